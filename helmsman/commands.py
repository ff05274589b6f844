"""
Helmsman command definitions and dispatch.

Overview
- Command(name, shortcut=None, permissions=None, channel=False, guard=None,
          subcommands=None, arguments=None, handler=None)
  • One node of the command tree. Leaves carry a handler, routers carry
    subcommands, and a node may carry both (subcommands are tried first).
  • The tree is plain data: every node has the same shape and the populated
    fields decide what it does.

- @command(name, **options)
  • Build a Command whose handler is the decorated callable.

- tokenize(text)
  • Maximal runs of non-whitespace characters; no quoting or escaping.

- isvalid(command)
  • Recursive, fail-fast structural check of a whole tree (bool only). Trees are
    validated once, at registration, and never mutated afterwards.

- dispatch(message, config, locale, tokens, commands)
  • Match the first token against the siblings and run the matched node:
    permissions → guard → subcommands → "no subcommand" → arguments → handler.
  • Returns True when a node matched (the invocation is handled, whatever happened
    downstream) and False when nothing matched.

Dispatch rules
- Committed match: the first sibling whose name (or shortcut, when the config
  enables shortcuts) equals the token wins. Later siblings are never tried, even
  when the matched node is blocked or fails to parse its arguments.
- Every user-visible failure is a single reply, sent through faults.trigger().
- Guards decide silently: a falsy guard result stops dispatch without a reply.
- Guards, handlers and the nested dispatch receive the command's own locale view
  (commands.<name>, then <parent>.subcommands.<name>), or the parent view when
  the locale has no section for the command. Descendants of such a command
  keep that parent view as well.
- Handler exceptions are not caught here.

Call conventions
- guard(message, config, locale) -> bool | Awaitable[bool]
- handler(message, config, locale, *arguments) -> Any | Awaitable[Any]
"""
import inspect
import logging
import re

from .arguments import *
from .faults import InvalidArgumentTypeError, MissingArgumentError, NoSubcommandError, trigger
from .permissions import gate, resolve
from .utils import *

logger = logging.getLogger(__name__)


class Command(metaclass=DefinitionType):
    """
    Read-only command tree node.

    Parameters
    - name: str
      token that selects this command among its siblings.
    - shortcut: str | None
      alternate token, matched only when the config enables shortcuts.
    - permissions: Permissions | int | Iterable | None
      permissions the author must hold (see permissions.resolve()).
    - channel: bool
      check permissions in the message's channel instead of the whole guild.
    - guard: Callable | None
      custom predicate run after the permission check.
    - subcommands: Sequence[Command] | None
      children, tried before this node's handler.
    - arguments: Sequence[Argument] | None
      declared arguments; None passes the remaining tokens through unparsed.
    - handler: Callable | None
      terminal action.
    """

    __introspectable__ = (
        "name",
        "shortcut",
        "permissions",
        "channel",
        "guard",
        "subcommands",
        "arguments",
        "handler",
    )
    __displayable__ = (
        "name",
        "shortcut",
        "permissions",
        "channel",
        "subcommands",
        "arguments",
    )

    def __new__(
            cls,
            name,
            /,
            *,
            shortcut=None,
            permissions=None,
            channel=False,
            guard=None,
            subcommands=None,
            arguments=None,
            handler=None
    ):
        if permissions is not None and not isinstance(permissions, int):
            permissions = resolve(permissions)

        self = super().__new__(cls)
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_shortcut", coalesce(shortcut))
        object.__setattr__(self, "_permissions", coalesce(permissions))
        object.__setattr__(self, "_channel", channel)
        object.__setattr__(self, "_guard", coalesce(guard))
        object.__setattr__(self, "_subcommands", freeze(coalesce(subcommands)))
        object.__setattr__(self, "_arguments", freeze(coalesce(arguments)))
        object.__setattr__(self, "_handler", coalesce(handler))
        return self

    def matches(self, token, /, shortcuts=False):
        """
        whether a token selects this command (the shortcut only counts when enabled).
        """
        return token == self.name or (shortcuts and self.shortcut is not None and token == self.shortcut)


def command(name, /, **options):
    """
    Return a decorator that builds a Command around the decorated handler.

    Example
        @command("calculate", shortcut="calc")
        async def calculate(message, config, locale, *tokens): ...
    """
    @rename("command")
    def wrapper(handler, /):
        if not callable(handler):
            raise TypeError("@command() must be applied to a callable")
        return Command(name, handler=handler, **options)

    return wrapper


def tokenize(text, /):
    """
    Split text into its non-whitespace runs ("" and blank text yield []).
    """
    if not isinstance(text, str):
        raise TypeError("tokenize() argument must be a string")
    return re.findall(r"\S+", text)


def isvalid(command, /):
    """
    Recursively check that a command tree is well formed.

    Checks (per node)
    - it is a Command with a str name and an optional str shortcut;
    - permissions is None or an int (bool excluded), channel is a bool;
    - guard/handler are None or callable;
    - subcommands/arguments are None or tuples;
    - it has a handler, subcommands, or both;
    - every subcommand is valid;
    - every argument is an Argument with a str name, a bool variadic flag and a
      non-empty tuple of registered type tags.

    Returns a single bool; it does not report which field failed.
    """
    if not isinstance(command, Command):
        return False
    if not isinstance(command.name, str) or not isinstance(command.shortcut, str | None):
        return False
    if not isinstance(command.permissions, int | None) or isinstance(command.permissions, bool):
        return False
    if not isinstance(command.channel, bool):
        return False
    if command.guard is not None and not callable(command.guard):
        return False
    if command.handler is not None and not callable(command.handler):
        return False
    if not isinstance(command.subcommands, tuple | None) or not isinstance(command.arguments, tuple | None):
        return False
    if command.handler is None and command.subcommands is None:
        return False

    for subcommand in command.subcommands or ():
        if not isvalid(subcommand):
            return False

    for argument in command.arguments or ():
        if not isinstance(argument, Argument):
            return False
        if not isinstance(argument.name, str) or not isinstance(argument.variadic, bool):
            return False
        if not argument.types or not all(isinstance(tag, str) and tag in converters for tag in argument.types):
            return False

    return True


async def _call(function, /, *args):
    result = function(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


async def dispatch(message, config, locale, tokens, commands, /):
    """
    Match tokens against sibling commands and run the matched one.

    Parameters
    - message: inbound message (author, channel, reply()).
    - config: container configuration (shortcuts).
    - locale: locale view of the parent level.
    - tokens: Sequence[str], the first token names the command.
    - commands: Sequence[Command], the siblings in declaration order.

    Returns
    - bool: True when a command matched (handled), False when nothing matched.
    """
    return await _dispatch(message, config, locale, tokens, commands, True)


async def _dispatch(message, config, locale, tokens, commands, narrow, /):
    # narrow is False below a node without its own locale section; the view
    # passed down is an ancestor's and must not be narrowed again.
    if not tokens:
        return False

    token, *rest = tokens
    for command in commands:
        if command.matches(token, config.shortcuts):
            break
    else:
        return False

    logger.debug("matched %r with %r", command.name, token)

    if command.permissions is not None and await gate(message, locale, command.permissions, channel=command.channel):
        return True

    sublocale = locale.commandlocale(command.name, allow_missing=True) if narrow else None
    narrowed = sublocale is not None
    sublocale = sublocale or locale

    if command.guard is not None and not await _call(command.guard, message, config, sublocale):
        logger.info("guard of %r rejected the invocation", command.name)
        return True

    if command.subcommands is not None:
        if await _dispatch(message, config, sublocale, rest, command.subcommands, narrowed):
            return True

    if command.handler is None:
        await trigger(NoSubcommandError(f"{command.name!r} requires a subcommand"), message, locale)
        return True

    try:
        arguments = parse(rest, command.arguments)
    except (MissingArgumentError, InvalidArgumentTypeError) as fault:
        await trigger(fault, message, locale)
        return True

    logger.debug("running %r with %d argument(s)", command.name, len(arguments))
    await _call(command.handler, message, config, sublocale, *arguments)
    return True


__all__ = (
    "Command",
    "command",
    "tokenize",
    "isvalid",
    "dispatch",
)
