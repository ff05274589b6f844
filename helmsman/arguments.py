r"""
Helmsman argument definitions, coercion strategies and the argument list parser.

Overview
- Argument(name, *types, variadic=False, default=Unset)
  • Read-only definition of one positional slot of a leaf command.
  • types: ordered type tags; the first tag whose strategy accepts the token wins.
  • variadic: greedily consumes every remaining token that coerces (never required).
  • default: used when the token is absent (Unset means "required"; ignored for variadic).

- Strategies
  • A strategy is a pure function (token) -> value | Unset registered under a tag
    with @converter("tag"). Adding a type is a registration, never a parser change.
  • Built-in tags: string, number, boolean, channel, user, role.

- coerce(token, argument, required=True)
  • Convert a single raw token (or Unset when absent) into a typed value.

- parse(tokens, arguments)
  • Walk the declared arguments left to right against the tokens and return the
    list of values handed to the handler (variadic slots yield a list).

Failure model
- MissingArgumentError / InvalidArgumentTypeError carry the slot's `argument` and the
  0-based token `index`; they are rendered to users 1-based.
- UnknownArgumentTypeError means a definition names a tag no strategy is registered
  for; it is a programming error and propagates.

Quick example:
    >>> from helmsman.arguments import Argument, parse
    >>> parse(["42", "7", "8"], [Argument("member", "user"), Argument("roles", "role", variadic=True)])
    ['42', ['7', '8']]
"""
import logging
import re
from types import MappingProxyType

from .faults import InvalidArgumentTypeError, MissingArgumentError, UnknownArgumentTypeError
from .utils import *

logger = logging.getLogger(__name__)


class Argument(metaclass=DefinitionType):
    """
    Positional argument definition.

    Parameters
    - name: str
      label used in error replies.
    - *types: str
      ordered type tags (see converters).
    - variadic: bool
      consume every remaining token that coerces.
    - default: Any | Unset
      value used when the token is absent; None is a legitimate default.

    Notes
    - Shapes are not enforced here; commands.isvalid() checks whole trees at startup.
    """

    __introspectable__ = (
        "name",
        "types",
        "variadic",
        "default",
    )

    def __new__(cls, name, /, *types, variadic=False, default=Unset):
        self = super().__new__(cls)
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_types", types)
        object.__setattr__(self, "_variadic", variadic)
        object.__setattr__(self, "_default", freeze(default))
        return self

    @property
    def required(self):
        """
        whether an absent token is a MissingArgumentError for this slot.
        """
        return not self.variadic and self.default is Unset


_converters = {}

converters = MappingProxyType(_converters)
"""
Read-only view of the registered strategies, keyed by type tag.
"""


def converter(tag, /):
    """
    Register the decorated function as the coercion strategy of a type tag.

    The strategy receives the raw token and returns the typed value, or Unset
    when the token does not belong to the type. Registering an existing tag
    replaces its strategy.
    """
    if not isinstance(tag, str):
        raise TypeError("@converter() argument must be a string")
    elif not (tag := tag.strip()):
        raise ValueError("@converter() argument cannot be empty")

    @rename("converter")
    def wrapper(function, /):
        if not callable(function):
            raise TypeError("@converter() must be applied to a callable")
        if tag in _converters:
            logger.debug("replacing converter for %r", tag)
        _converters[tag] = function
        return function

    return wrapper


@converter("string")
def _string(token):
    return token


@converter("number")
def _number(token):
    # decimal literals only: "nan", "inf" and "1_000" are not numbers to users
    if re.fullmatch(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", token, re.ASCII):
        return float(token)
    return Unset


@converter("boolean")
def _boolean(token):
    return {"true": True, "1": True, "false": False, "0": False}.get(token.lower(), Unset)


def _mention(pattern):
    pattern = re.compile(pattern, re.ASCII)

    def strategy(token):
        if match := pattern.fullmatch(token):
            return match.group("id") or match.group("bare")
        return Unset

    return strategy


converter("channel")(rename(_mention(r"<#(?P<id>\d+)>|(?P<bare>\d+)"), "_channel"))
converter("user")(rename(_mention(r"<@!?(?P<id>\d+)>|(?P<bare>\d+)"), "_user"))
converter("role")(rename(_mention(r"<@&(?P<id>\d+)>|(?P<bare>\d+)"), "_role"))


def coerce(token, argument, /, required=True):
    """
    Convert one raw token into a typed value for the given argument.

    Parameters
    - token: str | Unset
      the raw token, or Unset when the token list is exhausted.
    - argument: Argument
    - required: bool
      when False an absent token yields Unset instead of an error (variadic probing).

    Returns
    - the first value produced by the argument's strategies, in declared order;
      the declared default for an absent token; Unset (absent, not required).

    Raises
    - InvalidArgumentTypeError: no types are declared, or no strategy accepts the token.
    - MissingArgumentError: the token is absent, required, and no default applies.
    - UnknownArgumentTypeError: a tag has no registered strategy.
    """
    if not argument.types:
        raise InvalidArgumentTypeError(f"argument {argument.name!r} declares no types", argument=argument)

    if token is Unset:
        if not argument.variadic and argument.default is not Unset:
            return argument.default
        if required:
            raise MissingArgumentError(f"argument {argument.name!r} is required", argument=argument)
        return Unset

    for tag in argument.types:
        try:
            strategy = _converters[tag]
        except KeyError:
            raise UnknownArgumentTypeError(f"unknown argument type {tag!r}", argument=argument, tag=tag) from None
        if (value := strategy(token)) is not Unset:
            return value

    raise InvalidArgumentTypeError(
        f"argument {argument.name!r} cannot be {token!r}",
        argument=argument,
        token=token,
    )


def parse(tokens, arguments, /):
    """
    Apply the declared arguments to the tokens following a command name.

    Rules
    - arguments is None: the tokens are passed through as raw strings.
    - Fixed slots coerce the token at the cursor as required and advance by one.
    - Variadic slots collect tokens while they coerce and stop at the first one
      that does not (or at the end); the slot's value is the collected list.
    - Trailing tokens beyond the last slot are ignored.
    - Left to right, no backtracking: a variadic slot never gives a token back.

    Raises
    - MissingArgumentError / InvalidArgumentTypeError with `index` set to the
      0-based cursor of the failing slot and `argument` set to its definition.
    """
    tokens = list(tokens)
    if arguments is None:
        return tokens

    values = []
    cursor = 0
    for argument in arguments:
        if argument.variadic:
            collected = []
            while cursor < len(tokens):
                try:
                    value = coerce(tokens[cursor], argument, required=False)
                except InvalidArgumentTypeError:
                    break
                collected.append(value)
                cursor += 1
            values.append(collected)
            continue

        try:
            values.append(coerce(tokens[cursor] if cursor < len(tokens) else Unset, argument))
        except (MissingArgumentError, InvalidArgumentTypeError) as fault:
            raise type(fault)(
                f"{fault.message} at {ordinal(cursor + 1)} position",
                **{**fault.options, "index": cursor}
            ) from None
        cursor += 1

    return values


__all__ = (
    "Argument",
    "converter",
    "converters",
    "coerce",
    "parse",
)
