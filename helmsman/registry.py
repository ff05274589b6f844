"""
Helmsman registry: the root of a command tree.

Scope
- Registry collects the root commands a host dispatches against. Every tree is
  validated with commands.isvalid() when it is registered, so dispatch never
  starts with a malformed tree.
- include() imports a package with its modules (see utils.modules) and
  registers the root commands they define.
- dispatch() turns an inbound message into tokens (prefix first) and runs the
  command dispatcher over the registered roots.
"""
import importlib
import logging

from .commands import Command, isvalid, tokenize
from .commands import dispatch as _dispatch
from .faults import MalformedDefinitionError
from .utils import *

logger = logging.getLogger(__name__)


class Registry:
    """
    Ordered collection of validated root commands.

    Notes
    - Declaration order matters: with duplicate root names the first one
      registered shadows the others (a warning is logged).
    """

    def __init__(self, *commands):
        self._commands = []
        if commands:
            self.register(*commands)

    @property
    def commands(self):
        return tuple(self._commands)

    def register(self, *commands):
        """
        Validate and append root commands.

        Returns the single command when called with one (usable as a decorator
        on top of @command(...)), otherwise the tuple of commands.

        Raises
        - MalformedDefinitionError: a tree fails validation; nothing is registered.
        """
        for command in commands:
            if not isvalid(command):
                raise MalformedDefinitionError(f"malformed command definition {command!r}")

        names = {command.name for command in self._commands}
        for command in commands:
            if command.name in names:
                logger.warning("command %r is already registered and shadows the new one", command.name)
            names.add(command.name)
            self._commands.append(command)
            logger.debug("registered %r", command.name)

        return commands[0] if len(commands) == 1 else commands

    def include(self, package, /, recursive=True):
        """
        Import a package with its modules and register their root commands.

        Behavior
        - The package and its modules are listed with utils.modules(), which
          walks subpackages too unless recursive is False.
        - Every module is imported (ImportError is reported as TypeError).
        - Module-level Command objects are registered in definition order, except
          those that are a subcommand of another Command of the same module.

        Returns
        - tuple[Command, ...]: the commands registered by this call.
        """
        def imp(module):
            try:
                return importlib.import_module(module)
            except ImportError:
                raise TypeError(f"unable to import module {module!r}") from None

        included = []
        for module in map(imp, modules(package, recursive=recursive)):
            found = []
            for object in vars(module).values():
                if isinstance(object, Command) and object not in found:
                    found.append(object)

            nested = set()
            pending = list(found)
            while pending:
                for subcommand in pending.pop().subcommands or ():
                    if id(subcommand) not in nested:
                        nested.add(id(subcommand))
                        pending.append(subcommand)

            roots = [command for command in found if id(command) not in nested]
            if roots:
                self.register(*roots)
            included.extend(roots)

        return tuple(included)

    async def dispatch(self, message, config, locale, /):
        """
        Dispatch an inbound message against the registered roots.

        Returns False (no match) when the config sets a prefix the message does
        not start with, otherwise the result of commands.dispatch().
        """
        text = message.content
        if config.prefix is not None:
            if not text.startswith(config.prefix):
                return False
            text = text[len(config.prefix):]
        return await _dispatch(message, config, locale, tokenize(text), self._commands)

    def __len__(self):
        return len(self._commands)

    def __iter__(self):
        return iter(self.commands)

    def __repr__(self):
        return f"registry(commands={self.commands!r})"


__all__ = (
    "Registry",
)
