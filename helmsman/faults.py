"""
Helmsman faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every failure the engine
  can report. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- CommandException: base type that carries a diagnostic message + options and
  knows how to render itself twice: as a localized chat reply (render) and as a
  rich console panel (__rich__) for operators.
- trigger(): central entry point to surface a fault to the invoking message.
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: argument faults always carry the 1-based position of
  the offending token so users can learn by trying ("at second position").
- One reply per failure: a triggered fault sends exactly one reply to the
  originating message and never raises past the dispatcher.
- Definition faults (malformed trees, unknown argument types) are raised, not
  replied: they are programming errors and must surface at startup.

Integration
- The dispatcher and the permission gate build faults and await
  trigger(fault, message, locale, **context).
- In development (HELMSMAN_ENV=development) triggered faults are also printed
  to the stderr console via rich.
"""
import inspect
import logging
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .config import isdevelopment
from .utils import *

logger = logging.getLogger(__name__)

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - definitions (101xx)
      • MALFORMED_DEFINITION, UNKNOWN_ARGUMENT_TYPE
    - routing (111xx)
      • NO_SUBCOMMAND
    - gating (121xx)
      • MISSING_PERMISSIONS, GUARD_REJECTED
    - arguments (131xx)
      • MISSING_ARGUMENT, INVALID_ARGUMENT_TYPE

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired (e.g., to shorter labels).
    """
    # --- definition errors (10xxx) ---
    MALFORMED_DEFINITION        = 10101
    UNKNOWN_ARGUMENT_TYPE       = 10102

    # --- routing errors (11xxx) ---
    NO_SUBCOMMAND               = 11101

    # --- gating errors (12xxx) ---
    MISSING_PERMISSIONS         = 12101
    GUARD_REJECTED              = 12102

    # --- argument errors (13xxx) ---
    MISSING_ARGUMENT            = 13101
    INVALID_ARGUMENT_TYPE       = 13102

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base fault: a diagnostic message plus read-only options.

    options
    - title: short label shown in console headers.
    - code: FaultCode of this fault.
    - hint: one actionable sentence for operators.
    - anything else the fault needs to render (index, argument, missing, ...).

    subclasses declare defaults in __options__ and override render(locale) to
    produce the localized reply text.
    """
    __options__ = {}

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(type(self).__options__ | options)

    def render(self, locale):
        """
        return the localized reply for this fault (the raw message by default).
        """
        return coalesce(self.message, "")

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", "helmsman"), "prog-name"),
            " - ",
            text(code.normalize() if code else "?", "code"),
            " | ",
            text(str(self.options.get("title", "fault")).title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.options.get("hint"), "hint"))

        if self.options.get("fancy", True):
            return Panel(Group(message, hint), title=header, title_align="left")
        return Group(header, message, hint)

    async def __trigger__(self, message, locale):
        await message.reply(self.render(locale))

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MalformedDefinitionError(CommandException):
    __options__ = {
        "title": "malformed definition",
        "code": FaultCode.MALFORMED_DEFINITION,
        "hint": "fix the command tree before registering it; dispatch never starts with an invalid tree",
    }


class UnknownArgumentTypeError(CommandException):
    __options__ = {
        "title": "unknown argument type",
        "code": FaultCode.UNKNOWN_ARGUMENT_TYPE,
        "hint": "register the type with @converter(...) or validate the tree with isvalid() at startup",
    }


class NoSubcommandError(CommandException):
    __options__ = {
        "title": "no matching subcommand",
        "code": FaultCode.NO_SUBCOMMAND,
        "hint": "the command only routes to subcommands; one of them must be named",
    }

    def render(self, locale):
        return locale.common("no_subcommand")


class MissingPermissionsError(CommandException):
    __options__ = {
        "title": "missing permissions",
        "code": FaultCode.MISSING_PERMISSIONS,
        "hint": "grant the listed permissions to the member (or run the command elsewhere)",
        "missing": (),
        "listing": "",
        "channel": None,
    }

    def render(self, locale):
        if (channel := self.options["channel"]) is not None:
            return locale.formatcommon("no_channel_permissions", self.options["listing"], channel)
        return locale.formatcommon("no_guild_permissions", self.options["listing"])


class MissingArgumentError(CommandException):
    __options__ = {
        "title": "missing argument",
        "code": FaultCode.MISSING_ARGUMENT,
        "hint": "provide a value for the argument or declare a default",
        "index": 0,
    }

    def render(self, locale):
        return locale.formatcommon(
            "missing_argument",
            self.options["argument"].name,
            self.options["index"] + 1
        )


class InvalidArgumentTypeError(CommandException):
    __options__ = {
        "title": "invalid argument type",
        "code": FaultCode.INVALID_ARGUMENT_TYPE,
        "hint": "pass a value matching one of the accepted types",
        "index": 0,
    }

    def render(self, locale):
        argument = self.options["argument"]
        return locale.formatcommon(
            "invalid_argument_type",
            argument.name,
            self.options["index"] + 1,
            listing(argument.types, locale, "common.argument_types")
        )


async def trigger(fault, message, locale, /, **options):
    """
    surface a fault to the invoking message.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - the fault is logged (normalized code + message), printed to the console in
      development, then its __trigger__ sends the single localized reply.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")

    fault = fault.__replace__(**options)
    code = getattr(fault, "options", {}).get("code")
    logger.info("fault %s: %s", code.normalize() if isinstance(code, FaultCode) else "-", getattr(fault, "message", fault))
    if isdevelopment():
        console.print(fault)

    result = fault.__trigger__(message, locale)
    if inspect.isawaitable(result):
        await result


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "MalformedDefinitionError",
    "UnknownArgumentTypeError",
    "NoSubcommandError",
    "MissingPermissionsError",
    "MissingArgumentError",
    "InvalidArgumentTypeError",
    "FaultCode",
    "trigger",
    "getdoc",
)
