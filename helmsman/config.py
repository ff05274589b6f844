"""
Helmsman configuration records.

Scope
- GuildConfig: the read-only per-container (guild) configuration handed to every
  dispatch. The engine only reads `shortcuts` and `prefix`; `locale` is carried
  for hosts that pick a Locale per guild.
- environment(): runtime flags parsed from HELMSMAN_ENV.

Environment
- HELMSMAN_ENV holds a semicolon-separated list of flags, case-insensitive,
  e.g. "development" or "production;development". Unknown flags are ignored.
  When the variable is unset the runtime is "production".
"""
import os

from .utils import *

ENVIRONMENT_VARIABLE = "HELMSMAN_ENV"
FLAGS = frozenset(("production", "development"))


class GuildConfig(metaclass=DefinitionType):
    """
    Read-only configuration of the container (guild) a message was sent in.

    Fields
    - shortcuts: bool
      whether command shortcuts (e.g., "calc" for "calculate") are matched.
    - prefix: str | None
      text every command message must start with; None disables prefix handling.
    - locale: str
      locale tag hosts may use to choose a Locale.
    """

    __introspectable__ = (
        "shortcuts",
        "prefix",
        "locale",
    )

    def __new__(cls, *, shortcuts=False, prefix="!", locale="en"):
        if not isinstance(prefix, str | None):
            raise TypeError(f"{cls.__typename__} 'prefix' must be a string or None")
        if not isinstance(locale, str):
            raise TypeError(f"{cls.__typename__} 'locale' must be a string")

        self = super().__new__(cls)
        object.__setattr__(self, "_shortcuts", bool(shortcuts))
        object.__setattr__(self, "_prefix", prefix or None)
        object.__setattr__(self, "_locale", locale)
        return self


def environment(value=Unset, /):
    """
    Return the set of runtime flags.

    Parameters
    - value: str | Unset
      raw flags; read from HELMSMAN_ENV when Unset.

    Returns
    - frozenset[str]: recognised flags; {"production"} when nothing is set.
    """
    raw = coalesce(value, os.environ.get(ENVIRONMENT_VARIABLE))
    if raw is None or not raw.strip():
        return frozenset(("production",))
    return frozenset(flag for flag in map(str.strip, raw.lower().split(";")) if flag in FLAGS)


def isdevelopment(value=Unset, /):
    return "development" in environment(value)


__all__ = (
    "GuildConfig",
    "environment",
    "isdevelopment",
)
