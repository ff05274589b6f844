"""
Helmsman locale views.

Scope
- Locale: a read-only view over a nested mapping of localized strings. It is the
  reference implementation of the locale contract the dispatcher relies on
  (get/format/common/formatcommon/sublocale/commandlocale); hosts may pass any
  object honoring the same methods.
- DEFAULTS: the English strings used when no data is provided.

Layout of the data
    {
        "common": {
            "list_separator": ", ",
            "no_subcommand": "...",
            "permissions": {"manage_roles": "Manage Roles", ...},
            "argument_types": {"user": "user", ...},
            ...
        },
        "commands": {
            "role": {
                "no_target": "...",
                "subcommands": {"add": {...}, ...}
            }
        }
    }

Resolution rules
- get(key) is relative to the view; common(key) always reads the root "common".
- sublocale(path) is absolute from the root (e.g., "common.permissions").
- commandlocale(name) is "commands.<name>" at the root, and
  "<current>.subcommands.<name>" below it.
- A miss returns None when allow_missing is set; otherwise a warning is logged
  and a fallback is returned (the dotted path for strings, an empty view for
  sub-locales).
"""
import json
import logging
from collections.abc import Mapping
from pathlib import Path

from .permissions import Permissions
from .utils import *

logger = logging.getLogger(__name__)


DEFAULTS = freeze({
    "common": freeze({
        "list_separator": ", ",
        "no_guild_permissions": "You are missing the following server permissions: {0}",
        "no_channel_permissions": "You are missing the following permissions in #{1}: {0}",
        "no_subcommand": "No matching subcommand was found.",
        "missing_argument": "Argument {0} at position {1} is required.",
        "invalid_argument_type": "Argument {0} at position {1} must be one of: {2}",
        "permissions": freeze({
            flag.name.lower(): flag.name.replace("_", " ").title() for flag in Permissions
        }),
        "argument_types": freeze({
            "string": "text",
            "number": "number",
            "boolean": "true/false",
            "channel": "channel",
            "user": "user",
            "role": "role",
        }),
    }),
    "commands": freeze({}),
})


def _merge(base, overrides, /):
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Locale:
    """
    Read-only view over localized strings.

    Parameters
    - data: Mapping | Unset
      nested mapping of strings; DEFAULTS when Unset.
    - path: tuple[str, ...]
      internal, the position of this view inside the data (root when empty).
    """

    def __init__(self, data=Unset, /, *, path=()):
        data = coalesce(data, DEFAULTS)
        if not isinstance(data, Mapping):
            raise TypeError("locale data must be a mapping")
        self._data = data
        self._path = tuple(path)

    @classmethod
    def load(cls, path, /, *, merge=True):
        """
        Build a Locale from a JSON file.

        When merge is True the file only needs to override the keys it changes;
        everything else comes from DEFAULTS.
        """
        with Path(path).open(encoding="utf-8") as file:
            data = json.load(file)
        if not isinstance(data, Mapping):
            raise TypeError(f"locale file {str(path)!r} must contain an object")
        return cls(_merge(DEFAULTS, data) if merge else data)

    @property
    def path(self):
        return ".".join(self._path)

    def _lookup(self, path):
        node = self._data
        for segment in path:
            if not isinstance(node, Mapping) or segment not in node:
                return Unset
            node = node[segment]
        return node

    def _string(self, path, allow_missing):
        value = self._lookup(path)
        if isinstance(value, str):
            return value
        if allow_missing:
            return None
        logger.warning("missing locale string %r", ".".join(path))
        return ".".join(path)

    def _view(self, path, allow_missing):
        if isinstance(self._lookup(path), Mapping):
            return type(self)(self._data, path=path)
        if allow_missing:
            return None
        logger.warning("missing locale section %r", ".".join(path))
        return type(self)(self._data, path=path)

    def get(self, key, allow_missing=False):
        return self._string(self._path + tuple(key.split(".")), allow_missing)

    def format(self, key, *args):
        return self.get(key).format(*args)

    def common(self, key, allow_missing=False):
        return self._string(("common", *key.split(".")), allow_missing)

    def formatcommon(self, key, *args):
        return self.common(key).format(*args)

    def sublocale(self, path, allow_missing=False):
        return self._view(tuple(path.split(".")), allow_missing)

    def commandlocale(self, name, allow_missing=False):
        if not self._path:
            return self._view(("commands", name), allow_missing)
        return self._view(self._path + ("subcommands", name), allow_missing)

    def __repr__(self):
        return f"locale(path={self.path!r})"


__all__ = (
    "Locale",
    "DEFAULTS",
)
