"""
Helmsman utilities shared by the definition, locale and fault modules.

Overview
- Unset / UnsetType
  • "No value was given", kept apart from None: an argument default of None is
    a real default, an Unset default means the argument is required.
- coalesce(value, default=None)
  • Unset becomes the default; every other value (None, 0, "") is kept.
- rename(callable, name) / @rename(name)
  • Give generated wrappers a readable __name__/__qualname__.
- freeze(value) / mirror(name)
  • freeze() snapshots containers once, when a definition is built; mirror()
    exposes the snapshot stored in self._<name> as a read-only property.
- DefinitionType
  • Metaclass of the definition records (commands, arguments, configs).
- join(items, separator, mapper) / listing(keys, locale, path)
  • Enumerations for replies ("Kick Members, Ban Members").
- ordinal(number)
  • Position wording for diagnostics ("first", "second", "12th").
- modules(package, recursive=True)
  • Names of the modules of a package, used by Registry.include().

Quick examples
    >>> coalesce(Unset, 3), coalesce(None, 3)
    (3, None)
    >>> freeze(["a", "b"])
    ('a', 'b')
    >>> ordinal(3), ordinal(21)
    ('third', '21st')
"""
import builtins
import functools
import importlib
import pkgutil
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel (one instance per process, always falsy).
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __or__(self, other, /):
        # lets annotations and isinstance() checks spell "str | Unset"
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, `object` otherwise.
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    Set __name__ and __qualname__ of a callable.

    rename(callable, name) renames in place and returns the callable;
    rename(name) returns a decorator doing the same.
    """
    if len(parameters) == 1:
        name, = parameters
        if not isinstance(name, str):
            raise TypeError("@rename() argument must be a string")
        return rename(functools.partial(_rename, name=name), "rename")

    if len(parameters) != 2:
        raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))

    return _rename(*parameters)


def _rename(callable, name):
    if not builtins.callable(callable):
        raise TypeError("rename() target must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() name must be a string")
    try:
        callable.__name__ = callable.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() target does not accept a new name") from None
    return callable


def freeze(object, /):
    """
    Return an immutable snapshot of a container.

    Rules
    - Sequence (except str/bytes) → tuple
    - Mapping                     → MappingProxyType over a copy
    - Set                         → frozenset
    - anything else               → unchanged
    """
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray)):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Read-only property returning the value stored in self._<name>.

    Containers must already be frozen when stored (see freeze()).
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return getattr(self, "_" + name)

    return property(getter)


@rename("__repr__")
def _definition_repr(self):
    return "%s(%s)" % (type(self).__typename__, join(self.__rich_repr__(), ", ", "%s=%r".__mod__))


@rename("__rich_repr__")
def _definition_rich_repr(self):
    for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
        yield field, getattr(self, field)


def _definition_readonly(self, *unused):
    raise AttributeError(f"{type(self).__typename__} definitions are read-only")


class DefinitionType(type):
    """
    Metaclass of the read-only definition records.

    Provides
    - __typename__: the class name, hyphenated and lower-cased ("guild-config").
    - one mirror() property per name in __introspectable__.
    - __repr__ / __rich_repr__ over __displayable__ (or __introspectable__).
    - __setattr__ / __delattr__ that always raise: records fill their backing
      fields with object.__setattr__ inside __new__ and never change after.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        fields = namespace.get("__introspectable__", ())
        namespace = {
            **namespace,
            "__typename__": re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower(),
            **{field: mirror(field) for field in fields},
            "__repr__": _definition_repr,
            "__rich_repr__": _definition_rich_repr,
            "__setattr__": _definition_readonly,
            "__delattr__": _definition_readonly,
        }
        return super().__new__(cls, name, bases, namespace)


def join(items, separator, mapper=Unset, /):
    """
    str() every item (after `mapper`, when given) and glue them with `separator`.
    """
    return separator.join(map(str, items if mapper is Unset else map(mapper, items)))


def listing(keys, locale, path, /):
    """
    Render keys through a locale namespace and join them with the locale separator.

    Each key is looked up in the sub-locale at `path` (e.g., "common.permissions");
    when the sub-locale or the key is missing, the raw key is shown instead.
    """
    names = locale.sublocale(path, allow_missing=True)

    def name(key):
        if names is None:
            return key
        return names.get(key, allow_missing=True) or key

    return join(keys, locale.common("list_separator"), name)


_ORDINALS = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")


def ordinal(number, /):
    """
    Word a 1-based position: words up to ten, then "11th", "22nd", "103rd".
    """
    if 1 <= number <= len(_ORDINALS):
        return _ORDINALS[number - 1]
    if number % 100 in (11, 12, 13):
        return f"{number}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def modules(package, /, recursive=True):
    """
    Return the dotted names of a package and of the modules inside it.

    Parameters
    - package: str
      importable package (or plain module) name, e.g. "bot.commands".
    - recursive: bool
      also descend into subpackages.

    Returns
    - list[str]: the package itself first, then its modules in the order
      pkgutil reports them (alphabetical per directory).

    Raises
    - TypeError: the package cannot be imported.
    """
    if not isinstance(package, str):
        raise TypeError("modules() argument must be a string")
    try:
        root = importlib.import_module(package)
    except ImportError:
        raise TypeError(f"unable to import module {package!r}") from None

    names = [package]
    if hasattr(root, "__path__"):
        walk = pkgutil.walk_packages if recursive else pkgutil.iter_modules
        names.extend(info.name for info in walk(root.__path__, package + "."))
    return names


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "freeze",
    "mirror",
    "join",
    "listing",
    "ordinal",
    "modules",

    # Types
    "UnsetType",
    "DefinitionType",

    # Constants
    "Unset",
)
