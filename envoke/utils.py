"""
Envoke utilities shared by the binding and command layers.

Overview
- Unset: "nothing was given" marker, kept apart from None and "" because an
  empty environment value and an omitted default are different things.
- coalesce(value, default): swap Unset for a default, keep every other value.
- rename("name"): decorator pinning __name__/__qualname__ on generated
  functions so tracebacks and reprs stay readable.
- mirror("attr"): read-only property over self._attr returning a frozen copy.
- ordinal(n): "first", "second", ..., "11th", "22nd" for fault messages.

    >>> coalesce(Unset, "8080")
    '8080'
    >>> coalesce("", "8080")
    ''
    >>> ordinal(2)
    'second'
"""
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    There is exactly one instance; it is falsy, prints as "Unset" and can be
    combined with types in annotations and isinstance checks (str | Unset).
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    __ror__ = __or__

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, `object` otherwise (even if falsy).
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator setting a stable __name__ and __qualname__ on a function.

    Raises
    - TypeError: when name is not a string or the target cannot be renamed.
    """
    if not isinstance(name, str):
        raise TypeError("@rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("@rename() must be applied to a callable")
        try:
            function.__name__ = function.__qualname__ = name
        except (AttributeError, TypeError):
            raise TypeError("@rename() target %r cannot be renamed" % function) from None
        return function

    return decorator


def _freeze(object):
    # lists → tuple, dicts → mappingproxy over a copy, sets → frozenset
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray)):
        return tuple(object)
    elif isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    elif isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Read-only property exposing `self._<name>`.

    Container values are handed out as frozen copies, so a Command's flags or
    an Invocation's flag mapping cannot be changed after construction.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


_WORDS = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")


@functools.cache
def ordinal(number, /):
    """
    Ordinal label for a 1-based position: words up to ten, then "11th", "21st", ...
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError("ordinal() argument must be an integer")
    if 1 <= number <= len(_WORDS):
        return _WORDS[number - 1]
    if 10 < number % 100 < 20:
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
