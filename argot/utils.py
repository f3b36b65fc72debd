"""
Small building blocks shared by the definition, fault and parser layers.

Contents
- Unset: the "not declared" marker. It keeps an omitted default apart from a
  default declared as None, which is a real value.
- coalesce(value, fallback): swap Unset for a fallback, leave everything else.
- rename(name): decorator giving generated functions a readable name in
  tracebacks and reprs.
- view(name): read-only property over the backing slot '_' + name; container
  values come back frozen (tuple, MappingProxyType, frozenset).

    >>> coalesce(Unset, 1), coalesce(None, 1)
    (1, None)
"""
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    type of the Unset marker.

    - there is exactly one instance; calling UnsetType() returns it, and
      copy, deepcopy and pickle all preserve its identity.
    - falsy and printed as 'Unset'.
    - sealed: subclassing raises TypeError.
    """
    __slots__ = ()

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        # pickled by reference to the module attribute
        return "Unset"


def coalesce(object, default=None, /):
    """object, unless it is Unset; then default. None, 0 and "" are kept."""
    if object is Unset:
        return default
    return object


def rename(name, /):
    """
    decorator setting __name__ and __qualname__ of the decorated function.

        >>> @rename("__repr__")
        ... def generated(self): ...
        >>> generated.__qualname__
        '__repr__'
    """
    if not isinstance(name, str):
        raise TypeError("rename() expects a string, got %s" % type(name).__name__)

    def apply(function):
        if not callable(function):
            raise TypeError("rename() decorates functions, got %s" % type(function).__name__)
        function.__name__ = function.__qualname__ = name
        return function

    return apply


def _freeze(value):
    match value:
        case str():
            return value
        case Mapping():
            return MappingProxyType(value)
        case Set():
            return frozenset(value)
        case Sequence():
            return tuple(value)
        case _:
            return value


def view(name, /):
    """
    property returning the frozen form of self._<name>; it has no setter.
    """
    if not isinstance(name, str):
        raise TypeError("view() expects a string, got %s" % type(name).__name__)
    slot = "_" + name

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, slot))

    return property(getter)


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "view",
    "UnsetType",
    "Unset",
)
