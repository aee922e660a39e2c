"""
Helmsman utilities (internal helpers shared by every layer)

Scope
- Small building blocks used by the argument, command, registry and dispatch
  layers so they agree on sentinels, read-only views and sync/async calling.

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided”, distinct from None.
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/0/""/[] are preserved.

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables.

- mirror("attr")
  • Read-only property exposing self._attr through an immutable view
    (tuples for sequences, mapping proxies for mappings, frozensets for sets).

- toarray(object)
  • Normalize “one, many or none” inputs (pre-checks) into a tuple.

- settle(object)
  • Await the object when it is awaitable, otherwise return it as-is. Lets the
    dispatcher treat sync and async callbacks the same way.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> toarray(print)
    (<built-in function print>,)
    >>> toarray(Unset)
    ()
"""
import builtins
import functools
import inspect
from collections.abc import Iterable, Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used where None is a legitimate value (for example a handler returning None)
    but the API still has to tell “not provided” apart from “provided as None”.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a singleton per process.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns the given object unless it is Unset, in which case the default is
    returned. Falsey values like None, 0, "" or () are kept as they are.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (updated in place)
    - rename(name) -> decorator

    Raises
    - TypeError: wrong arity, non-callable target, non-string name, or a
      callable whose names cannot be updated (built-ins).
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Recursively build an immutable view of container values.

    - Sequence (non-string): tuple of frozen items.
    - Mapping: read-only mapping proxy over a fresh dict of frozen values.
    - Set: frozenset of the items.
    - Anything else: returned as-is.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(map(_freeze, object))
    elif isinstance(object, Mapping):
        return MappingProxyType(dict(zip(object.keys(), map(_freeze, object.values()))))
    elif isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private attribute "_{name}".

    Containers are handed out as immutable views so the public surface of
    commands and arguments cannot be mutated after construction.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


def toarray(object, /):
    """
    Normalize “none, one or many” into a tuple.

    - Unset or None -> ()
    - a callable    -> (callable,)
    - an iterable   -> tuple(iterable)

    Raises
    - TypeError: when the object is neither callable nor iterable.
    """
    if object is Unset or object is None:
        return ()
    if callable(object):
        return (object,)
    if isinstance(object, Iterable) and not isinstance(object, str):
        return tuple(object)
    raise TypeError("toarray() argument must be a callable or an iterable of callables")


async def settle(object, /):
    """
    Await the object if it is awaitable; otherwise return it unchanged.
    """
    if inspect.isawaitable(object):
        return await object
    return object


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Singleton, falsey, and never equal to None. Materialize it with coalesce().
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "toarray",
    "settle",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
