r"""
Helmsman argument specifications.

Overview
- Argument: a positional slot of a leaf command.
  • name: binding key in ParsedInput.args (unique within its command).
  • optional: when False (default) the slot must be supplied.
  • values: accepted values, for completion and help only. Either an iterable
    of strings, or a zero-argument callable returning one (sync or async),
    resolved lazily through Argument.choices().

- argument(...): factory building an Argument.

Binding is strictly positional and never coerces: the i-th argument token is
bound, as a raw string, to the i-th Argument of the command. `values` is never
enforced while parsing; handlers interpret their inputs.

Quick example:
    >>> from helmsman.arguments import argument
    >>> target = argument("target", optional=True, values=("debug", "release"))
    >>> target.optional
    True
"""
import functools
import operator
import re
from collections.abc import Iterable, Mapping

from .utils import *


class ArgumentType(type):
    """
    Metaclass exposing introspectable fields as read-only properties.

    - __typename__ is derived from the class name (camel-case split with
      hyphens) and used in validation messages.
    - Every name in __introspectable__ becomes a property mirroring "_{name}".
    - __repr__/__rich_repr__ list the introspectable fields.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Argument(metaclass=ArgumentType):
    """
    Positional argument slot of a leaf command.

    Arguments are owned by exactly one command and never mutated after
    construction; all fields are exposed as read-only properties.
    """
    __introspectable__ = (
        "name",
        "optional",
        "values",
    )

    def __init__(self, name, /, *, optional=False, values=Unset):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{type(self).__typename__} 'name' cannot be empty")

        if not isinstance(optional, bool):
            raise TypeError(f"{type(self).__typename__} 'optional' must be a boolean")

        if values is Unset or values is None:
            values = None
        elif callable(values):
            # Lazy: resolved on demand by choices().
            pass
        elif isinstance(values, Iterable) and not isinstance(values, str | Mapping):
            values = tuple(values)
            if not all(isinstance(value, str) for value in values):
                raise TypeError(f"{type(self).__typename__} 'values' must only contain strings")
        else:
            raise TypeError(f"{type(self).__typename__} 'values' must be an iterable of strings or a callable")

        self._name = name
        self._optional = optional
        self._values = values

    @property
    def lazy(self):
        """
        True when `values` is a callable resolved on demand.
        """
        return callable(self._values)

    async def choices(self):
        """
        Resolve the accepted values into a list.

        Returns an empty list when the argument declares no values. Lazy values
        are called and, when the call returns an awaitable, awaited.
        """
        if self._values is None:
            return []
        if self.lazy:
            values = await settle(self._values())
            if values is None:
                return []
            return list(values)
        return list(self._values)


def argument(name, /, *, optional=False, values=Unset):
    """
    Build an Argument.

    Parameters
    - name: str, binding key (non-empty).
    - optional: bool, whether the slot can be omitted (default False).
    - values: Iterable[str] | Callable[[], Iterable[str] | Awaitable[Iterable[str]]]
      accepted values used for completions.
    """
    return Argument(name, optional=optional, values=values)


def _process_argument(cls, object):
    """
    Internal: accept the supported shorthands for an argument slot.

    - Argument instances are kept as-is.
    - str -> required Argument with that name.
    - Mapping with "name" (and optional "optional"/"values") -> Argument.
    """
    if isinstance(object, Argument):
        return object
    if isinstance(object, str):
        return Argument(object)
    if isinstance(object, Mapping):
        try:
            name = object["name"]
        except KeyError:
            raise TypeError(f"{cls.__typename__} argument mapping must have a 'name'") from None
        return Argument(name, optional=object.get("optional", False), values=object.get("values", Unset))
    raise TypeError(f"{cls.__typename__} 'args' must only contain arguments")


__all__ = (
    "Argument",
    "argument",
)
