"""
Helmsman command layer: define the terminal's command tree.

What this module provides
- Command: common base of every command definition (name, descr, precheck).
- Group: a container command; owns an ordered tuple of subcommands and has no
  arguments and no run handler.
- Leaf: an executor command; owns an ordered tuple of Argument slots and a run
  handler receiving a ParsedInput.
- command(...): builder producing exactly one of the two shapes, usable
  directly or as a decorator over a handler.

Core ideas
- The container/executor split is structural: a Group can never carry a run
  handler and a Leaf can never carry subcommands, so the dispatcher does not
  need to validate shapes at runtime.
- Definitions are immutable: every field is exposed as a read-only property
  backed by an immutable view, and the registry and dispatcher only borrow them.
- Pre-checks and run handlers may be plain functions or coroutine functions;
  the dispatcher awaits whatever they return when it is awaitable.

Quick start
    from helmsman import command, argument

    @command("build", args=[argument("target", optional=True)])
    async def build(input):
        \"\"\"Build the current program\"\"\"
        return input.args.get("target", "debug")

    connect = command("connect", "Toggle connection to the wallet", run=lambda input: True)
    wallet = command("wallet", "Manage the wallet", subcommands=[connect])
"""
import functools
import inspect
import operator
import re
from collections.abc import Iterable

from .arguments import _process_argument
from .utils import *


class CommandType(type):
    """
    Metaclass that gives command definitions a stable, introspectable shape.

    Responsibilities
    - Derive __typename__ from the class name ("Group" -> "group") for messages.
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_{name}" field.
    - Provide __repr__/__rich_repr__ for diagnostics and rich pretty printing.
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
            """
            Example
            - group(name='wallet', descr='Manage the wallet', ...)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _process_identity(cls, metadata):
    """
    Internal: validate the fields shared by every command shape.

    - name: non-empty string without whitespace (a name containing whitespace
      could never be matched by a token).
    - descr: string (empty allowed).
    - precheck: Unset, a callable, or an iterable of callables; normalized into
      a tuple.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif re.search(r"\s", name):
        raise ValueError(f"{cls.__typename__} 'name' cannot contain whitespace")
    metadata["name"] = name

    if not isinstance(descr := coalesce(metadata["descr"], ""), str):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = descr.strip()

    try:
        precheck = toarray(metadata["precheck"])
    except TypeError:
        raise TypeError(f"{cls.__typename__} 'precheck' must be a callable or an iterable of callables") from None
    if not all(map(callable, precheck)):
        raise TypeError(f"{cls.__typename__} 'precheck' must only contain callables")
    metadata["precheck"] = precheck


class Command(metaclass=CommandType):
    """
    Base of the command definitions.

    Never instantiated directly: build a Group or a Leaf (or use command()).
    The base answers the questions the dispatcher asks of either shape, so a
    Leaf reports no subcommands and a Group reports no arguments and no handler.
    """
    __introspectable__ = (
        "name",
        "descr",
        "precheck",
    )

    kind = Unset

    def __init__(self, name, descr=Unset, /, *, precheck=Unset):
        if type(self) is Command:
            raise TypeError("command definitions must be built as a group or a leaf")
        metadata = {"name": name, "descr": descr, "precheck": precheck}
        _process_identity(type(self), metadata)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def subcommands(self):
        return ()

    @property
    def args(self):
        return ()

    @property
    def run(self):
        return None

    def find(self, name, /):
        """
        Return the first subcommand named exactly `name`, or None.
        """
        for subcommand in self.subcommands:
            if subcommand.name == name:
                return subcommand
        return None


class Group(Command):
    """
    Container command: routes to one of its subcommands.

    Reaching a group without a deeper match prints its help listing.
    Subcommand names must be unique within the group.
    """
    __introspectable__ = (
        "name",
        "descr",
        "precheck",
        "subcommands",
    )

    kind = "group"

    def __init__(self, name, descr=Unset, subcommands=(), /, *, precheck=Unset):
        super().__init__(name, descr, precheck=precheck)

        if isinstance(subcommands, str) or not isinstance(subcommands, Iterable):
            raise TypeError(f"{type(self).__typename__} 'subcommands' must be an iterable of commands")
        subcommands = tuple(subcommands)
        if not subcommands:
            raise ValueError(f"{type(self).__typename__} 'subcommands' cannot be empty")

        names = set()
        for subcommand in subcommands:
            if callable(subcommand) and not isinstance(subcommand, Command):
                raise TypeError(f"{type(self).__typename__} 'subcommands' must only contain commands, not callables (was command() given a handler?)")
            if not isinstance(subcommand, Command):
                raise TypeError(f"{type(self).__typename__} 'subcommands' must only contain commands")
            if subcommand.name in names:
                raise ValueError(f"{type(self).__typename__} subcommand name {subcommand.name!r} is already in use")
            names.add(subcommand.name)

        self._subcommands = subcommands


class Leaf(Command):
    """
    Executor command: binds positional arguments and runs its handler.

    The handler receives a single ParsedInput and may return any value (or an
    awaitable of it); that value becomes the dispatch result.
    """
    __introspectable__ = (
        "name",
        "descr",
        "precheck",
        "args",
        "run",
    )

    kind = "leaf"

    def __init__(self, name, descr=Unset, run=Unset, args=(), /, *, precheck=Unset):
        super().__init__(name, descr, precheck=precheck)

        if not callable(run):
            raise TypeError(f"{type(self).__typename__} 'run' must be callable")

        if isinstance(args, str) or not isinstance(args, Iterable):
            raise TypeError(f"{type(self).__typename__} 'args' must be an iterable of arguments")
        args = tuple(_process_argument(type(self), arg) for arg in args)

        names = set()
        for arg in args:
            if arg.name in names:
                raise ValueError(f"{type(self).__typename__} argument name {arg.name!r} is already in use")
            names.add(arg.name)

        self._run = run
        self._args = args


def command(name=Unset, /, descr=Unset, *, args=Unset, run=Unset, subcommands=Unset, precheck=Unset):
    """
    Build a Group or a Leaf, or return a decorator building a Leaf.

    Invocation modes
    - Group:
        command("wallet", "Manage the wallet", subcommands=[connect])
    - Leaf:
        command("connect", "Toggle connection", run=handler, args=[...])
    - Decorator (leaf):
        @command("build", args=[argument("target", optional=True)])
        def build(input): ...
      The handler's docstring is the default description.
    - Bare decorator:
        @command
        def build(input): ...
      The handler's __name__ is the command name.

    Without 'subcommands' and 'run', the call always returns the decorator,
    even when only a name and a description are given: command("wallet",
    "Manage") is a decorator, not a command, until applied to a handler.

    Raises
    - TypeError: when 'subcommands' is mixed with 'args' or 'run', or when
      the decorator is applied to a non-callable.
    """
    if subcommands is not Unset:
        if run is not Unset or args is not Unset:
            raise TypeError("command() cannot mix 'subcommands' with 'args' or 'run'")
        return Group(name, descr, subcommands, precheck=precheck)

    if callable(name) and descr is Unset and run is Unset:
        # Bare decorator: @command
        return command(name.__name__, run=name, args=args, precheck=precheck)

    @rename("command")
    def wrapper(run, /):
        if not callable(run):
            raise TypeError("@command() must be applied to a callable")
        return Leaf(
            coalesce(name, getattr(run, "__name__", Unset)),
            coalesce(descr, inspect.getdoc(run) or ""),
            run,
            coalesce(args, ()),
            precheck=precheck,
        )

    return wrapper(run) if run is not Unset else wrapper


__all__ = (
    "Command",
    "Group",
    "Leaf",
    "command",
)
