"""
Terminal facade: the surface application code talks to.

A Terminal wires one registry to one dispatcher, one lifecycle hub and one
rich console, and exposes:

- execute(prompt): tokenize a raw line (or take pre-split tokens) and dispatch
  it. Outside shell mode faults are raised to the caller; in shell mode they
  are rendered on the console and the call returns None.
- commands: lazily built, memoized handles keyed by the registry's internal
  keys (also reachable as attributes: terminal.commands.build). A handle runs
  its command from a string of arguments and subscribes to its lifecycle
  notifications without knowing the display name.
- names(), completions(), resolve_completions(): registry views for prompts
  and input completion.
- log(*objects): print on the terminal console.

Example
    terminal = Terminal(Registry(build=build, wallet=wallet))
    terminal.commands.build.on_did_run_finish(print)
    await terminal.commands.build.run("release")   # same as "build release"
    await terminal.execute("wallet connect")
"""
from collections.abc import Iterable, Mapping

from rich.console import Console

from .dispatcher import Dispatcher
from .events import Events
from .faults import CommandException, trigger
from .registry import Registry
from .tokens import tokenize
from .utils import *


class Handle:
    """
    Public handle of a top-level command, bound to a terminal.
    """
    __slots__ = ("_key", "_terminal")

    def __init__(self, key, terminal, /):
        self._key = key
        self._terminal = terminal

    @property
    def key(self):
        return self._key

    @property
    def name(self):
        return self._terminal.registry.display(self._key)

    async def run(self, args="", /):
        """
        Execute "{name} {args}" through the terminal and return the result.
        """
        if not isinstance(args, str):
            raise TypeError("run() argument must be a string")
        return await self._terminal.execute(f"{self.name} {args}")

    def on_did_run_start(self, callback, /):
        """
        Subscribe to the start of this command's runs; returns a Disposable.
        The callback receives the input line.
        """
        return self._terminal.events.on_did_run_start(self.name, callback)

    def on_did_run_finish(self, callback, /):
        """
        Subscribe to the completion of this command's runs; returns a
        Disposable. The callback receives the handler's result.
        """
        return self._terminal.events.on_did_run_finish(self.name, callback)

    def __repr__(self):
        return f"handle(key={self._key!r}, name={self.name!r})"


class Handles(Mapping):
    """
    Read-only mapping of internal key -> Handle, built on first access.
    """

    def __init__(self, terminal, /):
        self._terminal = terminal
        self._cache = {}

    def __getitem__(self, key):
        try:
            return self._cache[key]
        except KeyError:
            pass
        # Raises KeyError for unknown keys before anything is cached.
        self._terminal.registry[key]
        handle = self._cache[key] = Handle(key, self._terminal)
        return handle

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"no command registered under {name!r}") from None

    def __iter__(self):
        return iter(self._terminal.registry)

    def __len__(self):
        return len(self._terminal.registry)


class Terminal:
    """
    Parameters
    - registry: Registry of top-level commands.
    - console: rich Console for help listings, logs and rendered faults
      (stdout if Unset).
    - shell: render faults instead of raising them.
    - fancy: render faults inside a panel.
    - colorful: style rendered faults.
    - prog: label shown in fault headers (overridden by __main__.__prog__).
    """

    def __init__(self, registry, /, *, console=Unset, shell=False, fancy=False, colorful=True, prog=Unset):
        if not isinstance(registry, Registry):
            raise TypeError("terminal 'registry' must be a registry")
        if not isinstance(console, Console | Unset):
            raise TypeError("terminal 'console' must be a rich console")
        for name, flag in (("shell", shell), ("fancy", fancy), ("colorful", colorful)):
            if not isinstance(flag, bool):
                raise TypeError(f"terminal {name!r} must be a boolean")
        if not isinstance(prog, str | Unset):
            raise TypeError("terminal 'prog' must be a string")

        self._registry = registry
        self._console = Console() if console is Unset else console
        self._events = Events()
        self._dispatcher = Dispatcher(registry, events=self._events, console=self._console)
        self._commands = Handles(self)
        self._shell = shell
        self._fancy = fancy
        self._colorful = colorful
        self._prog = coalesce(prog, "helmsman")

    registry = property(lambda self: self._registry)
    events = property(lambda self: self._events)
    dispatcher = property(lambda self: self._dispatcher)
    console = property(lambda self: self._console)
    commands = property(lambda self: self._commands)
    shell = property(lambda self: self._shell)

    async def execute(self, prompt="", /):
        if isinstance(prompt, str):
            tokens = tokenize(prompt)
        elif isinstance(prompt, Iterable):
            tokens = [token for item in prompt for token in tokenize(item)]
        else:
            raise TypeError("execute() argument must be a string or an iterable of strings")

        try:
            return await self._dispatcher.execute(tokens)
        except CommandException as fault:
            if not self._shell:
                raise
            trigger(
                fault,
                shell=True,
                fancy=self._fancy,
                colorful=self._colorful,
                console=self._console,
                prog=self._prog,
            )
            return None

    def names(self):
        return self._registry.names()

    def completions(self):
        return self._registry.completions()

    async def resolve_completions(self):
        return await self._registry.resolve_completions()

    def log(self, *objects, **options):
        self._console.print(*objects, **options)


__all__ = (
    "Handle",
    "Handles",
    "Terminal",
)
