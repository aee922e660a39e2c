"""
Command registry: the immutable table of top-level commands.

The registry maps internal keys (identifiers used by application code, e.g.
"build" or "walletConnect") to command definitions. The key and the display
name typed in the terminal can differ; lookups by display name only consider
the top level.

It is built once at startup and read-only afterwards: it implements the
Mapping protocol and nothing else, and it is handed explicitly to the
dispatcher and the terminal instead of living in a global.

Operations
- resolve(name): top-level command whose display name equals `name`, or None.
- display(key): display name of the command registered under `key`.
- names(): display names in registry order.
- completions(): nested mapping mirroring the command tree for input
  completion; leaves map argument positions ("0", "1", ...) to their declared values.
- resolve_completions(): same tree with lazy values resolved (async).
"""
from collections.abc import Mapping

from .commands import Command


class Registry(Mapping):
    """
    Ordered, read-only mapping of internal key -> top-level command.

    Parameters
    - commands: Mapping[str, Command] | Iterable[tuple[str, Command]]
    - **named: additional key=command pairs, appended after `commands`.

    Raises
    - TypeError: non-string key or non-command value.
    - ValueError: two top-level commands sharing a display name.
    """

    def __init__(self, commands=(), /, **named):
        items = list(commands.items() if isinstance(commands, Mapping) else commands) + list(named.items())

        self._commands = {}
        names = set()
        for key, command in items:
            if not isinstance(key, str):
                raise TypeError("registry keys must be strings")
            if callable(command) and not isinstance(command, Command):
                raise TypeError(f"registry value for {key!r} must be a command, not a callable (was command() given a handler?)")
            if not isinstance(command, Command):
                raise TypeError(f"registry value for {key!r} must be a command")
            if key in self._commands:
                raise ValueError(f"registry key {key!r} is already in use")
            if command.name in names:
                raise ValueError(f"command name {command.name!r} is already in use")
            names.add(command.name)
            self._commands[key] = command

    def __getitem__(self, key):
        return self._commands[key]

    def __iter__(self):
        return iter(self._commands)

    def __len__(self):
        return len(self._commands)

    def __repr__(self):
        return f"registry({', '.join(self.names())})"

    def resolve(self, name, /):
        for command in self._commands.values():
            if command.name == name:
                return command
        return None

    def display(self, key, /):
        return self._commands[key].name

    def names(self):
        return [command.name for command in self._commands.values()]

    def completions(self):
        """
        Build the completion tree.

        Each command maps to a dict: groups recurse into their subcommands
        (keyed by name), leaves map the position of every argument declaring
        `values` (as a string, "0", "1", ...) to those values.
        Lazy values are left as callables.
        """
        def walk(commands):
            completions = {}
            for command in commands:
                completion = completions[command.name] = {}
                if command.kind == "group":
                    completion.update(walk(command.subcommands))
                    continue
                for index, arg in enumerate(command.args):
                    if arg.values is not None:
                        completion[str(index)] = arg.values if arg.lazy else list(arg.values)
            return completions

        return walk(self._commands.values())

    async def resolve_completions(self):
        """
        Build the completion tree with every argument's values materialized.
        """
        async def walk(commands):
            completions = {}
            for command in commands:
                completion = completions[command.name] = {}
                if command.kind == "group":
                    completion.update(await walk(command.subcommands))
                    continue
                for index, arg in enumerate(command.args):
                    if arg.values is not None:
                        completion[str(index)] = await arg.choices()
            return completions

        return await walk(self._commands.values())


__all__ = (
    "Registry",
)
