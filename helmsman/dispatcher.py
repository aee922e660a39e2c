"""
Helmsman dispatcher: resolve a token sequence to one command and run it.

What this module provides
- ParsedInput: the (raw, args) pair handed to run handlers.
- bind(specs, tokens): positional argument binding.
- Dispatcher: walks tokens through the registry, validates arguments, runs
  pre-checks and the handler, and publishes lifecycle notifications.

Dispatch, step by step
1. No tokens: nothing happens (no result, no notification).
2. The first token must be the display name of a top-level command, otherwise
   CommandNotFoundError.
3. The "start" notification of that top-level command is dispatched with the
   whole input (tokens joined by single spaces).
4. Tokens are walked left to right. A token naming a subcommand of the current
   command descends into it. When the following token is not a subcommand,
   every remaining token becomes an argument token:
     • a group has no arguments to take them: UnknownSubcommandError;
     • more argument tokens than declared slots: TooManyArgumentsError.
   The pre-checks of the current command run next, in order, each awaited.
   The walk continues while tokens remain and no argument was collected.
5. Ending on a group prints its help listing; the dispatch returns None.
6. Ending on a leaf binds the arguments, awaits the handler, dispatches the
   "finish" notification of the top-level command with the result and
   returns it. Exactly one handler runs per dispatch.

Serialization
- Each dispatcher owns an asyncio.Lock held for the whole dispatch, so at most
  one command body runs at a time. The lock is released on every exit path.
- The lock is created for the running event loop on first use, and replaced
  when the dispatcher is later driven by another loop.
- A dispatch awaited directly by a running pre-check or handler (the task that
  holds the lock) runs inside the lock instead of waiting for it. Tasks spawned
  from a handler are other tasks: they wait for the lock like any caller.

Errors raised by pre-checks and handlers propagate unchanged; no step is
retried.
"""
import asyncio
import difflib
from collections import namedtuple
from collections.abc import Iterable

from rich.console import Console

from .events import Events, channel
from .faults import *
from .formatting import format_help
from .registry import Registry
from .tokens import untokenize
from .utils import *

ParsedInput = namedtuple("ParsedInput", ("raw", "args"))
ParsedInput.__doc__ = """
Input handed to a run handler.

- raw: the full input line (tokens joined by single spaces).
- args: mapping of argument name -> raw string value; optional arguments that
  were not supplied are absent.
"""

def _hint(input, candidates, fallback):
    suggestions = difflib.get_close_matches(input, candidates, 5)
    try:
        return "did you mean %r? %s" % (suggestions[0], fallback)
    except IndexError:
        return fallback


def bind(specs, tokens, /):
    """
    Bind argument tokens to argument specs by position.

    - The i-th token is bound, as a raw string, to the i-th spec's name.
    - A missing token for a required spec raises MissingArgumentError.
    - A missing token for an optional spec leaves its name out of the result.

    Extra tokens are the dispatcher's concern (TooManyArgumentsError) and are
    ignored here.
    """
    bound = {}
    for index, spec in enumerate(specs):
        if index < len(tokens):
            bound[spec.name] = tokens[index]
        elif not spec.optional:
            raise MissingArgumentError(
                "Argument not specified: `%s`" % spec.name,
                title="missing argument",
                code=FaultCode.MISSING_ARGUMENT,
                argument=spec,
                index=index,
                hint="provide a value for %r at position %d" % (spec.name, index + 1),
                docs=getdoc(FaultCode.MISSING_ARGUMENT),
            )
    return bound


class Dispatcher:
    """
    Resolve and execute commands from a registry.

    Parameters
    - registry: Registry holding the top-level commands.
    - events: Events hub for lifecycle notifications (a private one if Unset).
    - console: rich Console receiving help listings (stdout if Unset).
    """

    def __init__(self, registry, /, *, events=Unset, console=Unset):
        if not isinstance(registry, Registry):
            raise TypeError("dispatcher 'registry' must be a registry")
        if not isinstance(events, Events | Unset):
            raise TypeError("dispatcher 'events' must be an events hub")
        if not isinstance(console, Console | Unset):
            raise TypeError("dispatcher 'console' must be a rich console")

        self._registry = registry
        self._events = Events() if events is Unset else events
        self._console = Console() if console is Unset else console
        # Created for the running loop by _acquire().
        self._lock = None
        self._loop = None
        self._owner = None

    @property
    def registry(self):
        return self._registry

    @property
    def events(self):
        return self._events

    @property
    def console(self):
        return self._console

    @property
    def busy(self):
        """
        True while a dispatch holds the lock.
        """
        return self._lock is not None and self._lock.locked()

    def log(self, text, /):
        # Verbatim: no markup, no highlighting, no wrapping.
        self._console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)

    async def execute(self, tokens, /):
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("execute() argument must be an iterable of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("execute() argument must be an iterable of strings")

        task = asyncio.current_task()
        if self._owner is not None and task is self._owner:
            return await self._dispatch(tokens)

        async with self._acquire():
            self._owner = task
            try:
                return await self._dispatch(tokens)
            finally:
                self._owner = None

    def _acquire(self):
        loop = asyncio.get_running_loop()
        if self._loop is not loop:
            self._lock = asyncio.Lock()
            self._loop = loop
        return self._lock

    async def _dispatch(self, tokens):
        if not tokens:
            return None

        top = self._registry.resolve(name := tokens[0])
        if top is None:
            raise CommandNotFoundError(
                "Command `%s` not found." % name,
                title="command not found",
                code=FaultCode.COMMAND_NOT_FOUND,
                input=name,
                hint=_hint(name, self._registry.names(), "available commands: %s" % ", ".join(self._registry.names())),
                docs=getdoc(FaultCode.COMMAND_NOT_FOUND),
            )

        raw = untokenize(tokens)
        self._events.dispatch(channel(top.name, "start"), raw)

        command = top
        args = []
        for index, token in enumerate(tokens):
            command = command.find(token) or command

            if index + 1 < len(tokens) and command.find(following := tokens[index + 1]) is None:
                args = tokens[index + 1:]

                if command.kind == "group":
                    names = [subcommand.name for subcommand in command.subcommands]
                    raise UnknownSubcommandError(
                        "Subcommand doesn't exist: `%s`\n\nAvailable subcommands: %s" % (following, ", ".join(names)),
                        title="unknown subcommand",
                        code=FaultCode.UNKNOWN_SUBCOMMAND,
                        input=following,
                        index=index + 1,
                        command=command,
                        available=names,
                        hint=_hint(following, names, "run '%s' to see available subcommands" % untokenize(tokens[:index + 1])),
                        docs=getdoc(FaultCode.UNKNOWN_SUBCOMMAND),
                    )
                if len(args) > len(command.args):
                    raise TooManyArgumentsError(
                        "Provided argument count is higher than expected: %d" % len(args),
                        title="too many arguments",
                        code=FaultCode.TOO_MANY_ARGUMENTS,
                        command=command,
                        received=len(args),
                        expected=len(command.args),
                        hint="%r takes at most %d argument(s)" % (command.name, len(command.args)),
                        docs=getdoc(FaultCode.TOO_MANY_ARGUMENTS),
                    )

            for precheck in command.precheck:
                await settle(precheck())

            if index < len(tokens) - 1 and not args:
                continue

            if command.kind == "group":
                self.log(format_help(command, untokenize(tokens[:index] + [command.name])))
                return None

            result = await settle(command.run(ParsedInput(raw, bind(command.args, args))))
            self._events.dispatch(channel(top.name, "finish"), result)
            return result


__all__ = (
    "Dispatcher",
    "ParsedInput",
    "bind",
)
