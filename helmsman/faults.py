"""
Helmsman faults (dispatch errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing
  dispatch error. Codes are grouped by domain so logs stay searchable.
- CommandException: base type carrying a message plus read-only options
  (title, code, hint and payload such as the offending input); knows how to
  render itself with rich.
- CommandNotFoundError, UnknownSubcommandError, TooManyArgumentsError,
  MissingArgumentError: the dispatch taxonomy.
- trigger(): surface a fault, either raising it or printing it (shell mode).
- getdoc(): optional description lookup for a code from the host application.

Messages
- The message (str(fault)) is the exact text terminals have always shown,
  e.g. "Command `foo` not found."; titles, hints and host documentation
  (the "docs" option, from getdoc()) only exist in the rich rendering.

Integration
- The dispatcher raises faults. Errors raised by pre-checks and run handlers
  are never wrapped: they reach the caller unchanged.
- The terminal facade calls trigger(fault, shell=..., ...): outside shell mode
  the fault is raised again, in shell mode it is printed on the console.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the terminal (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • COMMAND_NOT_FOUND, UNKNOWN_SUBCOMMAND
    - positionals (1112x)
      • TOO_MANY_ARGUMENTS, MISSING_ARGUMENT

    normalize() allows host remapping to custom labels while keeping the
    numeric codes stable.
    """
    # --- routing errors (11xxx) ---
    COMMAND_NOT_FOUND   = 11101
    UNKNOWN_SUBCOMMAND  = 11102

    # --- positional errors (11xxx) ---
    TOO_MANY_ARGUMENTS  = 11121
    MISSING_ARGUMENT    = 11125

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels. when no mapping is
        present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "dim #C8C8D0",  # faded host documentation footer
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("prog", "helmsman")), styler("prog-name"))
        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if code is not None else "-", styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        if docs := self.options.get("docs"):
            renders.append(text(docs, styler("docs")))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class CommandNotFoundError(CommandException): ...
class UnknownSubcommandError(CommandException): ...
class TooManyArgumentsError(CommandException): ...
class MissingArgumentError(CommandException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into a copy of the fault via __replace__(**options)
      before triggering.
    - shell=True prints the fault on options["console"] (default: stderr);
      otherwise the fault is raised.

    typical options
    - shell, fancy, colorful, console, prog.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings. when
    not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "CommandNotFoundError",
    "UnknownSubcommandError",
    "TooManyArgumentsError",
    "MissingArgumentError",
    "FaultCode",
    "trigger",
    "getdoc",
)
