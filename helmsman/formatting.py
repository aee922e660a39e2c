"""
Plain-text help rendering for command groups.

The output of this module is a compatibility contract: terminals and scripts
match on it, so it is produced as plain strings (no rich markup) and printed
verbatim by the dispatcher.

format_commands(entries)
- Sort: names made only of ASCII letters and hyphens come first, ordered by
  name (case-insensitive first, lowercase before uppercase on ties); every
  other name goes to the end, keeping its input order.
- Lines: four spaces, the name padded with spaces to 25 columns, the
  description, a newline. A name of 25 or more characters is followed by a
  single space instead.

format_help(group, path)
    <empty line>
    {descr}
    <empty line>
    Usage: {path} <COMMAND>
    <empty line>
    Commands:
    <empty line>
    {format_commands(group.subcommands)}
"""
import re
from collections.abc import Iterable, Mapping

WIDTH = 25
INDENT = " " * 4

_LETTERS = re.compile(r"[a-zA-Z-]+")


def _entry(object):
    # Commands expose name/descr; plain listings may use mappings or pairs.
    if isinstance(object, Mapping):
        return str(object["name"]), str(object.get("description", object.get("descr", "")))
    if hasattr(object, "name") and hasattr(object, "descr"):
        return object.name, object.descr
    try:
        name, description = object
    except (TypeError, ValueError):
        raise TypeError("format_commands() entries must have a name and a description") from None
    return str(name), str(description)


def _sortkey(entry):
    name, _ = entry
    if not _LETTERS.fullmatch(name):
        return (1,)
    return (0, name.casefold(), name.swapcase())


def format_commands(entries, /):
    if isinstance(entries, str) or not isinstance(entries, Iterable):
        raise TypeError("format_commands() argument must be an iterable of entries")

    lines = []
    for name, description in sorted(map(_entry, entries), key=_sortkey):
        padding = " " * (WIDTH - len(name)) if len(name) < WIDTH else " "
        lines.append(INDENT + name + padding + description + "\n")
    return "".join(lines)


def format_help(group, path, /):
    """
    Render the help listing of a group reached without a subcommand.

    `path` is the route typed so far, ending with the group's own name
    (e.g. "wallet" or "config network").
    """
    return (
        f"\n{group.descr}\n\n"
        f"Usage: {path} <COMMAND>\n\n"
        f"Commands:\n\n"
        f"{format_commands(group.subcommands)}"
    )


__all__ = (
    "format_commands",
    "format_help",
)
