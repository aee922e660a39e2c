"""
Faults module behavioral tests (messages, options, rendering, triggering).

Scope
- Validate messages and read-only options of CommandException.
- Validate __replace__/trigger semantics (raise vs. shell rendering).
- Validate rich rendering in plain and fancy modes.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured with a rich Console writing to a StringIO.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from helmsman.faults import (
    CommandException,
    CommandNotFoundError,
    MissingArgumentError,
    FaultCode,
    getdoc,
    trigger,
)


def _console():
    return Console(file=io.StringIO(), width=200, color_system=None)


class TestCommandException(TestCase):
    """Messages and options."""

    def testMessage(self):
        fault = CommandNotFoundError("Command `x` not found.", code=FaultCode.COMMAND_NOT_FOUND)
        self.assertEqual(str(fault), "Command `x` not found.")
        self.assertEqual(fault.args, ("Command `x` not found.",))

    def testEmptyMessage(self):
        self.assertEqual(str(CommandException()), "")

    def testOptionsReadOnly(self):
        fault = CommandException("boom", hint="try again")
        self.assertEqual(fault.options["hint"], "try again")
        with self.assertRaises(TypeError):
            fault.options["hint"] = "other"

    def testReplaceMergesOptions(self):
        fault = MissingArgumentError("Argument not specified: `a`", code=FaultCode.MISSING_ARGUMENT)
        copy = fault.__replace__(shell=True)
        self.assertIsInstance(copy, MissingArgumentError)
        self.assertIsNot(copy, fault)
        self.assertEqual(str(copy), str(fault))
        self.assertTrue(copy.options["shell"])
        self.assertEqual(copy.options["code"], FaultCode.MISSING_ARGUMENT)
        self.assertNotIn("shell", fault.options)

    def testTaxonomy(self):
        self.assertTrue(issubclass(CommandNotFoundError, CommandException))
        self.assertTrue(issubclass(CommandException, Exception))


class TestFaultCode(TestCase):
    """Codes and host lookups."""

    def testValues(self):
        self.assertEqual(int(FaultCode.COMMAND_NOT_FOUND), 11101)
        self.assertEqual(int(FaultCode.UNKNOWN_SUBCOMMAND), 11102)
        self.assertEqual(int(FaultCode.TOO_MANY_ARGUMENTS), 11121)
        self.assertEqual(int(FaultCode.MISSING_ARGUMENT), 11125)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.COMMAND_NOT_FOUND.normalize(), "11101")

    def testGetdocWithoutHostDocs(self):
        self.assertIsNone(getdoc(FaultCode.COMMAND_NOT_FOUND))

    def testGetdocRejectsPlainInts(self):
        with self.assertRaises(TypeError):
            getdoc(11101)


class TestTrigger(TestCase):
    """Raising and rendering."""

    def setUp(self):
        self.fault = CommandNotFoundError(
            "Command `deploy` not found.",
            title="command not found",
            code=FaultCode.COMMAND_NOT_FOUND,
            hint="available commands: build",
        )

    def testRaisesOutsideShell(self):
        with self.assertRaises(CommandNotFoundError) as context:
            trigger(self.fault)
        self.assertEqual(str(context.exception), "Command `deploy` not found.")

    def testShellPrintsOnConsole(self):
        console = _console()
        trigger(self.fault, shell=True, console=console, colorful=False)
        output = console.file.getvalue()
        self.assertIn("[ helmsman — 11101 | Command Not Found ]", output)
        self.assertIn("Command `deploy` not found.", output)
        self.assertIn("→ available commands: build", output)

    def testProgLabel(self):
        console = _console()
        trigger(self.fault, shell=True, console=console, colorful=False, prog="anchor")
        self.assertIn("[ anchor — 11101 | Command Not Found ]", console.file.getvalue())

    def testFancyRendersPanel(self):
        console = _console()
        trigger(self.fault, shell=True, console=console, fancy=True, colorful=False)
        output = console.file.getvalue()
        self.assertIn("Command `deploy` not found.", output)
        self.assertIn("╭", output)

    def testDocsRenderedAsFooter(self):
        plain, documented = _console(), _console()
        trigger(self.fault, shell=True, console=plain, colorful=False)
        trigger(self.fault, shell=True, console=documented, colorful=False, docs="Commands are listed by help.")
        lines = documented.file.getvalue().splitlines()
        self.assertEqual(lines[-1].strip(), "Commands are listed by help.")
        self.assertEqual(len(lines), len(plain.file.getvalue().splitlines()) + 1)

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))


if __name__ == "__main__":
    unittest.main()
