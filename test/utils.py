"""
Utils module behavioral tests (sentinel, normalization helpers).

Scope
- Validate Unset semantics (singleton, falsey, non-subclassable, unions).
- Validate coalesce, toarray, rename, mirror and settle.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import IsolatedAsyncioTestCase, TestCase

from helmsman.utils import Unset, UnsetType, coalesce, mirror, rename, settle, toarray


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsey(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testUnionInIsinstance(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))
        self.assertFalse(isinstance(1, str | Unset))


class TestHelpers(TestCase):

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")

    def testToarray(self):
        self.assertEqual(toarray(Unset), ())
        self.assertEqual(toarray(None), ())
        self.assertEqual(toarray(print), (print,))
        self.assertEqual(toarray([print, len]), (print, len))
        with self.assertRaises(TypeError):
            toarray(42)
        with self.assertRaises(TypeError):
            toarray("print")

    def testRename(self):
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")
        self.assertEqual(original.__qualname__, "renamed")
        with self.assertRaises(TypeError):
            rename(print, "other")

    def testMirrorFreezesContainers(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")

            def __init__(self):
                self._items = ["a", ["b"]]
                self._table = {"k": [1]}

        holder = Holder()
        self.assertEqual(holder.items, ("a", ("b",)))
        self.assertEqual(holder.table["k"], (1,))
        with self.assertRaises(TypeError):
            holder.table["k"] = 2
        with self.assertRaises(AttributeError):
            holder.items = ()


class TestSettle(IsolatedAsyncioTestCase):

    async def testPlainValue(self):
        self.assertEqual(await settle(1), 1)
        self.assertIsNone(await settle(None))

    async def testAwaitable(self):
        async def value():
            return "done"

        self.assertEqual(await settle(value()), "done")


if __name__ == "__main__":
    unittest.main()
