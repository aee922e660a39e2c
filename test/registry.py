"""
Registry behavioral tests (construction, lookup, completion trees).

Scope
- Validate construction from mappings, pairs and keywords.
- Validate lookup by display name and key/name separation.
- Validate the completion tree, with and without lazy resolution.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import IsolatedAsyncioTestCase, TestCase

from helmsman import Registry, argument, command


def noop(input):
    pass


async def accounts():
    return ["alice", "bob"]


def fixture():
    build = command("build", "Build the program", run=noop, args=[argument("target", optional=True, values=("debug", "release"))])
    connect = command("connect", "Connect", run=noop)
    use = command("use", "Select an account", run=noop, args=["wallet", argument("account", values=accounts)])
    wallet = command("wallet", "Manage the wallet", subcommands=[connect, use])
    return Registry(build=build, walletManager=wallet)


class TestRegistry(TestCase):
    """Construction and lookup."""

    def setUp(self):
        self.registry = fixture()

    def testMappingProtocol(self):
        self.assertEqual(list(self.registry), ["build", "walletManager"])
        self.assertEqual(len(self.registry), 2)
        self.assertEqual(self.registry["build"].name, "build")
        self.assertIn("walletManager", self.registry)

    def testReadOnly(self):
        with self.assertRaises(TypeError):
            self.registry["deploy"] = command("deploy", run=noop)

    def testResolveByDisplayName(self):
        self.assertIs(self.registry.resolve("wallet"), self.registry["walletManager"])
        self.assertIsNone(self.registry.resolve("walletManager"))

    def testResolveOnlyTopLevel(self):
        self.assertIsNone(self.registry.resolve("connect"))

    def testResolveIsCaseSensitive(self):
        self.assertIsNone(self.registry.resolve("Build"))

    def testDisplay(self):
        self.assertEqual(self.registry.display("walletManager"), "wallet")
        with self.assertRaises(KeyError):
            self.registry.display("wallet")

    def testNamesInOrder(self):
        self.assertEqual(self.registry.names(), ["build", "wallet"])

    def testFromPairsAndKeywords(self):
        a = command("a", run=noop)
        b = command("b", run=noop)
        registry = Registry([("first", a)], second=b)
        self.assertEqual(list(registry.items()), [("first", a), ("second", b)])

    def testFromMapping(self):
        a = command("a", run=noop)
        self.assertEqual(Registry({"a": a}).names(), ["a"])

    def testDuplicateDisplayNameRejected(self):
        with self.assertRaises(ValueError):
            Registry(one=command("build", run=noop), two=command("build", run=noop))

    def testDuplicateKeyRejected(self):
        a = command("a", run=noop)
        with self.assertRaises(ValueError):
            Registry([("a", a)], a=command("b", run=noop))

    def testNonCommandRejected(self):
        with self.assertRaises(TypeError):
            Registry(build=noop)

    def testUnappliedDecoratorRejected(self):
        with self.assertRaisesRegex(TypeError, "given a handler"):
            Registry(wallet=command("wallet", "Manage the wallet"))

    def testNonStringKeyRejected(self):
        with self.assertRaises(TypeError):
            Registry([(1, command("a", run=noop))])

    def testEmptyRegistry(self):
        registry = Registry()
        self.assertEqual(registry.names(), [])
        self.assertEqual(registry.completions(), {})

    def testRepr(self):
        self.assertEqual(repr(self.registry), "registry(build, wallet)")


class TestCompletions(IsolatedAsyncioTestCase):
    """Completion trees."""

    def setUp(self):
        self.registry = fixture()

    def testTreeMirrorsCommands(self):
        tree = self.registry.completions()
        self.assertEqual(set(tree), {"build", "wallet"})
        self.assertEqual(tree["build"], {"0": ["debug", "release"]})
        self.assertEqual(tree["wallet"]["connect"], {})
        self.assertEqual(set(tree["wallet"]["use"]), {"1"})

    def testLazyValuesKeptAsCallables(self):
        tree = self.registry.completions()
        self.assertIs(tree["wallet"]["use"]["1"], accounts)

    async def testResolvedTree(self):
        tree = await self.registry.resolve_completions()
        self.assertEqual(tree, {
            "build": {"0": ["debug", "release"]},
            "wallet": {
                "connect": {},
                "use": {"1": ["alice", "bob"]},
            },
        })


if __name__ == "__main__":
    unittest.main()
