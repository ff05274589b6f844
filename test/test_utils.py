"""
Utilities behavioral tests (sentinel, coalescing, freezing, definitions, enumerations).

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import pickle
import unittest
from types import MappingProxyType
from unittest import TestCase

from helmsman import Locale
from helmsman.utils import *


class UnsetTest(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyButNotNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertEqual(repr(Unset), "Unset")

    def testCopyAndPickleKeepIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testUnionWithTypes(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)

    def testCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})


class HelpersTest(TestCase):

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)

    def testFreeze(self):
        self.assertEqual(freeze([1, 2]), (1, 2))
        self.assertIsInstance(freeze({"a": 1}), MappingProxyType)
        self.assertEqual(freeze({1, 2}), frozenset((1, 2)))
        self.assertEqual(freeze("text"), "text")
        self.assertIsNone(freeze(None))

    def testRenameForms(self):
        def function():
            pass

        self.assertEqual(rename(function, "other").__name__, "other")
        self.assertEqual(rename("again")(function).__qualname__, "again")
        with self.assertRaises(TypeError):
            rename(function, 1)
        with self.assertRaises(TypeError):
            rename()

    def testJoin(self):
        self.assertEqual(join(["a", "b"], " | ", str.upper), "A | B")
        self.assertEqual(join([1, 2], ", "), "1, 2")

    def testOrdinal(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(111), "111th")

    def testListingUsesLocalizedNames(self):
        self.assertEqual(
            listing(["manage_roles", "kick_members"], Locale(), "common.permissions"),
            "Manage Roles, Kick Members"
        )

    def testListingFallsBackToRawKeys(self):
        locale = Locale({"common": {"list_separator": " / ", "permissions": {"ban_members": "Ban"}}})
        self.assertEqual(listing(["ban_members", "speak"], locale, "common.permissions"), "Ban / speak")
        self.assertEqual(listing(["a", "b"], locale, "common.missing"), "a / b")


class DefinitionTypeTest(TestCase):

    def setUp(self):
        class SampleRecord(metaclass=DefinitionType):
            __introspectable__ = ("items", "label")

            def __new__(cls, items, label):
                self = super().__new__(cls)
                object.__setattr__(self, "_items", freeze(items))
                object.__setattr__(self, "_label", label)
                return self

        self.record = SampleRecord([1, 2], "x")

    def testTypename(self):
        self.assertEqual(type(self.record).__typename__, "sample-record")

    def testMirroredFieldsAreFrozen(self):
        self.assertEqual(self.record.items, (1, 2))
        self.assertEqual(self.record.label, "x")

    def testMirrorReturnsTheStoredSnapshot(self):
        self.assertIs(self.record.items, self.record.items)

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.record.label = "y"
        with self.assertRaises(AttributeError):
            del self.record.label

    def testRepr(self):
        self.assertEqual(repr(self.record), "sample-record(items=(1, 2), label='x')")
        self.assertEqual(list(self.record.__rich_repr__()), [("items", (1, 2)), ("label", "x")])


class ModulesTest(TestCase):

    def testPackageComesFirst(self):
        names = modules("helmsman")
        self.assertEqual(names[0], "helmsman")
        self.assertIn("helmsman.commands", names)
        self.assertIn("helmsman.arguments", names)

    def testPlainModuleYieldsItself(self):
        self.assertEqual(modules("helmsman.commands"), ["helmsman.commands"])

    def testPackageModulesAreDiscovered(self):
        self.assertEqual(
            modules("sample_commands"),
            ["sample_commands", "sample_commands.moderation", "sample_commands.utility"]
        )

    def testRejections(self):
        with self.assertRaises(TypeError):
            modules(1)
        with self.assertRaises(TypeError):
            modules("nonexistent_package_for_tests")


if __name__ == "__main__":
    unittest.main()
