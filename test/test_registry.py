"""
Registry behavioral tests (registration, lookup, invariants).

Scope
- Validate the register()/add_* API: returned handles, ordering, decorator form.
- Validate duplicate detection and that failed registrations leave no trace.
- Validate name, binding and description sanitization.
- Validate exact (non-prefix) lookups and read-only flag metadata.

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None where "omitted" is meant; omit instead.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from pennant import Flags, Flag, Kind, Slot
from pennant.faults import DuplicateLongNameError, DuplicateShortNameError, FaultCode


class TestRegistration(TestCase):
    """Behavioral tests for Flags.register() and the add_* helpers."""

    def setUp(self):
        self.flags = Flags()

    def testRegisterReturnsHandle(self):
        flag = self.flags.register(Kind.BOOL, "d", "debug", descr="enable debug mode")
        self.assertIsInstance(flag, Flag)
        self.assertEqual(flag.short, "d")
        self.assertEqual(flag.long, "debug")
        self.assertEqual(flag.descr, "enable debug mode")
        self.assertIs(flag.kind, Kind.BOOL)
        self.assertIsNone(flag.binding)
        self.assertEqual(flag.count, 0)

    def testHelpersPickKinds(self):
        cases = [
            (self.flags.add_string, Kind.STRING, Slot("")),
            (self.flags.add_bool, Kind.BOOL, Slot(False)),
            (self.flags.add_int, Kind.INT, Slot(0)),
            (self.flags.add_float, Kind.FLOAT, Slot(0.0)),
            (self.flags.add_string_callback, Kind.STRING_CALLBACK, print),
            (self.flags.add_bool_callback, Kind.BOOL_CALLBACK, print),
            (self.flags.add_int_callback, Kind.INT_CALLBACK, print),
            (self.flags.add_float_callback, Kind.FLOAT_CALLBACK, print),
        ]
        for index, (helper, kind, binding) in enumerate(cases):
            with self.subTest(kind=kind):
                flag = helper(None, "flag%d" % index, binding)
                self.assertIs(flag.kind, kind)
                self.assertIs(flag.binding, binding)

    def testOrderPreserved(self):
        names = ["zeta", "alpha", "mid"]
        for name in names:
            self.flags.add_bool(None, name)
        self.assertEqual([flag.long for flag in self.flags], names)
        self.assertEqual(len(self.flags), 3)

    def testDuplicateLongNameRaises(self):
        first = self.flags.add_bool("d", "debug")
        with self.assertRaises(DuplicateLongNameError) as context:
            self.flags.add_int("x", "debug")
        self.assertEqual(context.exception.options["code"], FaultCode.DUPLICATE_LONG_NAME)
        self.assertIs(context.exception.options["flag"], first)
        # the first registration is untouched and the failed one left nothing behind
        self.assertIs(self.flags.find_by_long("debug"), first)
        self.assertIsNone(self.flags.find_by_short("x"))
        self.assertEqual(len(self.flags), 1)

    def testDuplicateShortNameRaises(self):
        self.flags.add_bool("d", "debug")
        with self.assertRaises(DuplicateShortNameError):
            self.flags.add_bool("d", "dry-run")
        self.assertNotIn("dry-run", self.flags)

    def testMissingShortNamesNeverCollide(self):
        self.flags.add_bool(None, "one")
        self.flags.add_bool(None, "two")
        self.assertEqual(len(self.flags), 2)

    def testDecoratorForm(self):
        received = []

        @self.flags.add_string_callback("f", "file", descr="process a file")
        def onFile(filename):
            received.append(filename)

        self.assertIsInstance(onFile, Flag)
        self.assertIs(onFile.kind, Kind.STRING_CALLBACK)
        self.flags.parse(["prog", "--file", "a.txt"])
        self.assertEqual(received, ["a.txt"])
        self.assertEqual(onFile.count, 1)

    def testDecoratorRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            self.flags.add_int_callback("n", "number")(42)

    def testFlagMetadataIsReadOnly(self):
        flag = self.flags.add_bool("d", "debug")
        with self.assertRaises(AttributeError):
            flag.long = "other"
        with self.assertRaises(AttributeError):
            flag.binding = Slot(True)


class TestSanitization(TestCase):
    """Behavioral tests for malformed registrations."""

    def setUp(self):
        self.flags = Flags()

    def testKindMustBeKind(self):
        with self.assertRaises(TypeError):
            self.flags.register("bool", "d", "debug")

    def testLongNameRules(self):
        for name in ("", "-debug", "two words", "key=value"):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    self.flags.add_bool(None, name)

    def testLongNameMustBeString(self):
        with self.assertRaises(TypeError):
            self.flags.add_bool(None, 42)

    def testShortNameRules(self):
        for short in ("", "ab", "-", " "):
            with self.subTest(short=short):
                with self.assertRaises(ValueError):
                    self.flags.add_bool(short, "debug")

    def testShortNameMustBeString(self):
        with self.assertRaises(TypeError):
            self.flags.add_bool(1, "debug")

    def testDirectBindingMustBeSlot(self):
        with self.assertRaises(TypeError):
            self.flags.add_int("c", "count", [0])

    def testCallbackBindingMustBeCallable(self):
        with self.assertRaises(TypeError):
            self.flags.add_int_callback("c", "count", Slot(0))

    def testDescrRules(self):
        with self.assertRaises(ValueError):
            self.flags.add_bool("d", "debug", descr="   ")
        with self.assertRaises(TypeError):
            self.flags.add_bool("d", "debug", descr=None)

    def testDescrIsTrimmed(self):
        flag = self.flags.add_bool("d", "debug", descr="  enable debug mode ")
        self.assertEqual(flag.descr, "enable debug mode")

    def testDescrDefaultsToNone(self):
        self.assertIsNone(self.flags.add_bool("d", "debug").descr)


class TestLookup(TestCase):
    """Behavioral tests for find_by_long()/find_by_short()."""

    def setUp(self):
        self.flags = Flags()
        self.verbose = self.flags.add_bool("v", "verbose")

    def testExactMatches(self):
        self.assertIs(self.flags.find_by_long("verbose"), self.verbose)
        self.assertIs(self.flags.find_by_short("v"), self.verbose)
        self.assertIn("verbose", self.flags)

    def testNoPrefixMatches(self):
        self.assertIsNone(self.flags.find_by_long("verb"))
        self.assertIsNone(self.flags.find_by_long("verbose-mode"))

    def testShortLookupIsCaseSensitive(self):
        self.assertIsNone(self.flags.find_by_short("V"))


if __name__ == "__main__":
    unittest.main()
