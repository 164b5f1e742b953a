"""
Tests for pennant faults.

This module verifies:
- Message and option handling on exceptions and warnings.
- FaultCode normalization (including host remapping via __main__.__codes__).
- copy.replace() support and the trigger() contract.
- Shell-mode rendering through rich (plain and fancy layouts).
"""
import copy
import io
import sys
import unittest
from contextlib import redirect_stderr
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from pennant import Flags
from pennant.faults import *


class FaultShapeTest(TestCase):
    """
    Test suite for the message/options shape shared by every fault.
    """

    def testMessage(self) -> None:
        fault = MissingValueError("prog: option '--count' requires a value")
        self.assertEqual(str(fault), "prog: option '--count' requires a value")
        self.assertEqual(fault.args, ("prog: option '--count' requires a value",))

    def testEmptyMessage(self) -> None:
        self.assertEqual(str(UnrecognizedFlagError()), "")
        self.assertEqual(str(InvalidNumberWarning()), "")

    def testOptionsAreReadOnly(self) -> None:
        fault = UnrecognizedFlagError("x", hint="y")
        with self.assertRaises(TypeError):
            fault.options["hint"] = "z"

    def testHierarchy(self) -> None:
        for cls in (DuplicateLongNameError, DuplicateShortNameError, UnrecognizedFlagError, MissingValueError):
            with self.subTest(cls=cls):
                self.assertTrue(issubclass(cls, FlagException))
        self.assertTrue(issubclass(InvalidNumberWarning, Warning))

    def testReplaceMergesOptions(self) -> None:
        fault = MissingValueError("m", code=FaultCode.MISSING_VALUE, hint="old")
        replaced = copy.replace(fault, hint="new", shell=True)
        self.assertIsInstance(replaced, MissingValueError)
        self.assertIsNot(replaced, fault)
        self.assertEqual(replaced.message, "m")
        self.assertEqual(replaced.options["hint"], "new")
        self.assertIs(replaced.options["code"], FaultCode.MISSING_VALUE)
        self.assertEqual(fault.options["hint"], "old")


class FaultCodeTest(TestCase):
    """
    Test suite for FaultCode values and normalization.
    """

    def testStableValues(self) -> None:
        self.assertEqual(FaultCode.DUPLICATE_LONG_NAME, 21101)
        self.assertEqual(FaultCode.DUPLICATE_SHORT_NAME, 21102)
        self.assertEqual(FaultCode.UNRECOGNIZED_FLAG, 22101)
        self.assertEqual(FaultCode.MISSING_VALUE, 22102)
        self.assertEqual(FaultCode.INVALID_NUMBER, 23101)

    def testNormalize(self) -> None:
        with patch.object(sys.modules["__main__"], "__codes__", {}, create=True):
            self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "22102")

    def testNormalizeWithHostCodes(self) -> None:
        codes = {FaultCode.MISSING_VALUE: "E-MISSING"}
        with patch.object(sys.modules["__main__"], "__codes__", codes, create=True):
            self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "E-MISSING")
            self.assertEqual(FaultCode.UNRECOGNIZED_FLAG.normalize(), "22101")


class TriggerTest(TestCase):
    """
    Test suite for trigger() in raising and shell modes.
    """

    def testRaises(self) -> None:
        fault = UnrecognizedFlagError("prog: unrecognized option '--nope'")
        with self.assertRaises(UnrecognizedFlagError) as context:
            trigger(fault, hint="did you mean '--name'?")
        self.assertEqual(str(context.exception), str(fault))
        self.assertEqual(context.exception.options["hint"], "did you mean '--name'?")

    def testWarns(self) -> None:
        with self.assertWarns(InvalidNumberWarning) as context:
            trigger(InvalidNumberWarning("prog: invalid integer value 'x' for option '-c'"))
        self.assertEqual(str(context.warning), "prog: invalid integer value 'x' for option '-c'")

    def testShellExits(self) -> None:
        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            trigger(MissingValueError("prog: option '-c' requires a value"), shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("prog: option '-c' requires a value", stderr.getvalue())

    def testShellWarningPrints(self) -> None:
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            trigger(InvalidNumberWarning("prog: bad number"), shell=True)
        self.assertIn("prog: bad number", stderr.getvalue())

    def testRejectsNonFaults(self) -> None:
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))
        with self.assertRaises(TypeError):
            trigger("text")


class RenderTest(TestCase):
    """
    Test suite for the rich rendering of faults.
    """

    def render(self, fault) -> str:
        buffer = io.StringIO()
        Console(file=buffer, width=100).print(fault)
        return buffer.getvalue()

    def fault(self, **options):
        return MissingValueError(
            "prog: option '--count' requires a value",
            title="missing value",
            code=FaultCode.MISSING_VALUE,
            hint="--count=<value>",
            **options
        )

    def testPlain(self) -> None:
        lines = self.render(self.fault()).splitlines()
        self.assertEqual(lines[0].rstrip(), "[ 22102 | Missing Value ]")
        self.assertEqual(lines[1].rstrip(), "prog: option '--count' requires a value")
        self.assertEqual(lines[2].rstrip(), " → --count=<value>")

    def testFancy(self) -> None:
        output = self.render(self.fault(fancy=True))
        self.assertIn("[ 22102 | Missing Value ]", output.splitlines()[0])
        self.assertIn("prog: option '--count' requires a value", output)
        self.assertIn("╭", output)

    def testColorfulKeepsText(self) -> None:
        output = self.render(self.fault(colorful=True))
        self.assertIn("Missing Value", output)
        self.assertIn("--count=<value>", output)

    def testProgramFromRegistry(self) -> None:
        flags = Flags(colorful=False)
        flags.parse(["tool"])
        output = self.render(flags.contextualize(self.fault()))
        self.assertEqual(output.splitlines()[0].rstrip(), "[ tool — 22102 | Missing Value ]")

    def testProgramFromHost(self) -> None:
        flags = Flags(colorful=False)
        flags.parse(["tool"])
        with patch.object(sys.modules["__main__"], "__prog__", "host", create=True):
            output = self.render(flags.contextualize(self.fault()))
        self.assertEqual(output.splitlines()[0].rstrip(), "[ host — 22102 | Missing Value ]")

    def testWithoutCodeOrHint(self) -> None:
        lines = self.render(UnrecognizedFlagError("prog: unrecognized option '-x'")).splitlines()
        self.assertEqual(lines[0].rstrip(), "[ - |  ]")
        self.assertEqual(len(lines), 2)


if __name__ == "__main__":
    unittest.main()
