"""
Faults behavioral tests (codes, options, rendering, trigger).

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured with a recording rich Console (no terminal needed).
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from rich.console import Console

from argvex import FaultCode, ParseError, InvalidFormatError, UnknownFlagError, trigger, parse


def render(renderable):
    console = Console(record=True, width=120, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestFaults(TestCase):
    """Behavioral tests for ParseError and its subclasses."""

    def testCodesAreStable(self):
        self.assertEqual(FaultCode.INVALID_FORMAT, 11111)
        self.assertEqual(FaultCode.UNKNOWN_FLAG, 11112)
        self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "11112")

    def testSubclassesCarryTheirCode(self):
        self.assertIs(InvalidFormatError("x").options["code"], FaultCode.INVALID_FORMAT)
        self.assertIs(UnknownFlagError("x").options["code"], FaultCode.UNKNOWN_FLAG)
        self.assertTrue(issubclass(UnknownFlagError, ParseError))

    def testOptionsAreReadOnly(self):
        error = UnknownFlagError("x", argument="--tea")
        with self.assertRaises(TypeError):
            error.options["argument"] = "--milk"  # type: ignore[index]

    def testDefaultsWhenOptionsMissing(self):
        error = InvalidFormatError("x")
        self.assertIsNone(error.argument)
        self.assertEqual(error.known, ())
        self.assertEqual(error.suggestions, ())

    def testReplaceMergesOptions(self):
        error = UnknownFlagError("unknown flag '--tea'", argument="--tea", known=("milk",))
        replaced = copy.replace(error, colorful=False)
        self.assertIsInstance(replaced, UnknownFlagError)
        self.assertEqual(replaced.message, error.message)
        self.assertEqual(replaced.argument, "--tea")
        self.assertFalse(replaced.options["colorful"])

    def testTriggerRaisesOutsideShell(self):
        with self.assertRaises(UnknownFlagError):
            trigger(UnknownFlagError("x"))

    def testTriggerRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))

    def testTriggerExitsInShell(self):
        with self.assertRaises(SystemExit) as context:
            trigger(InvalidFormatError("bad", argument="-"), shell=True, colorful=False)
        self.assertEqual(context.exception.code, 1)

    def testPlainRendering(self):
        try:
            parse(["--tea"], schema={"milk": {}}, strict=True)
        except UnknownFlagError as error:
            text = render(copy.replace(error, colorful=False))
        self.assertIn("11112", text)
        self.assertIn("Unknown Flag", text)
        self.assertIn("unknown flag '--tea' at first position", text)
        self.assertIn("known flags are --milk", text)

    def testFancyRendering(self):
        error = InvalidFormatError("bad form of flag '-' at first position", hint="use -- to end flags")
        text = render(copy.replace(error, colorful=False, fancy=True))
        self.assertIn("bad form of flag", text)
        self.assertIn("use -- to end flags", text)

    def testHostCodeRelabeling(self):
        main = __import__("__main__")
        previous = getattr(main, "__codes__", None)
        main.__codes__ = {FaultCode.UNKNOWN_FLAG: "E-FLAG"}
        try:
            self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "E-FLAG")
            self.assertEqual(FaultCode.INVALID_FORMAT.normalize(), "11111")
        finally:
            if previous is None:
                del main.__codes__
            else:
                main.__codes__ = previous


if __name__ == "__main__":
    unittest.main()
