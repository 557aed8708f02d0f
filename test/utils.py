"""
Utilities behavioral tests (Unset sentinel, coalesce, ordinal, ambient).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import sys
import unittest
from unittest import TestCase

from argvex.utils import Unset, UnsetType, coalesce, ordinal, ambient


class TestUtils(TestCase):

    def testUnsetIsFalseySingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):  # NOQA: F-841
                pass

    def testCoalescePreservesFalseyValues(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce([], "fallback"), [])

    def testOrdinals(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(113), "113th")
        self.assertEqual(ordinal(101), "101st")

    def testAmbientReadsProcessArguments(self):
        self.assertEqual(ambient(), sys.argv[1:])


if __name__ == "__main__":
    unittest.main()
