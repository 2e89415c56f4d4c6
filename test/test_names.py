"""
Names module behavioral tests.

Scope
- Token classification (is_dashed / is_short_option / is_long_option).
- Canonical short/long selection, fallback and destination keys.
- Construction-time validation and the degraded display warning.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
import warnings
from unittest import TestCase

from argtree import (
    Names,
    is_dashed,
    is_short_option,
    is_long_option,
    InvalidNameError,
    DuplicateNameError,
    NoUsableAliasError,
    DegradedNameWarning,
)


class TestTokenClasses(TestCase):
    """Bit-exact token classification."""

    def testShortOption(self):
        self.assertTrue(is_short_option("-v"))
        self.assertTrue(is_short_option("-verbose"))
        self.assertFalse(is_short_option("-"))
        self.assertFalse(is_short_option("--v"))
        self.assertFalse(is_short_option("v"))

    def testLongOption(self):
        self.assertTrue(is_long_option("--verbose"))
        self.assertTrue(is_long_option("--"))
        self.assertFalse(is_long_option("-v"))

    def testDashed(self):
        self.assertTrue(is_dashed("-"))
        self.assertTrue(is_dashed("--x"))
        self.assertFalse(is_dashed("file"))


class TestCanonicalForms(TestCase):
    """Short/long selection in declaration order."""

    def testShortAndLong(self):
        names = Names("-v", "--verbose")
        self.assertEqual(names.short, "-v")
        self.assertEqual(names.long, "--verbose")
        self.assertFalse(names.positional)

    def testFirstLongWins(self):
        names = Names("--verbose", "--loud", "-v")
        self.assertEqual(names.long, "--verbose")
        self.assertIn("--loud", names)
        self.assertEqual(names.short, "-v")

    def testShortFallsBackToFirstAlias(self):
        names = Names("--output")
        self.assertEqual(names.short, "--output")
        self.assertEqual(names.long, "--output")

    def testLongFallsBackToFirstAlias(self):
        names = Names("-o")
        self.assertEqual(names.long, "-o")

    def testPositional(self):
        names = Names("file")
        self.assertTrue(names.positional)
        self.assertEqual(names.short, "file")
        self.assertEqual(names.long, "file")

    def testIterableConstructor(self):
        self.assertEqual(Names(["-v", "--verbose"]), Names("-v", "--verbose"))

    def testDeclarationOrder(self):
        self.assertEqual(list(Names("--b", "-a", "--c")), ["--b", "-a", "--c"])

    def testContains(self):
        names = Names("-v", "--verbose")
        self.assertTrue(names.contains("--verbose"))
        self.assertFalse(names.contains("--verb"))

    def testImmutable(self):
        names = Names("-v")
        with self.assertRaises(AttributeError):
            names.extra = 1  # NOQA

    def testRepr(self):
        self.assertEqual(repr(Names("-v", "--verbose")), "names('-v', '--verbose')")


class TestDestination(TestCase):
    """Destination keys used in parse results."""

    def testLongName(self):
        self.assertEqual(Names("-n", "--dry-run").dest, "dry_run")

    def testShortOnly(self):
        self.assertEqual(Names("-n").dest, "n")

    def testPositional(self):
        self.assertEqual(Names("input-file").dest, "input_file")


class TestValidation(TestCase):
    """Construction-time errors."""

    def testEmpty(self):
        with self.assertRaises(InvalidNameError):
            Names()

    def testEmptyAlias(self):
        with self.assertRaises(InvalidNameError):
            Names("")

    def testWhitespace(self):
        with self.assertRaises(InvalidNameError):
            Names("--dry run")

    def testNonString(self):
        with self.assertRaises(InvalidNameError):
            Names("-v", 3)

    def testDuplicate(self):
        with self.assertRaises(DuplicateNameError):
            Names("-v", "--verbose", "-v")

    def testPositionalWithAliases(self):
        with self.assertRaises(InvalidNameError):
            Names("file", "--file")

    def testMixedBareAlias(self):
        with self.assertRaises(InvalidNameError):
            Names("--file", "file")

    def testNoUsableAlias(self):
        with self.assertRaises(NoUsableAliasError):
            Names("-verbose")
        with self.assertRaises(NoUsableAliasError):
            Names("-")
        with self.assertRaises(NoUsableAliasError):
            Names("--")

    def testConstructionErrorsAreValueErrors(self):
        with self.assertRaises(ValueError):
            Names("-v", "-v")


class TestDegradedDisplay(TestCase):
    """A first alias that is neither form warns once and keeps working."""

    def testWarnsOnDegradedFirstAlias(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            names = Names("-verbose", "--verbose")
        self.assertEqual(len(caught), 1)
        self.assertIs(caught[0].category, DegradedNameWarning)
        self.assertEqual(caught[0].filename, __file__)
        self.assertEqual(names.long, "--verbose")
        self.assertEqual(names.short, "-verbose")

    def testNoWarningForCanonicalFirstAlias(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            Names("--verbose", "-verbose")
        self.assertEqual(caught, [])


if __name__ == "__main__":
    unittest.main()
