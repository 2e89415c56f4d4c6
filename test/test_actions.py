"""
Actions module behavioral tests.

Scope
- Flag/Value construction, equality and pattern matching.
- apply(): flags record True, values convert and check their tokens.

Conventions
- Test method names follow CamelCase per project convention.
- apply() is exercised through a parser so that its state is real.
"""
import unittest
from unittest import TestCase

from argtree import (
    ArgumentParser,
    Flag,
    Value,
    MissingValueError,
    InvalidValueError,
    InvalidChoiceError,
)


class TestFlag(TestCase):

    def testArity(self):
        self.assertEqual(Flag().arity, 0)

    def testEquality(self):
        self.assertEqual(Flag(), Flag())
        self.assertEqual(hash(Flag()), hash(Flag()))
        self.assertNotEqual(Flag(), Value())

    def testMatch(self):
        match Flag():
            case Value():
                self.fail("a flag is not a value")
            case Flag():
                pass


class TestValue(TestCase):

    def testDefaultArity(self):
        self.assertEqual(Value().arity, 1)

    def testEquality(self):
        self.assertEqual(Value(2), Value(2))
        self.assertNotEqual(Value(1), Value(2))
        self.assertEqual(len({Value(2), Value(2), Value(3)}), 2)

    def testMatchArity(self):
        match Value(3):
            case Value(arity):
                self.assertEqual(arity, 3)

    def testRejectsZero(self):
        with self.assertRaises(ValueError):
            Value(0)

    def testRejectsNonInteger(self):
        with self.assertRaises(TypeError):
            Value("2")
        with self.assertRaises(TypeError):
            Value(True)

    def testImmutable(self):
        with self.assertRaises(AttributeError):
            Value().arity = 3  # NOQA

    def testRepr(self):
        self.assertEqual(repr(Value(2)), "value(arity=2)")
        self.assertEqual(repr(Flag()), "flag()")


class TestApply(TestCase):

    def setUp(self):
        self.parser = ArgumentParser("prog")

    def testFlagRecordsTrue(self):
        self.parser.add_argument("-v", "--verbose").as_flag()
        self.assertIs(self.parser.parse(["-v"])["verbose"], True)

    def testArityOneRecordsToken(self):
        self.parser.add_argument("-o", "--output")
        self.assertEqual(self.parser.parse(["-o", "out.txt"])["output"], "out.txt")

    def testArityTwoRecordsTuple(self):
        self.parser.add_argument("-r", "--range").as_value(2)
        self.assertEqual(self.parser.parse(["--range", "1", "5"])["range"], ("1", "5"))

    def testConverter(self):
        self.parser.add_argument("-r", "--range").as_value(2).with_type(int)
        self.assertEqual(self.parser.parse(["-r", "1", "5"]).range, (1, 5))

    def testMissingValue(self):
        self.parser.add_argument("-r", "--range").as_value(2)
        error = self.parser.parse(["--range", "1"])
        self.assertIsInstance(error, MissingValueError)
        self.assertEqual(error.name, "--range")
        self.assertEqual(error.index, 1)
        self.assertIn("expects 2 values but got 1", error.message)

    def testInvalidValue(self):
        self.parser.add_argument("-n", "--count").with_type(int)
        error = self.parser.parse(["-n", "many"])
        self.assertIsInstance(error, InvalidValueError)
        self.assertEqual(error.token, "many")

    def testInvalidChoice(self):
        self.parser.add_argument("-l", "--level").with_choices(["low", "high"])
        error = self.parser.parse(["-l", "mid"])
        self.assertIsInstance(error, InvalidChoiceError)
        self.assertEqual(error.token, "mid")
        self.assertIn("'low', 'high'", error.hint)

    def testValidChoice(self):
        self.parser.add_argument("-l", "--level").with_choices(["low", "high"])
        self.assertEqual(self.parser.parse(["-l", "high"]).level, "high")


if __name__ == "__main__":
    unittest.main()
