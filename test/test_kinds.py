"""
Kinds module behavioral tests (conversion rules and programmatic checks).

Scope
- Validate the strict text conversion of every kind (integers, floats, strings,
  booleans, characters), including the exact failure messages.
- Validate range handling for the fixed-width integer kinds and binary32 floats.
- Validate check() for defaults and handle writes (type mismatch vs. bad value).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import math
import struct
import unittest
from unittest import TestCase

from argvault import Kind, TypeMismatchError
from argvault.kinds import MISSING_VALUE
from argvault.utils import Unset


class TestIntegerConversion(TestCase):
    """Strict base-10 parsing for the six integer kinds."""

    def testSignedRoundTrip(self):
        for kind in (Kind.INT, Kind.LONG, Kind.LONGLONG):
            self.assertEqual(kind.convert("42"), 42)
            self.assertEqual(kind.convert("-7"), -7)
            self.assertEqual(kind.convert("+5"), 5)
            self.assertEqual(kind.convert("007"), 7)

    def testUnsignedRoundTrip(self):
        for kind in (Kind.UINT, Kind.ULONG, Kind.ULONGLONG):
            self.assertEqual(kind.convert("0"), 0)
            self.assertEqual(kind.convert("3"), 3)
            self.assertEqual(kind.convert("+12"), 12)

    def testTrailingGarbageRejected(self):
        with self.assertRaises(ValueError) as context:
            Kind.INT.convert("12x")
        self.assertEqual(str(context.exception), '"12x" is not an integer.')

    def testUnsignedMessageSaysPositive(self):
        with self.assertRaises(ValueError) as context:
            Kind.UINT.convert("-3")
        self.assertEqual(str(context.exception), '"-3" is not a positive integer.')

    def testEmptyAndWhitespaceRejected(self):
        for raw in ("", " 1", "1 ", "1_000", "0x10", "1.0", "--1"):
            with self.subTest(raw=raw), self.assertRaises(ValueError) as context:
                Kind.LONG.convert(raw)
            self.assertIn(raw, str(context.exception))

    def testWidthBounds(self):
        self.assertEqual(Kind.ULONGLONG.convert("0" * 30 + "18446744073709551615"), 2 ** 64 - 1)
        self.assertEqual(Kind.INT.convert("2147483647"), 2 ** 31 - 1)
        self.assertEqual(Kind.INT.convert("-2147483648"), -2 ** 31)
        self.assertEqual(Kind.UINT.convert("4294967295"), 2 ** 32 - 1)
        self.assertEqual(Kind.ULONGLONG.convert("18446744073709551615"), 2 ** 64 - 1)

    def testOutOfRange(self):
        for kind, raw in (
                (Kind.INT, "2147483648"),
                (Kind.UINT, "4294967296"),
                (Kind.LONG, "9223372036854775808"),
                (Kind.ULONG, "18446744073709551616"),
                (Kind.ULONGLONG, "9" * 5000),
                (Kind.INT, "-" + "1" * 4400),
        ):
            with self.subTest(kind=kind), self.assertRaises(ValueError) as context:
                kind.convert(raw)
            self.assertEqual(str(context.exception), '"%s" is out of range.' % raw)


class TestFloatConversion(TestCase):
    """Strict decimal/scientific parsing for FLOAT and DOUBLE."""

    def testDoubleRoundTrip(self):
        self.assertEqual(Kind.DOUBLE.convert("3.25"), 3.25)
        self.assertEqual(Kind.DOUBLE.convert("-0.1"), -0.1)
        self.assertEqual(Kind.DOUBLE.convert("1e3"), 1000.0)
        self.assertEqual(Kind.DOUBLE.convert(".5"), 0.5)
        self.assertEqual(Kind.DOUBLE.convert("2."), 2.0)
        self.assertEqual(Kind.DOUBLE.convert("10"), 10.0)

    def testSpecialValues(self):
        self.assertEqual(Kind.DOUBLE.convert("inf"), math.inf)
        self.assertEqual(Kind.DOUBLE.convert("-Infinity"), -math.inf)
        self.assertTrue(math.isnan(Kind.DOUBLE.convert("NaN")))

    def testNotANumber(self):
        for raw in ("pi", "1.5x", "", "1e", "1_0.0", " 1.0", "0x1p3"):
            with self.subTest(raw=raw), self.assertRaises(ValueError) as context:
                Kind.DOUBLE.convert(raw)
            self.assertEqual(str(context.exception), '"%s" is not a number.' % raw)

    def testFloatIsBinary32(self):
        expected = struct.unpack("f", struct.pack("f", 0.1))[0]
        self.assertEqual(Kind.FLOAT.convert("0.1"), expected)
        self.assertNotEqual(Kind.FLOAT.convert("0.1"), 0.1)
        self.assertEqual(Kind.FLOAT.convert("0.5"), 0.5)

    def testOverflowIsOutOfRange(self):
        with self.assertRaises(ValueError) as context:
            Kind.FLOAT.convert("1e39")
        self.assertEqual(str(context.exception), '"1e39" is out of range.')
        with self.assertRaises(ValueError):
            Kind.DOUBLE.convert("1e400")


class TestOtherConversions(TestCase):
    """STRING, BOOL and CHAR behavior, plus end-of-input handling."""

    def testStringVerbatim(self):
        self.assertEqual(Kind.STRING.convert("  hello world "), "  hello world ")
        self.assertEqual(Kind.STRING.convert(""), "")
        self.assertEqual(Kind.STRING.convert("--msg"), "--msg")

    def testBoolToggles(self):
        self.assertIs(Kind.BOOL.convert(Unset, False), True)
        self.assertIs(Kind.BOOL.convert("ignored", True), False)

    def testCharTakesFirstCharacter(self):
        self.assertEqual(Kind.CHAR.convert("xyz"), "x")
        self.assertEqual(Kind.CHAR.convert(""), "\0")

    def testMissingValue(self):
        for kind in Kind:
            if kind is Kind.BOOL:
                continue
            with self.subTest(kind=kind), self.assertRaises(ValueError) as context:
                kind.convert(Unset)
            self.assertEqual(str(context.exception), MISSING_VALUE)

    def testConsuming(self):
        self.assertFalse(Kind.BOOL.consuming)
        self.assertFalse(Kind.CHAR.consuming)
        for kind in set(Kind) - {Kind.BOOL, Kind.CHAR}:
            self.assertTrue(kind.consuming)


class TestCheck(TestCase):
    """Programmatic values (defaults and handle writes)."""

    def testDefaults(self):
        self.assertEqual(Kind.STRING.default, "")
        self.assertEqual(Kind.CHAR.default, "\0")
        self.assertIs(Kind.BOOL.default, False)
        self.assertEqual(Kind.DOUBLE.default, 0.0)
        self.assertEqual(Kind.ULONG.default, 0)
        for kind in Kind:
            self.assertEqual(kind.check(kind.default), kind.default)

    def testWrongTypeIsMismatch(self):
        for kind, value in (
                (Kind.INT, True),
                (Kind.INT, 1.0),
                (Kind.STRING, 3),
                (Kind.DOUBLE, "1"),
                (Kind.BOOL, 1),
                (Kind.CHAR, 65),
        ):
            with self.subTest(kind=kind, value=value), self.assertRaises(TypeMismatchError):
                kind.check(value)

    def testMismatchIsTypeError(self):
        with self.assertRaises(TypeError):
            Kind.UINT.check("3")

    def testBadValues(self):
        with self.assertRaises(ValueError):
            Kind.INT.check(2 ** 31)
        with self.assertRaises(ValueError):
            Kind.UINT.check(-1)
        with self.assertRaises(ValueError):
            Kind.CHAR.check("ab")
        with self.assertRaises(ValueError):
            Kind.FLOAT.check(1e39)
        with self.assertRaises(ValueError):
            Kind.DOUBLE.check(10 ** 400)
        with self.assertRaises(ValueError):
            Kind.FLOAT.check(10 ** 400)

    def testFloatsAcceptIntegers(self):
        self.assertEqual(Kind.DOUBLE.check(2), 2.0)
        self.assertIsInstance(Kind.FLOAT.check(2), float)


if __name__ == "__main__":
    unittest.main()
