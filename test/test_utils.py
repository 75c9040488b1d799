"""
Utils module behavioral tests (sentinel, coalesce, rename, mirror).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argvault.utils import Unset, UnsetType, coalesce, mirror, rename


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsey(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testSealed(self):
        with self.assertRaises(TypeError):
            class Derived(UnsetType): ...

    def testUnion(self):
        self.assertIsInstance(Unset, str | UnsetType)
        self.assertNotIsInstance(3, str | UnsetType)


class TestCoalesce(TestCase):

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testKeepsFalseyValues(self):
        for value in (None, 0, "", False, 0.0):
            self.assertIs(coalesce(value, "fallback"), value)


class TestRename(TestCase):

    def testDirect(self):
        def function(): ...
        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testDecorator(self):
        @rename("uint")
        def declare(): ...
        self.assertEqual(declare.__name__, "uint")

    def testErrors(self):
        with self.assertRaises(TypeError):
            rename(3, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 3)
        with self.assertRaises(TypeError):
            rename(3)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename("name")(3)


class TestMirror(TestCase):

    def testReadOnly(self):
        class Holder:
            value = mirror("value")

            def __init__(self):
                self._value = 7

        holder = Holder()
        self.assertEqual(holder.value, 7)
        self.assertEqual(Holder.value.fget.__name__, "value")
        with self.assertRaises(AttributeError):
            holder.value = 8

    def testRequiresString(self):
        with self.assertRaises(TypeError):
            mirror(3)


if __name__ == "__main__":
    unittest.main()
