"""
Tests for caller-owned cells and the Unset sentinel.

This module verifies:
- Cell semantics: default value, get/set, identity-based equality, representations.
- Unset semantics: singleton identity, falsiness, representation, finality.
- coalesce() and mirror() helper behavior.
"""
import copy
import io
import unittest
from unittest import TestCase

from rich.console import Console

from plainopts import Cell
from plainopts.utils import *


class CellTest(TestCase):
    """
    Test suite for Cell storage.
    """

    def testDefaultIsNone(self) -> None:
        """
        A cell built without arguments holds None.
        """
        self.assertIsNone(Cell().value)

    def testGetSet(self) -> None:
        cell = Cell(1)
        self.assertEqual(cell.get(), 1)
        cell.set(2)
        self.assertEqual(cell.value, 2)
        cell.value = 3
        self.assertEqual(cell.get(), 3)

    def testCellsAreDistinctStorage(self) -> None:
        """
        Two cells with equal contents are still different locations.
        """
        self.assertNotEqual(Cell(0), Cell(0))

    def testCellIsTruthyEvenWhenEmpty(self) -> None:
        self.assertTrue(Cell())
        self.assertTrue(Cell(0))

    def testNoExtraAttributes(self) -> None:
        with self.assertRaises(AttributeError):
            Cell().other = 1

    def testRepr(self) -> None:
        self.assertEqual(repr(Cell("x")), "cell('x')")
        self.assertEqual(repr(Cell()), "cell(None)")

    def testRichRendering(self) -> None:
        """
        Rich renders the same text as repr.
        """
        buffer = io.StringIO()
        Console(file=buffer, color_system=None, width=80).print(Cell(5))
        self.assertEqual(buffer.getvalue().strip(), "cell(5)")

    def testCopyIsIndependent(self) -> None:
        cell = Cell([1])
        clone = copy.deepcopy(cell)
        clone.value.append(2)
        self.assertEqual(cell.value, [1])


class UnsetTest(TestCase):
    """
    Test suite for the Unset sentinel and helpers.
    """

    def testSingleton(self) -> None:
        self.assertIs(Unset, UnsetType())

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            class Sub(UnsetType):  # NOQA: F-841
                pass

    def testUnionWithTypes(self) -> None:
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", str | Unset)

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, "fallback"), 0)
        self.assertIsNone(coalesce(Unset))

    def testMirrorFreezesSequences(self) -> None:
        class Holder:
            items = mirror("items")
            name = mirror("name")

            def __init__(self):
                self._items = [1, 2]
                self._name = "holder"

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertEqual(holder.name, "holder")
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testRename(self) -> None:
        @rename("renamed")
        def source():
            pass

        self.assertEqual(source.__name__, "renamed")
        self.assertEqual(source.__qualname__, "renamed")
        with self.assertRaises(TypeError):
            rename(1, "x")


if __name__ == "__main__":
    unittest.main()
