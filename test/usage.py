"""
Usage renderer tests.

Scope
- Validate the options listing layout (header, names, labels, descriptions, required marker).
- Validate sink routing and styling switches (colorful, __styles__ overrides).

Conventions
- Test method names follow CamelCase per project convention.
- Lines are compared by their plain text; styles are checked through spans.
"""

from __future__ import annotations

import sys
import unittest
from unittest import TestCase

from plainopts import Cell, Parser, Flag, FlagCount, Int, Float, String, Path, PathExisting


class TestUsage(TestCase):

    def setUp(self):
        self.errors = []
        self.usages = []
        self.parser = Parser(
            Int("I", "int", "some int", False, Cell(0)),
            Float("F", "float", "some float", False, Cell(0.0)),
            String("S", "string", "some string", True, Cell()),
            Path("f", "output-file", "some path", False, Cell()),
            PathExisting("i", "input-file", "input file", True, Cell()),
            Flag("D", "debug", "some flag", Cell(False)),
            FlagCount("V", "verbose", "verbosity", Cell(0)),
            error=self.errors.append,
            usage=self.usages.append,
        )

    def testLayout(self):
        self.assertEqual([line.plain for line in self.parser.usage_lines()], [
            "Options:",
            "  -I, --int <integer>\tsome int",
            "  -F, --float <float>\tsome float",
            "  -S, --string <string>\tsome string (required)",
            "  -f, --output-file <path>\tsome path",
            "  -i, --input-file <path>\tinput file (required)",
            "  -D, --debug\tsome flag",
            "  -V, --verbose\tverbosity",
        ])

    def testPrintUsageUsesUsageSink(self):
        self.parser.print_usage()
        self.assertEqual(len(self.usages), 8)
        self.assertEqual(self.usages[0].plain, "Options:")
        self.assertEqual(self.errors, [])

    def testUsageHasNoParsingSideEffects(self):
        self.parser.print_usage()
        self.assertFalse(self.parser.parsed)
        self.assertFalse(any(option.seen for option in self.parser.options))
        self.assertEqual(self.parser.remaining, ())

    def testEmptyParserPrintsHeaderOnly(self):
        lines = []
        Parser(usage=lines.append).print_usage()
        self.assertEqual([line.plain for line in lines], ["Options:"])

    def testColorfulLinesAreStyled(self):
        self.assertTrue(self.parser.usage_lines()[1].spans)

    def testPlainLinesAreUnstyled(self):
        parser = Parser(Int("I", "int", "some int", False, Cell(0)), colorful=False)
        for line in parser.usage_lines():
            self.assertEqual(line.spans, [])

    def testStylesOverrideFromMain(self):
        main = sys.modules["__main__"]
        previous = getattr(main, "__styles__", None)
        main.__styles__ = {"metavar": "red"}
        self.addCleanup(lambda: setattr(main, "__styles__", previous) if previous is not None else delattr(main, "__styles__"))

        line = self.parser.usage_lines()[1]
        self.assertIn("red", [str(span.style) for span in line.spans])


if __name__ == "__main__":
    unittest.main()
