"""
Example program tests (main.py host behavior).

Scope
- Successful run prints the parsed values and exits with 0.
- Failed run prints the fault, the custom preamble and the options listing to stderr.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import contextlib
import io
import re
import unittest
from unittest import TestCase

import main


class TestExample(TestCase):

    def run_main(self, argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            status = main.main(argv)
        # rich may still colour output when the environment forces it
        return status, stdout.getvalue(), re.sub(r"\x1b\[[0-9;]*m", "", stderr.getvalue())

    def testSuccess(self):
        status, stdout, stderr = self.run_main(["main.py", "-vv", "--input-file", "in.txt"])
        self.assertEqual(status, 0)
        self.assertEqual(stdout, "Input file = in.txt\nVerbosity = 2\n")
        self.assertEqual(stderr, "")

    def testMissingInput(self):
        status, stdout, stderr = self.run_main(["main.py", "-v"])
        self.assertEqual(status, 1)
        self.assertEqual(stdout, "")
        self.assertIn("error: option -i/--input-file is required", stderr)
        self.assertIn("Usage: main.py [-v] -i INPUT", stderr)
        self.assertIn("Options:", stderr)
        self.assertIn("--input-file <string>", stderr)


if __name__ == "__main__":
    unittest.main()
