"""Tests for error locations and formatted error output."""

from __future__ import annotations

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from yadil import (
    ERR_WRONG_VALUE,
    YadilError,
    format_error,
    offset_to_line_col,
    parse,
)
from yadil._diagnostics import MAX_ERROR_CONTEXT_LEN


def _error_for(data: bytes) -> YadilError:
    try:
        parse(data)
    except YadilError as e:
        return e
    raise AssertionError("expected {!r} to fail".format(data))


class TestLineCol(unittest.TestCase):
    def test_start_of_input(self):
        self.assertEqual(offset_to_line_col(b"u@a=1;", 0), (1, 2))

    def test_first_line(self):
        self.assertEqual(offset_to_line_col(b"u@a=1;", 3), (1, 5))

    def test_column_resets_after_newline(self):
        data = b"u@a=1;\nu@p=8x;"
        self.assertEqual(offset_to_line_col(data, 7), (2, 1))
        self.assertEqual(offset_to_line_col(data, 11), (2, 5))

    def test_several_lines(self):
        self.assertEqual(offset_to_line_col(b"\n\n\nx", 3), (4, 1))

    def test_index_at_end(self):
        self.assertEqual(offset_to_line_col(b"ab\n", 3), (2, 1))


class TestFormatError(unittest.TestCase):
    def test_points_at_failing_byte(self):
        data = b"u@a=1;\nu@port=8x80;"
        err = _error_for(data)
        self.assertEqual(err.code, ERR_WRONG_VALUE)
        self.assertEqual(format_error(data, err, "cfg.yadil"), (
            "WrongValue: Invalid unsigned value `x`\n"
            "  --> cfg.yadil:2:9\n"
            "u@port=8x80;\n"
            "        ^"
        ))

    def test_default_path(self):
        data = b"u@=1;"
        text = format_error(data, _error_for(data))
        self.assertIn("  --> <input>:1:4\n", text)
        self.assertTrue(text.startswith("EmptyIdent: Identifier is empty\n"))

    def test_error_at_end_of_input(self):
        data = b"u@age=42"
        text = format_error(data, _error_for(data))
        self.assertTrue(text.endswith("u@age=42\n        ^"))

    def test_tabs_rendered_as_spaces(self):
        data = b"\tu@a=x;"
        text = format_error(data, _error_for(data))
        self.assertTrue(text.endswith(" u@a=x;\n     ^"))

    def test_long_line_is_cut(self):
        data = b"s@pad=" + b"a" * 200 + b"; u@n=1x;"
        err = _error_for(data)
        lines = format_error(data, err).split("\n")
        source, pointer = lines[2], lines[3]
        self.assertTrue(source.startswith("..."))
        self.assertLessEqual(len(source), 2 * MAX_ERROR_CONTEXT_LEN + 3)
        self.assertEqual(source[pointer.index("^")], "x")


if __name__ == "__main__":
    unittest.main()
