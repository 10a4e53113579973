"""Tests for the scalar literal decoders."""

from __future__ import annotations

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from yadil import (
    ERR_WRONG_VALUE,
    INT64_MAX,
    INT64_MIN,
    UINT64_MAX,
    Value,
    YadilError,
    parse,
)
from yadil._cursor import RawRun
from yadil._literals import (
    decode_bool,
    decode_float,
    decode_signed,
    decode_string,
    decode_unsigned,
)


def _run(data: bytes, base: int = 10) -> RawRun:
    """A raw run as if `data` started at input offset `base`."""
    return RawRun(data, tuple(range(base, base + len(data))), base + len(data))


def _value(tag: str, literal: bytes) -> Value:
    return parse(tag.encode() + b"@v=" + literal + b";")[b"v"]


class DecoderErrorMixin:
    def assertWrongValue(self, decoder, data, index=None):
        with self.assertRaises(YadilError) as ctx:
            decoder(_run(data))
        self.assertEqual(ctx.exception.code, ERR_WRONG_VALUE)
        if index is not None:
            self.assertEqual(ctx.exception.index, index)
        return ctx.exception


# ── String ────────────────────────────────────────────────────

class TestString(DecoderErrorMixin, unittest.TestCase):
    def test_ascii(self):
        self.assertEqual(decode_string(_run(b"hello")), Value.string("hello"))

    def test_multibyte_utf8(self):
        self.assertEqual(_value("s", "héllo wörld ✓".encode("utf-8")),
                         Value.string("héllo wörld ✓"))

    def test_invalid_utf8_points_at_bad_byte(self):
        err = self.assertWrongValue(decode_string, b"ab\xffcd", index=12)
        self.assertEqual(err.message, "Invalid utf8")

    def test_truncated_sequence(self):
        self.assertWrongValue(decode_string, b"\xe2\x9c", index=10)

    def test_encoded_surrogate_rejected(self):
        self.assertWrongValue(decode_string, b"\xed\xa0\x80")


# ── Unsigned ──────────────────────────────────────────────────

class TestUnsigned(DecoderErrorMixin, unittest.TestCase):
    def test_positional_value(self):
        self.assertEqual(decode_unsigned(_run(b"42")), Value.unsigned(42))
        self.assertEqual(decode_unsigned(_run(b"1000")), Value.unsigned(1000))

    def test_leading_zeros(self):
        self.assertEqual(decode_unsigned(_run(b"007")), Value.unsigned(7))

    def test_zero(self):
        self.assertEqual(decode_unsigned(_run(b"0")), Value.unsigned(0))

    def test_max(self):
        raw = str(UINT64_MAX).encode()
        self.assertEqual(decode_unsigned(_run(raw)), Value.unsigned(UINT64_MAX))

    def test_overflow(self):
        raw = str(UINT64_MAX + 1).encode()
        err = self.assertWrongValue(decode_unsigned, raw, index=10 + len(raw) - 1)
        self.assertIn("out of range", err.message)

    def test_huge_digit_run_fails_fast(self):
        self.assertWrongValue(decode_unsigned, b"9" * 100000, index=10 + 19)

    def test_non_digit(self):
        err = self.assertWrongValue(decode_unsigned, b"12a", index=12)
        self.assertIn("`a`", err.message)

    def test_minus_rejected(self):
        self.assertWrongValue(decode_unsigned, b"-1", index=10)

    def test_trailing_space_rejected(self):
        with self.assertRaises(YadilError) as ctx:
            parse(b"u@a=1 ;")
        self.assertEqual(ctx.exception.index, 5)


# ── Signed ────────────────────────────────────────────────────

class TestSigned(DecoderErrorMixin, unittest.TestCase):
    def test_positive(self):
        self.assertEqual(decode_signed(_run(b"17")), Value.signed(17))

    def test_negative(self):
        self.assertEqual(decode_signed(_run(b"-17")), Value.signed(-17))

    def test_sign_toggles_per_minus(self):
        self.assertEqual(decode_signed(_run(b"--5")), Value.signed(5))
        self.assertEqual(decode_signed(_run(b"---5")), Value.signed(-5))

    def test_minus_after_digit(self):
        err = self.assertWrongValue(decode_signed, b"5-", index=11)
        self.assertEqual(err.message, "Found `-` after number rather than before")

    def test_minus_only(self):
        self.assertWrongValue(decode_signed, b"--", index=11)

    def test_non_digit(self):
        self.assertWrongValue(decode_signed, b"-1.5", index=12)

    def test_bounds(self):
        self.assertEqual(decode_signed(_run(str(INT64_MIN).encode())),
                         Value.signed(INT64_MIN))
        self.assertEqual(decode_signed(_run(str(INT64_MAX).encode())),
                         Value.signed(INT64_MAX))

    def test_out_of_range(self):
        self.assertWrongValue(decode_signed, str(INT64_MAX + 1).encode())
        self.assertWrongValue(decode_signed, str(INT64_MIN - 1).encode())

    def test_signed_differs_from_unsigned(self):
        self.assertNotEqual(_value("i", b"1"), _value("u", b"1"))


# ── Float ─────────────────────────────────────────────────────

class TestFloat(DecoderErrorMixin, unittest.TestCase):
    def test_decimal(self):
        self.assertEqual(decode_float(_run(b"3.14")), Value.floating(3.14))

    def test_integer_part_is_positional(self):
        self.assertEqual(decode_float(_run(b"42")), Value.floating(42.0))

    def test_fraction_only(self):
        self.assertEqual(decode_float(_run(b".25")), Value.floating(0.25))

    def test_trailing_dot(self):
        self.assertEqual(decode_float(_run(b"7.")), Value.floating(7.0))

    def test_fraction_digits_nearest_double(self):
        self.assertEqual(decode_float(_run(b"0.1")), Value.floating(0.1))
        self.assertEqual(decode_float(_run(b"123.456")), Value.floating(123.456))

    def test_sign_toggle(self):
        self.assertEqual(decode_float(_run(b"-2.5")), Value.floating(-2.5))
        self.assertEqual(decode_float(_run(b"--2.5")), Value.floating(2.5))

    def test_second_dot(self):
        err = self.assertWrongValue(decode_float, b"1.2.3", index=13)
        self.assertIn("`.`", err.message)

    def test_minus_after_digit(self):
        self.assertWrongValue(decode_float, b"1.-2", index=12)

    def test_minus_after_dot(self):
        self.assertWrongValue(decode_float, b".-2", index=11)

    def test_no_digits(self):
        self.assertWrongValue(decode_float, b".")
        self.assertWrongValue(decode_float, b"-")

    def test_exponent_not_supported(self):
        self.assertWrongValue(decode_float, b"1e5", index=11)

    def test_too_large(self):
        err = self.assertWrongValue(decode_float, b"9" * 400)
        self.assertIn("out of range", err.message)

    def test_negative_zero_keeps_sign(self):
        neg = decode_float(_run(b"-0"))
        self.assertEqual(neg, Value.floating(-0.0))
        self.assertNotEqual(neg, Value.floating(0.0))
        self.assertEqual(len({neg, Value.floating(0.0)}), 2)

    def test_float_differs_from_unsigned(self):
        self.assertNotEqual(_value("f", b"1"), _value("u", b"1"))


# ── Bool ──────────────────────────────────────────────────────

class TestBool(DecoderErrorMixin, unittest.TestCase):
    def test_spellings(self):
        for raw, expected in [(b"true", True), (b"t", True),
                              (b"false", False), (b"f", False)]:
            with self.subTest(raw=raw):
                self.assertEqual(decode_bool(_run(raw)), Value.boolean(expected))

    def test_case_sensitive(self):
        for raw in [b"True", b"FALSE", b"T"]:
            with self.subTest(raw=raw):
                self.assertWrongValue(decode_bool, raw, index=10)

    def test_other_values(self):
        for raw in [b"1", b"0", b"yes", b"truee"]:
            with self.subTest(raw=raw):
                self.assertWrongValue(decode_bool, raw)

    def test_bool_differs_from_unsigned(self):
        self.assertNotEqual(_value("b", b"t"), _value("u", b"1"))


if __name__ == "__main__":
    unittest.main()
