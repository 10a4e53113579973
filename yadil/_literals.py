"""Literal decoders for the scalar types (string, unsigned, signed, float, bool).

Each decoder receives the raw run the assignment parser collected
between `=` and `;` and either returns a Value or raises a WrongValue
error at the offset of the offending byte.  Escaping backslashes are
still in the run; only the string decoder accepts them as content.
"""

from __future__ import annotations

import math
from typing import Callable, Mapping, Tuple

from ._constants import (
    ASCII_NINE,
    ASCII_ZERO,
    BOOL_LITERALS,
    DECIMAL_MARK,
    INT64_MAX,
    INT64_MIN,
    MINUS_SIGN,
    UINT64_MAX,
)
from ._cursor import RawRun
from ._errors import ERR_WRONG_VALUE, YadilError, describe_byte
from ._value import DataType, Value


def _is_digit(byte: int) -> bool:
    return ASCII_ZERO <= byte <= ASCII_NINE


def _wrong(run: RawRun, i: int, message: str) -> YadilError:
    return YadilError(ERR_WRONG_VALUE, message, run.offset(i))


def decode_string(run: RawRun) -> Value:
    try:
        text = run.data.decode("utf-8", errors="strict")
    except UnicodeDecodeError as e:
        raise _wrong(run, e.start, "Invalid utf8")
    return Value.string(text)


def decode_unsigned(run: RawRun) -> Value:
    total = 0
    for i, byte in enumerate(run.data):
        if not _is_digit(byte):
            raise _wrong(run, i, "Invalid unsigned value {}".format(describe_byte(byte)))
        total = total * 10 + (byte - ASCII_ZERO)
        if total > UINT64_MAX:
            raise _wrong(run, i, "Unsigned value out of range")
    return Value.unsigned(total)


def _split_sign(run: RawRun, kind: str) -> Tuple[bool, int]:
    """Consume the leading `-` run.  Returns (negative, first index after it).

    Every `-` toggles the sign, so `--5` is positive.
    """
    negative = False
    for i, byte in enumerate(run.data):
        if byte != MINUS_SIGN:
            return negative, i
        negative = not negative
    # Nothing but minus signs (or nothing at all).
    raise _wrong(run, len(run.data), "{} value has no digits".format(kind))


def decode_signed(run: RawRun) -> Value:
    negative, start = _split_sign(run, "Signed")
    limit = -INT64_MIN if negative else INT64_MAX
    total = 0
    for i in range(start, len(run.data)):
        byte = run.data[i]
        if byte == MINUS_SIGN:
            raise _wrong(run, i, "Found `-` after number rather than before")
        if not _is_digit(byte):
            raise _wrong(run, i, "Invalid signed value {}".format(describe_byte(byte)))
        total = total * 10 + (byte - ASCII_ZERO)
        if total > limit:
            raise _wrong(run, i, "Signed value out of range")
    return Value.signed(-total if negative else total)


def decode_float(run: RawRun) -> Value:
    negative, start = _split_sign(run, "Float")
    int_digits = bytearray()
    frac_digits = bytearray()
    in_fraction = False
    for i in range(start, len(run.data)):
        byte = run.data[i]
        if byte == MINUS_SIGN:
            raise _wrong(run, i, "Found `-` after number rather than before")
        if byte == DECIMAL_MARK:
            if in_fraction:
                raise _wrong(run, i, "Found `.` after decimal rather than before")
            in_fraction = True
            continue
        if not _is_digit(byte):
            raise _wrong(run, i, "Invalid float value {}".format(describe_byte(byte)))
        if in_fraction:
            frac_digits.append(byte)
        else:
            int_digits.append(byte)

    if not int_digits and not frac_digits:
        raise _wrong(run, len(run.data), "Float value has no digits")

    # float() rounds the exact decimal int_part + sum(d_k / 10**k) to the
    # nearest double, which summing term by term in floats would not.
    literal = b"%s.%s" % (bytes(int_digits) or b"0", bytes(frac_digits) or b"0")
    total = float(literal.decode("ascii"))
    if not math.isfinite(total):
        raise _wrong(run, len(run.data) - 1, "Float value out of range")
    return Value.floating(-total if negative else total)


def decode_bool(run: RawRun) -> Value:
    flag = BOOL_LITERALS.get(run.data)
    if flag is None:
        raise _wrong(run, 0, "Invalid bool value")
    return Value.boolean(flag)


DECODERS: Mapping[DataType, Callable[[RawRun], Value]] = {
    DataType.STRING: decode_string,
    DataType.UNSIGNED: decode_unsigned,
    DataType.SIGNED: decode_signed,
    DataType.FLOAT: decode_float,
    DataType.BOOL: decode_bool,
}
