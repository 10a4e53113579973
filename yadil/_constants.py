"""YADIL constants — structural bytes, type tags, and parser limits.

Everything the grammar treats as structural lives here so the parser,
the decoders and the tests agree on a single spelling of each byte.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import FrozenSet, Mapping

# ── Structural bytes ─────────────────────────────────────────
# A structural byte preceded by BACKSLASH is literal content, not a
# delimiter.  The backslash itself stays in the collected bytes.

TYPE_SEPARATOR: int = ord("@")   # ends the type tag
ASSIGN_MARK: int = ord("=")      # ends the identifier (or a map key)
TERMINATOR: int = ord(";")       # ends the value
COMMENT_MARK: int = ord("#")     # opens and closes a comment
BACKSLASH: int = ord("\\")
END_OF_MESSAGE: int = 0x00       # NUL stops parsing, not an error

LIST_OPEN_MARK: int = ord("[")
LIST_CLOSE_MARK: int = ord("]")
MAP_OPEN_MARK: int = ord("{")
MAP_CLOSE_MARK: int = ord("}")

MINUS_SIGN: int = ord("-")
DECIMAL_MARK: int = ord(".")
ASCII_ZERO: int = ord("0")
ASCII_NINE: int = ord("9")

# Dropped while scanning type tags and identifiers, and before the first
# byte of a value.
IGNORE_BYTES: FrozenSet[int] = frozenset(b" \n\r\t")

# ── Type tags ────────────────────────────────────────────────
# First byte of every recognised tag.  Anything else at the top level
# is an UnexpectedChar.
DATA_TYPE_START_BYTES: FrozenSet[int] = frozenset(b"suifblm")

# Short and long spelling of each tag, mapped to the DataType value name.
TYPE_TAGS: Mapping[bytes, str] = MappingProxyType({
    b"s": "string",
    b"str": "string",
    b"u": "unsigned",
    b"uint": "unsigned",
    b"i": "signed",
    b"sint": "signed",
    b"f": "float",
    b"float": "float",
    b"b": "bool",
    b"bool": "bool",
    b"l": "list",
    b"list": "list",
    b"m": "map",
    b"map": "map",
})

BOOL_LITERALS: Mapping[bytes, bool] = MappingProxyType({
    b"true": True,
    b"t": True,
    b"false": False,
    b"f": False,
})

# ── Numeric ranges ───────────────────────────────────────────
# Python ints are arbitrary-precision, so the 64-bit bounds of the
# format have to be checked explicitly.
UINT64_MAX: int = 2**64 - 1
INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1

# ── Safety limits ────────────────────────────────────────────
# Collections recurse; this keeps adversarially deep input from
# reaching the interpreter's recursion limit.
MAX_DEPTH: int = 32
