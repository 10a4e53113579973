"""YADIL error codes and exception class.

A parse either returns a complete message or raises exactly one
YadilError for the first fault it meets.  There is no recovery mode and
no collected list of violations.
"""

from __future__ import annotations

from typing import List

# ── Error codes ──────────────────────────────────────────────
# The values are what the conformance vectors compare against.

ERR_UNEXPECTED_CHAR: str = "UnexpectedChar"  # byte not valid at this point
ERR_EMPTY_IDENT: str = "EmptyIdent"          # nothing before `=`
ERR_WRONG_VALUE: str = "WrongValue"          # value failed to decode

ERROR_CODES: List[str] = [
    ERR_UNEXPECTED_CHAR,
    ERR_EMPTY_IDENT,
    ERR_WRONG_VALUE,
]


class YadilError(Exception):
    """Exception for YADIL parse failures.

    `.code` is one of the ERR_* strings above, `.message` the bare reason
    and `.index` the byte offset in the input where the fault was found.
    An index equal to the input length means the input ended early.
    """

    def __init__(self, code: str, message: str, index: int) -> None:
        super().__init__("error at index {}: {}".format(index, message))
        self.code = code
        self.message = message
        self.index = index

    def __repr__(self) -> str:
        return "YadilError({!r}, {!r}, {!r})".format(
            self.code, self.message, self.index)


def describe_byte(byte: int) -> str:
    """Printable form of a byte for error messages."""
    if 0x20 <= byte < 0x7F:
        return "`{}`".format(chr(byte))
    return "0x{:02x}".format(byte)
