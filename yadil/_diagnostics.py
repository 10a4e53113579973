"""Turn a byte offset from a YadilError into something a person can read.

None of this is used by the parser itself; it exists for callers (and
the CLI) that need to show where a parse failed.
"""

from __future__ import annotations

from typing import Optional, Tuple

from ._errors import YadilError

ERROR_POINTER_CHAR = "^"
ERROR_ELLIPSIS = "..."

MAX_ERROR_CONTEXT_LEN = 80
"""
The maximum number of characters on each side of the failing byte
to include in a formatted error.  Longer lines are cut and marked with
ERROR_ELLIPSIS.
"""

_NEWLINE = 0x0A


def offset_to_line_col(data: bytes, index: int) -> Tuple[int, int]:
    """Convert a byte offset into a (line, column) pair.

    Lines are 1-indexed.  The column starts at 2 for offset 0 and resets
    to 1 after each newline, which is what `yadil` has always printed;
    subtract one from the column on the first line for 1-indexed columns.
    """
    line = 1
    col = 2
    for byte in data[:max(index, 0)]:
        if byte == _NEWLINE:
            line += 1
            col = 1
        else:
            col += 1
    return line, col


def _line_bounds(data: bytes, index: int) -> Tuple[int, int]:
    """Start (inclusive) and end (exclusive) of the line holding `index`."""
    index = min(max(index, 0), len(data))
    start = data.rfind(b"\n", 0, index) + 1
    end = data.find(b"\n", index)
    if end == -1:
        end = len(data)
    return start, end


def format_error(data: bytes, err: YadilError, path: Optional[str] = None) -> str:
    """Render a YadilError with its location and the offending line.

    Example output:

        WrongValue: Invalid unsigned value `x`
          --> config.yadil:2:9
        u@port=8x80;
                ^
    """
    line_num, col = offset_to_line_col(data, err.index)
    location = "{}:{}:{}".format(path or "<input>", line_num, col)

    start, end = _line_bounds(data, err.index)
    before = data[start:err.index].decode("utf-8", errors="replace")
    after = data[err.index:end].decode("utf-8", errors="replace")
    before = before.replace("\t", " ").rstrip("\r")
    after = after.replace("\t", " ").rstrip("\r")

    if len(before) > MAX_ERROR_CONTEXT_LEN:
        before = ERROR_ELLIPSIS + before[-MAX_ERROR_CONTEXT_LEN:]
    if len(after) > MAX_ERROR_CONTEXT_LEN:
        after = after[:MAX_ERROR_CONTEXT_LEN] + ERROR_ELLIPSIS

    return (
        "{}: {}\n"
        "  --> {}\n"
        "{}{}\n"
        "{}{}"
    ).format(
        err.code, err.message,
        location,
        before, after,
        " " * len(before), ERROR_POINTER_CHAR,
    )
