"""Byte cursor over a read-only input buffer."""

from __future__ import annotations

from typing import List, NamedTuple, Optional, Tuple

from ._constants import BACKSLASH


class RawRun(NamedTuple):
    """Bytes collected for one value, with the input offset of each byte.

    Whitespace skipping means the collected bytes are not always a
    contiguous slice of the input, so the offsets are kept alongside to
    let decoders point at the exact failing byte.
    """
    data: bytes
    offsets: Tuple[int, ...]
    end: int  # offset of the terminating delimiter

    def offset(self, i: int) -> int:
        if not self.offsets:
            return self.end
        if i >= len(self.offsets):
            return self.offsets[-1]
        return self.offsets[i]


class RunBuilder:
    """Accumulates a RawRun one byte at a time."""

    __slots__ = ("_data", "_offsets")

    def __init__(self) -> None:
        self._data = bytearray()
        self._offsets: List[int] = []

    def __len__(self) -> int:
        return len(self._data)

    def append(self, byte: int, offset: int) -> None:
        self._data.append(byte)
        self._offsets.append(offset)

    def build(self, end: int) -> RawRun:
        return RawRun(bytes(self._data), tuple(self._offsets), end)


class Cursor:
    """Read position into an immutable byte buffer.

    Only `index` ever changes; the buffer is borrowed for the duration of
    one parse and never written.
    """

    __slots__ = ("data", "index")

    def __init__(self, data: bytes, index: int = 0) -> None:
        self.data = data
        self.index = index

    def __len__(self) -> int:
        return len(self.data)

    def at_end(self) -> bool:
        return self.index >= len(self.data)

    def next(self) -> Optional[int]:
        """Return the current byte and advance, or None at end of input."""
        if self.index >= len(self.data):
            return None
        byte = self.data[self.index]
        self.index += 1
        return byte

    def peek(self, offset: int = 0) -> Optional[int]:
        """Look at the byte `offset` positions ahead without consuming it."""
        pos = self.index + offset
        if pos < 0 or pos >= len(self.data):
            return None
        return self.data[pos]

    def advance(self, n: int = 1) -> None:
        self.index = min(self.index + n, len(self.data))

    def is_unescaped(self, target: int, pos: int) -> bool:
        """True if the byte at `pos` is `target` and not preceded by `\\`."""
        if pos < 0 or pos >= len(self.data) or self.data[pos] != target:
            return False
        return pos == 0 or self.data[pos - 1] != BACKSLASH

    def escaped_match(self, byte: int, target: int) -> bool:
        """True if `byte`, the byte last returned by next(), is an
        unescaped `target`.

        A backslash directly before it turns the byte into literal
        content.  The first byte of the input cannot be escaped.
        """
        if byte != target:
            return False
        pos = self.index - 1
        return pos <= 0 or self.data[pos - 1] != BACKSLASH
