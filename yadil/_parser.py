"""Parse a YADIL message into a `dict` of identifier bytes to Value.

```python
data = b'''
# people #
s@name = John Doe;
u@age  = 50;
l@children = [s@Jane; s@Jimmy;];
m@scores = {s@math=f@9.5; s@art=f@7;};
'''

message = parse(data)

assert message[b"age"] == Value.unsigned(50)
assert message[b"children"].to_python() == ["Jane", "Jimmy"]
```

Grammar, one assignment per `;`:

    assign   := tag "@" ident "=" value ";"
    tag      := s | str | u | uint | i | sint | f | float | b | bool
              | l | list | m | map
    list     := "[" (tag "@" value ";")* "]"
    map      := "{" (tag "@" value "=" tag "@" value ";")* "}"

`@`, `=`, `;` and `#` preceded by a backslash are literal content.  The
backslash is kept in the collected bytes.  An unescaped `=` inside a
value is skipped.
"""

from __future__ import annotations

from typing import Dict, List, NamedTuple, Optional, Tuple, Union

from ._constants import (
    ASSIGN_MARK,
    COMMENT_MARK,
    DATA_TYPE_START_BYTES,
    END_OF_MESSAGE,
    IGNORE_BYTES,
    LIST_CLOSE_MARK,
    LIST_OPEN_MARK,
    MAP_CLOSE_MARK,
    MAP_OPEN_MARK,
    MAX_DEPTH,
    TERMINATOR,
    TYPE_SEPARATOR,
)
from ._cursor import Cursor, RawRun, RunBuilder
from ._errors import (
    ERR_EMPTY_IDENT,
    ERR_UNEXPECTED_CHAR,
    ERR_WRONG_VALUE,
    YadilError,
    describe_byte,
)
from ._literals import DECODERS
from ._value import DATA_TYPES, DataType, Value

Message = Dict[bytes, Value]

_MAX_TAG_LEN = max(len(token) for token in DATA_TYPES)


class _Slot(NamedTuple):
    """Where a value sits, which decides how its end is recognised."""
    terminator: int
    what: str
    eof_reason: str
    stray: Optional[int] = None  # unescaped byte that means a missing value
    dropped: Optional[int] = None  # unescaped byte skipped inside the value


_EXPR = _Slot(TERMINATOR, "expr", "Expected `;` to end expr", dropped=ASSIGN_MARK)
_LIST_ELEMENT = _Slot(TERMINATOR, "list element", "Unterminated list", dropped=ASSIGN_MARK)
_MAP_KEY = _Slot(ASSIGN_MARK, "map key", "Unterminated map", stray=TERMINATOR)
_MAP_VALUE = _Slot(TERMINATOR, "map value", "Unterminated map", dropped=ASSIGN_MARK)

_COLLECTION_MARKS = {
    DataType.LIST: (LIST_OPEN_MARK, LIST_CLOSE_MARK),
    DataType.MAP: (MAP_OPEN_MARK, MAP_CLOSE_MARK),
}


def parse(data: Union[bytes, bytearray, memoryview]) -> Message:
    """Parse a YADIL message.

    Returns a `dict` mapping each identifier (as `bytes`) to its Value.
    A repeated identifier keeps the last value assigned to it.
    Raises YadilError on the first malformed byte.
    """
    return Parser(data).parse()


class Parser:
    """Recursive descent parser for one YADIL input buffer."""

    _cursor: Cursor
    _message: Optional[Message]
    """Cached result of parsing the input."""

    def __init__(self, data: Union[bytes, bytearray, memoryview]) -> None:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(
                "YADIL input must be bytes-like, not {}".format(type(data).__name__))
        # Private copy: the caller's buffer may be mutable.
        self._cursor = Cursor(bytes(data))
        self._message = None

    def parse(self) -> Message:
        if self._message is None:
            self._cursor.index = 0
            self._message = self._parse_message()
        return self._message

    # Error reporting

    def _error(self, code: str, reason: str, index: Optional[int] = None) -> YadilError:
        if index is None:
            index = self._cursor.index
        return YadilError(code, reason, index)

    def _unexpected_end(self, code: str, reason: str) -> YadilError:
        return self._error(code, reason, len(self._cursor))

    # Message assembler

    def _parse_message(self) -> Message:
        cursor = self._cursor
        message: Message = {}
        while True:
            byte = cursor.peek()
            if byte is None or byte == END_OF_MESSAGE:
                return message
            if byte in IGNORE_BYTES:
                cursor.advance()
            elif byte == COMMENT_MARK:
                self._skip_comment()
            elif byte in DATA_TYPE_START_BYTES:
                ident, value = self._parse_assign_start()
                message[ident] = value
            else:
                raise self._error(
                    ERR_UNEXPECTED_CHAR,
                    "Expected expression, got {}".format(describe_byte(byte)),
                )

    def _skip_comment(self) -> None:
        """Skip from the opening `#` to the next unescaped `#`."""
        cursor = self._cursor
        cursor.advance()
        while True:
            byte = cursor.next()
            if byte is None:
                raise self._unexpected_end(ERR_UNEXPECTED_CHAR, "Unterminated comment")
            if cursor.escaped_match(byte, COMMENT_MARK):
                return

    def _skip_blank(self) -> None:
        """Skip whitespace and comments between collection elements."""
        cursor = self._cursor
        while True:
            byte = cursor.peek()
            if byte in IGNORE_BYTES:
                cursor.advance()
            elif byte == COMMENT_MARK:
                self._skip_comment()
            else:
                return

    # Type dispatcher

    def _parse_assign_start(self) -> Tuple[bytes, Value]:
        data_type = self._parse_data_type()
        ident = self._parse_ident()
        if data_type.is_collection:
            return ident, self._parse_collection_value(data_type, 1, _EXPR)
        return ident, DECODERS[data_type](self._scan_value(_EXPR))

    def _parse_data_type(self, container: Optional[str] = None) -> DataType:
        """Read the type tag up to its unescaped `@`.

        Whitespace inside the tag is ignored.  `container` names the
        enclosing list or map, so running out of input inside it is
        reported as that collection being unterminated.
        """
        cursor = self._cursor
        start = cursor.index
        token = bytearray()
        while True:
            byte = cursor.next()
            if byte is None:
                if container is not None:
                    raise self._unexpected_end(
                        ERR_WRONG_VALUE, "Unterminated {}".format(container))
                raise self._unexpected_end(
                    ERR_UNEXPECTED_CHAR, "Expected `@` after data type")
            if cursor.escaped_match(byte, TYPE_SEPARATOR):
                break
            if byte in IGNORE_BYTES:
                continue
            token.append(byte)
            if len(token) > _MAX_TAG_LEN:
                break

        data_type = DATA_TYPES.get(bytes(token))
        if data_type is None:
            raise self._error(
                ERR_UNEXPECTED_CHAR,
                "Invalid data type `{}`".format(token.decode("ascii", "replace")),
                start,
            )
        return data_type

    # Assignment parser

    def _parse_ident(self) -> bytes:
        """Collect identifier bytes up to and including the unescaped `=`."""
        cursor = self._cursor
        ident = bytearray()
        while True:
            byte = cursor.next()
            if byte is None:
                raise self._unexpected_end(ERR_WRONG_VALUE, _EXPR.eof_reason)
            pos = cursor.index - 1
            if cursor.escaped_match(byte, ASSIGN_MARK):
                if not ident:
                    raise self._error(ERR_EMPTY_IDENT, "Identifier is empty", pos)
                return bytes(ident)
            if cursor.escaped_match(byte, TERMINATOR):
                if not ident:
                    raise self._error(
                        ERR_UNEXPECTED_CHAR,
                        "Unexpected semicolon before expr start",
                        pos,
                    )
                raise self._error(ERR_WRONG_VALUE, "Expected value in expr", pos)
            if byte in IGNORE_BYTES:
                continue
            ident.append(byte)

    def _scan_value(self, slot: _Slot) -> RawRun:
        """Collect a scalar's raw bytes up to the slot's unescaped terminator.

        Leading whitespace is dropped; once the first value byte is seen
        every byte up to the terminator is kept, escapes included.  An
        unescaped `=` after the identifier is still a delimiter and is
        skipped, so `s@k=a=b;` holds `ab`; `\\=` keeps it as content.
        """
        cursor = self._cursor
        run = RunBuilder()
        while True:
            byte = cursor.next()
            if byte is None:
                raise self._unexpected_end(ERR_WRONG_VALUE, slot.eof_reason)
            pos = cursor.index - 1
            if cursor.escaped_match(byte, slot.terminator):
                if not run:
                    raise self._error(
                        ERR_WRONG_VALUE, "Expected value in {}".format(slot.what), pos)
                return run.build(pos)
            if slot.stray is not None and cursor.escaped_match(byte, slot.stray):
                raise self._error(ERR_WRONG_VALUE, "Map entry is missing a value", pos)
            if slot.dropped is not None and cursor.escaped_match(byte, slot.dropped):
                continue
            if byte in IGNORE_BYTES and not run:
                continue
            run.append(byte, pos)

    # Collection parser

    def _parse_collection_value(
        self, data_type: DataType, depth: int, slot: _Slot
    ) -> Value:
        """Parse a list or map literal followed by the slot's terminator."""
        self._skip_blank()
        value = self._parse_collection(data_type, depth, slot)
        self._skip_blank()

        cursor = self._cursor
        byte = cursor.next()
        if byte is None:
            raise self._unexpected_end(ERR_WRONG_VALUE, slot.eof_reason)
        pos = cursor.index - 1
        if cursor.escaped_match(byte, slot.terminator):
            return value
        if slot.stray is not None and cursor.escaped_match(byte, slot.stray):
            raise self._error(ERR_WRONG_VALUE, "Map entry is missing a value", pos)
        raise self._error(
            ERR_WRONG_VALUE,
            "Expected `{}` after {}, got {}".format(
                chr(slot.terminator), data_type, describe_byte(byte)),
            pos,
        )

    def _parse_collection(self, data_type: DataType, depth: int, slot: _Slot) -> Value:
        if depth > MAX_DEPTH:
            raise self._error(
                ERR_WRONG_VALUE, "Nesting exceeds MAX_DEPTH ({})".format(MAX_DEPTH))

        open_mark, _ = _COLLECTION_MARKS[data_type]
        cursor = self._cursor
        byte = cursor.peek()
        if byte is None:
            raise self._unexpected_end(ERR_WRONG_VALUE, slot.eof_reason)
        if byte != open_mark:
            if cursor.is_unescaped(slot.terminator, cursor.index):
                raise self._error(
                    ERR_WRONG_VALUE, "Expected value in {}".format(slot.what))
            raise self._error(
                ERR_WRONG_VALUE,
                "Expected `{}` to start {}, got {}".format(
                    chr(open_mark), data_type, describe_byte(byte)),
            )
        cursor.advance()

        if data_type is DataType.LIST:
            return Value.list_of(self._parse_list_items(depth))
        return Value.map_of(self._parse_map_entries(depth))

    def _parse_list_items(self, depth: int) -> List[Value]:
        cursor = self._cursor
        items: List[Value] = []
        while True:
            self._skip_blank()
            if cursor.at_end():
                raise self._unexpected_end(ERR_WRONG_VALUE, "Unterminated list")
            if cursor.peek() == LIST_CLOSE_MARK:
                cursor.advance()
                return items
            items.append(self._parse_element(depth, _LIST_ELEMENT, "list"))

    def _parse_map_entries(self, depth: int) -> Dict[Value, Value]:
        cursor = self._cursor
        entries: Dict[Value, Value] = {}
        while True:
            self._skip_blank()
            if cursor.at_end():
                raise self._unexpected_end(ERR_WRONG_VALUE, "Unterminated map")
            if cursor.peek() == MAP_CLOSE_MARK:
                cursor.advance()
                return entries

            key_start = cursor.index
            key = self._parse_element(depth, _MAP_KEY, "map")
            if key in entries:
                raise self._error(ERR_WRONG_VALUE, "Duplicate map key", key_start)

            self._skip_blank()
            if cursor.at_end():
                raise self._unexpected_end(ERR_WRONG_VALUE, "Unterminated map")
            if cursor.peek() in (TERMINATOR, MAP_CLOSE_MARK):
                raise self._error(ERR_WRONG_VALUE, "Map entry is missing a value")
            entries[key] = self._parse_element(depth, _MAP_VALUE, "map")

    def _parse_element(self, depth: int, slot: _Slot, container: str) -> Value:
        """One type-tagged value inside a list or map."""
        byte = self._cursor.peek()
        if byte not in DATA_TYPE_START_BYTES:
            raise self._error(
                ERR_UNEXPECTED_CHAR,
                "Expected {}, got {}".format(slot.what, describe_byte(byte)),
            )
        data_type = self._parse_data_type(container)
        if data_type.is_collection:
            return self._parse_collection_value(data_type, depth + 1, slot)
        return DECODERS[data_type](self._scan_value(slot))
