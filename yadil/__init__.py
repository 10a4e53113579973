"""yadil — parser for YADIL, a compact typed key/value message format.

A message is a run of `type@identifier=value;` assignments:

    >>> from yadil import parse, Value
    >>> parse(b"u@age=42; s@name=John Doe;")[b"age"]
    Unsigned(42)
    >>> parse(b"i@x=--5;") == {b"x": Value.signed(5)}
    True

Types are tagged with a short or long spelling: s|str, u|uint, i|sint,
f|float, b|bool, l|list, m|map.  Lists and maps nest:

    >>> msg = parse(b"l@xs=[u@1; l@[b@t;];]; m@ages={s@ann=u@30;};")
    >>> msg[b"xs"].to_python(), msg[b"ages"].to_python()
    ([1, [True]], {'ann': 30})

Failures raise YadilError carrying an error code and the byte offset
of the fault:

    >>> try:
    ...     parse(b"u@=1;")
    ... except YadilError as e:
    ...     print(e.code, e.index)
    EmptyIdent 2
"""

from __future__ import annotations

from ._constants import INT64_MAX, INT64_MIN, MAX_DEPTH, UINT64_MAX
from ._diagnostics import format_error, offset_to_line_col
from ._errors import (
    ERR_EMPTY_IDENT,
    ERR_UNEXPECTED_CHAR,
    ERR_WRONG_VALUE,
    YadilError,
)
from ._json_adapter import message_to_json, value_to_json
from ._parser import Message, Parser, parse
from ._value import DataType, Value

__version__ = "0.1.0"

__all__ = [
    # Parsing
    "parse",
    "Parser",
    "Message",
    # Values
    "DataType",
    "Value",
    # Diagnostics
    "offset_to_line_col",
    "format_error",
    # JSON rendering
    "message_to_json",
    "value_to_json",
    # Exception
    "YadilError",
    # Error codes
    "ERR_UNEXPECTED_CHAR",
    "ERR_EMPTY_IDENT",
    "ERR_WRONG_VALUE",
    # Limits
    "MAX_DEPTH",
    "UINT64_MAX",
    "INT64_MIN",
    "INT64_MAX",
]
