"""Tagged JSON rendering of parsed messages.

Plain JSON cannot tell `u@n=1;` from `i@n=1;` or `f@n=1;`, and its
object keys must be strings, so every value is written as a one-entry
object keyed by its short type tag:

    String    -> {"s": "text"}
    Unsigned  -> {"u": 42}
    Signed    -> {"i": -5}
    Float     -> {"f": 3.14}
    Bool      -> {"b": true}
    List      -> {"l": [<value>, ...]}
    Map       -> {"m": [[<key>, <value>], ...]}

Map entries are a list of pairs because YADIL map keys may be any value.
This is the form the conformance vectors use for expected results.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping

from ._value import DataType, Value, entries

_SHORT_TAGS: Dict[DataType, str] = {
    DataType.STRING: "s",
    DataType.UNSIGNED: "u",
    DataType.SIGNED: "i",
    DataType.FLOAT: "f",
    DataType.BOOL: "b",
    DataType.LIST: "l",
    DataType.MAP: "m",
}


def decode_ident(ident: bytes) -> str:
    """Identifier bytes as text; undecodable bytes become `\\xNN` escapes."""
    return ident.decode("utf-8", errors="backslashreplace")


def value_to_json(value: Value) -> Dict[str, Any]:
    tag = _SHORT_TAGS[value.type]
    if value.type is DataType.LIST:
        return {tag: [value_to_json(item) for item in value.data]}
    if value.type is DataType.MAP:
        return {tag: [[value_to_json(k), value_to_json(v)] for k, v in entries(value)]}
    return {tag: value.data}


def message_to_json(message: Mapping[bytes, Value]) -> Dict[str, Any]:
    """JSON-compatible dict of a parsed message, identifiers sorted."""
    return {
        decode_ident(ident): value_to_json(message[ident])
        for ident in sorted(message)
    }


def dumps(message: Mapping[bytes, Value], indent: int = 2) -> str:
    return json.dumps(message_to_json(message), indent=indent, ensure_ascii=False)
