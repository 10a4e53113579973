"""Typed values produced by the parser.

Every parsed value keeps its YADIL type next to its Python payload, so
`u@n=1;`, `i@n=1;` and `b@n=t;` stay distinguishable after parsing:

    STRING    str
    UNSIGNED  int in [0, UINT64_MAX]
    SIGNED    int in [INT64_MIN, INT64_MAX]
    FLOAT     float (finite)
    BOOL      bool
    LIST      tuple of Value
    MAP       read-only mapping of Value to Value

Values are immutable and hashable, which is what lets any value,
collections included, be used as a map key.
"""

from __future__ import annotations

import dataclasses
import math
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Tuple

from ._constants import TYPE_TAGS


class DataType(Enum):
    STRING = "string"
    UNSIGNED = "unsigned"
    SIGNED = "signed"
    FLOAT = "float"
    BOOL = "bool"
    LIST = "list"
    MAP = "map"

    def __str__(self) -> str:
        return self.value

    @property
    def is_collection(self) -> bool:
        return self is DataType.LIST or self is DataType.MAP


# Tag token (b"u", b"uint", ...) to DataType.  Closed set; there is no
# way to register new types.
DATA_TYPES: Mapping[bytes, DataType] = MappingProxyType({
    token: DataType(name) for token, name in TYPE_TAGS.items()
})


@dataclasses.dataclass(frozen=True, eq=False)
class Value:
    type: DataType
    data: Any

    # ── Constructors ─────────────────────────────────────────

    @classmethod
    def string(cls, text: str) -> "Value":
        return cls(DataType.STRING, text)

    @classmethod
    def unsigned(cls, n: int) -> "Value":
        return cls(DataType.UNSIGNED, n)

    @classmethod
    def signed(cls, n: int) -> "Value":
        return cls(DataType.SIGNED, n)

    @classmethod
    def floating(cls, x: float) -> "Value":
        return cls(DataType.FLOAT, x)

    @classmethod
    def boolean(cls, flag: bool) -> "Value":
        return cls(DataType.BOOL, flag)

    @classmethod
    def list_of(cls, items: Iterable["Value"]) -> "Value":
        return cls(DataType.LIST, tuple(items))

    @classmethod
    def map_of(cls, entries: Mapping["Value", "Value"]) -> "Value":
        return cls(DataType.MAP, MappingProxyType(dict(entries)))

    # ── Identity ─────────────────────────────────────────────
    # Equal when type and data are equal.  Floats also compare their sign
    # so `0.0` and `-0.0` are distinct map keys.  MappingProxyType is
    # unhashable, so maps are keyed by their item set.

    def _identity(self) -> Tuple[Any, ...]:
        if self.type is DataType.FLOAT:
            return (self.type, self.data, math.copysign(1.0, self.data))
        if self.type is DataType.MAP:
            return (self.type, frozenset(self.data.items()))
        return (self.type, self.data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        if self.type is DataType.LIST:
            inner = ", ".join(repr(v) for v in self.data)
            return "List([{}])".format(inner)
        if self.type is DataType.MAP:
            inner = ", ".join(
                "{!r}: {!r}".format(k, v) for k, v in self.data.items())
            return "Map({{{}}})".format(inner)
        return "{}({!r})".format(self.type.name.capitalize(), self.data)

    # ── Conversion ───────────────────────────────────────────

    def to_python(self) -> Any:
        """Drop the type tags and return plain Python objects.

        Lists become `list` and maps become `dict`.  A map whose key is
        itself a list or map cannot be a `dict` key as-is, so such keys
        are converted to tuples (of items, or of key/value pairs).
        """
        if self.type is DataType.LIST:
            return [item.to_python() for item in self.data]
        if self.type is DataType.MAP:
            return {_python_key(k): v.to_python() for k, v in self.data.items()}
        return self.data


def _python_key(key: Value) -> Any:
    if key.type is DataType.LIST:
        return tuple(_python_key(item) for item in key.data)
    if key.type is DataType.MAP:
        return tuple(
            (_python_key(k), _python_key(v)) for k, v in key.data.items())
    return key.data


def message_to_python(message: Mapping[bytes, Value]) -> Dict[str, Any]:
    """Plain-Python view of a parsed message with identifiers decoded.

    Identifiers are arbitrary bytes; invalid UTF-8 is replaced rather
    than rejected since this view is only meant for display.
    """
    return {
        ident.decode("utf-8", errors="replace"): value.to_python()
        for ident, value in message.items()
    }


def entries(value: Value) -> Tuple[Tuple[Value, Value], ...]:
    """Key/value pairs of a MAP value, in insertion order."""
    if value.type is not DataType.MAP:
        raise TypeError("entries() needs a map value, got {}".format(value.type))
    return tuple(value.data.items())
