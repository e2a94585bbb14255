"""Value model: a type-erased view of a serialized record.

A record is serialized once into a tree of ``Value`` nodes. Rules only ever
inspect that tree, never the caller's original objects.

Lookup policy: any path that cannot be resolved (missing key, index out of
range, stepping into a scalar, empty segment) resolves to Absent. Lookup
never raises.
"""

from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from freeval.config import get_settings


class ValueKind(str, Enum):
    """Shape of a serialized value."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    ABSENT = "absent"
    SEQUENCE = "sequence"
    MAP = "map"


# Python payload type expected for each kind
_PAYLOAD_TYPES = {
    ValueKind.STRING: str,
    ValueKind.INTEGER: int,
    ValueKind.FLOAT: float,
    ValueKind.BOOLEAN: bool,
    ValueKind.ABSENT: type(None),
    ValueKind.SEQUENCE: tuple,
    ValueKind.MAP: dict,
}


class Value(BaseModel):
    """One node of a serialized record.

    Scalars keep their Python payload in ``data``; sequences hold a tuple of
    Values and maps a dict of str -> Value. Equality is structural, so an
    Integer 1 and a Float 1.0 are different values.
    """

    model_config = ConfigDict(frozen=True)

    kind: ValueKind
    data: Any = None

    @model_validator(mode="after")
    def check_payload(self) -> "Value":
        expected = _PAYLOAD_TYPES[self.kind]
        data = self.data
        if not isinstance(data, expected) or (self.kind is ValueKind.INTEGER and isinstance(data, bool)):
            raise ValueError(f"{self.kind.value} value cannot hold {type(data).__name__}")
        return self

    # ── Constructors ──

    @classmethod
    def absent(cls) -> "Value":
        return cls(kind=ValueKind.ABSENT)

    @classmethod
    def scalar(cls, data: Any) -> "Value":
        """Wrap a str, bool, int, float or None."""
        if data is None:
            return cls.absent()
        if isinstance(data, bool):
            return cls(kind=ValueKind.BOOLEAN, data=data)
        if isinstance(data, int):
            return cls(kind=ValueKind.INTEGER, data=data)
        if isinstance(data, float):
            return cls(kind=ValueKind.FLOAT, data=data)
        if isinstance(data, str):
            return cls(kind=ValueKind.STRING, data=data)
        raise TypeError(f"Not a scalar: {type(data).__name__}")

    @classmethod
    def sequence(cls, items: Iterable["Value"]) -> "Value":
        return cls(kind=ValueKind.SEQUENCE, data=tuple(items))

    @classmethod
    def mapping(cls, entries: Mapping[str, "Value"]) -> "Value":
        return cls(kind=ValueKind.MAP, data=dict(entries))

    # ── Inspection ──

    @property
    def is_absent(self) -> bool:
        return self.kind is ValueKind.ABSENT

    @property
    def is_numeric(self) -> bool:
        return self.kind in (ValueKind.INTEGER, ValueKind.FLOAT)

    def length(self) -> Optional[int]:
        """Character count for strings, element count for sequences, else None."""
        if self.kind in (ValueKind.STRING, ValueKind.SEQUENCE):
            return len(self.data)
        return None

    def lookup(self, path: str, separator: Optional[str] = None) -> "Value":
        """Resolve a plain or dotted field path to exactly one Value.

        A plain key present on this map wins over splitting, so a key that
        itself contains the separator stays addressable. Sequence steps take
        non-negative decimal indexes (``items.0.name``).
        """
        if self.kind is ValueKind.MAP and path in self.data:
            return self.data[path]

        separator = separator or get_settings().PATH_SEPARATOR
        current = self
        for segment in path.split(separator):
            current = current._step(segment)
            if current.is_absent:
                break
        return current

    def _step(self, segment: str) -> "Value":
        if not segment:
            return Value.absent()
        if self.kind is ValueKind.MAP:
            entry = self.data.get(segment)
            return entry if entry is not None else Value.absent()
        if self.kind is ValueKind.SEQUENCE and segment.isascii() and segment.isdigit():
            index = int(segment)
            if index < len(self.data):
                return self.data[index]
        return Value.absent()

    def to_python(self) -> Any:
        """Convert back to plain Python data (None, scalars, lists, dicts)."""
        if self.kind is ValueKind.SEQUENCE:
            return [item.to_python() for item in self.data]
        if self.kind is ValueKind.MAP:
            return {key: item.to_python() for key, item in self.data.items()}
        return self.data
