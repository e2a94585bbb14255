"""Serialization boundary: turn caller records into Value trees.

Accepted records:
    - pydantic models (``model_dump(mode="json")``)
    - dataclass instances
    - mappings
    - any object exposing ``model_dump()`` or ``to_dict()``; protobuf
      messages can be passed through ``json_format.MessageToDict`` first

Other leaves (datetime, UUID, Path, URLs, ...) go through pydantic's JSON
encoder, so anything pydantic can serialize is representable.

Usage:
    from freeval.serialize import serialize

    value = serialize(SignupForm(username="olamide", password="..."))
    value.lookup("username")
"""

import dataclasses
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError, to_jsonable_python

from freeval.errors import UnrepresentableValueError
from freeval.values import Value

SCALAR_TYPES = (str, bool, int, float)


def serialize(record: Any) -> Value:
    """Serialize a record into a Value tree mirroring its structure."""
    if isinstance(record, Value):
        return record
    try:
        return to_value(record)
    except RecursionError as e:
        raise UnrepresentableValueError(
            f"Cannot serialize self-referencing or too deeply nested '{type(record).__name__}' record"
        ) from e


def to_value(obj: Any) -> Value:
    """Convert one Python object (recursively) into a Value."""
    if obj is None:
        return Value.absent()
    if isinstance(obj, Value):
        return obj
    if isinstance(obj, Enum):
        return to_value(obj.value)
    if isinstance(obj, SCALAR_TYPES):
        return Value.scalar(obj)
    if isinstance(obj, Decimal):
        return Value.scalar(float(obj))
    if isinstance(obj, (bytes, bytearray)):
        try:
            return Value.scalar(bytes(obj).decode("utf-8"))
        except UnicodeDecodeError as e:
            raise UnrepresentableValueError(f"Cannot represent non UTF-8 bytes as a string: {e}") from e
    if isinstance(obj, Mapping):
        return Value.mapping({_key(k): to_value(v) for k, v in obj.items()})
    if isinstance(obj, (list, tuple)):
        return Value.sequence(to_value(item) for item in obj)
    if isinstance(obj, (set, frozenset)):
        return Value.sequence(to_value(item) for item in sorted(obj, key=repr))

    dumped = _dump(obj)
    if dumped is not None:
        return to_value(dumped)

    try:
        encoded = to_jsonable_python(obj)
    except PydanticSerializationError as e:
        raise UnrepresentableValueError(
            f"Cannot serialize value of type '{type(obj).__name__}'; "
            f"provide a mapping, dataclass, pydantic model or an object with to_dict()"
        ) from e
    return to_value(encoded)


def _dump(obj: Any) -> Any:
    """Apply the object's own serialization contract, or return None."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    for method_name in ("model_dump", "to_dict"):
        method = getattr(obj, method_name, None)
        if callable(method):
            return method()
    return None


def _key(key: Any) -> str:
    if isinstance(key, Enum):
        key = key.value
    return key if isinstance(key, str) else str(key)
