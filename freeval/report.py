"""Validation output: the per-field error report and the Ok/Err result."""

from collections.abc import Mapping
from typing import Iterator

from pydantic import BaseModel, Field, RootModel

from freeval.errors import RecordInvalidError


class ErrorReport(RootModel[dict[str, list[str]]]):
    """Field name -> ordered failure messages.

    A field with no failing rule has no key. An empty report means success.
    Serializes as a plain JSON object, ready to embed in an RPC error.
    """

    root: dict[str, list[str]] = Field(default_factory=dict)

    def add(self, field: str, message: str) -> None:
        self.root.setdefault(field, []).append(message)

    @property
    def is_empty(self) -> bool:
        return not self.root

    def fields(self) -> list[str]:
        return list(self.root)

    def messages_for(self, field: str) -> list[str]:
        return list(self.root.get(field, []))

    def error_count(self) -> int:
        return sum(len(messages) for messages in self.root.values())

    def to_dict(self) -> dict[str, list[str]]:
        return {field: list(messages) for field, messages in self.root.items()}

    def to_json(self) -> str:
        return self.model_dump_json()

    def __getitem__(self, field: str) -> list[str]:
        return self.root[field]

    def __iter__(self) -> Iterator[str]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __contains__(self, field: object) -> bool:
        return field in self.root

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorReport):
            return self.root == other.root
        if isinstance(other, Mapping):
            return self.root == dict(other)
        return NotImplemented


class ValidationResult(BaseModel):
    """Outcome of Validator.validate(): Ok when ``errors`` is empty, else Err."""

    errors: ErrorReport = Field(default_factory=ErrorReport)

    @property
    def is_ok(self) -> bool:
        return self.errors.is_empty

    @property
    def is_err(self) -> bool:
        return not self.errors.is_empty

    def raise_for_errors(self) -> None:
        """Raise RecordInvalidError carrying the report when validation failed."""
        if self.is_err:
            raise RecordInvalidError(self.errors)

    def summary(self) -> str:
        if self.is_ok:
            return "valid"
        return f"invalid: {self.errors.error_count()} error(s) on {len(self.errors)} field(s)"
