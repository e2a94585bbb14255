"""Rule models: the closed set of validation rule variants.

Every rule is a frozen pydantic model with a ``kind`` discriminator and an
optional ``message`` that replaces the generated default message verbatim.
Evaluation lives in ``freeval.rules.checks``, dispatched on ``kind``.
"""

import re
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from freeval.config import get_settings
from freeval.errors import RuleConfigurationError


class RuleKind(str, Enum):
    """Discriminator for every supported rule variant."""

    REQUIRED = "required"
    LENGTH_RANGE = "length_range"
    LENGTH = "length"
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    PASSWORD = "password"
    SIZE = "size"
    MIN_SIZE = "min_size"
    MAX_SIZE = "max_size"
    SIZE_RANGE = "size_range"
    BOOL = "bool"
    EMAIL = "email"
    PHONE = "phone"
    CREDIT_CARD = "credit_card"
    REGEX = "regex"
    CONTAINS = "contains"
    MUST_MATCH = "must_match"


class Outcome(BaseModel):
    """Result of evaluating one rule against one value."""

    model_config = ConfigDict(frozen=True)

    passed: bool
    message: Optional[str] = None
    reasons: tuple[str, ...] = ()

    @classmethod
    def ok(cls) -> "Outcome":
        return cls(passed=True)

    @classmethod
    def fail(cls, message: str, reasons: tuple[str, ...] = ()) -> "Outcome":
        return cls(passed=False, message=message, reasons=reasons)


class BaseRule(BaseModel):
    """Common base for all rule variants.

    Invalid parameters raise RuleConfigurationError at construction time.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    message: Optional[str] = None

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except PydanticValidationError as e:
            raise RuleConfigurationError(f"Invalid {type(self).__name__} rule: {e}") from e

    def with_message(self, message: Optional[str]) -> "BaseRule":
        """Return a copy of this rule carrying a custom error message."""
        return self.model_copy(update={"message": message})

    def evaluate(self, value, field: str = "value", record=None) -> Outcome:
        """Evaluate this rule against a Value.

        Args:
            value: The resolved field Value
            field: Field name used in generated messages
            record: Whole serialized record, needed by cross-field rules

        Returns:
            Outcome with passed=False and a message on failure
        """
        from freeval.rules.checks import evaluate

        return evaluate(self, value, field, record)


class _Bounds(BaseRule):
    """Inclusive [min, max] bounds."""

    @model_validator(mode="after")
    def check_order(self):
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        return self


# ── Presence ──


class Required(BaseRule):
    kind: Literal["required"] = "required"


# ── Length (strings and sequences) ──


class LengthRange(_Bounds):
    kind: Literal["length_range"] = "length_range"
    min: int = Field(ge=0)
    max: int = Field(ge=0)


class Length(BaseRule):
    kind: Literal["length"] = "length"
    length: int = Field(ge=0)


class MinLength(BaseRule):
    kind: Literal["min_length"] = "min_length"
    length: int = Field(ge=0)


class MaxLength(BaseRule):
    kind: Literal["max_length"] = "max_length"
    length: int = Field(ge=0)


class Password(BaseRule):
    """Composite strength check: length, upper, lower, digit and symbol."""

    kind: Literal["password"] = "password"
    min_length: int = Field(default_factory=lambda: get_settings().PASSWORD_MIN_LENGTH, ge=1)


# ── Numeric size ──


class Size(BaseRule):
    kind: Literal["size"] = "size"
    size: Union[int, float]


class MinSize(BaseRule):
    kind: Literal["min_size"] = "min_size"
    size: Union[int, float]


class MaxSize(BaseRule):
    kind: Literal["max_size"] = "max_size"
    size: Union[int, float]


class SizeRange(_Bounds):
    kind: Literal["size_range"] = "size_range"
    min: Union[int, float]
    max: Union[int, float]


# ── Formats ──


class Bool(BaseRule):
    """Boolean field must be true (e.g. an accepted terms checkbox)."""

    kind: Literal["bool"] = "bool"


class Email(BaseRule):
    kind: Literal["email"] = "email"


class Phone(BaseRule):
    kind: Literal["phone"] = "phone"


class CreditCard(BaseRule):
    kind: Literal["credit_card"] = "credit_card"


class Regex(BaseRule):
    """String must fully match ``pattern``."""

    kind: Literal["regex"] = "regex"
    pattern: str

    @field_validator("pattern")
    @classmethod
    def check_pattern_compiles(cls, pattern: str) -> str:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ValueError(f"invalid regular expression {pattern!r}: {e}") from e
        return pattern


class Contains(BaseRule):
    kind: Literal["contains"] = "contains"
    substring: str = Field(min_length=1)


# ── Cross-field ──


class MustMatch(BaseRule):
    """Field must equal the value found at ``other_field`` in the same record."""

    kind: Literal["must_match"] = "must_match"
    other_field: str = Field(min_length=1)


Rule = Annotated[
    Union[
        Required,
        LengthRange,
        Length,
        MinLength,
        MaxLength,
        Password,
        Size,
        MinSize,
        MaxSize,
        SizeRange,
        Bool,
        Email,
        Phone,
        CreditCard,
        Regex,
        Contains,
        MustMatch,
    ],
    Field(discriminator="kind"),
]

RULE_ADAPTER = TypeAdapter(Rule)
