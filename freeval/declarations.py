"""Field rule declarations: which rules apply to which field.

Usage:
    from freeval import declare_rule, LengthRange, Required

    username = declare_rule("username", LengthRange(min=8, max=12), "Too short!")
    username.insert(Required())
"""

from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from freeval.errors import ConfigurationError, EmptyRuleSetError
from freeval.rules.models import BaseRule, Rule


class FieldRule(BaseModel):
    """A field name and its ordered, non-empty list of rules.

    Rule order is evaluation order, and therefore error message order.
    """

    field: str = Field(min_length=1)
    rules: list[Rule] = Field(min_length=1)

    def __init__(self, field: str, rules: Sequence[BaseRule]):
        rules = list(rules)
        if not isinstance(field, str) or not field:
            raise ConfigurationError(f"Field name must be a non-empty string, got {field!r}")
        if not rules:
            raise EmptyRuleSetError(f"Field '{field}' must declare at least one rule")
        for rule in rules:
            _ensure_rule(rule, field)
        try:
            super().__init__(field=field, rules=rules)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid rules for field '{field}': {e}") from e

    def insert(self, rule: BaseRule, message: Optional[str] = None) -> "FieldRule":
        """Append a rule (optionally with a custom message); returns self."""
        _ensure_rule(rule, self.field)
        if message is not None:
            rule = rule.with_message(message)
        self.rules.append(rule)
        return self


def _ensure_rule(rule: object, field: str) -> None:
    if not isinstance(rule, BaseRule):
        raise ConfigurationError(f"Field '{field}' was given {type(rule).__name__}, expected a rule")


def declare_rule(field: str, rule: BaseRule, message: Optional[str] = None) -> FieldRule:
    """Declare a single-rule FieldRule, attaching ``message`` when given."""
    _ensure_rule(rule, field)
    if message is not None:
        rule = rule.with_message(message)
    return FieldRule(field, [rule])


def insert_rule(field_rule: FieldRule, rule: BaseRule, message: Optional[str] = None) -> FieldRule:
    return field_rule.insert(rule, message)


def merge(existing: FieldRule, incoming: FieldRule) -> FieldRule:
    """Concatenate two FieldRules for the same field into a new one."""
    if existing.field != incoming.field:
        raise ConfigurationError(
            f"Cannot merge rules for different fields: '{existing.field}' and '{incoming.field}'"
        )
    return FieldRule(existing.field, [*existing.rules, *incoming.rules])


def merge_field_rules(field_rules: Iterable[FieldRule]) -> list[FieldRule]:
    """Merge entries sharing a field name, keeping first-appearance order.

    Always returns fresh FieldRule objects; the inputs are never mutated.
    """
    merged: dict[str, FieldRule] = {}
    for field_rule in field_rules:
        current = merged.get(field_rule.field)
        if current is None:
            merged[field_rule.field] = FieldRule(field_rule.field, field_rule.rules)
        else:
            merged[field_rule.field] = merge(current, field_rule)
    return list(merged.values())
