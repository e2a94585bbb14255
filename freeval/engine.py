"""Validator: runs every field rule against one serialized record.

Usage:
    validator = Validator(form, [username_rule, password_rule])
    result = validator.validate()
    if result.is_err:
        return {"errors": result.errors.to_dict()}
"""

import time
from typing import Any, Iterable

import structlog

from freeval.declarations import FieldRule, merge_field_rules
from freeval.errors import ConfigurationError, EmptyRuleSetError, UnrepresentableValueError
from freeval.report import ErrorReport, ValidationResult
from freeval.rules.checks import evaluate
from freeval.rules.models import BaseRule, Outcome
from freeval.serialize import serialize
from freeval.values import Value, ValueKind

logger = structlog.get_logger()


class Validator:
    """One record snapshot plus one ordered rule collection.

    Design principles:
        - Evaluate-all: every rule of every field runs, no short-circuit
        - Deterministic: validate() is idempotent and side-effect free
        - Snapshot: the record is serialized once at construction and rule
          lists are copied, so later changes by the caller have no effect
    """

    def __init__(self, record: Any, field_rules: Iterable[FieldRule]):
        """Serialize the record and freeze the rule declarations.

        Args:
            record: Any serializable record (see freeval.serialize)
            field_rules: FieldRules in evaluation order; same-name entries merge

        Raises:
            ConfigurationError: On malformed declarations or records
        """
        field_rules = list(field_rules)
        for field_rule in field_rules:
            _check_declaration(field_rule)

        self.record: Value = serialize(record)
        if self.record.kind is not ValueKind.MAP:
            raise UnrepresentableValueError(
                f"Record must serialize to a map of fields, got {self.record.kind.value}"
            )

        self.field_rules: tuple[tuple[str, tuple[BaseRule, ...]], ...] = tuple(
            (fr.field, tuple(fr.rules)) for fr in merge_field_rules(field_rules)
        )

        logger.debug(
            "validator_created",
            fields=[field for field, _ in self.field_rules],
            rule_count=sum(len(rules) for _, rules in self.field_rules),
        )

    def validate(self) -> ValidationResult:
        """Evaluate every rule and collect all failures.

        Returns:
            ValidationResult; is_ok when no rule failed
        """
        start_time = time.perf_counter()
        report = ErrorReport()

        for field, rules in self.field_rules:
            value = self.record.lookup(field)
            for rule in rules:
                outcome = self._evaluate(rule, value, field)
                if not outcome.passed:
                    report.add(field, outcome.message)

        total_duration = (time.perf_counter() - start_time) * 1000

        logger.info(
            "validation_complete",
            passed=report.is_empty,
            failed_fields=report.fields(),
            total_errors=report.error_count(),
            duration_ms=round(total_duration, 3),
        )

        return ValidationResult(errors=report)

    def _evaluate(self, rule: BaseRule, value: Value, field: str) -> Outcome:
        try:
            return evaluate(rule, value, field, self.record)
        except Exception as e:
            logger.error(
                "rule_check_failed",
                field=field,
                rule=rule.kind,
                error=str(e),
                error_type=type(e).__name__,
            )
            # One broken check must not hide the rest of the report
            message = rule.message
            if message is None:
                message = f"{field} could not be validated ({rule.kind} check failed)"
            return Outcome.fail(message, ("check_error",))


def _check_declaration(field_rule: object) -> None:
    if not isinstance(field_rule, FieldRule):
        raise ConfigurationError(f"Expected FieldRule, got {type(field_rule).__name__}")
    if not field_rule.field:
        raise ConfigurationError("Field name must be a non-empty string")
    if not field_rule.rules:
        raise EmptyRuleSetError(f"Field '{field_rule.field}' must declare at least one rule")
    for rule in field_rule.rules:
        if not isinstance(rule, BaseRule):
            raise ConfigurationError(f"Field '{field_rule.field}' holds {type(rule).__name__}, expected a rule")


def validate_many(records: Iterable[Any], field_rules: Iterable[FieldRule]) -> list[ValidationResult]:
    """Validate a batch of records against the same rule collection."""
    field_rules = list(field_rules)
    return [Validator(record, field_rules).validate() for record in records]
