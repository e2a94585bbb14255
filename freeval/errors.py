"""Exception hierarchy.

Configuration errors are programmer errors raised at construction time.
Validation failures are never raised; they are collected into an ErrorReport.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from freeval.report import ErrorReport


class FreevalError(Exception):
    """Base class for every error raised by freeval."""


class ConfigurationError(FreevalError, ValueError):
    """A rule, field rule or validator was declared with invalid configuration."""


class EmptyRuleSetError(ConfigurationError):
    """A FieldRule was declared without any rules."""


class RuleConfigurationError(ConfigurationError):
    """A rule was declared with invalid parameters (bad bounds, bad pattern, ...)."""


class UnrepresentableValueError(ConfigurationError):
    """A record contains a value the Value model cannot represent."""


class RecordInvalidError(FreevalError):
    """Raised by ValidationResult.raise_for_errors() when validation failed."""

    def __init__(self, report: "ErrorReport"):
        self.report = report
        fields = ", ".join(report.fields())
        super().__init__(f"Record failed validation on field(s): {fields}")
