"""Validation rules: declarative rule models and their checks."""

from freeval.rules.checks import CHECKS, evaluate
from freeval.rules.models import (
    RULE_ADAPTER,
    BaseRule,
    Bool,
    Contains,
    CreditCard,
    Email,
    Length,
    LengthRange,
    MaxLength,
    MaxSize,
    MinLength,
    MinSize,
    MustMatch,
    Outcome,
    Password,
    Phone,
    Regex,
    Required,
    Rule,
    RuleKind,
    Size,
    SizeRange,
)

__all__ = [
    "CHECKS",
    "RULE_ADAPTER",
    "BaseRule",
    "Bool",
    "Contains",
    "CreditCard",
    "Email",
    "Length",
    "LengthRange",
    "MaxLength",
    "MaxSize",
    "MinLength",
    "MinSize",
    "MustMatch",
    "Outcome",
    "Password",
    "Phone",
    "Regex",
    "Required",
    "Rule",
    "RuleKind",
    "Size",
    "SizeRange",
    "evaluate",
]
