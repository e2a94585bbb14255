"""freeval: rule-based validation for dynamically typed records.

Usage:
    from freeval import Validator, declare_rule, LengthRange, Password, Required

    username = declare_rule("username", LengthRange(min=8, max=12), "Must be between 8 and 12")
    username.insert(Required())
    password = declare_rule("password", Password(min_length=8), "Password unacceptable!")

    result = Validator({"username": "short1", "password": "12345678"}, [username, password]).validate()
    if result.is_err:
        # {"username": [...], "password": [...]}
        print(result.errors.to_dict())
"""

from freeval.declarations import FieldRule, declare_rule, insert_rule, merge, merge_field_rules
from freeval.engine import Validator, validate_many
from freeval.errors import (
    ConfigurationError,
    EmptyRuleSetError,
    FreevalError,
    RecordInvalidError,
    RuleConfigurationError,
    UnrepresentableValueError,
)
from freeval.loader import load_field_rules, load_field_rules_file
from freeval.report import ErrorReport, ValidationResult
from freeval.rules import (
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
from freeval.serialize import serialize
from freeval.values import Value, ValueKind

__version__ = "0.1.0"

__all__ = [
    # Engine
    "Validator",
    "validate_many",
    "ValidationResult",
    "ErrorReport",
    # Declarations
    "FieldRule",
    "declare_rule",
    "insert_rule",
    "merge",
    "merge_field_rules",
    "load_field_rules",
    "load_field_rules_file",
    # Rules
    "BaseRule",
    "Rule",
    "RuleKind",
    "Outcome",
    "Required",
    "LengthRange",
    "Length",
    "MinLength",
    "MaxLength",
    "Password",
    "Size",
    "MinSize",
    "MaxSize",
    "SizeRange",
    "Bool",
    "Email",
    "Phone",
    "CreditCard",
    "Regex",
    "Contains",
    "MustMatch",
    # Values
    "Value",
    "ValueKind",
    "serialize",
    # Errors
    "FreevalError",
    "ConfigurationError",
    "EmptyRuleSetError",
    "RuleConfigurationError",
    "UnrepresentableValueError",
    "RecordInvalidError",
]
