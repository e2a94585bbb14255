"""Rule loader: build FieldRules from plain data or JSON files.

Format (one entry per field, rules in evaluation order):

    {
        "username": [
            {"kind": "length_range", "min": 8, "max": 12, "message": "Too short!"},
            "required"
        ],
        "email": ["email"]
    }

A bare string is shorthand for a rule without parameters.
"""

import json
from pathlib import Path
from typing import Any, Mapping, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from freeval.declarations import FieldRule
from freeval.errors import ConfigurationError, RuleConfigurationError
from freeval.rules.models import RULE_ADAPTER

logger = structlog.get_logger()


def load_field_rules(data: Mapping[str, Any]) -> list[FieldRule]:
    """Parse a {field: [rule, ...]} mapping into FieldRules.

    Raises:
        RuleConfigurationError: If a rule entry is unknown or malformed
        EmptyRuleSetError: If a field lists no rules
    """
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Rule declarations must be a mapping, got {type(data).__name__}")

    field_rules = []
    for field, entries in data.items():
        if isinstance(entries, (str, Mapping)):
            entries = [entries]
        elif not isinstance(entries, (list, tuple)):
            raise ConfigurationError(f"Rules for field '{field}' must be a list, got {type(entries).__name__}")
        rules = [_parse_rule(field, entry) for entry in entries]
        field_rules.append(FieldRule(field, rules))
    return field_rules


def _parse_rule(field: str, entry: Any):
    if isinstance(entry, str):
        entry = {"kind": entry}
    try:
        return RULE_ADAPTER.validate_python(entry)
    except PydanticValidationError as e:
        raise RuleConfigurationError(f"Invalid rule for field '{field}': {e}") from e


def load_field_rules_file(path: Union[str, Path]) -> list[FieldRule]:
    """Load FieldRules from a JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to read rule file {path}: {e}") from e

    field_rules = load_field_rules(data)
    logger.debug("rules_loaded", path=str(path), fields=[fr.field for fr in field_rules])
    return field_rules
