"""Rule checks: one function per rule kind, dispatched through CHECKS.

Each check takes (rule, value, record) and returns None on pass or a
Failure describing why the value was rejected. Messages are rendered only
when the rule carries no custom message.

Adding a rule kind means adding a model in ``models.py``, a check here and
one entry in CHECKS; existing checks are untouched.
"""

import math
import re
from typing import Callable, NamedTuple, Optional

from freeval.config import get_settings
from freeval.rules.models import BaseRule, Outcome, RuleKind
from freeval.values import Value, ValueKind

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_PATTERN = re.compile(r"\+?[0-9 ().\-]+")
CARD_SEPARATORS = re.compile(r"[ \-]")

# Password criteria, in message order
PASSWORD_CRITERIA = {
    "too_short": "be at least {min_length} characters long",
    "missing_uppercase": "contain an uppercase letter",
    "missing_lowercase": "contain a lowercase letter",
    "missing_digit": "contain a digit",
    "missing_symbol": "contain a symbol",
    "contains_whitespace": "not contain whitespace",
}


class Failure(NamedTuple):
    """Why a value failed; ``template`` is formatted with field and params."""

    reasons: tuple[str, ...]
    template: str
    params: dict

    def render(self, field: str) -> str:
        return self.template.format(field=field, **self.params)


def _fail(reason: str, template: str, **params) -> Failure:
    return Failure((reason,), template, params)


def _mismatch(expected: str, value: Value) -> Failure:
    return _fail("type_mismatch", "{field} must be {expected}, got {kind}", expected=expected, kind=value.kind.value)


def _measure(value: Value) -> Optional[int]:
    """Length for length-class rules; Absent counts as 0."""
    if value.is_absent:
        return 0
    return value.length()


# ── Presence ──


def check_required(rule, value: Value, record: Value) -> Optional[Failure]:
    if value.is_absent or value.length() == 0:
        return _fail("required", "{field} is required")
    return None


# ── Length ──


def check_length_range(rule, value: Value, record: Value) -> Optional[Failure]:
    length = _measure(value)
    if length is None:
        return _mismatch("a string or sequence", value)
    if length < rule.min or length > rule.max:
        return _fail("out_of_range", "{field} length must be between {min} and {max}", min=rule.min, max=rule.max)
    return None


def check_length(rule, value: Value, record: Value) -> Optional[Failure]:
    length = _measure(value)
    if length is None:
        return _mismatch("a string or sequence", value)
    if length != rule.length:
        return _fail("out_of_range", "{field} length must be exactly {length}", length=rule.length)
    return None


def check_min_length(rule, value: Value, record: Value) -> Optional[Failure]:
    length = _measure(value)
    if length is None:
        return _mismatch("a string or sequence", value)
    if length < rule.length:
        return _fail("out_of_range", "{field} length must be at least {length}", length=rule.length)
    return None


def check_max_length(rule, value: Value, record: Value) -> Optional[Failure]:
    length = _measure(value)
    if length is None:
        return _mismatch("a string or sequence", value)
    if length > rule.length:
        return _fail("out_of_range", "{field} length must be at most {length}", length=rule.length)
    return None


def check_password(rule, value: Value, record: Value) -> Optional[Failure]:
    """Absent is judged as an empty password."""
    if value.is_absent:
        text = ""
    elif value.kind is ValueKind.STRING:
        text = value.data
    else:
        return _mismatch("a string", value)

    failed = []
    if len(text) < rule.min_length:
        failed.append("too_short")
    if not any(c.isupper() for c in text):
        failed.append("missing_uppercase")
    if not any(c.islower() for c in text):
        failed.append("missing_lowercase")
    if not any(c.isdigit() for c in text):
        failed.append("missing_digit")
    if not any(not c.isalnum() and not c.isspace() for c in text):
        failed.append("missing_symbol")
    if any(c.isspace() for c in text):
        failed.append("contains_whitespace")

    if not failed:
        return None

    parts = [PASSWORD_CRITERIA[reason] for reason in failed]
    joined = parts[0] if len(parts) == 1 else ", ".join(parts[:-1]) + " and " + parts[-1]
    return Failure(tuple(failed), "{field} must " + joined, {"min_length": rule.min_length})


# ── Numeric size ──


def _number(value: Value, rule_template: str, **params) -> tuple[Optional[float], Optional[Failure]]:
    if value.is_absent:
        return None, _fail("absent", rule_template, **params)
    if not value.is_numeric:
        return None, _mismatch("a number", value)
    # NaN compares false against every bound
    if isinstance(value.data, float) and math.isnan(value.data):
        return None, _fail("out_of_range", rule_template, **params)
    return value.data, None


def check_size(rule, value: Value, record: Value) -> Optional[Failure]:
    template = "{field} must be exactly {size}"
    number, failure = _number(value, template, size=rule.size)
    if failure is None and number != rule.size:
        failure = _fail("out_of_range", template, size=rule.size)
    return failure


def check_min_size(rule, value: Value, record: Value) -> Optional[Failure]:
    template = "{field} must be at least {size}"
    number, failure = _number(value, template, size=rule.size)
    if failure is None and number < rule.size:
        failure = _fail("out_of_range", template, size=rule.size)
    return failure


def check_max_size(rule, value: Value, record: Value) -> Optional[Failure]:
    template = "{field} must be at most {size}"
    number, failure = _number(value, template, size=rule.size)
    if failure is None and number > rule.size:
        failure = _fail("out_of_range", template, size=rule.size)
    return failure


def check_size_range(rule, value: Value, record: Value) -> Optional[Failure]:
    template = "{field} must be between {min} and {max}"
    number, failure = _number(value, template, min=rule.min, max=rule.max)
    if failure is None and not rule.min <= number <= rule.max:
        failure = _fail("out_of_range", template, min=rule.min, max=rule.max)
    return failure


# ── Formats ──


def check_bool(rule, value: Value, record: Value) -> Optional[Failure]:
    if value.is_absent or value.data is False:
        return _fail("not_true", "{field} must be true")
    if value.kind is not ValueKind.BOOLEAN:
        return _mismatch("a boolean", value)
    return None


def check_email(rule, value: Value, record: Value) -> Optional[Failure]:
    if value.kind is not ValueKind.STRING:
        return _mismatch("a string", value)
    if not EMAIL_PATTERN.fullmatch(value.data):
        return _fail("invalid_format", "{field} must be a valid email address")
    return None


def check_phone(rule, value: Value, record: Value) -> Optional[Failure]:
    if value.kind is not ValueKind.STRING:
        return _mismatch("a string", value)
    settings = get_settings()
    text = value.data.strip()
    digits = sum(1 for c in text if c.isdigit())
    if not PHONE_PATTERN.fullmatch(text) or not settings.PHONE_MIN_DIGITS <= digits <= settings.PHONE_MAX_DIGITS:
        return _fail("invalid_format", "{field} must be a valid phone number")
    return None


def luhn_valid(digits: str) -> bool:
    """Luhn (mod 10) checksum over a string of decimal digits."""
    total = 0
    for position, char in enumerate(reversed(digits)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def check_credit_card(rule, value: Value, record: Value) -> Optional[Failure]:
    if value.kind is not ValueKind.STRING:
        return _mismatch("a string", value)
    digits = CARD_SEPARATORS.sub("", value.data.strip())
    if not (digits.isascii() and digits.isdigit() and 12 <= len(digits) <= 19 and luhn_valid(digits)):
        return _fail("invalid_format", "{field} must be a valid credit card number")
    return None


def check_regex(rule, value: Value, record: Value) -> Optional[Failure]:
    if value.kind is not ValueKind.STRING:
        return _mismatch("a string", value)
    if re.fullmatch(rule.pattern, value.data) is None:
        return _fail("no_match", "{field} must match pattern {pattern}", pattern=rule.pattern)
    return None


def check_contains(rule, value: Value, record: Value) -> Optional[Failure]:
    template = "{field} must contain '{substring}'"
    if value.kind is ValueKind.STRING:
        found = rule.substring in value.data
    elif value.kind is ValueKind.SEQUENCE:
        found = Value.scalar(rule.substring) in value.data
    elif value.is_absent:
        found = False
    else:
        return _mismatch("a string or sequence", value)
    if not found:
        return _fail("not_contained", template, substring=rule.substring)
    return None


# ── Cross-field ──


def check_must_match(rule, value: Value, record: Value) -> Optional[Failure]:
    if record.lookup(rule.other_field) != value:
        return _fail("mismatch", "{field} must match {other_field}", other_field=rule.other_field)
    return None


CheckFn = Callable[[BaseRule, Value, Value], Optional[Failure]]

CHECKS: dict[RuleKind, CheckFn] = {
    RuleKind.REQUIRED: check_required,
    RuleKind.LENGTH_RANGE: check_length_range,
    RuleKind.LENGTH: check_length,
    RuleKind.MIN_LENGTH: check_min_length,
    RuleKind.MAX_LENGTH: check_max_length,
    RuleKind.PASSWORD: check_password,
    RuleKind.SIZE: check_size,
    RuleKind.MIN_SIZE: check_min_size,
    RuleKind.MAX_SIZE: check_max_size,
    RuleKind.SIZE_RANGE: check_size_range,
    RuleKind.BOOL: check_bool,
    RuleKind.EMAIL: check_email,
    RuleKind.PHONE: check_phone,
    RuleKind.CREDIT_CARD: check_credit_card,
    RuleKind.REGEX: check_regex,
    RuleKind.CONTAINS: check_contains,
    RuleKind.MUST_MATCH: check_must_match,
}


def evaluate(rule: BaseRule, value: Value, field: str = "value", record: Optional[Value] = None) -> Outcome:
    """Run the check for ``rule.kind`` and build the Outcome.

    A custom rule message replaces the generated one verbatim.
    """
    check = CHECKS[RuleKind(rule.kind)]
    failure = check(rule, value, record if record is not None else Value.absent())
    if failure is None:
        return Outcome.ok()
    message = rule.message if rule.message is not None else failure.render(field)
    return Outcome.fail(message, failure.reasons)
