"""Tests for the Validator: evaluate-all execution and report aggregation."""

import pytest
from structlog.testing import capture_logs

from freeval import (
    ConfigurationError,
    EmptyRuleSetError,
    Email,
    LengthRange,
    MustMatch,
    Password,
    Required,
    UnrepresentableValueError,
    Validator,
    declare_rule,
    validate_many,
)
from freeval.rules import checks
from freeval.rules.models import RuleKind

from .conftest import SignupForm


def test_signup_scenario(signup_rules):
    """Short username fails only its length rule; numeric password fails Password."""
    result = Validator({"username": "short1", "password": "12345678"}, signup_rules).validate()

    assert result.is_err
    assert result.errors == {
        "username": ["username length is too short! Must be between 8 and 12"],
        "password": ["Password unacceptable!"],
    }


def test_signup_scenario_from_pydantic_model(signup_rules):
    form = SignupForm(username="short1", password="12345678")
    result = Validator(form, signup_rules).validate()
    assert result.errors.fields() == ["username", "password"]


def test_all_rules_satisfied_gives_empty_report(signup_rules):
    result = Validator({"username": "olamide_01", "password": "WhatAPass@003"}, signup_rules).validate()

    assert result.is_ok
    assert not result.is_err
    assert result.errors.to_dict() == {}
    assert len(result.errors) == 0


def test_every_absent_required_field_is_reported():
    fields = ["name", "city", "bio"]
    rules = [declare_rule(field, Required()) for field in fields]
    result = Validator({}, rules).validate()

    assert result.is_err
    assert result.errors.fields() == fields
    assert result.errors["bio"] == ["bio is required"]


def test_no_short_circuit_within_a_field():
    """Required then LengthRange on an Absent field yields both messages in order."""
    rule = declare_rule("username", Required())
    rule.insert(LengthRange(min=8, max=12))
    result = Validator({}, [rule]).validate()

    assert result.errors["username"] == [
        "username is required",
        "username length must be between 8 and 12",
    ]


def test_no_short_circuit_across_fields():
    rules = [
        declare_rule("email", Email()),
        declare_rule("name", Required()),
        declare_rule("password", Password(min_length=8)),
    ]
    result = Validator({"email": "nope", "password": "x"}, rules).validate()
    assert result.errors.fields() == ["email", "name", "password"]


def test_validate_is_idempotent(signup_rules):
    validator = Validator({"username": "short1", "password": "12345678"}, signup_rules)
    first = validator.validate()
    second = validator.validate()

    assert first.errors == second.errors
    assert first.errors.to_json() == second.errors.to_json()
    assert first.errors is not second.errors


def test_same_field_declarations_are_merged_in_order():
    rules = [
        declare_rule("username", Required(), "first"),
        declare_rule("password", Required(), "pw"),
        declare_rule("username", LengthRange(min=3, max=5), "second"),
    ]
    result = Validator({}, rules).validate()
    assert result.errors.to_dict() == {"username": ["first", "second"], "password": ["pw"]}


def test_nested_field_paths(customer):
    rules = [
        declare_rule("address.city", Required()),
        declare_rule("address.zip_code", Required(), "zip code missing"),
    ]
    result = Validator(customer, rules).validate()
    assert result.errors == {"address.zip_code": ["zip code missing"]}


def test_must_match_across_fields():
    rules = [declare_rule("confirm", MustMatch(other_field="password"))]
    assert Validator({"password": "a", "confirm": "a"}, rules).validate().is_ok
    result = Validator({"password": "a", "confirm": "b"}, rules).validate()
    assert result.errors == {"confirm": ["confirm must match password"]}


def test_validator_snapshots_rules_and_record():
    record = {"name": ""}
    rule = declare_rule("name", Required())
    validator = Validator(record, [rule])

    rule.insert(LengthRange(min=5, max=10))
    record["name"] = "Olamide"

    assert validator.validate().errors == {"name": ["name is required"]}


def test_rules_can_be_reused_across_validators(signup_rules):
    results = validate_many(
        [
            {"username": "olamide_01", "password": "WhatAPass@003"},
            {"username": "short1", "password": "12345678"},
        ],
        signup_rules,
    )
    assert [r.is_ok for r in results] == [True, False]


def test_empty_rule_collection_always_passes():
    assert Validator({"anything": 1}, []).validate().is_ok


def test_non_field_rule_rejected():
    with pytest.raises(ConfigurationError):
        Validator({}, [Required()])


def test_field_rule_emptied_after_declaration_rejected():
    rule = declare_rule("name", Required())
    rule.rules.clear()
    with pytest.raises(EmptyRuleSetError):
        Validator({}, [rule])


def test_non_map_record_rejected():
    with pytest.raises(UnrepresentableValueError):
        Validator(["not", "a", "record"], [declare_rule("x", Required())])


def test_crashing_check_is_reported_not_raised(monkeypatch):
    def explode(rule, value, record):
        raise RuntimeError("boom")

    monkeypatch.setitem(checks.CHECKS, RuleKind.EMAIL, explode)
    rules = [declare_rule("email", Email()), declare_rule("name", Required())]

    with capture_logs() as logs:
        result = Validator({"email": "a@b.co"}, rules).validate()

    assert result.errors == {
        "email": ["email could not be validated (email check failed)"],
        "name": ["name is required"],
    }
    assert any(log["event"] == "rule_check_failed" for log in logs)


def test_validation_is_logged(signup_rules):
    with capture_logs() as logs:
        Validator({"username": "short1", "password": "12345678"}, signup_rules).validate()

    complete = [log for log in logs if log["event"] == "validation_complete"]
    assert len(complete) == 1
    assert complete[0]["passed"] is False
    assert complete[0]["failed_fields"] == ["username", "password"]
    assert complete[0]["total_errors"] == 2


def test_non_rule_smuggled_into_rules_rejected():
    rule = declare_rule("name", Required())
    rule.rules.append("required")
    with pytest.raises(ConfigurationError):
        Validator({}, [rule])
