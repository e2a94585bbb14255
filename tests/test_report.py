"""Tests for ErrorReport and ValidationResult."""

import json

import pytest

from freeval import ErrorReport, RecordInvalidError, ValidationResult


@pytest.fixture
def report():
    report = ErrorReport()
    report.add("username", "too short")
    report.add("password", "too weak")
    report.add("username", "required")
    return report


def test_messages_keep_insertion_order(report):
    assert report.fields() == ["username", "password"]
    assert report["username"] == ["too short", "required"]
    assert report.messages_for("missing") == []
    assert "password" in report
    assert "email" not in report
    assert list(report) == ["username", "password"]
    assert report.error_count() == 3


def test_equality_with_plain_mappings(report):
    assert report == {"username": ["too short", "required"], "password": ["too weak"]}
    assert ErrorReport() == {}
    assert report != {}


def test_to_dict_is_a_copy(report):
    data = report.to_dict()
    data["username"].append("mutated")
    assert report["username"] == ["too short", "required"]


def test_json_is_a_plain_object(report):
    assert json.loads(report.to_json()) == {"username": ["too short", "required"], "password": ["too weak"]}


def test_ok_result():
    result = ValidationResult()
    assert result.is_ok
    assert result.summary() == "valid"
    result.raise_for_errors()


def test_err_result_raises_with_report(report):
    result = ValidationResult(errors=report)
    assert result.is_err
    assert result.summary() == "invalid: 3 error(s) on 2 field(s)"

    with pytest.raises(RecordInvalidError) as exc_info:
        result.raise_for_errors()

    assert exc_info.value.report is report
    assert "username, password" in str(exc_info.value)
