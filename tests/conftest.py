"""Shared pytest fixtures for freeval tests."""

from dataclasses import dataclass, field
from typing import Optional

import pytest
from pydantic import BaseModel

from freeval import LengthRange, Password, Required, declare_rule
from freeval.config import get_settings


class SignupForm(BaseModel):
    """A typical form submission."""

    username: str
    password: str
    email: Optional[str] = None
    tags: list[str] = []


@dataclass
class Address:
    city: str
    zip_code: Optional[str] = None


@dataclass
class Customer:
    name: str
    address: Address
    phones: list[str] = field(default_factory=list)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so env overrides in one test never leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def signup_rules():
    """The username/password declarations from the README scenario."""
    username = declare_rule(
        "username",
        LengthRange(min=8, max=12),
        "username length is too short! Must be between 8 and 12",
    )
    username.insert(Required())
    password = declare_rule("password", Password(min_length=8), "Password unacceptable!")
    return [username, password]


@pytest.fixture
def customer():
    return Customer(
        name="Olamide",
        address=Address(city="Lagos"),
        phones=["+234 803 555 0101", "0803-555-0102"],
    )
