"""Shared fixtures for the link_validator test suite."""

import pytest

from link_validator.services.validator_cache import validator_cache


@pytest.fixture
def user_rules() -> dict:
    """The basic rule-syntax schema used across the suite."""
    return {
        "username": {"type": "string", "required": True, "min": 3},
        "email": {"type": "email", "required": True},
    }


@pytest.fixture
def user_json_schema() -> dict:
    """JSON Schema equivalent of ``user_rules``."""
    return {
        "type": "object",
        "properties": {
            "username": {"type": "string", "minLength": 3},
            "email": {"type": "string", "format": "email"},
        },
        "required": ["username", "email"],
    }


@pytest.fixture
def nested_rules() -> dict:
    """Three levels of nested object rules."""
    return {
        "user": {
            "type": "object",
            "required": True,
            "fields": {
                "profile": {
                    "type": "object",
                    "fields": {
                        "personal": {
                            "type": "object",
                            "fields": {
                                "name": {"type": "string", "required": True},
                                "age": {"type": "integer", "min": 0},
                            },
                        }
                    },
                }
            },
        }
    }


@pytest.fixture(autouse=True)
def empty_validator_cache():
    """Start every test with an empty compiled-validator cache."""
    validator_cache.clear()
    yield
    validator_cache.clear()
