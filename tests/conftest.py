"""Shared fixtures for validator-assistant tests."""

from dataclasses import dataclass, field
from typing import Any

import pytest

from validator_assistant.rules import RuleRegistry, register_builtin_rules
from validator_assistant.types import ValidatorDeclaration


@dataclass
class FakeOutcome:
    failures: dict[str, str] = field(default_factory=dict)

    def has_failures(self) -> bool:
        return bool(self.failures)

    def get(self, field: str) -> list[str]:
        return [self.failures[field]] if field in self.failures else []


class CountingEngine:
    """Engine double that records every call.

    Fails every field whose rule string contains "fail".
    """

    def __init__(self):
        self.calls: list[tuple[dict[str, Any], dict[str, str], dict[str, str]]] = []

    def evaluate(self, inputs, rules, messages):
        self.calls.append((inputs, rules, messages))
        return FakeOutcome(
            failures={name: rule for name, rule in rules.items() if "fail" in rule}
        )

    @property
    def call_count(self) -> int:
        return len(self.calls)


class ExplodingEngine:
    """Engine double that raises on every call."""

    def __init__(self, error: Exception):
        self.error = error
        self.call_count = 0

    def evaluate(self, inputs, rules, messages):
        self.call_count += 1
        raise self.error


@pytest.fixture
def engine():
    return CountingEngine()


@pytest.fixture
def user_declaration():
    """Registration vs profile editing of the same user entity."""
    return ValidatorDeclaration.from_dict({
        "rules": {
            "username": "required",
            "email": "required|email",
        },
        "messages": {
            "email.required": "We need your email.",
        },
        "scopes": {
            "profile": {
                "rules": {
                    "name": "required",
                    "age": "required|numeric|min:13",
                },
                "messages": {
                    "age.min": "You must be at least 13.",
                },
            },
            "admin": {
                "rules": {
                    "email": "required",
                },
            },
        },
    })


@pytest.fixture
def builtin_rules():
    """Reset the rule registry to the built-in rules around a test."""
    RuleRegistry.clear()
    register_builtin_rules()
    yield
    RuleRegistry.clear()
    register_builtin_rules()
