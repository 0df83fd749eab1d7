"""Exceptions raised by validator-assistant.

Normal validation failure is never an exception; it is reported through the
engine outcome. These cover broken declarations and rule strings the
reference engine cannot interpret.
"""

from dataclasses import dataclass
from pathlib import Path


class ValidatorAssistantError(Exception):
    """Base class for all validator-assistant errors."""
    pass


@dataclass
class DeclarationIssue:
    """A single problem found while loading a declaration file."""

    file: Path | None
    message: str
    path: str = ""  # location within the document, e.g. "scopes/profile/rules/age"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        source = self.file if self.file is not None else "<declaration>"
        return f"{source}{loc}: {self.message}"


class DeclarationError(ValidatorAssistantError):
    """A declaration could not be loaded or does not match the schema."""

    def __init__(self, issues: list[DeclarationIssue]):
        self.issues = issues
        summary = "; ".join(str(issue) for issue in issues) or "invalid declaration"
        super().__init__(summary)


class RuleError(ValidatorAssistantError):
    """A rule string could not be interpreted by the engine."""
    pass


class UnknownRuleError(RuleError):
    """A rule token names a rule that is not registered."""

    def __init__(self, rule: str, field: str):
        self.rule = rule
        self.field = field
        super().__init__(
            f"Rule '{rule}' on field '{field}' is not registered. "
            "Register it with RuleRegistry.register() or the @rule decorator."
        )


class RuleConfigurationError(RuleError):
    """A rule token has missing or malformed parameters, or lacks a dependency."""
    pass
