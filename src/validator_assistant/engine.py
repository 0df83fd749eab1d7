"""Reference validation engine.

RuleEngine interprets pipe-delimited rule strings ("required|numeric|min:13")
against an input batch and collects per-field errors into a
ValidationOutcome. Any other object implementing the ValidationEngine
protocol can be used in its place.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from validator_assistant.rules.builtins import is_empty, register_builtin_rules
from validator_assistant.rules.registry import (
    RuleContext,
    RuleDefinition,
    RuleRegistry,
    Store,
)
from validator_assistant.types import RULE_DELIMITER, MessageCollection, RuleCollection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleToken:
    """One parsed rule token, e.g. "between:1,10"."""

    name: str
    params: list[str] = field(default_factory=list)


def parse_rule_string(rule_string: str) -> list[RuleToken]:
    """Split a rule string into tokens.

    Parameters follow the first ":" and are comma separated, except for
    "regex", whose whole remainder is the pattern. A pattern cannot contain
    the "|" delimiter.
    """
    tokens: list[RuleToken] = []
    for part in rule_string.split(RULE_DELIMITER):
        part = part.strip()
        if not part:
            continue
        name, _, rest = part.partition(":")
        if name == "regex":
            params = [rest] if rest else []
        else:
            params = [p.strip() for p in rest.split(",")] if rest else []
        tokens.append(RuleToken(name=name.strip(), params=params))
    return tokens


@dataclass(frozen=True)
class FieldError:
    """A single failed rule on a field.

    Attributes:
        field: Field name the error relates to
        rule: Name of the rule that failed (e.g., "min")
        message: Human-readable message
    """

    field: str
    rule: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "rule": self.rule,
            "message": self.message,
        }


@dataclass
class ValidationOutcome:
    """Result of evaluating an input batch.

    Attributes:
        errors: Failed rules, in field declaration order
    """

    errors: list[FieldError] = field(default_factory=list)

    def has_failures(self) -> bool:
        return len(self.errors) > 0

    def failed_fields(self) -> list[str]:
        """Names of fields with at least one error, without duplicates."""
        seen: dict[str, None] = {}
        for error in self.errors:
            seen.setdefault(error.field, None)
        return list(seen)

    def get(self, field: str) -> list[str]:
        """All messages for `field`."""
        return [e.message for e in self.errors if e.field == field]

    def first(self, field: str) -> str | None:
        """First message for `field`, or None if it passed."""
        messages = self.get(field)
        return messages[0] if messages else None

    def has(self, field: str) -> bool:
        return any(e.field == field for e in self.errors)

    def all(self) -> list[str]:
        return [e.message for e in self.errors]

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "valid": not self.has_failures(),
            "errors": {},
        }
        for error in self.errors:
            result["errors"].setdefault(error.field, []).append(error.message)
        return result


class RuleEngine:
    """Evaluates rule strings using the checks in RuleRegistry.

    Evaluation of a field stops at its first failing rule. Empty values only
    fail implicit rules such as "required".
    """

    def __init__(self, store: Store | None = None):
        self.store = store
        register_builtin_rules()

    def evaluate(
        self,
        inputs: dict[str, Any],
        rules: RuleCollection,
        messages: MessageCollection,
    ) -> ValidationOutcome:
        """Validate inputs against rules.

        Raises:
            UnknownRuleError: A token names an unregistered rule
            RuleConfigurationError: A token's parameters are unusable
        """
        errors: list[FieldError] = []

        for field_name, rule_string in rules.items():
            tokens = parse_rule_string(rule_string)
            # Resolve every token first so unknown rules surface even when an
            # earlier rule fails.
            definitions = [RuleRegistry.get(t.name, field_name) for t in tokens]

            value = inputs.get(field_name)
            ctx = RuleContext(
                field=field_name,
                inputs=inputs,
                rule_names=[t.name for t in tokens],
                store=self.store,
            )

            for token, definition in zip(tokens, definitions):
                if is_empty(value) and not definition.implicit:
                    continue
                if not definition.check(value, token.params, ctx):
                    errors.append(
                        FieldError(
                            field=field_name,
                            rule=token.name,
                            message=self._message(field_name, token, definition, messages),
                        )
                    )
                    break

        logger.debug(
            "Evaluated %d field(s), %d error(s)", len(rules), len(errors)
        )
        return ValidationOutcome(errors=errors)

    def _message(
        self,
        field_name: str,
        token: RuleToken,
        definition: RuleDefinition,
        messages: MessageCollection,
    ) -> str:
        """Pick the message for a failed rule.

        Lookup order: "field.rule", then "rule", then the rule's default.
        A declared message is used even when it is the empty string.
        """
        template = messages.get(f"{field_name}.{token.name}")
        if template is None:
            template = messages.get(token.name)
        if template is None:
            template = definition.message
        try:
            return template.format(*token.params, field=field_name)
        except (IndexError, KeyError, ValueError):
            # Literal braces or placeholders we cannot fill
            return template
