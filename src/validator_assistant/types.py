"""Core types for validator-assistant.

This module defines the data shared by the resolver, the session and the
engines:
- RuleCollection / MessageCollection: plain field -> string mappings
- ValidatorDeclaration: the default collections plus named scope overlays
- ValidationEngine / Outcome: the boundary to whatever interprets rule strings
- SessionState: lazy evaluation state of a validation session
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Protocol

RuleCollection = dict[str, str]
MessageCollection = dict[str, str]

DEFAULT_SCOPE = "default"
RULE_DELIMITER = "|"

RULES_PREFIX = "rules"
MESSAGES_PREFIX = "messages"


class SessionState(Enum):
    """Lazy evaluation state of a ValidationSession.

    UNEVALUATED: No engine call made yet
    EVALUATED: Engine outcome cached and current
    STALE: Outcome was computed, then rules, messages or inputs changed
    """

    UNEVALUATED = "unevaluated"
    EVALUATED = "evaluated"
    STALE = "stale"


class Outcome(Protocol):
    """Protocol for the result object returned by a validation engine."""

    def has_failures(self) -> bool:
        """Return True if at least one field failed validation."""
        ...

    def get(self, field: str) -> list[str]:
        """Return the error messages for `field` (empty if it passed)."""
        ...


class ValidationEngine(Protocol):
    """Protocol that validation engines must implement.

    Rule and message strings are opaque to the caller; the engine owns the
    rule grammar and message formatting.
    """

    def evaluate(
        self,
        inputs: dict[str, Any],
        rules: RuleCollection,
        messages: MessageCollection,
    ) -> Outcome:
        """Validate inputs against rules.

        Args:
            inputs: Field name -> submitted value
            rules: Field name -> rule string
            messages: "field.rule" -> custom message

        Returns:
            Engine-specific outcome exposing has_failures()
        """
        ...


@dataclass(frozen=True)
class ValidatorDeclaration:
    """Declared rules and messages for one kind of form or entity.

    The default collections always apply. Scope overlays are keyed by their
    collection identifier ("rulesProfile", "messagesProfile"); use from_dict()
    to declare them by scope name instead.

    Every collection is copied on construction and stored read-only, so
    neither the caller's dicts nor the attributes can change it afterwards.

    Attributes:
        rules: Default field -> rule string mapping
        messages: Default "field.rule" -> message mapping
        scoped_rules: Collection identifier -> overlay rules
        scoped_messages: Collection identifier -> overlay messages
    """

    rules: Mapping[str, str] = field(default_factory=dict)
    messages: Mapping[str, str] = field(default_factory=dict)
    scoped_rules: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    scoped_messages: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))
        object.__setattr__(self, "messages", MappingProxyType(dict(self.messages)))
        object.__setattr__(self, "scoped_rules", _freeze_overlays(self.scoped_rules))
        object.__setattr__(self, "scoped_messages", _freeze_overlays(self.scoped_messages))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ValidatorDeclaration":
        """Create a ValidatorDeclaration from a YAML/JSON dict.

        Expected shape::

            rules: {field: rule}
            messages: {field.rule: message}
            scopes:
              profile:
                rules: {field: rule}
                messages: {field.rule: message}

        Raises:
            DeclarationError: If two scope names map to the same identifier
                (e.g. "profile" and "Profile")
        """
        from validator_assistant.errors import DeclarationError, DeclarationIssue
        from validator_assistant.resolver import (
            colliding_scopes,
            messages_identifier,
            rules_identifier,
        )

        scopes = data.get("scopes") or {}
        collisions = colliding_scopes(scopes)
        if collisions:
            raise DeclarationError([
                DeclarationIssue(
                    file=None,
                    message=(
                        f"Scope '{name}' collides with '{other}': "
                        f"both are declared as '{rules_identifier(name)}'"
                    ),
                    path=f"scopes/{name}",
                )
                for name, other in collisions
            ])

        scoped_rules: dict[str, RuleCollection] = {}
        scoped_messages: dict[str, MessageCollection] = {}
        for scope, overlay in scopes.items():
            overlay = overlay or {}
            if "rules" in overlay:
                scoped_rules[rules_identifier(scope)] = dict(overlay["rules"] or {})
            if "messages" in overlay:
                scoped_messages[messages_identifier(scope)] = dict(overlay["messages"] or {})

        return cls(
            rules=dict(data.get("rules") or {}),
            messages=dict(data.get("messages") or {}),
            scoped_rules=scoped_rules,
            scoped_messages=scoped_messages,
        )

    def resolve(
        self, scope: str | None = None
    ) -> tuple[RuleCollection, MessageCollection]:
        """Merge the default collections with the overlay for `scope`."""
        from validator_assistant.resolver import resolve

        return resolve(
            self.rules,
            self.messages,
            self.scoped_rules,
            self.scoped_messages,
            scope,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "rules": dict(self.rules),
            "messages": dict(self.messages),
            "scopedRules": {k: dict(v) for k, v in self.scoped_rules.items()},
            "scopedMessages": {k: dict(v) for k, v in self.scoped_messages.items()},
        }


def _freeze_overlays(
    overlays: Mapping[str, Mapping[str, str]],
) -> Mapping[str, Mapping[str, str]]:
    return MappingProxyType(
        {key: MappingProxyType(dict(value)) for key, value in overlays.items()}
    )
