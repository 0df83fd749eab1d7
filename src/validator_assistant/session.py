"""Validation sessions.

A ValidationSession wraps one input batch and the rules/messages resolved for
one scope. Overrides change the session's working copies only; the
declaration stays untouched. The engine is called lazily, at most once per
combination of working rules, working messages and inputs.

Usage:
    form = FormValidator(declaration)
    session = form.make(request_data, "profile")
    session.append_rule("email", "unique:users,email")
    if session.fails():
        errors = session.errors()
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from validator_assistant.types import (
    DEFAULT_SCOPE,
    RULE_DELIMITER,
    MessageCollection,
    Outcome,
    RuleCollection,
    SessionState,
    ValidationEngine,
    ValidatorDeclaration,
)

logger = logging.getLogger(__name__)


class ValidationSession:
    """One input batch validated against one resolved scope.

    Sessions are single-caller objects: they hold mutable working sets and a
    cached outcome without any locking.
    """

    def __init__(
        self,
        declaration: ValidatorDeclaration,
        inputs: dict[str, Any],
        scope: str | None = None,
        *,
        engine: ValidationEngine,
    ):
        self._inputs = dict(inputs)
        self._scope = scope or DEFAULT_SCOPE
        self._engine = engine
        self._rules, self._messages = declaration.resolve(scope)
        self._outcome: Outcome | None = None
        self._state = SessionState.UNEVALUATED

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def scope(self) -> str:
        return self._scope

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def rules(self) -> RuleCollection:
        """Copy of the working rule set."""
        return dict(self._rules)

    @property
    def messages(self) -> MessageCollection:
        """Copy of the working message set."""
        return dict(self._messages)

    @property
    def inputs(self) -> dict[str, Any]:
        return dict(self._inputs)

    # -------------------------------------------------------------------------
    # Overrides
    # -------------------------------------------------------------------------

    def set_rule(self, field: str, rule: str) -> None:
        """Replace the rule string for `field`, adding the field if absent."""
        self._rules[field] = rule
        self._invalidate()

    def set_message(self, key: str, message: str) -> None:
        """Replace the message for `key` ("field.rule"), adding it if absent."""
        self._messages[key] = message
        self._invalidate()

    def append_rule(self, field: str, fragment: str) -> bool:
        """Extend the existing rule string for `field` with `fragment`.

        Only fields already in the working rule set can be extended. For any
        other field this is a silent no-op.

        Returns:
            True if the rule was extended, False if `field` has no rule
        """
        if field not in self._rules:
            logger.debug(
                "append_rule ignored: field '%s' has no rule in scope '%s'",
                field,
                self._scope,
            )
            return False

        self._rules[field] = self._rules[field] + RULE_DELIMITER + fragment
        self._invalidate()
        return True

    def set_inputs(self, inputs: dict[str, Any]) -> None:
        """Replace the input batch."""
        self._inputs = dict(inputs)
        self._invalidate()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def fails(self) -> bool:
        """Return True if at least one field fails validation."""
        return self._evaluate().has_failures()

    def passes(self) -> bool:
        """Return True if every field passes validation."""
        return not self.fails()

    def instance(self) -> Outcome:
        """Return the engine's outcome object, evaluating if needed."""
        return self._evaluate()

    def errors(self) -> Outcome:
        """Alias of instance(), for callers that only want the error detail."""
        return self.instance()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _invalidate(self) -> None:
        if self._state == SessionState.EVALUATED:
            self._state = SessionState.STALE
            self._outcome = None

    def _evaluate(self) -> Outcome:
        if self._state == SessionState.EVALUATED and self._outcome is not None:
            return self._outcome

        logger.debug(
            "Evaluating %d rule(s) for scope '%s' (%s)",
            len(self._rules),
            self._scope,
            self._state.value,
        )
        # Engine errors propagate; state is left as-is so the next query retries.
        outcome = self._engine.evaluate(
            dict(self._inputs),
            dict(self._rules),
            dict(self._messages),
        )
        self._outcome = outcome
        self._state = SessionState.EVALUATED
        return outcome

    def __repr__(self) -> str:
        return (
            f"ValidationSession(scope={self._scope!r}, "
            f"fields={sorted(self._rules)!r}, state={self._state.value})"
        )


@dataclass
class FormValidator:
    """Binds a declaration to an engine and creates sessions from it.

    Application helpers (saving, redirecting) wrap the sessions this creates
    instead of subclassing them.

    Attributes:
        declaration: Default rules/messages and scope overlays
        engine: Engine used by every session; the reference RuleEngine if omitted
    """

    declaration: ValidatorDeclaration
    engine: ValidationEngine | None = field(default=None)

    def __post_init__(self) -> None:
        if self.engine is None:
            from validator_assistant.engine import RuleEngine

            self.engine = RuleEngine()

    def make(self, inputs: dict[str, Any], scope: str | None = None) -> ValidationSession:
        """Create a session for `inputs`, merging the overlay for `scope`."""
        return ValidationSession(self.declaration, inputs, scope, engine=self.engine)
