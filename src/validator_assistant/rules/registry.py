"""Rule registry for the reference engine.

Provides registration and lookup for the checks behind rule tokens such as
"required", "email" or "min:13". Built-in rules are registered by
register_builtin_rules(); applications register their own at startup.

Example:
    @rule("postcode", message="The {field} field must be a valid postcode.")
    def postcode(value, params, ctx):
        return POSTCODE_PATTERN.match(str(value)) is not None
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from validator_assistant.errors import UnknownRuleError


class Store(Protocol):
    """Protocol for data access needed by rules such as "unique"."""

    def exists(self, table: str, column: str, value: Any) -> bool:
        """Return True if a row in `table` has `column` equal to `value`."""
        ...


@dataclass
class RuleContext:
    """Context passed to every rule check.

    Attributes:
        field: Name of the field being validated
        inputs: The whole input batch (for rules comparing fields)
        rule_names: Names of every rule declared on this field
        store: Optional data store for lookups
    """

    field: str
    inputs: dict[str, Any]
    rule_names: list[str] = field(default_factory=list)
    store: Store | None = None

    @property
    def numeric(self) -> bool:
        """Whether size rules should compare the value rather than its length."""
        return "numeric" in self.rule_names or "integer" in self.rule_names


# Rule check signature: (value, params, ctx) -> passed
RuleCheck = Callable[[Any, list[str], RuleContext], bool]


@dataclass(frozen=True)
class RuleDefinition:
    """A registered rule.

    Attributes:
        name: Token name used in rule strings
        check: Function returning True when the value passes
        message: Default message template ({field}, {0}, {1}, ...)
        implicit: Run even when the value is empty (e.g. "required")
    """

    name: str
    check: RuleCheck
    message: str
    implicit: bool = False


class RuleRegistry:
    """Registry for rule checks.

    Rules must be registered before a rule string can use them. Unknown
    tokens are reported as UnknownRuleError when a rule string is evaluated.
    """

    _rules: dict[str, RuleDefinition] = {}

    @classmethod
    def register(
        cls,
        name: str,
        check: RuleCheck,
        message: str = "The {field} field is invalid.",
        implicit: bool = False,
    ) -> None:
        """Register a rule check by name.

        Idempotent - re-registering the same name is a no-op.

        Args:
            name: Token name (e.g., "email", "unique")
            check: Function implementing the rule
            message: Default message template
            implicit: If true, the rule also runs on empty values
        """
        if name in cls._rules:
            return
        cls._rules[name] = RuleDefinition(
            name=name,
            check=check,
            message=message,
            implicit=implicit,
        )

    @classmethod
    def get(cls, name: str, field: str = "") -> RuleDefinition:
        """Get a registered rule by name.

        Raises:
            UnknownRuleError: If the rule is not registered
        """
        if name not in cls._rules:
            raise UnknownRuleError(name, field)
        return cls._rules[name]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._rules

    @classmethod
    def list_registered(cls) -> list[str]:
        """List all registered rule names."""
        return sorted(cls._rules.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._rules.clear()


def rule(
    name: str,
    message: str = "The {field} field is invalid.",
    implicit: bool = False,
) -> Callable[[RuleCheck], RuleCheck]:
    """Decorator to register a rule check.

    Usage:
        @rule("even", message="The {field} field must be even.")
        def even(value, params, ctx):
            return int(value) % 2 == 0
    """

    def decorator(fn: RuleCheck) -> RuleCheck:
        RuleRegistry.register(name, fn, message=message, implicit=implicit)
        return fn

    return decorator
