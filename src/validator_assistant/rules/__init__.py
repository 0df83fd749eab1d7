"""Rules understood by the reference engine.

This module provides the registry and the built-in rule checks that the
RuleEngine looks up by token name.
"""

from validator_assistant.rules.builtins import (
    EMAIL_PATTERN,
    URL_PATTERN,
    UUID_PATTERN,
    is_empty,
    register_builtin_rules,
)
from validator_assistant.rules.registry import (
    RuleCheck,
    RuleContext,
    RuleDefinition,
    RuleRegistry,
    Store,
    rule,
)

__all__ = [
    "EMAIL_PATTERN",
    "URL_PATTERN",
    "UUID_PATTERN",
    "RuleCheck",
    "RuleContext",
    "RuleDefinition",
    "RuleRegistry",
    "Store",
    "is_empty",
    "register_builtin_rules",
    "rule",
]
