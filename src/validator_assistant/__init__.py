"""validator-assistant: scoped validation rule declarations.

Rules and messages are declared once as plain data, with named scopes that
overlay the defaults. A ValidationSession merges the requested scope, accepts
run-time overrides and hands the result to a validation engine lazily.

Usage:
    from validator_assistant import FormValidator, ValidatorDeclaration

    declaration = ValidatorDeclaration.from_dict({
        "rules": {"username": "required", "email": "required|email"},
        "scopes": {
            "profile": {"rules": {"age": "required|numeric|min:13"}},
        },
    })

    session = FormValidator(declaration).make(request_data, "profile")
    session.append_rule("email", "unique:users,email")
    if session.fails():
        print(session.errors().to_dict())
"""

from validator_assistant.declaration import (
    check_declaration,
    declaration_from_attributes,
    load_declaration,
    parse_declaration,
)
from validator_assistant.engine import (
    FieldError,
    RuleEngine,
    RuleToken,
    ValidationOutcome,
    parse_rule_string,
)
from validator_assistant.errors import (
    DeclarationError,
    DeclarationIssue,
    RuleConfigurationError,
    RuleError,
    UnknownRuleError,
    ValidatorAssistantError,
)
from validator_assistant.resolver import (
    messages_identifier,
    resolve,
    rules_identifier,
    scope_identifier,
)
from validator_assistant.rules import RuleContext, RuleRegistry, Store, rule
from validator_assistant.session import FormValidator, ValidationSession
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

__all__ = [
    # Types
    "DEFAULT_SCOPE",
    "RULE_DELIMITER",
    "MessageCollection",
    "Outcome",
    "RuleCollection",
    "SessionState",
    "ValidationEngine",
    "ValidatorDeclaration",
    # Resolver
    "messages_identifier",
    "resolve",
    "rules_identifier",
    "scope_identifier",
    # Session
    "FormValidator",
    "ValidationSession",
    # Declarations
    "check_declaration",
    "declaration_from_attributes",
    "load_declaration",
    "parse_declaration",
    # Reference engine
    "FieldError",
    "RuleContext",
    "RuleEngine",
    "RuleRegistry",
    "RuleToken",
    "Store",
    "ValidationOutcome",
    "parse_rule_string",
    "rule",
    # Errors
    "DeclarationError",
    "DeclarationIssue",
    "RuleConfigurationError",
    "RuleError",
    "UnknownRuleError",
    "ValidatorAssistantError",
]
