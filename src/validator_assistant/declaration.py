"""Building ValidatorDeclarations from YAML files and attribute declarations.

YAML declarations are checked against ``schemas/declaration.schema.json``
before use:

    rules:
      username: required
      email: required|email
    messages:
      email.required: We need your email.
    scopes:
      profile:
        rules:
          age: required|numeric|min:13

Attribute declarations follow the naming convention of the resolver: a
``rules``/``messages`` pair for the defaults plus ``rulesProfile``,
``messagesProfile`` and so on for each scope.

Usage:
    from validator_assistant.declaration import load_declaration

    declaration = load_declaration(Path("forms/user.yaml"))
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from validator_assistant.errors import DeclarationError, DeclarationIssue
from validator_assistant.resolver import colliding_scopes, rules_identifier
from validator_assistant.types import (
    DEFAULT_SCOPE,
    MESSAGES_PREFIX,
    RULES_PREFIX,
    ValidatorDeclaration,
)

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "declaration.schema.json"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_schema() -> dict[str, Any]:
    with _SCHEMA_PATH.open() as fh:
        return json.load(fh)


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def check_declaration(data: Any, source: Path | None = None) -> list[DeclarationIssue]:
    """
    Check a parsed declaration document against the declaration schema.

    Args:
        data:   The parsed YAML/JSON document.
        source: File the document came from, used in issue messages.

    Returns:
        A list of :class:`DeclarationIssue` objects (empty on success).
    """
    validator = Draft202012Validator(_load_schema())
    issues = [
        DeclarationIssue(file=source, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(data), key=_json_path)
    ]

    if isinstance(data, dict) and isinstance(data.get("scopes"), dict):
        if DEFAULT_SCOPE in data["scopes"]:
            issues.append(
                DeclarationIssue(
                    file=source,
                    message=f"'{DEFAULT_SCOPE}' is reserved for the top-level rules",
                    path=f"scopes/{DEFAULT_SCOPE}",
                )
            )
        for name, other in colliding_scopes(data["scopes"]):
            issues.append(
                DeclarationIssue(
                    file=source,
                    message=(
                        f"Scope '{name}' collides with '{other}': "
                        f"both are declared as '{rules_identifier(name)}'"
                    ),
                    path=f"scopes/{name}",
                )
            )

    return issues


def parse_declaration(data: Any, source: Path | None = None) -> ValidatorDeclaration:
    """Build a declaration from a parsed document.

    Raises:
        DeclarationError: If the document does not match the schema
    """
    issues = check_declaration(data, source)
    if issues:
        raise DeclarationError(issues)
    return ValidatorDeclaration.from_dict(data)


def load_declaration(path: Path) -> ValidatorDeclaration:
    """
    Load a declaration from a YAML file.

    Raises:
        DeclarationError: On YAML parse errors, empty files, or schema violations.
    """
    try:
        with path.open() as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise DeclarationError(
            [DeclarationIssue(file=path, message=f"YAML parse error: {exc}")]
        ) from exc

    if raw is None:
        raise DeclarationError(
            [DeclarationIssue(file=path, message="File is empty or contains only whitespace")]
        )

    declaration = parse_declaration(raw, path)
    logger.debug(
        "Loaded declaration %s: %d rule(s), %d scope overlay(s)",
        path,
        len(declaration.rules),
        len(declaration.scoped_rules),
    )
    return declaration


def declaration_from_attributes(source: Any) -> ValidatorDeclaration:
    """Build a declaration from ``rules``/``messages`` style attributes.

    Reads ``rules`` and ``messages`` from `source` (a class or an instance),
    plus every ``rules<Scope>`` / ``messages<Scope>`` attribute whose suffix
    starts with an upper-case letter and whose value is a mapping.

    Example:
        class UserForm:
            rules = {"username": "required", "email": "required|email"}
            rulesProfile = {"name": "required"}

        declaration = declaration_from_attributes(UserForm)
    """
    scoped_rules: dict[str, dict[str, str]] = {}
    scoped_messages: dict[str, dict[str, str]] = {}

    for name in dir(source):
        for prefix, target in ((RULES_PREFIX, scoped_rules), (MESSAGES_PREFIX, scoped_messages)):
            suffix = name[len(prefix):]
            if not name.startswith(prefix) or not suffix[:1].isupper():
                continue
            value = getattr(source, name)
            if isinstance(value, Mapping):
                target[name] = dict(value)

    rules = getattr(source, RULES_PREFIX, None)
    messages = getattr(source, MESSAGES_PREFIX, None)
    return ValidatorDeclaration(
        rules=dict(rules) if isinstance(rules, Mapping) else {},
        messages=dict(messages) if isinstance(messages, Mapping) else {},
        scoped_rules=scoped_rules,
        scoped_messages=scoped_messages,
    )
