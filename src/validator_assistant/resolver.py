"""Scope resolution for declared rule and message collections.

A declaration has one default RuleCollection/MessageCollection and any number
of scope overlays. Overlays are identified by a fixed prefix followed by the
scope name with its first character upper-cased:

    rules + Profile     -> "rulesProfile"
    messages + Profile  -> "messagesProfile"

Resolving a scope copies the defaults and overwrites every entry the overlay
declares. Fields the overlay does not mention keep their default rule. A scope
with no declared overlay resolves to the defaults alone.
"""

import logging
from collections.abc import Iterable, Mapping

from validator_assistant.types import (
    DEFAULT_SCOPE,
    MESSAGES_PREFIX,
    RULES_PREFIX,
    MessageCollection,
    RuleCollection,
)

logger = logging.getLogger(__name__)


def scope_identifier(prefix: str, scope: str) -> str:
    """Build the collection identifier for a scope.

    Only the first character of the scope name is changed, so
    "homeAddress" becomes "HomeAddress", not "Homeaddress".
    """
    return prefix + scope[:1].upper() + scope[1:]


def rules_identifier(scope: str) -> str:
    return scope_identifier(RULES_PREFIX, scope)


def messages_identifier(scope: str) -> str:
    return scope_identifier(MESSAGES_PREFIX, scope)


def colliding_scopes(scopes: Iterable[str]) -> list[tuple[str, str]]:
    """Find scope names that map to an identifier already taken.

    "profile" and "Profile" both resolve to "rulesProfile", so the later one
    would replace the earlier overlay.

    Returns:
        (name, earlier_name) pairs, in declaration order
    """
    seen: dict[str, str] = {}
    collisions: list[tuple[str, str]] = []
    for name in scopes:
        identifier = rules_identifier(name)
        if identifier in seen:
            collisions.append((name, seen[identifier]))
        else:
            seen[identifier] = name
    return collisions


def is_default_scope(scope: str | None) -> bool:
    return scope is None or scope == DEFAULT_SCOPE


def resolve(
    default_rules: Mapping[str, str],
    default_messages: Mapping[str, str],
    scoped_rules: Mapping[str, Mapping[str, str]],
    scoped_messages: Mapping[str, Mapping[str, str]],
    scope: str | None = None,
) -> tuple[RuleCollection, MessageCollection]:
    """Merge the default collections with the overlay declared for `scope`.

    Args:
        default_rules: Field -> rule string, always applied
        default_messages: "field.rule" -> message, always applied
        scoped_rules: Collection identifier -> overlay rules
        scoped_messages: Collection identifier -> overlay messages
        scope: Requested scope name; None or "default" selects defaults only

    Returns:
        (merged_rules, merged_messages) as fresh dicts. The arguments are
        never mutated.
    """
    merged_rules: RuleCollection = dict(default_rules)
    merged_messages: MessageCollection = dict(default_messages)

    if is_default_scope(scope):
        return merged_rules, merged_messages

    rules_key = rules_identifier(scope)
    overlay_rules = scoped_rules.get(rules_key)
    if overlay_rules is None:
        logger.debug(
            "No rules declared as '%s' for scope '%s'; using defaults",
            rules_key,
            scope,
        )
    else:
        merged_rules.update(overlay_rules)

    overlay_messages = scoped_messages.get(messages_identifier(scope))
    if overlay_messages is not None:
        merged_messages.update(overlay_messages)

    return merged_rules, merged_messages
