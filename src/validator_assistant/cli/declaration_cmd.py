"""Declaration CLI commands: check and resolve."""

import json
from pathlib import Path

import click

from validator_assistant.config import CLIConfig
from validator_assistant.declaration import load_declaration
from validator_assistant.errors import DeclarationError
from validator_assistant.resolver import messages_identifier, rules_identifier
from validator_assistant.types import (
    DEFAULT_SCOPE,
    MESSAGES_PREFIX,
    RULES_PREFIX,
    ValidatorDeclaration,
)


def load_or_exit(config: CLIConfig, path: Path) -> ValidatorDeclaration:
    """Load a declaration, reporting issues and exiting with status 1 on failure."""
    target = config.resolve_path(path)
    if not target.is_file():
        click.echo(f"Error: Declaration file not found at {target}", err=True)
        raise SystemExit(1)

    try:
        return load_declaration(target)
    except DeclarationError as exc:
        for issue in exc.issues:
            click.echo(click.style(f"[ERROR] {issue}", fg="red"), err=True)
        click.echo(
            click.style(f"\n{len(exc.issues)} declaration error(s) found", fg="red", bold=True),
            err=True,
        )
        raise SystemExit(1)


def declared_scopes(declaration: ValidatorDeclaration) -> list[str]:
    """Scope names with a rules or messages overlay, e.g. "profile"."""
    names = set()
    for identifier in declaration.scoped_rules:
        suffix = identifier[len(RULES_PREFIX):]
        names.add(suffix[:1].lower() + suffix[1:])
    for identifier in declaration.scoped_messages:
        suffix = identifier[len(MESSAGES_PREFIX):]
        names.add(suffix[:1].lower() + suffix[1:])
    return sorted(names)


@click.group()
def declaration():
    """Declaration commands."""
    pass


@declaration.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_obj
def check(config: CLIConfig, path: Path):
    """Check a YAML declaration against the declaration schema."""
    loaded = load_or_exit(config, path)

    click.echo(f"Default scope: {len(loaded.rules)} rule(s), {len(loaded.messages)} message(s)")
    for scope in declared_scopes(loaded):
        rules = loaded.scoped_rules.get(rules_identifier(scope), {})
        messages = loaded.scoped_messages.get(messages_identifier(scope), {})
        click.echo(f"  ✓ {scope} ({len(rules)} rule(s), {len(messages)} message(s))")

    click.echo(click.style("\nDeclaration is valid.", fg="green", bold=True))


@declaration.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--scope", default=DEFAULT_SCOPE, show_default=True, help="Scope to merge over the defaults.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON instead of text.")
@click.pass_obj
def resolve(config: CLIConfig, path: Path, scope: str, as_json: bool):
    """Show the rules and messages a scope resolves to."""
    loaded = load_or_exit(config, path)
    rules, messages = loaded.resolve(scope)

    if as_json:
        click.echo(json.dumps({"scope": scope, "rules": rules, "messages": messages}, indent=2))
        return

    declared = (
        rules_identifier(scope) in loaded.scoped_rules
        or messages_identifier(scope) in loaded.scoped_messages
    )
    if scope != DEFAULT_SCOPE and not declared:
        click.echo(
            click.style(f"Scope '{scope}' is not declared; showing defaults.", fg="yellow"),
            err=True,
        )

    click.echo(f"Rules ({scope}):")
    for field_name, rule in rules.items():
        click.echo(f"  {field_name}: {rule}")

    if messages:
        click.echo(f"\nMessages ({scope}):")
        for key, message in messages.items():
            click.echo(f"  {key}: {message}")
