"""Validate CLI command: run a declaration against a JSON input batch."""

import json
from pathlib import Path

import click

from validator_assistant.cli.declaration_cmd import load_or_exit
from validator_assistant.config import CLIConfig
from validator_assistant.engine import RuleEngine
from validator_assistant.errors import RuleError
from validator_assistant.session import FormValidator
from validator_assistant.types import DEFAULT_SCOPE


def _split_pairs(values: tuple[str, ...], option: str) -> list[tuple[str, str]]:
    """Split "key=value" option values."""
    pairs = []
    for value in values:
        key, sep, rest = value.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got '{value}'", param_hint=option)
        pairs.append((key, rest))
    return pairs


@click.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.argument("inputs", type=click.File("r"))
@click.option("--scope", default=DEFAULT_SCOPE, show_default=True, help="Scope to merge over the defaults.")
@click.option("--rule", "rules", multiple=True, help="Replace a rule: FIELD=RULES.")
@click.option("--append", "appends", multiple=True, help="Extend an existing rule: FIELD=RULES.")
@click.option("--message", "messages", multiple=True, help="Replace a message: FIELD.RULE=TEXT.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON instead of text.")
@click.pass_obj
def validate(
    config: CLIConfig,
    path: Path,
    inputs,
    scope: str,
    rules: tuple[str, ...],
    appends: tuple[str, ...],
    messages: tuple[str, ...],
    as_json: bool,
):
    """Validate a JSON object of inputs (file or '-' for stdin)."""
    loaded = load_or_exit(config, path)

    try:
        data = json.load(inputs)
    except json.JSONDecodeError as exc:
        click.echo(f"Error: inputs are not valid JSON: {exc}", err=True)
        raise SystemExit(2)
    if not isinstance(data, dict):
        click.echo("Error: inputs must be a JSON object", err=True)
        raise SystemExit(2)

    session = FormValidator(loaded, RuleEngine()).make(data, scope)
    for field_name, rule in _split_pairs(rules, "--rule"):
        session.set_rule(field_name, rule)
    for field_name, fragment in _split_pairs(appends, "--append"):
        if not session.append_rule(field_name, fragment):
            click.echo(
                click.style(f"Ignored --append for '{field_name}': field has no rule.", fg="yellow"),
                err=True,
            )
    for key, message in _split_pairs(messages, "--message"):
        session.set_message(key, message)

    try:
        outcome = session.instance()
    except RuleError as exc:
        click.echo(click.style(f"Rule error: {exc}", fg="red"), err=True)
        raise SystemExit(2)

    if as_json:
        click.echo(json.dumps(outcome.to_dict(), indent=2))
    elif outcome.has_failures():
        for field_name in outcome.failed_fields():
            for message in outcome.get(field_name):
                click.echo(click.style(f"  ✗ {field_name}: {message}", fg="red"))
        click.echo(
            click.style(f"\n{len(outcome.failed_fields())} field(s) failed validation", fg="red", bold=True)
        )
    else:
        click.echo(click.style("All inputs are valid.", fg="green", bold=True))

    if outcome.has_failures():
        raise SystemExit(1)
