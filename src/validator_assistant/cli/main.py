"""validator-assistant CLI entry point."""

import logging

import click

from validator_assistant.config import CLIConfig


@click.group()
@click.pass_context
def cli(ctx: click.Context):
    """validator-assistant: scoped validation rule declarations."""
    config = CLIConfig.from_env()
    logging.basicConfig(
        level=config.logging_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config


# Register subcommands
from validator_assistant.cli.declaration_cmd import declaration  # noqa: E402
from validator_assistant.cli.validate_cmd import validate  # noqa: E402

cli.add_command(declaration)
cli.add_command(validate)
