"""Run the validator-assistant CLI.

Usage:
    python -m validator_assistant declaration check forms/user.yaml
    python -m validator_assistant validate forms/user.yaml input.json --scope profile
"""

from validator_assistant.cli.main import cli


def main():
    cli(prog_name="validator-assistant")


if __name__ == "__main__":
    main()
