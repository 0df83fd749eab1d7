"""Command line interface for validator-assistant."""
