"""Command line configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class CLIConfig:
    """Settings for the validator-assistant command line.

    The library itself takes no configuration; these only affect the CLI.
    """

    log_level: str = "WARNING"
    declarations_dir: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_env(cls) -> CLIConfig:
        """Create config from environment variables.

        - VALIDATOR_ASSISTANT_LOG_LEVEL: logging level name (default WARNING)
        - VALIDATOR_ASSISTANT_DECLARATIONS: base directory for relative
          declaration paths (default: current directory)
        """
        level = os.environ.get("VALIDATOR_ASSISTANT_LOG_LEVEL", "WARNING").upper()
        declarations = os.environ.get("VALIDATOR_ASSISTANT_DECLARATIONS")
        return cls(
            log_level=level,
            declarations_dir=Path(declarations) if declarations else Path.cwd(),
        )

    @property
    def logging_level(self) -> int:
        """Numeric logging level; unknown names fall back to WARNING."""
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.WARNING

    def resolve_path(self, path: Path) -> Path:
        """Resolve a declaration path against declarations_dir."""
        if path.is_absolute():
            return path
        return self.declarations_dir / path
