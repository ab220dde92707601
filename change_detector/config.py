"""Configuration management for the connector change detector."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass
class Config:
    """Central configuration for a change-detection run.

    Defaults are read from the environment when the instance is created, so
    calling ``load_dotenv()`` beforehand makes ``.env`` values visible.
    """

    # Snapshot roots
    previous_root: Path = field(default_factory=lambda: Path(os.getenv("CONNECTORS_PREVIOUS", "connectors/previous")))
    current_root: Path = field(default_factory=lambda: Path(os.getenv("CONNECTORS_CURRENT", "connectors/current")))

    # Reconciliation
    expand_folder_changes: bool = field(default_factory=lambda: _env_flag("EXPAND_FOLDER_CHANGES"))
    max_workers: int = field(default_factory=lambda: int(os.getenv("MAX_WORKERS", "1")))

    # Classification
    severity_rules_path: Optional[Path] = field(
        default_factory=lambda: Path(os.environ["SEVERITY_RULES_PATH"]) if os.getenv("SEVERITY_RULES_PATH") else None
    )

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    def validate(self) -> None:
        """Validate configuration and raise errors for invalid values."""
        errors = []
        if self.max_workers < 1:
            errors.append(f"max_workers must be >= 1, got {self.max_workers}")
        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"log_level is not a logging level: {self.log_level}")
        if self.severity_rules_path is not None and self.severity_rules_path.is_dir():
            errors.append(f"severity_rules_path is a directory: {self.severity_rules_path}")

        if errors:
            raise ValueError(f"Invalid configuration: {'; '.join(errors)}")

    @property
    def is_parallel(self) -> bool:
        """Check if connectors are reconciled on a worker pool."""
        return self.max_workers > 1
