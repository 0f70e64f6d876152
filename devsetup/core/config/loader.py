"""
Configuration loader — reads devsetup.yml into a SetupConfig.

The file is optional. Without it every default matches the standard
two-tier layout (``server/`` + ``client/``). With it, individual keys
can be overridden; unknown keys are rejected so typos surface early.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

# Default config filename
SETUP_CONFIG_FILE = "devsetup.yml"


class ConfigError(Exception):
    """Raised when setup configuration is invalid or unreadable."""


class SetupConfig(BaseModel):
    """Layout and tool settings for a run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    server_dir: str = "server"
    client_dir: str = "client"
    # Defaults to <server_dir>/logs and <server_dir>/uploads
    directories: list[str] = Field(default_factory=list)
    root_helper: str = "concurrently"
    required_tools: list[str] = Field(default_factory=lambda: ["node", "npm"])
    command_timeout: int = Field(default=600, gt=0)

    @model_validator(mode="before")
    @classmethod
    def _default_directories(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("directories") is None:
            server_dir = data.get("server_dir", "server")
            data = {**data, "directories": [f"{server_dir}/logs", f"{server_dir}/uploads"]}
        return data

    @property
    def schema_marker(self) -> str:
        return f"{self.server_dir}/prisma/schema.prisma"

    @property
    def migrations_dir(self) -> str:
        return f"{self.server_dir}/prisma/migrations"


def find_config_file(project_root: Path) -> Path | None:
    """Return the project's devsetup.yml, or None when it has none."""
    candidate = project_root / SETUP_CONFIG_FILE
    return candidate if candidate.is_file() else None


def load_config(path: Path | None = None) -> SetupConfig:
    """Load and validate setup configuration.

    Args:
        path: Path to devsetup.yml. None means "use defaults".

    Returns:
        Validated SetupConfig.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    if path is None:
        logger.debug("No %s — using defaults", SETUP_CONFIG_FILE)
        return SetupConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading setup config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    # An empty file is a valid "all defaults" config
    if data is None:
        return SetupConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = SetupConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid setup configuration in {path}: {e}") from e

    logger.info("Loaded setup config from %s", path)
    return config
