"""
Runtime configuration.

Parses the [tablerest] section of a tablerest.toml file. Environment
variables take precedence over the file:

- TABLEREST_LOG_LEVEL overrides log_level
- TABLEREST_PREFIX overrides prefix
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "tablerest.toml"

_ENV_OVERRIDES = {
    "TABLEREST_LOG_LEVEL": "log_level",
    "TABLEREST_PREFIX": "prefix",
}


class TableRestConfig(BaseModel):
    """Configuration for the HTTP binding and logging."""

    model_config = ConfigDict(frozen=True)

    title: str = "tablerest"
    prefix: str = Field(default="", description="Prefix for every generated route")
    log_level: str = "INFO"
    log_dir: str = ".tablerest/logs"
    log_to_file: bool = False
    include_options: bool = Field(default=True, description="Register OPTIONS routes")

    @field_validator("prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = f"/{v}"
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return v

    def get_log_dir(self, project_root: Path) -> Path | None:
        """Absolute log directory, or None when file logging is off."""
        if not self.log_to_file:
            return None
        log_dir = Path(self.log_dir)
        if log_dir.is_absolute():
            return log_dir
        return project_root / log_dir


def load_config(toml_path: Path | str | None = None) -> TableRestConfig:
    """
    Load configuration from a TOML file and the environment.

    Args:
        toml_path: Path to tablerest.toml (defaults to ./tablerest.toml)

    Returns:
        TableRestConfig with parsed values or defaults
    """
    path = Path(toml_path) if toml_path is not None else Path.cwd() / CONFIG_FILENAME

    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "rb") as f:
            data = dict(tomllib.load(f).get("tablerest", {}))

    for env_var, key in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[key] = value

    return TableRestConfig(**data)
