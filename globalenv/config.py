"""Configuration with JSON/YAML file and env variable support.

Everything has a sensible default, so ``GlobalEnvConfig()`` is enough for the
common case: pick the backend from the platform and the rc file from $SHELL.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from globalenv.enums import BackendKind

logger = logging.getLogger(__name__)

ENV_PREFIX = "GLOBALENV_"


def _load_mapping(path: Path) -> dict[str, Any]:
    """Load a JSON or YAML mapping from *path*.

    Returns an empty dict if the file does not exist. Unknown suffixes are
    parsed as YAML (a superset of JSON).
    """
    if not path.exists():
        return {}

    with path.open("r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


class GlobalEnvConfig(BaseSettings):
    """Settings for where and how variables are persisted.

    Load order (later overrides earlier):
    1. config file (optional, via ``from_file``)
    2. Environment variables - runtime overrides

    Prefix: GLOBALENV_ (e.g., GLOBALENV_RC_FILE)
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend: BackendKind = Field(
        default=BackendKind.AUTO,
        description="Persistence backend; 'auto' picks the registry on Windows and the rc file elsewhere.",
    )
    shell: str | None = Field(
        default=None,
        description="Shell name or path used instead of $SHELL (e.g. 'zsh' or '/bin/bash').",
    )
    rc_file: str | None = Field(
        default=None,
        description="Explicit rc file to edit. Skips shell resolution entirely.",
    )
    registry_key: str = Field(
        default="Environment",
        description="Subkey of HKEY_CURRENT_USER holding per-user variables.",
    )

    # Logging
    log_level: str = Field(default="WARNING")
    redact_values: bool = Field(
        default=True,
        description="Redact secret-looking variable values in log output.",
    )

    @field_validator("registry_key")
    @classmethod
    def registry_key_not_empty(cls, v: str) -> str:
        v = (v or "").strip().strip("\\")
        if not v:
            raise ValueError("registry_key must not be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = (v or "").strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v!r}")
        return level

    def rc_file_path(self) -> Path | None:
        if not self.rc_file:
            return None
        return Path(self.rc_file).expanduser()

    @classmethod
    def from_file(cls, config_path: str | Path = "globalenv.yml") -> "GlobalEnvConfig":
        """Load config from a JSON/YAML file with env var overrides.

        Args:
            config_path: Path to a ``.json``, ``.yml`` or ``.yaml`` file.

        Returns:
            Configured GlobalEnvConfig instance.
        """
        config_data = _load_mapping(Path(config_path))

        # Remove keys from config_data if the corresponding env var is set
        # so env vars override file values.
        keys_to_remove = [key for key in config_data if f"{ENV_PREFIX}{key.upper()}" in os.environ]
        for key in keys_to_remove:
            del config_data[key]

        logger.debug("Loaded %d config keys from %s", len(config_data), config_path)
        return cls(**config_data)
