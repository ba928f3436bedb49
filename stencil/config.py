"""
Stencil Config - Settings model, config file loading and logging setup

Settings come from an optional YAML file and are then overridden by
STENCIL_* environment variables (STENCIL_PACKAGE_MANAGER,
STENCIL_REGISTRY_FILE, ...). pydantic-settings reads the environment and
handles validation and defaults.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError
from rich.console import Console
from rich.logging import RichHandler

from stencil.errors import ConfigError

logger = logging.getLogger("stencil")

DEFAULT_CONFIG_PATH = Path("~/.config/stencil/config.yaml")

ENV_PREFIX = "STENCIL_"
ENV_CONFIG = "STENCIL_CONFIG"

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

class Settings(BaseSettings):
    """Process-wide configuration for one stencil invocation."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="forbid")

    registry_file: Path | None = None
    package_manager: str = "npm"
    install_args: list[str] = Field(default_factory=lambda: ["install", "--force"])
    git_executable: str = "git"
    clone_depth: int = Field(1, ge=1)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Environment first: it wins over values passed in from the YAML file.
        return env_settings, init_settings

    @field_validator("package_manager", "git_executable")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @property
    def install_command(self) -> list[str]:
        return [self.package_manager, *self.install_args]

def snake_case(key: str) -> str:
    """packageManager -> package_manager; snake_case keys pass through."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()

def _config_path(path: Path | None) -> Path | None:
    """Pick the config file: explicit path, then $STENCIL_CONFIG, then the default if it exists."""
    if path is not None:
        return path
    if os.environ.get(ENV_CONFIG):
        return Path(os.environ[ENV_CONFIG]).expanduser()
    default = DEFAULT_CONFIG_PATH.expanduser()
    return default if default.is_file() else None

def _read_config_file(config_file: Path) -> dict[str, Any]:
    logger.debug("Reading config from %s", config_file)
    try:
        loaded = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_file}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file {config_file} is not valid YAML: {e}") from e
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {config_file} must contain a mapping")
    return {snake_case(str(key)): value for key, value in loaded.items()}

def load_settings(path: Path | None = None) -> Settings:
    """
    Load settings from YAML and the environment.

    Args:
        path: Explicit config file. Must exist when given.

    Returns:
        Validated Settings
    """
    config_file = _config_path(path)
    data = _read_config_file(config_file) if config_file is not None else {}

    try:
        return Settings(**data)
    except (ValidationError, SettingsError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

def configure_logging(level: int | str = logging.WARNING, console: Console | None = None) -> logging.Logger:
    """Route the stencil logger through Rich."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
