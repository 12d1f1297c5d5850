"""
Settings for Hyprland Configuration Manager.

Resolves the home directory and the Hyprland file locations, and loads
optional overrides from a TOML settings file.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "HYPR_CONFIG_MANAGER_HOME"
CANONICAL_FILENAME = "hyprland.conf"
TEST_FILENAME = "hyprland.test.conf"


def default_home() -> Path:
    """Home directory, overridable through HYPR_CONFIG_MANAGER_HOME."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home()


def default_settings_path(home: Optional[Path] = None) -> Path:
    return (home or default_home()) / ".config" / "hypr-config-manager" / "settings.toml"


class ManagerSettings(BaseModel):
    """Runtime settings for the edit session and CLI."""

    home_dir: Path = Field(default_factory=default_home, description="User home directory")
    backup_keep: int = Field(5, ge=0, description="Backups kept by cleanup")
    parse_general_block: bool = Field(
        False,
        description="Read general { } values back from text on load (off: settings live in memory only)"
    )
    log_level: str = Field("WARNING", description="Logging level name")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def config_dir(self) -> Path:
        return self.home_dir / ".config" / "hypr"

    @property
    def canonical_path(self) -> Path:
        return self.config_dir / CANONICAL_FILENAME

    @property
    def test_path(self) -> Path:
        return self.config_dir / TEST_FILENAME


def load_settings(path: Optional[Path] = None, **overrides) -> ManagerSettings:
    """
    Load settings from a TOML file, then apply keyword overrides.

    A missing file is not an error: defaults are used.

    Args:
        path: Settings file (defaults to ~/.config/hypr-config-manager/settings.toml)
        **overrides: Field values taking precedence over the file (None values ignored)

    Returns:
        ManagerSettings instance

    Raises:
        tomllib.TOMLDecodeError: If the settings file is not valid TOML
        pydantic.ValidationError: If a value is out of range
    """
    settings_path = path or default_settings_path(overrides.get("home_dir"))
    data = {}

    if settings_path.exists():
        with open(settings_path, "rb") as f:
            data = tomllib.load(f).get("settings", {})
        logger.debug(f"Loaded settings from {settings_path}")
    else:
        logger.debug(f"No settings file at {settings_path}, using defaults")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return ManagerSettings(**data)
