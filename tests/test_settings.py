"""
Settings tests.

Tests cover:
- Path resolution from the home directory
- TOML settings file loading and override precedence
"""

import pytest
from pydantic import ValidationError

from hypr_config_manager.settings import (
    ManagerSettings,
    default_home,
    default_settings_path,
    load_settings,
)


def test_paths_derive_from_home(tmp_path):
    settings = ManagerSettings(home_dir=tmp_path)

    assert settings.canonical_path == tmp_path / ".config" / "hypr" / "hyprland.conf"
    assert settings.test_path == tmp_path / ".config" / "hypr" / "hyprland.test.conf"


def test_home_env_override(monkeypatch, tmp_path):
    monkeypatch.setenv("HYPR_CONFIG_MANAGER_HOME", str(tmp_path))
    assert default_home() == tmp_path


def test_defaults(tmp_path):
    settings = load_settings(home_dir=tmp_path)

    assert settings.home_dir == tmp_path
    assert settings.backup_keep == 5
    assert settings.parse_general_block is False
    assert settings.log_level == "WARNING"


def test_settings_file(tmp_path):
    path = default_settings_path(tmp_path)
    path.parent.mkdir(parents=True)
    path.write_text(
        "[settings]\n"
        "backup_keep = 10\n"
        "parse_general_block = true\n"
        'log_level = "debug"\n'
    )

    settings = load_settings(home_dir=tmp_path)

    assert settings.backup_keep == 10
    assert settings.parse_general_block is True
    assert settings.log_level == "DEBUG"


def test_overrides_win_over_file(tmp_path):
    path = tmp_path / "custom.toml"
    path.write_text("[settings]\nbackup_keep = 10\nlog_level = \"INFO\"\n")

    settings = load_settings(path, home_dir=tmp_path, backup_keep=2, log_level=None)

    assert settings.backup_keep == 2
    assert settings.log_level == "INFO"


@pytest.mark.parametrize("fields", [
    {"backup_keep": -1},
    {"log_level": "LOUD"},
])
def test_invalid_values(tmp_path, fields):
    with pytest.raises(ValidationError):
        ManagerSettings(home_dir=tmp_path, **fields)
