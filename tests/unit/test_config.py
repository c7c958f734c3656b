# tests/unit/test_config.py: Unit tests for configuration loading and validation.

import os
import re
from pathlib import Path

import pytest

from pushgate.config import (
    HookConfiguration,
    HookSettings,
    dump_config,
    get_default_config_path,
    load_config,
    validate_settings,
)
from pushgate.util.errors import ConfigError

VALID_CONFIG_YAML = r"""
version: 1
logging:
  level: DEBUG
  json: false
defaults:
  pattern: '.*\.pem$'
repos:
  - name: infra
    settings:
      pattern: '.*\.jar$'
      pattern-exclude: 'vendor/.*'
      pattern-branches: 'refs/heads/release/.*'
"""

@pytest.fixture
def mock_config_dir(tmp_path: Path, monkeypatch) -> Path:
    """Creates a mock XDG config directory structure and sets the environment variable."""
    # platformdirs will add 'pushgate' to this path
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.delenv("PUSHGATE_CONFIG", raising=False)
    config_dir = tmp_path / "pushgate"
    config_dir.mkdir()
    return config_dir

def test_load_valid_config(mock_config_dir: Path):
    """Tests that a valid configuration file is loaded and parsed correctly."""
    (mock_config_dir / "policy.yaml").write_text(VALID_CONFIG_YAML)

    config = load_config()

    assert config.version == 1
    assert config.logging.level == "DEBUG"
    assert config.logging.json_format is False
    assert config.defaults.include == r".*\.pem$"
    infra = config.settings_for("infra")
    assert infra.include == r".*\.jar$"
    assert infra.exclude == "vendor/.*"
    assert infra.branches == "refs/heads/release/.*"

def test_settings_fall_back_to_defaults(tmp_path: Path):
    path = tmp_path / "policy.yaml"
    path.write_text(VALID_CONFIG_YAML)
    config = load_config(path)
    assert config.settings_for("web").include == r".*\.pem$"

def test_no_settings_without_defaults(tmp_path: Path):
    path = tmp_path / "policy.yaml"
    path.write_text("version: 1\n")
    config = load_config(path)
    assert config.settings_for("web") is None
    assert config.logging.level == "WARNING"
    assert config.logging.json_format is True

def test_load_config_not_found(tmp_path: Path, monkeypatch):
    """Tests that a ConfigError is raised if the config file doesn't exist."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.delenv("PUSHGATE_CONFIG", raising=False)
    with pytest.raises(ConfigError, match="Configuration file not found"):
        load_config()

def test_config_override_env_var(tmp_path: Path, monkeypatch):
    path = tmp_path / "elsewhere.yaml"
    monkeypatch.setenv("PUSHGATE_CONFIG", str(path))
    assert get_default_config_path() == path

def test_config_yaml_error(tmp_path: Path):
    path = tmp_path / "policy.yaml"
    path.write_text("repos: [unclosed\n")
    with pytest.raises(ConfigError, match="Error parsing YAML"):
        load_config(path)

def test_config_validation_error(tmp_path: Path):
    """Tests that a ConfigError is raised on an invalid configuration."""
    path = tmp_path / "policy.yaml"
    path.write_text("version: 1\nrepos:\n  - settings:\n      pattern: x\n")
    with pytest.raises(ConfigError, match="Configuration validation failed"):
        load_config(path)

def test_unknown_log_level_is_a_config_error(tmp_path: Path):
    path = tmp_path / "policy.yaml"
    path.write_text("version: 1\nlogging:\n  level: LOUD\n")
    with pytest.raises(ConfigError, match="Configuration validation failed"):
        load_config(path)

def test_log_level_is_normalized(tmp_path: Path):
    path = tmp_path / "policy.yaml"
    path.write_text("version: 1\nlogging:\n  level: debug\n")
    assert load_config(path).logging.level == "DEBUG"

def test_invalid_pattern_is_refused_on_load(tmp_path: Path):
    path = tmp_path / "policy.yaml"
    path.write_text("version: 1\nrepos:\n  - name: web\n    settings:\n      pattern: '[unclosed'\n")
    with pytest.raises(ConfigError, match="Invalid hook settings for 'web'"):
        load_config(path)

    config = load_config(path, check_settings=False)
    assert config.settings_for("web").include == "[unclosed"

def test_validate_settings_accepts_valid_patterns():
    settings = HookSettings(include=r".*\.pem$", exclude="test/.*", branches="refs/heads/.*")
    assert not validate_settings(settings)

@pytest.mark.parametrize("settings, field", [
    (HookSettings(), "pattern"),
    (HookSettings(include=""), "pattern"),
    (HookSettings(include="(unclosed"), "pattern"),
    (HookSettings(include="ok", exclude="[bad"), "pattern-exclude"),
    (HookSettings(include="ok", branches="*bad"), "pattern-branches"),
])
def test_validate_settings_field_errors(settings, field):
    """Tests that each invalid field is reported under its persisted key."""
    errors = validate_settings(settings)
    assert list(errors) == [(field, "Pattern is not a valid regular expression")]

def test_validate_settings_reports_every_field():
    errors = validate_settings(HookSettings(include="(", exclude="[", branches="*"))
    assert sorted(errors.field_errors) == ["pattern", "pattern-branches", "pattern-exclude"]

def test_empty_optional_patterns_are_unset():
    settings = HookSettings.model_validate({"pattern": "x", "pattern-exclude": "", "pattern-branches": ""})
    assert settings.exclude is None
    assert settings.branches is None

def test_hook_configuration_from_settings():
    config = HookConfiguration.from_settings(HookSettings(include=r"\.pem$", branches="refs/heads/main"))
    assert config.include.pattern == r"\.pem$"
    assert config.exclude is None
    assert config.branches.fullmatch("refs/heads/main")

def test_hook_configuration_fails_loudly_on_invalid_pattern():
    """Tests that an invalid pattern never turns into an empty policy."""
    with pytest.raises(ConfigError, match="pattern-exclude"):
        HookConfiguration.from_settings(HookSettings(include="x", exclude="[bad"))
    with pytest.raises(ConfigError, match="missing"):
        HookConfiguration.from_settings(HookSettings())

def test_dump_config_uses_persisted_keys(tmp_path: Path):
    path = tmp_path / "policy.yaml"
    path.write_text(VALID_CONFIG_YAML)
    dumped = dump_config(load_config(path))
    assert "pattern-exclude: vendor/.*" in dumped
    assert "json: false" in dumped

    path.write_text(dumped)
    assert load_config(path).settings_for("infra").branches == "refs/heads/release/.*"
