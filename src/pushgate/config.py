# src/pushgate/config.py: Pydantic models for configuration.
# This module defines the schema for the 'policy.yaml' configuration file using
# Pydantic models. It is responsible for loading the file, validating the
# regular expressions of every hook settings block, and compiling a validated
# block into the HookConfiguration the decision engine consumes.

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .util.errors import ConfigError
from .util.paths import get_config_override, get_xdg_config_home

SETTINGS_INCLUDE_PATTERN = "pattern"
SETTINGS_EXCLUDE_PATTERN = "pattern-exclude"
SETTINGS_BRANCHES_PATTERN = "pattern-branches"

INVALID_PATTERN_MESSAGE = "Pattern is not a valid regular expression"

# --- Pydantic Models for Configuration Schema ---

class HookSettings(BaseModel):
    """The three persisted pattern strings of one repository."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    include: Optional[str] = Field(None, alias=SETTINGS_INCLUDE_PATTERN)
    exclude: Optional[str] = Field(None, alias=SETTINGS_EXCLUDE_PATTERN)
    branches: Optional[str] = Field(None, alias=SETTINGS_BRANCHES_PATTERN)

    @field_validator("include", "exclude", "branches", mode="before")
    @classmethod
    def _empty_is_unset(cls, value):
        if value == "":
            return None
        return value

class LoggingConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    level: str = "WARNING"
    json_format: bool = Field(True, alias="json")

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{value}'")
        return level

class RepoEntry(BaseModel):
    name: str
    settings: HookSettings

class Config(BaseModel):
    version: int = 1
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    defaults: Optional[HookSettings] = None
    repos: List[RepoEntry] = Field(default_factory=list)

    def settings_for(self, repository: str) -> Optional[HookSettings]:
        """Repository-specific settings, falling back to the defaults block."""
        for repo in self.repos:
            if repo.name == repository:
                return repo.settings
        return self.defaults

    def settings_blocks(self):
        """Yields (name, settings) for the defaults block and every repository."""
        if self.defaults is not None:
            yield "defaults", self.defaults
        for repo in self.repos:
            yield repo.name, repo.settings


# --- Validation ---

class SettingsValidationErrors:
    """Collects field-level errors for one settings block."""

    def __init__(self):
        self.field_errors: Dict[str, List[str]] = {}

    def add_field_error(self, field: str, message: str) -> None:
        self.field_errors.setdefault(field, []).append(message)

    def __bool__(self):
        return bool(self.field_errors)

    def __iter__(self):
        for field, messages in self.field_errors.items():
            for message in messages:
                yield field, message


def _is_valid_regex(source: str) -> bool:
    try:
        re.compile(source)
    except re.error:
        return False
    return True


def validate_settings(settings: HookSettings) -> SettingsValidationErrors:
    """
    Checks a settings block the way it is checked before being saved.

    The include pattern is required; the exclude and branches patterns are
    only checked when set.
    """
    errors = SettingsValidationErrors()

    if not settings.include or not _is_valid_regex(settings.include):
        errors.add_field_error(SETTINGS_INCLUDE_PATTERN, INVALID_PATTERN_MESSAGE)

    if settings.exclude and not _is_valid_regex(settings.exclude):
        errors.add_field_error(SETTINGS_EXCLUDE_PATTERN, INVALID_PATTERN_MESSAGE)

    if settings.branches and not _is_valid_regex(settings.branches):
        errors.add_field_error(SETTINGS_BRANCHES_PATTERN, INVALID_PATTERN_MESSAGE)

    return errors


# --- Compiled configuration ---

class HookConfiguration:
    """Compiled patterns for one evaluation."""

    def __init__(
        self,
        include: re.Pattern[str],
        exclude: Optional[re.Pattern[str]] = None,
        branches: Optional[re.Pattern[str]] = None,
    ):
        self.include = include
        self.exclude = exclude
        self.branches = branches

    @classmethod
    def from_settings(cls, settings: HookSettings) -> "HookConfiguration":
        """
        Compiles a settings block that already passed validation.

        Raises:
            ConfigError: If the include pattern is missing or any pattern does
                not compile. Saved settings are validated, so this only happens
                when the file was edited by hand.
        """
        if not settings.include:
            raise ConfigError(f"Hook settings are missing the '{SETTINGS_INCLUDE_PATTERN}' field.")
        return cls(
            include=_compile(SETTINGS_INCLUDE_PATTERN, settings.include),
            exclude=_compile(SETTINGS_EXCLUDE_PATTERN, settings.exclude) if settings.exclude else None,
            branches=_compile(SETTINGS_BRANCHES_PATTERN, settings.branches) if settings.branches else None,
        )


def _compile(field: str, source: str) -> re.Pattern[str]:
    try:
        return re.compile(source)
    except re.error as e:
        raise ConfigError(f"Field '{field}' holds an invalid regular expression {source!r}: {e}") from e


# --- Configuration Loading ---

def get_default_config_path() -> Path:
    return get_config_override() or get_xdg_config_home() / "policy.yaml"


def load_config(path: Optional[Path] = None, check_settings: bool = True) -> Config:
    """
    Loads, validates, and returns the configuration.

    Args:
        path: The configuration file. Defaults to 'policy.yaml' in the user
            config directory.
        check_settings: Also validate the regular expressions of every hook
            settings block.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, does not fit
            the schema, or holds an invalid regular expression.
    """
    config_path = path or get_default_config_path()
    if not config_path.is_file():
        raise ConfigError(
            f"Configuration file not found. Please create it at '{config_path}'."
        )

    try:
        with open(config_path, "r") as f:
            raw_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML configuration: {e}") from e

    try:
        config = Config.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e

    if not check_settings:
        return config

    for name, settings in config.settings_blocks():
        errors = validate_settings(settings)
        if errors:
            problems = "; ".join(f"{field}: {message}" for field, message in errors)
            raise ConfigError(f"Invalid hook settings for '{name}': {problems}")

    return config


def dump_config(config: Config) -> str:
    """Serializes a configuration back to YAML with the persisted key names."""
    data = config.model_dump(by_alias=True, exclude_none=True)
    return yaml.safe_dump(data, sort_keys=False)
