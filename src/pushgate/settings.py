# src/pushgate/settings.py: Hook settings storage.
# Settings access is a collaborator of the hook: the host asks a
# SettingsSource for the settings of the repository being pushed to. The YAML
# implementation reads the policy file; saving validates the patterns first
# and refuses to persist settings that carry field errors.

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .config import (
    Config,
    HookSettings,
    RepoEntry,
    dump_config,
    get_default_config_path,
    load_config,
    validate_settings,
)
from .util.errors import ConfigError, SettingsValidationError
from .util.fs import atomic_write
from .util.log import get_logger

logger = get_logger(__name__)


class SettingsSource(ABC):
    """Abstract base class for reading the hook settings of a repository."""
    @abstractmethod
    def get_settings(self, repository: str) -> Optional[HookSettings]:
        """Return the settings for the repository, or None if the hook is not enabled."""
        pass


class YamlSettingsSource(SettingsSource):
    """Reads settings from a 'policy.yaml' file."""
    def __init__(self, config: Config):
        self.config = config

    @classmethod
    def from_path(cls, path: Optional[Path] = None) -> "YamlSettingsSource":
        return cls(load_config(path))

    def get_settings(self, repository: str) -> Optional[HookSettings]:
        return self.config.settings_for(repository)


def save_repo_settings(repository: str, settings: HookSettings, path: Optional[Path] = None) -> Path:
    """
    Validates and stores the settings of one repository.

    The policy file is created when it does not exist yet. An existing entry
    for the repository is replaced in place.

    Raises:
        SettingsValidationError: If any pattern is invalid. Nothing is written.
        ConfigError: If the existing policy file cannot be loaded.
    """
    errors = validate_settings(settings)
    if errors:
        raise SettingsValidationError(errors.field_errors)

    config_path = path or get_default_config_path()
    try:
        config = load_config(config_path, check_settings=False)
    except ConfigError:
        if config_path.exists():
            raise
        config = Config()

    entry = RepoEntry(name=repository, settings=settings)
    repos = [repo for repo in config.repos if repo.name != repository]
    position = next((i for i, repo in enumerate(config.repos) if repo.name == repository), len(repos))
    repos.insert(position, entry)
    config = config.model_copy(update={"repos": repos})

    atomic_write(config_path, dump_config(config))
    logger.info(f"Saved hook settings for '{repository}' to {config_path}")
    return config_path
