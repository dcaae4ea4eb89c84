"""Configuration handling for git-worktree-keeper"""

import json
import os
from dataclasses import dataclass, field
from typing import List, Optional

from git_worktree_keeper.exceptions import ConfigError
from git_worktree_keeper.utils.logging import get_logger

logger = get_logger(__name__)

CONFIG_DIR_NAME = ".gw"
CONFIG_FILE_NAME = "config.json"

# Config file keys (camelCase on disk) mapped to Config fields
_FILE_KEYS = {
    "defaultBranch": "default_branch",
    "cleanThreshold": "clean_threshold",
    "autoClean": "auto_clean",
    "autoCopyFiles": "auto_copy_files",
    "protectedBranches": "protected_branches",
    "lastAutoCleanTime": "last_auto_clean_time",
}


@dataclass
class Config:
    """Configuration for git-worktree-keeper with validation."""

    # Branch handling
    default_branch: str = "main"
    protected_branches: List[str] = field(default_factory=list)
    remote_name: str = "origin"

    # Cleanup
    clean_threshold: int = 7
    auto_clean: bool = False
    last_auto_clean_time: Optional[int] = None  # epoch milliseconds

    # Checkout
    auto_copy_files: List[str] = field(default_factory=list)

    # Output
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_default_branch()
        self._validate_clean_threshold()
        self._validate_protected_branches()
        self._validate_auto_copy_files()
        self._validate_last_auto_clean_time()

    def _validate_default_branch(self):
        """Validate default_branch is not empty."""
        if not isinstance(self.default_branch, str) or not self.default_branch.strip():
            raise ValueError("default_branch cannot be empty")
        self.default_branch = self.default_branch.strip()

    def _validate_clean_threshold(self):
        """Validate clean_threshold is a non-negative integer."""
        if isinstance(self.clean_threshold, bool) or not isinstance(self.clean_threshold, int):
            raise ValueError(f"clean_threshold must be an integer, got {self.clean_threshold!r}")
        if self.clean_threshold < 0:
            raise ValueError(f"clean_threshold must not be negative, got {self.clean_threshold}")

    def _validate_protected_branches(self):
        """Validate protected_branches list."""
        if not isinstance(self.protected_branches, list):
            raise ValueError("protected_branches must be a list")

    def _validate_auto_copy_files(self):
        """Validate auto_copy_files is a list of strings."""
        if not isinstance(self.auto_copy_files, list) or not all(
            isinstance(item, str) for item in self.auto_copy_files
        ):
            raise ValueError("auto_copy_files must be a list of strings")

    def _validate_last_auto_clean_time(self):
        """Validate last_auto_clean_time is a non-negative timestamp."""
        if self.last_auto_clean_time is None:
            return
        if not isinstance(self.last_auto_clean_time, (int, float)) or self.last_auto_clean_time < 0:
            raise ValueError(
                f"last_auto_clean_time must be a positive timestamp, got {self.last_auto_clean_time!r}"
            )

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "default_branch": self.default_branch,
            "protected_branches": self.protected_branches,
            "remote_name": self.remote_name,
            "clean_threshold": self.clean_threshold,
            "auto_clean": self.auto_clean,
            "last_auto_clean_time": self.last_auto_clean_time,
            "auto_copy_files": self.auto_copy_files,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = set(cls.__dataclass_fields__)
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)


def get_config_path(git_root: str) -> str:
    """Path of the per-repository config file."""
    return os.path.join(git_root, CONFIG_DIR_NAME, CONFIG_FILE_NAME)


def load_repo_config(git_root: str, **overrides) -> Config:
    """Load <git_root>/.gw/config.json into a Config.

    Missing file means defaults. Keyword overrides (e.g. command-line flags)
    win over values from the file.

    Raises:
        ConfigError: If the file is not valid JSON or holds invalid values
    """
    config_path = get_config_path(git_root)
    values = {}

    if os.path.exists(config_path):
        try:
            with open(config_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(config_path, str(e)) from e

        if not isinstance(data, dict):
            raise ConfigError(config_path, "top-level value must be an object")

        values = {field_name: data[key] for key, field_name in _FILE_KEYS.items() if key in data}
        logger.debug(f"Loaded config from {config_path}: {values}")
    else:
        logger.debug(f"No config at {config_path}, using defaults")

    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return Config.from_dict(values)
    except (TypeError, ValueError) as e:
        raise ConfigError(config_path, str(e)) from e


def _read_config_file(config_path: str) -> dict:
    """Raw contents of an existing config file, or {} when absent or unreadable."""
    if not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            existing = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Overwriting unreadable config at {config_path}: {e}")
        return {}
    return existing if isinstance(existing, dict) else {}


def _write_config_file(config_path: str, data: dict) -> None:
    os.makedirs(os.path.dirname(config_path), exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    logger.debug(f"Saved config to {config_path}")


def save_repo_config(git_root: str, config: Config) -> None:
    """Write the persisted fields of config back to <git_root>/.gw/config.json.

    Unknown keys already present in the file are preserved.
    """
    config_path = get_config_path(git_root)
    data = _read_config_file(config_path)

    for key, field_name in _FILE_KEYS.items():
        value = getattr(config, field_name)
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value

    _write_config_file(config_path, data)


def update_repo_config(git_root: str, **values) -> None:
    """Set individual persisted fields in <git_root>/.gw/config.json.

    Only the named fields change; every other key in the file is left as it
    is and defaults are not filled in. A value of None removes the key.

    Raises:
        ValueError: If a name is not a persisted Config field
    """
    keys_by_field = {field_name: key for key, field_name in _FILE_KEYS.items()}
    unknown = sorted(set(values) - set(keys_by_field))
    if unknown:
        raise ValueError(f"Not persisted config fields: {', '.join(unknown)}")

    config_path = get_config_path(git_root)
    data = _read_config_file(config_path)
    for field_name, value in values.items():
        if value is None:
            data.pop(keys_by_field[field_name], None)
        else:
            data[keys_by_field[field_name]] = value

    _write_config_file(config_path, data)
