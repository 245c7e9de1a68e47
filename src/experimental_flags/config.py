"""
Configuration for flag persistence.

Settings come from code with optional environment overrides:

- EXPERIMENTS_CONFIG_PATH: path of the JSON document
- EXPERIMENTS_AUTOLOAD: load persisted state at construction
- EXPERIMENTS_AUTOSAVE: save after every change
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .interfaces import IPersistenceGateway
from .flag_persistence import JsonFilePersistence, NullPersistence

DEFAULT_CONFIG_DIR = Path("resources") / "config"

ENV_CONFIG_PATH = "EXPERIMENTS_CONFIG_PATH"
ENV_AUTOLOAD = "EXPERIMENTS_AUTOLOAD"
ENV_AUTOSAVE = "EXPERIMENTS_AUTOSAVE"


def get_env_flag(env_var: str, default: bool) -> bool:
    """Get boolean value from environment variable."""
    value = os.environ.get(env_var)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("true", "1", "yes", "on")


def default_config_path(type_name: str) -> Path:
    """
    Build the default document path for a flag-set type.

    ``CommonExperiments`` becomes ``resources/config/common_experiments.json``.
    """
    snake_name = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", type_name).lower()
    return DEFAULT_CONFIG_DIR / f"{snake_name}.json"


@dataclass
class ExperimentsConfig:
    """Persistence settings for one flag set."""

    config_path: Optional[Path] = None
    autoload: bool = True
    autosave: bool = True

    def __post_init__(self):
        if self.config_path is not None:
            self.config_path = Path(self.config_path)

    @classmethod
    def from_env(cls, default_path: Optional[Union[str, Path]] = None) -> "ExperimentsConfig":
        """Create a config from environment variables, falling back to ``default_path``."""
        path = os.environ.get(ENV_CONFIG_PATH) or default_path
        return cls(
            config_path=Path(path) if path else None,
            autoload=get_env_flag(ENV_AUTOLOAD, True),
            autosave=get_env_flag(ENV_AUTOSAVE, True),
        )


def create_persistence(config: ExperimentsConfig) -> IPersistenceGateway:
    """Create the persistence gateway described by a config."""
    if config.config_path is None:
        return NullPersistence()
    return JsonFilePersistence(config.config_path)
