"""Configuration loader for tracker settings."""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from ..exceptions import ConfigError
from ..utils.logging import get_logger
from .models import DEFAULT_HOME, TrackerConfig

logger = get_logger(__name__)

CONFIG_ENV = "QURAN_TRACKER_CONFIG"
DATA_ENV = "QURAN_TRACKER_DATA"
DEFAULT_CONFIG_FILE = DEFAULT_HOME / "config.yml"


class ConfigLoader:
    """Loads tracker settings from YAML and the environment."""

    def __init__(self, config_file: Path | None = None, use_dotenv: bool = True):
        """Initialize the config loader.

        Args:
            config_file: Explicit config file. Defaults to $QURAN_TRACKER_CONFIG
                or ~/.quran_tracker/config.yml
            use_dotenv: Read a .env file from the working directory first
        """
        if use_dotenv:
            load_dotenv()
        self.config_file = config_file

    def load(self) -> TrackerConfig:
        """Load the configuration.

        A missing config file means defaults. $QURAN_TRACKER_DATA overrides
        the data file either way.

        Raises:
            ConfigError: If the config file exists but cannot be read or is not valid YAML
        """
        path = self._resolve_path()
        data = self._load_yaml(path) if path.exists() else {}
        if not path.exists():
            logger.debug(f"No config file at {path}, using defaults")

        data_override = os.getenv(DATA_ENV)
        if data_override:
            data["data_file"] = data_override

        try:
            return TrackerConfig.from_dict(data)
        except ValueError as e:
            raise ConfigError(f"Invalid config {path}: {e}") from e

    def _resolve_path(self) -> Path:
        if self.config_file:
            return Path(self.config_file).expanduser()
        env_path = os.getenv(CONFIG_ENV)
        return Path(env_path).expanduser() if env_path else DEFAULT_CONFIG_FILE

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load and parse a YAML file."""
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse config {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must be a mapping")
        return data
