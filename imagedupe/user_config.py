"""
User configuration management for imagedupe.

Supports configuration from multiple sources (in order of priority):
1. Command-line arguments (highest priority)
2. Environment variables
3. User config file (~/.imagedupe/config.json)
4. Default values from config.py (lowest priority)

Example config.json:
{
    "default_threshold": 10,
    "default_workers": 8,
    "db_filename": ".image_hash.db",
    "trash_dir": null
}
"""

import json
import os
from pathlib import Path
from typing import Any, Optional
import logging

from .config import (
    DEFAULT_THRESHOLD,
    DEFAULT_WORKERS,
    DB_FILENAME,
    TRASH_DIRNAME,
)

logger = logging.getLogger(__name__)


class UserConfig:
    """
    Reads user configuration from a JSON file and environment variables.

    The file is read lazily on first access and cached on the instance.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir) if config_dir else None
        self._config_data: Optional[dict] = None

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        if self._config_dir is not None:
            return self._config_dir

        # Check environment variable first
        env_dir = os.getenv('IMAGEDUPE_CONFIG_DIR')
        if env_dir:
            return Path(env_dir)

        # Default to ~/.imagedupe/
        return Path.home() / '.imagedupe'

    @property
    def config_file_path(self) -> Path:
        """Get the configuration file path."""
        return self.config_dir / 'config.json'

    def _load_config_file(self) -> dict:
        """Load configuration from JSON file."""
        if not self.config_file_path.exists():
            return {}

        try:
            with open(self.config_file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {self.config_file_path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {self.config_file_path}: not a JSON object")
            return {}

        logger.debug(f"Loaded configuration from {self.config_file_path}")
        return data

    def _get_config_data(self) -> dict:
        """Get cached config data (lazy loading)."""
        if self._config_data is None:
            self._config_data = self._load_config_file()
        return self._config_data

    def reload(self):
        """Reload configuration from file."""
        self._config_data = None

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """
        Get a configuration value with priority:
        1. Environment variable (if env_var specified)
        2. Config file
        3. Default value

        Args:
            key: Configuration key
            default: Default value if not found
            env_var: Optional environment variable name to check

        Returns:
            Configuration value
        """
        # Check environment variable first
        if env_var:
            env_value = os.getenv(env_var)
            if env_value is not None:
                # Try to parse as JSON for non-string types
                try:
                    return json.loads(env_value)
                except (json.JSONDecodeError, TypeError):
                    return env_value

        # Check config file
        config_data = self._get_config_data()
        if key in config_data:
            return config_data[key]

        # Return default
        return default

    def _get_int(self, key: str, default: int, env_var: str, minimum: int) -> int:
        """Get an integer setting, falling back to default if invalid."""
        value = self.get(key, default=default, env_var=env_var)
        if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
            logger.warning(f"Ignoring invalid {key}={value!r}, using {default}")
            return default
        return value

    @property
    def default_threshold(self) -> int:
        """Similarity threshold for duplicate discovery (0-64)."""
        return self._get_int('default_threshold', DEFAULT_THRESHOLD, 'IMAGEDUPE_THRESHOLD', 0)

    @property
    def default_workers(self) -> int:
        """Number of parallel workers for fingerprinting."""
        return self._get_int('default_workers', DEFAULT_WORKERS, 'IMAGEDUPE_WORKERS', 1)

    @property
    def db_filename(self) -> str:
        """Database file name used when no --db is given."""
        return self.get('db_filename', default=DB_FILENAME, env_var='IMAGEDUPE_DB_FILENAME')

    @property
    def trash_dir(self) -> Path:
        """Directory discarded images are moved to when no --trash-dir is given."""
        custom = self.get('trash_dir', env_var='IMAGEDUPE_TRASH_DIR')
        if custom:
            return Path(custom).expanduser()
        return self.config_dir / TRASH_DIRNAME


def load_user_config(config_dir: Optional[Path] = None) -> UserConfig:
    """Build a UserConfig for this run."""
    return UserConfig(config_dir)
