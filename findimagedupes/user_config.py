"""
User configuration management for findimagedupes.

Supports configuration from multiple sources (in order of priority):
1. Runtime parameters (highest priority)
2. Environment variables
3. User config file (~/.findimagedupes/config.json)
4. Default values from config.py (lowest priority)

Configuration file location: ~/.findimagedupes/config.json

Example config.json:
{
    "default_threshold": 10.0,
    "default_workers": 4,
    "default_extensions": "jpg,jpeg,gif,png",
    "max_image_pixels": 500000000,
    "union_find_auto_threshold": 2000
}

Only the CLI and web layers read this; the scanner receives an explicit
ScanConfig built from it.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional
import logging

from .config import (
    CONFIG_DIR,
    DEFAULT_EXTENSIONS,
    DEFAULT_THRESHOLD_PERCENT,
    DEFAULT_WORKERS,
    MAX_IMAGE_PIXELS,
    UNION_FIND_AUTO_THRESHOLD,
)
from .models import ScanConfig

logger = logging.getLogger(__name__)


class UserConfig:
    """
    Manages user configuration from file and environment variables.

    Attributes are lazy-loaded and cached for performance.
    """

    _instance: Optional['UserConfig'] = None
    _config_data: Optional[dict] = None

    def __new__(cls):
        """Singleton pattern to ensure one config instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        # Check environment variable first
        env_dir = os.getenv('FINDIMAGEDUPES_CONFIG_DIR')
        if env_dir:
            return Path(env_dir)

        return Path(CONFIG_DIR)

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
                logger.debug(f"Loaded configuration from {self.config_file_path}")
                return data
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {self.config_file_path}: {e}")
            return {}

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
                # Try to parse as JSON for complex types
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

    @property
    def default_threshold(self) -> float:
        """Match threshold as a percentage of the fingerprint bits (0-100)."""
        return float(self.get(
            'default_threshold',
            default=DEFAULT_THRESHOLD_PERCENT,
            env_var='FINDIMAGEDUPES_THRESHOLD'
        ))

    @property
    def default_workers(self) -> int:
        """Number of parallel workers for fingerprinting."""
        return int(self.get(
            'default_workers',
            default=DEFAULT_WORKERS,
            env_var='FINDIMAGEDUPES_WORKERS'
        ))

    @property
    def default_extensions(self) -> str:
        """Comma-separated extension allow-list."""
        value = self.get(
            'default_extensions',
            default=','.join(DEFAULT_EXTENSIONS),
            env_var='FINDIMAGEDUPES_EXTENSIONS'
        )
        if isinstance(value, (list, tuple)):
            return ','.join(value)
        return str(value)

    @property
    def max_image_pixels(self) -> int:
        """Maximum image size in pixels (decompression bomb limit, 0 disables it)."""
        return int(self.get(
            'max_image_pixels',
            default=MAX_IMAGE_PIXELS,
            env_var='FINDIMAGEDUPES_MAX_PIXELS'
        ))

    @property
    def union_find_auto_threshold(self) -> int:
        """Switch clustering to Union-Find when collection size >= this value."""
        return int(self.get(
            'union_find_auto_threshold',
            default=UNION_FIND_AUTO_THRESHOLD,
            env_var='FINDIMAGEDUPES_UNION_FIND_THRESHOLD'
        ))

    def scan_config(self, **overrides) -> ScanConfig:
        """
        Build a ScanConfig from the configured defaults.

        Keyword arguments that are not None override the configured values.
        An 'extensions' override may be a comma-separated string or a list.
        """
        from .scanner import parse_extensions

        values = {
            'threshold_percent': self.default_threshold,
            'extensions': self.default_extensions,
            'workers': self.default_workers,
            'union_find_auto_threshold': self.union_find_auto_threshold,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        values['extensions'] = tuple(sorted(
            ext.lstrip('.') for ext in parse_extensions(values['extensions'])
        ))
        return ScanConfig(**values)

    def create_example_config(self):
        """Create an example configuration file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        example_config = {
            "_comment": "findimagedupes user configuration",
            "default_threshold": DEFAULT_THRESHOLD_PERCENT,
            "default_workers": DEFAULT_WORKERS,
            "default_extensions": ','.join(DEFAULT_EXTENSIONS),
            "max_image_pixels": MAX_IMAGE_PIXELS,
            "union_find_auto_threshold": UNION_FIND_AUTO_THRESHOLD,
        }

        try:
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(example_config, f, indent=2)
            logger.info(f"Created example config file at {self.config_file_path}")
            return True
        except OSError as e:
            logger.error(f"Failed to create example config: {e}")
            return False


# Global instance
_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Get the global UserConfig instance."""
    return _user_config
