"""Configuration loader for the Hytale server bootstrap

Loads configuration from multiple sources with the following priority:
1. Environment variables (highest priority)
2. bootstrap.json file
3. Hardcoded defaults (lowest priority)
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

# Set up logger for config loader
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "bootstrap.json"


class ConfigLoader:
    """Handles loading configuration from various sources"""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize the config loader

        Args:
            config_path: Optional path to the JSON config file.
                        Defaults to $BOOTSTRAP_CONFIG or 'bootstrap.json'.
        """
        if config_path is None:
            config_path = os.getenv("BOOTSTRAP_CONFIG") or DEFAULT_CONFIG_FILE
        self.config_path = Path(config_path)
        self.config_data = self._load_config_file()

    def _load_config_file(self) -> Dict[str, Any]:
        """Load configuration from JSON file if it exists"""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Failed to load {self.config_path}: {e}")
                return {}
            if not isinstance(data, dict):
                logger.warning(f"Ignoring {self.config_path}: expected a JSON object")
                return {}
            return data
        return {}

    def get(self, env_var: str, config_path: str, default: Any) -> Any:
        """Get a configuration value with priority: env > config file > default

        Args:
            env_var: Environment variable name to check
            config_path: Dot-separated path in the config file (e.g., "server.auth_mode")
            default: Default value if not found elsewhere

        Returns:
            The configuration value from the highest priority source
        """
        # 1. Check environment variable
        env_value = os.getenv(env_var)
        if env_value is not None and env_value != "":
            return self._coerce(env_var, env_value, default)

        # 2. Check config file
        if self.config_data:
            value = self._get_nested_value(self.config_data, config_path)
            if value is not None:
                return self._coerce(config_path, value, default)

        # 3. Return default
        return default

    @staticmethod
    def _coerce(name: str, value: Any, default: Any) -> Any:
        """Convert a raw env or config file value to the default's type"""
        if not isinstance(value, str):
            value = str(value)
        # bool must be checked before int (bool is an int subclass)
        if isinstance(default, bool):
            return value.strip().lower() in ('true', '1', 'yes')
        elif isinstance(default, int):
            try:
                return int(value)
            except ValueError:
                logger.warning(f"Ignoring non-integer {name}={value!r}, using {default}")
                return default
        elif isinstance(default, float):
            try:
                return float(value)
            except ValueError:
                logger.warning(f"Ignoring non-numeric {name}={value!r}, using {default}")
                return default
        return value

    def _get_nested_value(self, data: Dict[str, Any], path: str) -> Any:
        """Get a value from nested dictionary using dot notation

        Args:
            data: The dictionary to search
            path: Dot-separated path (e.g., "server.name")

        Returns:
            The value if found, None otherwise
        """
        keys = path.split('.')
        current = data

        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return None

        return current

    def get_all_config(self) -> Dict[str, Any]:
        """Get the entire loaded configuration"""
        return self.config_data.copy()
