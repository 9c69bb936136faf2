#!/usr/bin/env python3
"""
Configuration manager for the archaea dashboard
Handles loading and accessing configuration from various sources.
"""
import os
import copy
import json
import logging
from typing import Dict, Any, Optional, List

import yaml

from archaea.exceptions import ConfigurationError
from .schema import ConfigSchema
from .defaults import DEFAULT_CONFIG


class ConfigManager:
    """Configuration manager for the archaea dashboard"""

    ENV_PREFIX = "ARCHAEA_"

    # Bare variables honoured for the database connection
    LEGACY_DB_ENV = {
        'DB_HOST': 'host',
        'DB_PORT': 'port',
        'DB_NAME': 'database',
        'DB_USER': 'user',
        'DB_PASSWORD': 'password',
    }

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager

        Args:
            config_path: Path to configuration file (optional)
        """
        self.logger = logging.getLogger("archaea.config")
        self.config_path = config_path
        self.config: Dict[str, Any] = {}

        self._load_defaults()

        if config_path:
            if not os.path.exists(config_path):
                raise ConfigurationError(f"Configuration file not found: {config_path}",
                                         {"path": config_path})
            self._load_from_file(config_path)

            local_config_path = self._get_local_config_path(config_path)
            if os.path.exists(local_config_path):
                self._load_from_file(local_config_path)
                self.logger.info(f"Merged local configuration from {local_config_path}")

        self._load_from_env()
        self.errors = self._validate_config()

    def _get_local_config_path(self, config_path: str) -> str:
        """Get path to local configuration file: <filename>.local.<extension>"""
        config_dir = os.path.dirname(config_path)
        name, ext = os.path.splitext(os.path.basename(config_path))
        local_path = os.path.join(config_dir, f"{name}.local{ext}")
        self.logger.debug(f"Looking for local config at: {local_path}")
        return local_path

    def _load_defaults(self) -> None:
        """Load default configuration values"""
        self.config = copy.deepcopy(DEFAULT_CONFIG)
        self.logger.debug("Loaded default configuration")

    def _load_from_file(self, config_path: str) -> None:
        """Load configuration from YAML or JSON file

        Args:
            config_path: Path to configuration file

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        try:
            with open(config_path, 'r') as f:
                if config_path.endswith('.json'):
                    file_config = json.load(f)
                else:
                    file_config = yaml.safe_load(f) or {}
        except (OSError, ValueError, yaml.YAMLError) as e:
            error_msg = f"Error loading config file {config_path}: {str(e)}"
            self.logger.error(error_msg)
            raise ConfigurationError(error_msg, {"path": config_path}) from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Configuration file {config_path} must contain a mapping",
                                     {"path": config_path})

        self._deep_update(self.config, file_config)
        self.logger.info(f"Loaded configuration from {config_path}")

    def _load_from_env(self) -> None:
        """Override config with environment variables

        Environment variables should be prefixed with ARCHAEA_
        and use double underscore __ for nesting.
        Example: ARCHAEA_DATABASE__HOST for database.host
        """
        database = self.config.setdefault('database', {})
        for env_key, field in self.LEGACY_DB_ENV.items():
            value = os.environ.get(env_key)
            if value:
                database[field] = value if field == 'password' else self._convert_value(value)

        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue
            config_key = key[len(self.ENV_PREFIX):].lower()
            parts = config_key.split("__")
            # Passwords stay strings even when they look numeric
            if parts[-1] == 'password':
                self._set_nested_value(self.config, parts, value, convert=False)
            else:
                self._set_nested_value(self.config, parts, value)

        self.logger.debug("Applied environment variable overrides")

    def _set_nested_value(self, config: Dict[str, Any],
                          key_parts: List[str], value: str, convert: bool = True) -> None:
        """Set a nested value in the configuration dictionary"""
        current = config
        for part in key_parts[:-1]:
            if part not in current or not isinstance(current[part], dict):
                current[part] = {}
            current = current[part]

        current[key_parts[-1]] = self._convert_value(value) if convert else value

    def _convert_value(self, value: str) -> Any:
        """Convert string environment variable to appropriate type"""
        if value.lower() in ('true', 'yes'):
            return True
        if value.lower() in ('false', 'no'):
            return False
        try:
            return int(value)
        except ValueError:
            try:
                return float(value)
            except ValueError:
                return value

    def _deep_update(self, target: Dict[str, Any], source: Dict[str, Any]) -> None:
        """Recursively update target dictionary with values from source"""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._deep_update(target[key], value)
            else:
                target[key] = value

    def _validate_config(self) -> List[str]:
        """Validate the configuration against the schema"""
        errors = ConfigSchema.validate(self.config)

        if errors:
            for error in errors:
                self.logger.error(f"Configuration error: {error}")
            self.logger.warning("Using configuration with validation errors")
        else:
            self.logger.debug("Configuration validated successfully")
        return errors

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation

        Args:
            key: Configuration key (can use dot notation for nested values)
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        current: Any = self.config
        for part in key.split('.'):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def get_db_config(self) -> Dict[str, Any]:
        """Get database configuration as a dictionary"""
        return dict(self.config.get('database', {}))

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get a whole configuration section (empty dict if missing)"""
        return dict(self.config.get(section, {}))
