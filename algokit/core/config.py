"""
Centralized configuration management.

This module loads algokit settings from ``ALGOKIT_*`` environment variables
and an optional ``config/.env`` file, converts them to their declared types
and validates them, reporting every invalid value in one error.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import dotenv_values

from ..types.models import AlgoKitSettings, ComplexityConfig
from .exceptions import ConfigurationError

logger = logging.getLogger('algokit.config')

ENV_PREFIX = 'ALGOKIT_'


class ConfigManager:
    """
    Configuration manager with type conversion and validation.

    Values come from the process environment first and the .env file
    second, so an exported variable always wins over the file.
    """

    # Environment variables with their default values
    OPTIONAL_VARS = {
        'ALGOKIT_MIN_SIZE': 100,
        'ALGOKIT_MAX_SIZE': 10000,
        'ALGOKIT_STEP_MULTIPLIER': 2,
        'ALGOKIT_ITERATIONS': 5,
        'ALGOKIT_WARMUP_RUNS': 3,
        'ALGOKIT_MEMORY_BACKEND': 'rss',
        'ALGOKIT_LOG_LEVEL': 'INFO',
        'ALGOKIT_SLOW_OPERATION_MS': 1000.0,
        'ALGOKIT_HISTORY_SIZE': 100,
        'ALGOKIT_LOG_DIR': None,
    }

    # Environment variable types for validation
    VAR_TYPES = {
        'ALGOKIT_MIN_SIZE': int,
        'ALGOKIT_MAX_SIZE': int,
        'ALGOKIT_STEP_MULTIPLIER': int,
        'ALGOKIT_ITERATIONS': int,
        'ALGOKIT_WARMUP_RUNS': int,
        'ALGOKIT_MEMORY_BACKEND': str,
        'ALGOKIT_LOG_LEVEL': str,
        'ALGOKIT_SLOW_OPERATION_MS': float,
        'ALGOKIT_HISTORY_SIZE': int,
        'ALGOKIT_LOG_DIR': str,
    }

    def __init__(self, env_file_path: Optional[str] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """
        Initialize the configuration manager.

        Args:
            env_file_path: Optional path to .env file. If not provided,
                          config/.env relative to the project root is used.
            environ: Environment mapping to read (defaults to os.environ)
        """
        self._settings: Optional[AlgoKitSettings] = None
        self._environ = environ if environ is not None else os.environ
        self._env_path = Path(env_file_path) if env_file_path else \
            Path(__file__).parent.parent.parent / 'config' / '.env'
        self._file_values: Dict[str, Optional[str]] = {}
        self._load_environment()

    def _load_environment(self) -> None:
        if self._env_path.exists():
            self._file_values = dotenv_values(dotenv_path=self._env_path)
            logger.debug(f"Loaded {len(self._file_values)} values from {self._env_path}")
        else:
            self._file_values = {}
            logger.debug(f"Environment file not found at {self._env_path}, using defaults")

    def _get_raw(self, var: str) -> Optional[str]:
        value = self._environ.get(var)
        if value is None:
            value = self._file_values.get(var)
        if value is not None and value.strip() == '':
            return None
        return value

    def load_settings(self) -> AlgoKitSettings:
        """
        Load and validate settings.

        Returns:
            AlgoKitSettings: Validated settings object

        Raises:
            ConfigurationError: If any value cannot be converted or fails validation
        """
        if self._settings is not None:
            return self._settings

        settings = AlgoKitSettings(**self._extract_config_values())

        try:
            settings.validate()
        except ValueError as e:
            raise ConfigurationError(
                "Invalid algokit configuration",
                validation_errors=str(e).split('; '),
                env_file_path=str(self._env_path)
            ) from e

        settings.log_level = settings.log_level.upper()
        self._settings = settings
        return settings

    def _extract_config_values(self) -> Dict[str, Any]:
        """
        Convert environment values to their declared types.

        Raises:
            ConfigurationError: Listing every value that failed conversion
        """
        config_data = {}
        invalid_values = {}

        for env_var, default_value in self.OPTIONAL_VARS.items():
            field_name = env_var[len(ENV_PREFIX):].lower()
            env_value = self._get_raw(env_var)

            if env_value is None:
                config_data[field_name] = default_value
                continue

            try:
                var_type = self.VAR_TYPES.get(env_var)
                if var_type == int:
                    config_data[field_name] = int(env_value)
                elif var_type == float:
                    config_data[field_name] = float(env_value)
                else:
                    config_data[field_name] = env_value.strip()
            except (ValueError, TypeError):
                invalid_values[env_var] = env_value

        if invalid_values:
            raise ConfigurationError(
                f"Invalid values for environment variables: {', '.join(invalid_values)}",
                invalid_values=invalid_values,
                env_file_path=str(self._env_path)
            )

        return config_data

    def get_settings(self) -> AlgoKitSettings:
        """
        Get the current settings, loading them on first use.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        return self.load_settings()

    def reload_settings(self) -> AlgoKitSettings:
        """Re-read the .env file and environment and validate again."""
        self._load_environment()
        self._settings = None
        return self.load_settings()

    def to_complexity_config(self) -> ComplexityConfig:
        return self.get_settings().to_complexity_config()

    def get_config_summary(self) -> Dict[str, Any]:
        """
        Get a summary of the current configuration.

        Returns:
            Dict with load status, the .env path and every setting value
        """
        if self._settings is None:
            return {'status': 'not_loaded', 'env_file': str(self._env_path)}

        return {
            'status': 'loaded',
            'env_file': str(self._env_path),
            'env_file_found': self._env_path.exists(),
            'values': self._settings.to_dict()
        }

    @staticmethod
    def create_example_env_file(file_path: str = "config/.env.example") -> None:
        """
        Create an example .env file listing every supported variable.

        Args:
            file_path: Path where to create the example file
        """
        env_path = Path(file_path)
        env_path.parent.mkdir(parents=True, exist_ok=True)

        content = [
            "# algokit Configuration",
            "# Copy this file to .env and uncomment the values you want to change",
            "",
            "# Complexity analysis sampling",
            "# ALGOKIT_MIN_SIZE=100",
            "# ALGOKIT_MAX_SIZE=10000",
            "# ALGOKIT_STEP_MULTIPLIER=2",
            "# ALGOKIT_ITERATIONS=5",
            "# ALGOKIT_WARMUP_RUNS=3",
            "# ALGOKIT_MEMORY_BACKEND=rss  # Options: rss, tracemalloc",
            "",
            "# Operation metrics tracker",
            "# ALGOKIT_SLOW_OPERATION_MS=1000.0",
            "# ALGOKIT_HISTORY_SIZE=100",
            "",
            "# Logging Configuration",
            "# ALGOKIT_LOG_LEVEL=INFO  # Options: DEBUG, INFO, WARNING, ERROR, CRITICAL",
            "# ALGOKIT_LOG_DIR=logs",
            "",
        ]

        with open(env_path, 'w') as f:
            f.write('\n'.join(content))


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_settings() -> AlgoKitSettings:
    """Load settings using the global configuration manager."""
    return get_config_manager().load_settings()
