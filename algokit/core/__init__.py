"""
Core module for algokit.

This module contains the shared infrastructure:
- Configuration management system
- Custom exception classes for error categorization
"""

from .config import ConfigManager, get_config_manager, load_settings
from .exceptions import (
    AlgoKitError,
    ConfigurationError,
    InsufficientDataError,
    ValidationError,
    MeasurementError,
)

__all__ = [
    # Configuration
    'ConfigManager',
    'get_config_manager',
    'load_settings',

    # Exception classes
    'AlgoKitError',
    'ConfigurationError',
    'InsufficientDataError',
    'ValidationError',
    'MeasurementError',
]
