"""
Structured logging for algokit.

This module provides JSON-structured logging with configurable levels,
contextual information and performance timing.
"""

from .structured_logger import StructuredLogger, ContextLogger, timed

__all__ = [
    'StructuredLogger',
    'ContextLogger',
    'timed'
]
