"""
Utility modules for algokit.

This package provides structured logging with performance entries, used by
the command line interface.
"""

from .logging import StructuredLogger, ContextLogger, timed

__all__ = [
    'StructuredLogger',
    'ContextLogger',
    'timed'
]
