"""
Performance measurement package.

This package provides the process-wide operation metrics tracker, the
empirical complexity analyzer and the memory and statistics helpers they
share.
"""

from .complexity import ComplexityAnalyzer, growth_exponent
from .memory import TracemallocProbe, collect_garbage, get_memory_probe, rss_bytes
from .tracker import (
    MeasurementContext,
    OperationMetrics,
    OperationMetricsTracker,
    get_tracker,
    performance_context,
    reset_tracker,
    timing,
)

__all__ = [
    'ComplexityAnalyzer',
    'growth_exponent',
    'TracemallocProbe',
    'collect_garbage',
    'get_memory_probe',
    'rss_bytes',
    'MeasurementContext',
    'OperationMetrics',
    'OperationMetricsTracker',
    'get_tracker',
    'performance_context',
    'reset_tracker',
    'timing',
]
