"""
Type definitions for algokit.

This package contains the dataclasses and enums shared by the containers,
the algorithms and the performance tooling.
"""

from .models import (
    T,
    Comparator,
    LogLevel,
    ComplexityClass,
    ComplexityType,
    SortMetric,
    TrendDirection,
    MemoryBackend,
    ComplexityConfig,
    MeasurementPoint,
    ComplexityResult,
    CombinedComplexityResult,
    PerformanceTrend,
    PerformanceComparison,
    SystemPerformance,
    SearchMetrics,
    AlgorithmProfile,
    LogEntry,
    AlgoKitSettings,
)

__all__ = [
    'T',
    'Comparator',
    'LogLevel',
    'ComplexityClass',
    'ComplexityType',
    'SortMetric',
    'TrendDirection',
    'MemoryBackend',
    'ComplexityConfig',
    'MeasurementPoint',
    'ComplexityResult',
    'CombinedComplexityResult',
    'PerformanceTrend',
    'PerformanceComparison',
    'SystemPerformance',
    'SearchMetrics',
    'AlgorithmProfile',
    'LogEntry',
    'AlgoKitSettings',
]
