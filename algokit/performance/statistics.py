"""
Numeric helpers for measurement analysis.

Thin wrappers over numpy that return plain floats and define the
degenerate cases (empty input, zero variance) the analyzer relies on.
"""

import math
from typing import List, Sequence, Tuple

import numpy as np


def median(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.median(np.asarray(values, dtype=float)))


def mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))


def sample_std(values: Sequence[float]) -> float:
    """Sample standard deviation (n - 1 denominator); 0.0 below two values."""
    if len(values) < 2:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float), ddof=1))


def population_std(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


def population_variance(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.var(np.asarray(values, dtype=float)))


def growth_ratios(values: Sequence[float]) -> List[float]:
    """
    Ratios between consecutive values.

    A ratio is 0.0 when the earlier value is 0, so a zero reading never
    produces an infinite ratio.
    """
    return [
        values[i] / values[i - 1] if values[i - 1] != 0 else 0.0
        for i in range(1, len(values))
    ]


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient of two equally long series.

    Returns:
        Coefficient in [-1, 1], or 0.0 when either series is constant or
        shorter than two values
    """
    if len(x) != len(y) or len(x) < 2:
        return 0.0

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    dx = xs - xs.mean()
    dy = ys - ys.mean()
    denominator = math.sqrt(float(np.sum(dx * dx)) * float(np.sum(dy * dy)))
    if denominator == 0.0:
        return 0.0
    return float(np.sum(dx * dy)) / denominator


def log_log_slope(sizes: Sequence[float], values: Sequence[float]) -> Tuple[float, float]:
    """
    Least squares slope of log(value) against log(size).

    Non-positive pairs are ignored.

    Returns:
        (slope, r_squared) of the fit, (0.0, 0.0) with fewer than two usable pairs
    """
    valid = [(s, v) for s, v in zip(sizes, values) if s > 0 and v > 0]
    if len(valid) < 2:
        return 0.0, 0.0

    log_sizes = np.log(np.array([s for s, _ in valid], dtype=float))
    log_values = np.log(np.array([v for _, v in valid], dtype=float))
    slope, intercept = np.polyfit(log_sizes, log_values, 1)

    predicted = slope * log_sizes + intercept
    ss_res = float(np.sum((log_values - predicted) ** 2))
    ss_tot = float(np.sum((log_values - np.mean(log_values)) ** 2))
    r_squared = 1 - (ss_res / ss_tot) if ss_tot > 0 else 0.0
    return float(slope), r_squared
