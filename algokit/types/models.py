"""
Data models and type definitions for algokit.

This module defines the records shared by the containers, the search/sort
library, the metrics tracker and the complexity analyzer, with type hints
for better type safety and code clarity.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

T = TypeVar('T')

# Returns negative, zero or positive as the first argument sorts before, with or after the second
Comparator = Callable[[Any, Any], int]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class LogLevel(Enum):
    """Logging levels for structured logging."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ComplexityClass(Enum):
    """Asymptotic growth classes recognised by the complexity analyzer."""
    CONSTANT = ("O(1)", "Constant time/space")
    LOGARITHMIC = ("O(log n)", "Logarithmic growth")
    LINEAR = ("O(n)", "Linear growth")
    LINEARITHMIC = ("O(n log n)", "Linearithmic growth")
    QUADRATIC = ("O(n²)", "Quadratic growth")
    CUBIC = ("O(n³)", "Cubic growth")
    EXPONENTIAL = ("O(2^n)", "Exponential growth")
    UNKNOWN = ("O(?)", "Unknown complexity pattern")

    def __init__(self, notation: str, description: str):
        self.notation = notation
        self.description = description

    def __str__(self) -> str:
        return self.notation


class ComplexityType(Enum):
    """Which metric of a measurement point is being analysed."""
    TIME = "time"
    SPACE = "space"


class SortMetric(Enum):
    """Ranking criteria for the top performers query."""
    AVERAGE_TIME = "average_time"
    TOTAL_TIME = "total_time"
    OPERATION_COUNT = "operation_count"
    MEMORY_USAGE = "memory_usage"


class TrendDirection(Enum):
    """Direction of an operation's execution time over its history."""
    IMPROVING = "improving"
    STABLE = "stable"
    DEGRADING = "degrading"


class MemoryBackend(Enum):
    """Sources used to sample memory during analysis."""
    RSS = "rss"
    TRACEMALLOC = "tracemalloc"


# Complexity analysis data models
@dataclass
class ComplexityConfig:
    """
    Sampling configuration for the complexity analyzer.

    Input sizes grow geometrically from ``min_size`` to ``max_size`` so the
    number of measurement points stays logarithmic in the covered range.
    """
    min_size: int = 100
    max_size: int = 10000
    step_multiplier: int = 2
    iterations: int = 5
    warmup_runs: int = 3
    collect_garbage: bool = True
    min_sample_ns: int = 0

    def validate(self) -> None:
        """
        Validate sampling parameters.

        Raises:
            ValueError: If any parameter has the wrong type or is out of range
        """
        if not _is_int(self.min_size) or self.min_size <= 0:
            raise ValueError(f"min_size must be a positive integer, got {self.min_size!r}")
        if not _is_int(self.max_size) or self.max_size < self.min_size:
            raise ValueError(f"max_size must be an integer >= min_size, got {self.max_size!r}")
        if not _is_number(self.step_multiplier) or self.step_multiplier <= 1:
            raise ValueError(f"step_multiplier must be a number greater than 1, got {self.step_multiplier!r}")
        if not _is_int(self.iterations) or self.iterations < 1:
            raise ValueError(f"iterations must be at least 1, got {self.iterations!r}")
        if not _is_int(self.warmup_runs) or self.warmup_runs < 0:
            raise ValueError(f"warmup_runs cannot be negative, got {self.warmup_runs!r}")
        if not _is_int(self.min_sample_ns) or self.min_sample_ns < 0:
            raise ValueError(f"min_sample_ns cannot be negative, got {self.min_sample_ns!r}")

    def input_sizes(self) -> List[int]:
        """Geometric sequence of input sizes covered by this configuration."""
        sizes = []
        size = self.min_size
        while size <= self.max_size:
            sizes.append(size)
            # Fractional multipliers must still make progress
            size = max(size + 1, int(size * self.step_multiplier))
        return sizes


@dataclass(frozen=True)
class MeasurementPoint:
    """
    One empirical observation for a given input size.

    ``average_time`` and ``average_memory`` hold the median of the recorded
    samples. Times are in nanoseconds, memory in bytes.
    """
    input_size: int
    average_time: float
    average_memory: float
    standard_deviation: float
    raw_time_samples: Tuple[int, ...] = ()
    raw_memory_samples: Tuple[int, ...] = ()

    def value(self, complexity_type: 'ComplexityType') -> float:
        """Metric of this point that the given analysis type looks at."""
        if complexity_type == ComplexityType.TIME:
            return self.average_time
        return self.average_memory

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        data = asdict(self)
        data['raw_time_samples'] = list(self.raw_time_samples)
        data['raw_memory_samples'] = list(self.raw_memory_samples)
        return data


@dataclass(frozen=True)
class ComplexityResult:
    """Immutable summary of one complexity analysis pass."""
    complexity_class: ComplexityClass
    growth_rate: float
    r_squared: float
    measurement_points: Tuple[MeasurementPoint, ...]
    report: str
    complexity_type: ComplexityType = ComplexityType.TIME

    def __str__(self) -> str:
        return (
            f"Complexity: {self.complexity_class.notation}, "
            f"Growth Rate: {self.growth_rate:.2f}, R²: {self.r_squared:.3f}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            'complexity_type': self.complexity_type.value,
            'complexity_class': self.complexity_class.name,
            'notation': self.complexity_class.notation,
            'growth_rate': self.growth_rate,
            'r_squared': self.r_squared,
            'measurement_points': [p.to_dict() for p in self.measurement_points],
            'report': self.report,
        }


@dataclass(frozen=True)
class CombinedComplexityResult:
    """Paired time and space analysis of the same algorithm."""
    time_complexity: ComplexityResult
    space_complexity: ComplexityResult

    def __str__(self) -> str:
        return f"Time: {self.time_complexity}, Space: {self.space_complexity}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            'time': self.time_complexity.to_dict(),
            'space': self.space_complexity.to_dict(),
        }


# Metrics tracker data models
@dataclass
class PerformanceTrend:
    """Trend analysis over an operation's recent execution times."""
    operation_name: str
    execution_times: List[int]
    average_time: float
    standard_deviation: float
    trend: TrendDirection


@dataclass
class PerformanceComparison:
    """Side by side comparison of two tracked operations."""
    operation1: str
    operation2: str
    time_ratio: float
    memory_ratio: float

    @property
    def faster_operation(self) -> str:
        return self.operation1 if self.time_ratio < 1.0 else self.operation2

    @property
    def more_memory_efficient_operation(self) -> str:
        return self.operation1 if self.memory_ratio < 1.0 else self.operation2


@dataclass
class SystemPerformance:
    """Process level memory figures plus tracker totals."""
    process_memory_bytes: int
    system_memory_total: int
    system_memory_available: int
    system_memory_percent: float
    total_operations: int
    tracked_operations: int


# Search data models
@dataclass
class SearchMetrics:
    """Cost of a single instrumented linear search."""
    comparisons: int
    execution_time_ns: int
    found: bool
    result_index: Optional[int]


@dataclass(frozen=True)
class AlgorithmProfile:
    """Documented complexity characteristics of a library algorithm."""
    name: str
    category: str
    time_complexity: str
    space_complexity: str
    best_case: str
    average_case: str
    worst_case: str
    stable: Optional[bool] = None
    in_place: Optional[bool] = None
    prerequisite: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, dropping fields that do not apply."""
        return {k: v for k, v in asdict(self).items() if v is not None}


# Logging data models
@dataclass
class LogEntry:
    """Structured log entry."""
    timestamp: datetime
    level: LogLevel
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    operation: Optional[str] = None
    duration_ms: Optional[float] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON logging."""
        data = {
            'timestamp': self.timestamp.isoformat(),
            'level': self.level.value,
            'message': self.message,
            'context': self.context
        }

        if self.operation:
            data['operation'] = self.operation
        if self.duration_ms is not None:
            data['duration_ms'] = self.duration_ms
        if self.error:
            data['error'] = self.error

        return data


# Configuration data models
@dataclass
class AlgoKitSettings:
    """
    Type-safe settings loaded from the environment.

    Every field has a default so the library works without any .env file;
    the analyzer fields seed :class:`ComplexityConfig`.
    """
    min_size: int = 100
    max_size: int = 10000
    step_multiplier: int = 2
    iterations: int = 5
    warmup_runs: int = 3
    memory_backend: str = MemoryBackend.RSS.value
    log_level: str = "INFO"
    slow_operation_ms: float = 1000.0
    history_size: int = 100
    log_dir: Optional[str] = None

    def validate(self) -> None:
        """
        Validate settings values.

        Raises:
            ValueError: If any value is invalid, listing every problem found
        """
        errors = []

        try:
            self.to_complexity_config().validate()
        except ValueError as e:
            errors.append(str(e))

        valid_backends = [b.value for b in MemoryBackend]
        if self.memory_backend not in valid_backends:
            errors.append(
                f"memory_backend must be one of {', '.join(valid_backends)}, got {self.memory_backend!r}"
            )

        valid_levels = [level.value for level in LogLevel]
        if self.log_level.upper() not in valid_levels:
            errors.append(f"log_level must be one of {', '.join(valid_levels)}, got {self.log_level!r}")

        if self.slow_operation_ms <= 0:
            errors.append(f"slow_operation_ms must be positive, got {self.slow_operation_ms}")

        if self.history_size <= 0:
            errors.append(f"history_size must be positive, got {self.history_size}")

        if errors:
            raise ValueError("; ".join(errors))

    def to_complexity_config(self) -> ComplexityConfig:
        """Build the analyzer sampling configuration from these settings."""
        return ComplexityConfig(
            min_size=self.min_size,
            max_size=self.max_size,
            step_multiplier=self.step_multiplier,
            iterations=self.iterations,
            warmup_runs=self.warmup_runs,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return asdict(self)
