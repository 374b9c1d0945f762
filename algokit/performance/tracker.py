"""
Operation Metrics Tracker.

This module aggregates timing and memory samples per named operation:
- Measurement contexts that capture start/end time and memory
- Thread-safe running aggregates (count, totals, min/max)
- Bounded per-operation execution time history and trend analysis
- Top performer ranking and operation comparison
- Slow operation warnings on the ``algokit.performance`` logger
- A ``timing`` decorator and ``performance_context`` context manager

One tracker is shared per process through ``get_tracker()``. Components
that need isolation (tests, benchmarks) can construct their own tracker and
pass it explicitly to the decorator and context manager.
"""

import functools
import inspect
import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar, cast

import psutil

from ..containers.ring_buffer import RingBuffer
from ..core.exceptions import ValidationError
from ..types.models import (
    PerformanceComparison,
    PerformanceTrend,
    SortMetric,
    SystemPerformance,
    TrendDirection,
)
from .memory import MemoryProbe, rss_bytes
from .statistics import mean, population_std

# Performance monitoring logger
perf_logger = logging.getLogger('algokit.performance')

F = TypeVar('F', bound=Callable[..., Any])

TREND_WINDOW = 10
TREND_THRESHOLD = 0.1


class OperationMetrics:
    """
    Running aggregate of the measurements recorded for one operation.

    Times are nanoseconds and memory deltas are bytes; memory deltas can
    be negative when a collection ran during the measured block.

    Attributes:
        name (str): Operation name
        total_time (int): Sum of execution times
        total_memory (int): Sum of memory deltas
        count (int): Number of measurements folded in
    """

    def __init__(self, name: str):
        self.name = name
        self.total_time = 0
        self.total_memory = 0
        self.count = 0
        self.min_time: Optional[int] = None
        self.max_time: Optional[int] = None
        self.min_memory: Optional[int] = None
        self.max_memory: Optional[int] = None
        self._lock = threading.Lock()

    def add_measurement(self, time_ns: int, memory_bytes: int) -> None:
        """
        Fold one measurement into the aggregate.

        Safe to call from several threads at once.
        """
        with self._lock:
            self.total_time += time_ns
            self.total_memory += memory_bytes
            self.count += 1
            self.min_time = time_ns if self.min_time is None else min(self.min_time, time_ns)
            self.max_time = time_ns if self.max_time is None else max(self.max_time, time_ns)
            self.min_memory = memory_bytes if self.min_memory is None else min(self.min_memory, memory_bytes)
            self.max_memory = memory_bytes if self.max_memory is None else max(self.max_memory, memory_bytes)

    @property
    def average_time(self) -> float:
        with self._lock:
            return self.total_time / self.count if self.count else 0.0

    @property
    def average_memory(self) -> float:
        with self._lock:
            return self.total_memory / self.count if self.count else 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Consistent snapshot of the aggregate."""
        with self._lock:
            count = self.count
            return {
                'name': self.name,
                'count': count,
                'total_time_ns': self.total_time,
                'average_time_ns': self.total_time / count if count else 0.0,
                'min_time_ns': self.min_time or 0,
                'max_time_ns': self.max_time or 0,
                'total_memory_bytes': self.total_memory,
                'average_memory_bytes': self.total_memory / count if count else 0.0,
                'min_memory_bytes': self.min_memory or 0,
                'max_memory_bytes': self.max_memory or 0,
            }

    def __repr__(self) -> str:
        return (
            f"OperationMetrics(name={self.name!r}, count={self.count}, "
            f"average_time={self.average_time:.0f}ns)"
        )


class MeasurementContext:
    """
    An open measurement of one operation.

    Created by :meth:`OperationMetricsTracker.start_measurement`. Calling
    ``complete()`` records the elapsed time and memory delta; later calls
    do nothing. Used as a context manager it completes on exit, including
    exits caused by an exception.
    """

    def __init__(self, tracker: 'OperationMetricsTracker', operation_name: str):
        self.operation_name = operation_name
        self._tracker = tracker
        self._completed = False
        self.execution_time: Optional[int] = None
        self.memory_used: Optional[int] = None
        self.start_memory = tracker.memory_probe()
        self.start_time = tracker.timer()

    @property
    def completed(self) -> bool:
        return self._completed

    def complete(self) -> None:
        if self._completed:
            return
        end_time = self._tracker.timer()
        end_memory = self._tracker.memory_probe()
        self._completed = True

        self.execution_time = end_time - self.start_time
        self.memory_used = end_memory - self.start_memory
        self._tracker.record(self.operation_name, self.execution_time, self.memory_used)

    def __enter__(self) -> 'MeasurementContext':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.complete()


class OperationMetricsTracker:
    """
    Thread-safe registry of per-operation aggregates.

    The registry lock guards creation and removal of aggregates, the
    execution time history and folding samples into an aggregate; each
    aggregate also guards its own counters for readers.

    Attributes:
        memory_probe: Callable returning the current memory reading in bytes
        timer: Callable returning a monotonic nanosecond timestamp
        history_size (int): Execution times kept per operation for trends
        slow_operation_ms (float): Threshold for slow operation warnings
    """

    def __init__(self,
                 memory_probe: MemoryProbe = rss_bytes,
                 history_size: int = 100,
                 slow_operation_ms: float = 1000.0,
                 timer: Callable[[], int] = time.perf_counter_ns):
        if history_size <= 0:
            raise ValidationError("history_size must be positive", field_name='history_size', value=history_size)

        self.memory_probe = memory_probe
        self.timer = timer
        self.history_size = history_size
        self.slow_operation_ms = slow_operation_ms
        self._metrics: Dict[str, OperationMetrics] = {}
        self._history: Dict[str, RingBuffer[int]] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> 'OperationMetricsTracker':
        """Build a tracker from :class:`AlgoKitSettings`."""
        return cls(history_size=settings.history_size, slow_operation_ms=settings.slow_operation_ms)

    def start_measurement(self, operation_name: str) -> MeasurementContext:
        """
        Open a measurement for an operation.

        Args:
            operation_name: Aggregate the measurement is folded into

        Returns:
            MeasurementContext to complete when the operation finishes
        """
        self._check_name(operation_name)
        return MeasurementContext(self, operation_name)

    def record(self, operation_name: str, time_ns: int, memory_bytes: int) -> None:
        """
        Fold an externally measured sample into an operation's aggregate.

        Args:
            operation_name: Aggregate name, created on first use
            time_ns: Execution time in nanoseconds
            memory_bytes: Memory delta in bytes
        """
        self._check_name(operation_name)

        with self._lock:
            metrics = self._metrics.get(operation_name)
            if metrics is None:
                metrics = OperationMetrics(operation_name)
                self._metrics[operation_name] = metrics
                self._history[operation_name] = RingBuffer(self.history_size)
            self._history[operation_name].push_evicting(time_ns)
            # Clears are ordered before or after the whole record
            metrics.add_measurement(time_ns, memory_bytes)

        duration_ms = time_ns / 1_000_000
        if duration_ms > self.slow_operation_ms:
            perf_logger.warning(
                f"Slow operation detected: {operation_name} took {duration_ms:.2f}ms"
            )

    def get_operation_metrics(self, operation_name: str) -> Optional[OperationMetrics]:
        with self._lock:
            return self._metrics.get(operation_name)

    def get_all_metrics(self) -> Dict[str, OperationMetrics]:
        """Copy of the registry keyed by operation name."""
        with self._lock:
            return dict(self._metrics)

    @property
    def total_operations(self) -> int:
        return sum(metrics.count for metrics in self.get_all_metrics().values())

    def get_top_performers(self, limit: int = 10,
                           metric: SortMetric = SortMetric.AVERAGE_TIME) -> List[OperationMetrics]:
        """
        Rank operations by a metric.

        Average time, total time and average memory rank ascending;
        operation count ranks descending. Ties keep name order.

        Args:
            limit: Maximum number of operations returned
            metric: Ranking criterion

        Returns:
            Up to ``limit`` aggregates, best first

        Raises:
            ValidationError: If limit is negative
        """
        if limit < 0:
            raise ValidationError("limit cannot be negative", field_name='limit', value=limit)

        sort_keys: Dict[SortMetric, Callable[[OperationMetrics], float]] = {
            SortMetric.AVERAGE_TIME: lambda m: m.average_time,
            SortMetric.TOTAL_TIME: lambda m: m.total_time,
            SortMetric.OPERATION_COUNT: lambda m: -m.count,
            SortMetric.MEMORY_USAGE: lambda m: m.average_memory,
        }
        key = sort_keys[SortMetric(metric)]

        ranked = sorted(self.get_all_metrics().values(), key=lambda m: m.name)
        ranked.sort(key=key)
        return ranked[:limit]

    def get_performance_trend(self, operation_name: str) -> Optional[PerformanceTrend]:
        """
        Analyse the recent execution times of an operation.

        The mean of the first and last windows (up to 10 samples, at most
        half the history each) are compared; a difference above 10% of the
        overall average marks the operation as degrading or improving.

        Returns:
            PerformanceTrend, or None if the operation has no history
        """
        with self._lock:
            history = self._history.get(operation_name)
            times = history.to_list() if history is not None else []

        if not times:
            return None

        average = mean(times)
        return PerformanceTrend(
            operation_name=operation_name,
            execution_times=times,
            average_time=average,
            standard_deviation=population_std(times),
            trend=self._calculate_trend(times, average),
        )

    def compare_operations(self, operation1: str, operation2: str) -> Optional[PerformanceComparison]:
        """
        Compare the averages of two operations.

        Ratios are operation1 over operation2; below 1.0 means operation1
        is cheaper.

        Returns:
            PerformanceComparison, or None if either operation is unknown
        """
        with self._lock:
            metrics1 = self._metrics.get(operation1)
            metrics2 = self._metrics.get(operation2)

        if metrics1 is None or metrics2 is None:
            return None

        return PerformanceComparison(
            operation1=operation1,
            operation2=operation2,
            time_ratio=_ratio(metrics1.average_time, metrics2.average_time),
            memory_ratio=_ratio(metrics1.average_memory, metrics2.average_memory),
        )

    def get_system_performance(self) -> SystemPerformance:
        """Process and system memory figures alongside tracker totals."""
        virtual_memory = psutil.virtual_memory()
        all_metrics = self.get_all_metrics()
        return SystemPerformance(
            process_memory_bytes=rss_bytes(),
            system_memory_total=virtual_memory.total,
            system_memory_available=virtual_memory.available,
            system_memory_percent=virtual_memory.percent,
            total_operations=sum(m.count for m in all_metrics.values()),
            tracked_operations=len(all_metrics),
        )

    def generate_report(self, limit: int = 5) -> str:
        """
        Get formatted performance report.

        Returns:
            str: System overview followed by the fastest operations
        """
        system = self.get_system_performance()
        lines = [
            "=== Performance Analysis Report ===",
            "",
            "System Performance:",
            f"  Total Operations: {system.total_operations}",
            f"  Tracked Operations: {system.tracked_operations}",
            f"  Process Memory: {system.process_memory_bytes / (1024 * 1024):.2f} MB",
            f"  System Memory: {system.system_memory_percent:.1f}% used "
            f"of {system.system_memory_total / (1024 * 1024):.0f} MB",
            "",
            "Top Performers (by average execution time):",
        ]

        top_performers = self.get_top_performers(limit, SortMetric.AVERAGE_TIME)
        for rank, metrics in enumerate(top_performers, 1):
            lines.append(
                f"  {rank}. {metrics.name}: {metrics.average_time / 1_000_000:.2f} ms avg "
                f"({metrics.total_time / 1_000_000:.2f} ms total, {metrics.count} ops)"
            )
        if not top_performers:
            lines.append("  No operations recorded")

        return "\n".join(lines)

    def clear_metrics(self) -> None:
        with self._lock:
            self._metrics.clear()
            self._history.clear()

    def clear_operation_metrics(self, operation_name: str) -> bool:
        """
        Drop the aggregate and history of one operation.

        Returns:
            True if the operation was tracked
        """
        with self._lock:
            self._history.pop(operation_name, None)
            return self._metrics.pop(operation_name, None) is not None

    @staticmethod
    def _calculate_trend(times: List[int], average: float) -> TrendDirection:
        size = len(times)
        if size < 2:
            return TrendDirection.STABLE

        window = min(TREND_WINDOW, size // 2)
        first_window = mean(times[:window])
        last_window = mean(times[size - window:])
        threshold = average * TREND_THRESHOLD

        if last_window > first_window + threshold:
            return TrendDirection.DEGRADING
        if last_window < first_window - threshold:
            return TrendDirection.IMPROVING
        return TrendDirection.STABLE

    @staticmethod
    def _check_name(operation_name: str) -> None:
        if not operation_name or not isinstance(operation_name, str):
            raise ValidationError(
                "Operation name must be a non-empty string",
                field_name='operation_name',
                value=operation_name
            )


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 1.0 if numerator == 0 else float('inf')
    return numerator / denominator


# Global tracker instance
_tracker: Optional[OperationMetricsTracker] = None
_tracker_lock = threading.Lock()


def get_tracker() -> OperationMetricsTracker:
    """Get the process-wide tracker, creating it on first use."""
    global _tracker
    if _tracker is None:
        with _tracker_lock:
            if _tracker is None:
                _tracker = OperationMetricsTracker()
    return _tracker


def reset_tracker(tracker: Optional[OperationMetricsTracker] = None) -> None:
    """
    Replace the process-wide tracker.

    Args:
        tracker: New shared tracker; None discards the current one so the
            next ``get_tracker()`` call creates a fresh default tracker
    """
    global _tracker
    with _tracker_lock:
        _tracker = tracker


def timing(operation: Optional[str] = None,
           tracker: Optional[OperationMetricsTracker] = None) -> Callable[[F], F]:
    """
    Decorator recording each call of a function as a measurement.

    Works for plain and ``async`` functions. Calls that raise are recorded
    too, and the exception propagates unchanged.

    Args:
        operation: Operation name (defaults to the function's qualified name)
        tracker: Tracker to record into (defaults to the shared tracker)

    Returns:
        Decorated function
    """
    def decorator(func: F) -> F:
        op_name = operation or func.__qualname__

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with (tracker or get_tracker()).start_measurement(op_name):
                return func(*args, **kwargs)

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with (tracker or get_tracker()).start_measurement(op_name):
                return await func(*args, **kwargs)

        if inspect.iscoroutinefunction(func):
            return cast(F, async_wrapper)
        return cast(F, wrapper)

    return decorator


@contextmanager
def performance_context(operation: str,
                        tracker: Optional[OperationMetricsTracker] = None) -> Iterator[MeasurementContext]:
    """
    Context manager for measuring code blocks.

    Args:
        operation: Operation name the block is recorded under
        tracker: Tracker to record into (defaults to the shared tracker)
    """
    context = (tracker or get_tracker()).start_measurement(operation)
    try:
        yield context
    finally:
        context.complete()
        perf_logger.debug(
            f"Context '{operation}': {context.execution_time / 1_000_000:.2f}ms, "
            f"memory delta: {context.memory_used} bytes"
        )
