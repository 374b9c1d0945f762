"""
Unit tests for the operation metrics tracker.

Tests cover measurement contexts, concurrent recording, ranking, trend
analysis and the timing decorator for sync and async functions.
"""

import asyncio
import inspect
import logging
import threading
from unittest.mock import Mock, patch

import pytest

from algokit.core.exceptions import ValidationError
from algokit.performance.tracker import (
    OperationMetrics,
    OperationMetricsTracker,
    get_tracker,
    performance_context,
    reset_tracker,
    timing,
)
from algokit.types import AlgoKitSettings, SortMetric, TrendDirection


class TestOperationMetrics:
    """Test OperationMetrics aggregation."""

    def test_empty_aggregate(self):
        metrics = OperationMetrics("op")
        assert metrics.count == 0
        assert metrics.average_time == 0.0
        assert metrics.min_time is None
        assert metrics.to_dict()['min_time_ns'] == 0

    def test_add_measurement(self):
        metrics = OperationMetrics("op")
        metrics.add_measurement(100, 10)
        metrics.add_measurement(300, -20)

        assert metrics.count == 2
        assert metrics.total_time == 400
        assert metrics.average_time == 200.0
        assert metrics.average_memory == -5.0
        assert metrics.min_time == 100
        assert metrics.max_time == 300
        assert metrics.min_memory == -20
        assert metrics.max_memory == 10

    def test_to_dict(self):
        metrics = OperationMetrics("op")
        metrics.add_measurement(50, 8)
        data = metrics.to_dict()
        assert data['name'] == "op"
        assert data['count'] == 1
        assert data['total_time_ns'] == 50
        assert data['average_memory_bytes'] == 8.0


class TestMeasurementContext:
    """Test start/complete measurement lifecycle."""

    def test_complete_records_time_and_memory(self, tracker, fake_clock, fake_memory):
        context = tracker.start_measurement("load")
        fake_clock.advance(5_000_000)
        fake_memory.allocate(1024)
        context.complete()

        assert context.completed
        assert context.execution_time == 5_000_000
        assert context.memory_used == 1024

        metrics = tracker.get_operation_metrics("load")
        assert metrics.count == 1
        assert metrics.total_time == 5_000_000
        assert metrics.total_memory == 1024

    def test_complete_is_idempotent(self, tracker, fake_clock):
        context = tracker.start_measurement("op")
        fake_clock.advance(10)
        context.complete()
        fake_clock.advance(10)
        context.complete()

        assert tracker.get_operation_metrics("op").count == 1
        assert context.execution_time == 10

    def test_context_manager_records_on_exception(self, tracker, fake_clock):
        with pytest.raises(RuntimeError):
            with tracker.start_measurement("failing"):
                fake_clock.advance(42)
                raise RuntimeError("boom")

        assert tracker.get_operation_metrics("failing").total_time == 42

    @pytest.mark.parametrize("name", ["", None, 42])
    def test_invalid_operation_name(self, tracker, name):
        with pytest.raises(ValidationError):
            tracker.start_measurement(name)
        with pytest.raises(ValidationError):
            tracker.record(name, 1, 1)

    def test_invalid_history_size(self):
        with pytest.raises(ValidationError):
            OperationMetricsTracker(history_size=0)

    def test_from_settings(self):
        tracker = OperationMetricsTracker.from_settings(
            AlgoKitSettings(history_size=7, slow_operation_ms=25.0)
        )
        assert tracker.history_size == 7
        assert tracker.slow_operation_ms == 25.0


class TestConcurrentRecording:
    """Test thread safety of the tracker."""

    def test_parallel_records_to_one_operation(self, tracker):
        threads_count, records_per_thread = 8, 1000

        def worker():
            for _ in range(records_per_thread):
                tracker.record("shared", 10, 1)

        threads = [threading.Thread(target=worker) for _ in range(threads_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        metrics = tracker.get_operation_metrics("shared")
        assert metrics.count == threads_count * records_per_thread
        assert metrics.total_time == 10 * threads_count * records_per_thread
        assert metrics.total_memory == threads_count * records_per_thread

    def test_parallel_creation_of_operations(self, tracker):
        barrier = threading.Barrier(6)

        def worker(index):
            barrier.wait()
            for i in range(200):
                tracker.record(f"op-{i % 5}", index + 1, 0)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        all_metrics = tracker.get_all_metrics()
        assert sorted(all_metrics) == [f"op-{i}" for i in range(5)]
        assert tracker.total_operations == 6 * 200

    def test_sample_folded_while_registry_locked(self, tracker):
        lock_states = []
        original = OperationMetrics.add_measurement

        def checking_add(metrics, time_ns, memory_bytes):
            lock_states.append(tracker._lock.locked())
            original(metrics, time_ns, memory_bytes)

        with patch.object(OperationMetrics, 'add_measurement', checking_add):
            tracker.record("guarded", 10, 0)
            tracker.record("guarded", 20, 0)

        assert lock_states == [True, True]

    def test_records_interleaved_with_clears(self, tracker):
        stop = threading.Event()

        def clearer():
            while not stop.is_set():
                tracker.clear_operation_metrics("volatile")

        thread = threading.Thread(target=clearer)
        thread.start()
        try:
            for _ in range(2000):
                tracker.record("volatile", 5, 0)
        finally:
            stop.set()
            thread.join()

        tracker.record("volatile", 5, 0)
        metrics = tracker.get_operation_metrics("volatile")
        trend = tracker.get_performance_trend("volatile")
        assert metrics.count >= 1
        assert len(trend.execution_times) == min(metrics.count, tracker.history_size)


class TestQueries:
    """Test ranking, comparison and trend queries."""

    def _populate(self, tracker):
        for time_ns, memory in ((300, 30), (300, 30)):
            tracker.record("slow", time_ns, memory)
        tracker.record("fast", 100, 50)
        for _ in range(4):
            tracker.record("medium", 200, 10)

    def test_top_performers_by_average_time(self, tracker):
        self._populate(tracker)
        names = [m.name for m in tracker.get_top_performers()]
        assert names == ["fast", "medium", "slow"]
        assert [m.name for m in tracker.get_top_performers(limit=2)] == ["fast", "medium"]

    def test_top_performers_other_metrics(self, tracker):
        self._populate(tracker)
        by_count = tracker.get_top_performers(metric=SortMetric.OPERATION_COUNT)
        assert [m.name for m in by_count] == ["medium", "slow", "fast"]

        by_total = tracker.get_top_performers(metric=SortMetric.TOTAL_TIME)
        assert [m.name for m in by_total] == ["fast", "slow", "medium"]

        by_memory = tracker.get_top_performers(metric=SortMetric.MEMORY_USAGE)
        assert [m.name for m in by_memory] == ["medium", "slow", "fast"]

    def test_top_performers_ties_keep_name_order(self, tracker):
        for name in ("b", "c", "a"):
            tracker.record(name, 100, 0)
        assert [m.name for m in tracker.get_top_performers()] == ["a", "b", "c"]

    def test_top_performers_limits(self, tracker):
        self._populate(tracker)
        assert tracker.get_top_performers(limit=0) == []
        with pytest.raises(ValidationError):
            tracker.get_top_performers(limit=-1)

    def test_compare_operations(self, tracker):
        tracker.record("a", 100, 10)
        tracker.record("b", 200, 5)

        comparison = tracker.compare_operations("a", "b")
        assert comparison.time_ratio == 0.5
        assert comparison.memory_ratio == 2.0
        assert comparison.faster_operation == "a"
        assert comparison.more_memory_efficient_operation == "b"

    def test_compare_operations_zero_averages(self, tracker):
        tracker.record("a", 0, 0)
        tracker.record("b", 0, 10)
        comparison = tracker.compare_operations("a", "b")
        assert comparison.time_ratio == 1.0
        assert comparison.memory_ratio == 0.0

        reverse = tracker.compare_operations("b", "a")
        assert reverse.memory_ratio == float('inf')

    def test_compare_unknown_operation(self, tracker):
        tracker.record("a", 1, 1)
        assert tracker.compare_operations("a", "missing") is None

    def test_trend_degrading_and_improving(self, tracker):
        for _ in range(10):
            tracker.record("up", 100, 0)
            tracker.record("down", 200, 0)
        for _ in range(10):
            tracker.record("up", 200, 0)
            tracker.record("down", 100, 0)

        up = tracker.get_performance_trend("up")
        assert up.trend == TrendDirection.DEGRADING
        assert up.average_time == 150.0
        assert up.standard_deviation == 50.0
        assert tracker.get_performance_trend("down").trend == TrendDirection.IMPROVING

    def test_trend_stable(self, tracker):
        for time_ns in (100, 104, 98, 101, 103, 99):
            tracker.record("flat", time_ns, 0)
        assert tracker.get_performance_trend("flat").trend == TrendDirection.STABLE

        tracker.record("single", 100, 0)
        assert tracker.get_performance_trend("single").trend == TrendDirection.STABLE

    def test_trend_unknown_operation(self, tracker):
        assert tracker.get_performance_trend("missing") is None

    def test_history_is_bounded(self, fake_clock, fake_memory):
        tracker = OperationMetricsTracker(memory_probe=fake_memory, timer=fake_clock, history_size=5)
        for time_ns in range(1, 13):
            tracker.record("op", time_ns, 0)

        trend = tracker.get_performance_trend("op")
        assert trend.execution_times == [8, 9, 10, 11, 12]
        assert tracker.get_operation_metrics("op").count == 12

    def test_clear(self, tracker):
        self._populate(tracker)
        assert tracker.clear_operation_metrics("fast") is True
        assert tracker.clear_operation_metrics("fast") is False
        assert tracker.get_performance_trend("fast") is None

        tracker.clear_metrics()
        assert tracker.get_all_metrics() == {}
        assert tracker.total_operations == 0


class TestSlowOperations:
    """Test slow operation warnings."""

    def test_slow_operation_logs_warning(self, fake_clock, fake_memory, caplog):
        tracker = OperationMetricsTracker(
            memory_probe=fake_memory, timer=fake_clock, slow_operation_ms=1.0
        )
        with caplog.at_level(logging.WARNING, logger='algokit.performance'):
            tracker.record("quick", 500_000, 0)
            tracker.record("sluggish", 2_000_000, 0)

        messages = [r.getMessage() for r in caplog.records]
        assert "Slow operation detected: sluggish took 2.00ms" in messages
        assert not any("quick" in message for message in messages)


class TestSystemPerformance:
    """Test psutil backed system figures."""

    @patch('algokit.performance.tracker.rss_bytes', return_value=64 * 1024 * 1024)
    @patch('algokit.performance.tracker.psutil.virtual_memory')
    def test_system_performance(self, mock_virtual_memory, _mock_rss, tracker):
        mock_virtual_memory.return_value = Mock(
            total=8 * 1024 ** 3, available=4 * 1024 ** 3, percent=50.0
        )
        tracker.record("a", 10, 0)
        tracker.record("a", 10, 0)
        tracker.record("b", 10, 0)

        system = tracker.get_system_performance()
        assert system.process_memory_bytes == 64 * 1024 * 1024
        assert system.system_memory_percent == 50.0
        assert system.total_operations == 3
        assert system.tracked_operations == 2

    @patch('algokit.performance.tracker.psutil.virtual_memory')
    def test_generate_report(self, mock_virtual_memory, tracker):
        mock_virtual_memory.return_value = Mock(total=1024 ** 3, available=1024 ** 2, percent=12.5)
        tracker.record("sort", 3_000_000, 0)

        report = tracker.generate_report()
        assert report.startswith("=== Performance Analysis Report ===")
        assert "Top Performers (by average execution time):" in report
        assert "1. sort: 3.00 ms avg" in report

    @patch('algokit.performance.tracker.psutil.virtual_memory')
    def test_generate_report_empty(self, mock_virtual_memory, tracker):
        mock_virtual_memory.return_value = Mock(total=1024 ** 3, available=1024 ** 2, percent=12.5)
        assert "No operations recorded" in tracker.generate_report()


class TestTimingDecorator:
    """Test the timing decorator and performance context."""

    def test_sync_function(self, tracker, fake_clock):
        @timing(tracker=tracker)
        def work(n):
            fake_clock.advance(n)
            return n * 2

        assert work(25) == 50
        metrics = tracker.get_operation_metrics(work.__qualname__)
        assert metrics.count == 1
        assert metrics.total_time == 25
        assert work.__name__ == "work"

    def test_exception_is_recorded_and_propagated(self, tracker, fake_clock):
        @timing("explode", tracker=tracker)
        def explode():
            fake_clock.advance(7)
            raise ValueError("bad input")

        with pytest.raises(ValueError, match="bad input"):
            explode()
        assert tracker.get_operation_metrics("explode").total_time == 7

    @pytest.mark.asyncio
    async def test_async_function(self, tracker, fake_clock):
        @timing("fetch", tracker=tracker)
        async def fetch():
            await asyncio.sleep(0)
            fake_clock.advance(1_000)
            return "done"

        assert inspect.iscoroutinefunction(fetch)
        assert await fetch() == "done"
        assert await fetch() == "done"

        metrics = tracker.get_operation_metrics("fetch")
        assert metrics.count == 2
        assert metrics.average_time == 1_000.0

    def test_shared_tracker_used_by_default(self):
        @timing("shared-op")
        def noop():
            return None

        noop()
        assert get_tracker().get_operation_metrics("shared-op").count == 1

    def test_performance_context(self, tracker, fake_clock, fake_memory):
        with performance_context("block", tracker) as context:
            fake_clock.advance(300)
            fake_memory.allocate(64)

        assert context.execution_time == 300
        assert context.memory_used == 64
        assert tracker.get_operation_metrics("block").count == 1

    def test_performance_context_on_exception(self, tracker, fake_clock):
        with pytest.raises(KeyError):
            with performance_context("broken", tracker):
                fake_clock.advance(5)
                raise KeyError("missing")
        assert tracker.get_operation_metrics("broken").total_time == 5


class TestGlobalTracker:
    """Test the process-wide tracker."""

    def test_get_tracker_is_singleton(self):
        assert get_tracker() is get_tracker()

    def test_reset_tracker(self, tracker):
        reset_tracker(tracker)
        assert get_tracker() is tracker

        reset_tracker()
        assert get_tracker() is not tracker

    def test_concurrent_first_access(self):
        seen = []

        def worker():
            seen.append(get_tracker())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(t is seen[0] for t in seen)
