"""
Empirical complexity analysis.

The analyzer runs an algorithm across a geometric sequence of input sizes,
records time and memory samples at each size and infers the growth class
from how the median values grow between consecutive sizes:

1. Growth ratios ``v[i] / v[i-1]`` give a mean ratio and its variance.
2. The mean size step ``m`` turns the mean ratio into a growth exponent
   ``log(mean ratio) / log(m)``, so the bands work for any step multiplier.
3. Ratio and exponent bands pick a candidate class and a Pearson
   correlation between the observed values and the class's basis function
   (log n, n log n, n², n³) must exceed 0.8 to accept it.

Classification is a heuristic over noisy measurements, not a proof: small
inputs with a large constant overhead can look logarithmic or constant.
Deterministic results are available by injecting a fake timer and memory
probe.
"""

import logging
import math
import time
from typing import Any, Callable, List, Optional, Sequence, Tuple

from ..core.exceptions import ConfigurationError, InsufficientDataError, MeasurementError
from ..types.models import (
    CombinedComplexityResult,
    ComplexityClass,
    ComplexityConfig,
    ComplexityResult,
    ComplexityType,
    MeasurementPoint,
)
from . import statistics
from .memory import MemoryProbe, collect_garbage, get_memory_probe, rss_bytes

InputGenerator = Callable[[int], Any]
Algorithm = Callable[[Any], Any]

CORRELATION_THRESHOLD = 0.8
MAX_CALIBRATION_REPEATS = 1 << 20

_BASIS_FUNCTIONS = {
    ComplexityClass.LOGARITHMIC: lambda n: math.log(n),
    ComplexityClass.LINEAR: lambda n: float(n),
    ComplexityClass.LINEARITHMIC: lambda n: n * math.log(n),
    ComplexityClass.QUADRATIC: lambda n: float(n) ** 2,
    ComplexityClass.CUBIC: lambda n: float(n) ** 3,
}


class ComplexityAnalyzer:
    """
    Measures and classifies the growth of an algorithm's cost.

    Attributes:
        config (ComplexityConfig): Default sampling configuration
        timer: Callable returning a monotonic nanosecond timestamp
        memory_probe: Callable returning the current memory reading in bytes
        logger (logging.Logger): Logger for progress and results
    """

    def __init__(self,
                 config: Optional[ComplexityConfig] = None,
                 timer: Callable[[], int] = time.perf_counter_ns,
                 memory_probe: Optional[MemoryProbe] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the analyzer.

        Args:
            config: Sampling configuration used when a call passes none
            timer: Nanosecond clock, injectable for deterministic tests
            memory_probe: Memory reading in bytes (process RSS when None)
            logger: Logger instance (uses ``algokit.complexity`` if None)

        Raises:
            ConfigurationError: If config is invalid
        """
        self.config = _validated(config or ComplexityConfig())
        self.timer = timer
        self.memory_probe = memory_probe or rss_bytes
        self.logger = logger or logging.getLogger('algokit.complexity')
        self._last_measurements: Tuple[MeasurementPoint, ...] = ()

    @classmethod
    def from_settings(cls, settings, **kwargs) -> 'ComplexityAnalyzer':
        """Build an analyzer from :class:`AlgoKitSettings`."""
        kwargs.setdefault('memory_probe', get_memory_probe(settings.memory_backend))
        return cls(config=settings.to_complexity_config(), **kwargs)

    @property
    def last_measurements(self) -> Tuple[MeasurementPoint, ...]:
        """Points gathered by the most recent measurement pass."""
        return self._last_measurements

    def measure_time_complexity(self, input_generator: InputGenerator, algorithm: Algorithm,
                                config: Optional[ComplexityConfig] = None) -> ComplexityResult:
        """
        Measure how execution time grows with input size.

        At every size ``warmup_runs`` discarded runs precede ``iterations``
        measured runs. Each measured run optionally collects garbage, reads
        memory, generates a fresh input, times the algorithm and reads
        memory again.

        Args:
            input_generator: Builds an input of the requested size
            algorithm: Callable run on each generated input
            config: Overrides the analyzer's configuration for this call

        Returns:
            ComplexityResult classified on the median times

        Raises:
            ConfigurationError: If config is invalid or yields fewer than two sizes
            MeasurementError: If input_generator or algorithm raises
        """
        config = _validated(config) if config is not None else self.config
        sizes = _measured_sizes(config)
        self.logger.info(
            f"Measuring time complexity over {len(sizes)} sizes "
            f"({sizes[0]}-{sizes[-1]}, {config.iterations} iterations each)"
        )

        points = []
        try:
            for size in sizes:
                point = self._measure_time_point(input_generator, algorithm, size, config)
                self.logger.debug(
                    f"n={size}: median {point.average_time:.0f}ns, "
                    f"std dev {point.standard_deviation:.0f}ns"
                )
                points.append(point)
        finally:
            self._release_memory_probe()

        self._last_measurements = tuple(points)
        return self.analyze_points(points, ComplexityType.TIME)

    def measure_space_complexity(self, input_generator: InputGenerator, algorithm: Algorithm,
                                 config: Optional[ComplexityConfig] = None) -> ComplexityResult:
        """
        Measure how memory use grows with input size.

        Runs independently of any time pass and records no timings. The
        algorithm's result stays referenced until the second memory
        reading so retained output counts toward the sample.

        Returns:
            ComplexityResult classified on the median memory deltas

        Raises:
            ConfigurationError: If config is invalid or yields fewer than two sizes
            MeasurementError: If input_generator or algorithm raises
        """
        config = _validated(config) if config is not None else self.config
        sizes = _measured_sizes(config)
        self.logger.info(f"Measuring space complexity over {len(sizes)} sizes ({sizes[0]}-{sizes[-1]})")

        points = []
        try:
            for size in sizes:
                memory_samples = []
                for _ in range(config.iterations):
                    if config.collect_garbage:
                        collect_garbage()
                    memory_before = self.memory_probe()
                    data = self._generate(input_generator, size)
                    result = self._run(algorithm, data, size)
                    memory_after = self.memory_probe()
                    memory_samples.append(max(0, memory_after - memory_before))
                    del data, result

                points.append(MeasurementPoint(
                    input_size=size,
                    average_time=0.0,
                    average_memory=statistics.median(memory_samples),
                    standard_deviation=0.0,
                    raw_memory_samples=tuple(memory_samples),
                ))
        finally:
            self._release_memory_probe()

        self._last_measurements = tuple(points)
        return self.analyze_points(points, ComplexityType.SPACE)

    def measure_combined_complexity(self, input_generator: InputGenerator, algorithm: Algorithm,
                                    config: Optional[ComplexityConfig] = None) -> CombinedComplexityResult:
        """Run a time pass followed by an independent space pass."""
        time_result = self.measure_time_complexity(input_generator, algorithm, config)
        space_result = self.measure_space_complexity(input_generator, algorithm, config)
        return CombinedComplexityResult(time_complexity=time_result, space_complexity=space_result)

    def analyze_points(self, points: Sequence[MeasurementPoint],
                       complexity_type: ComplexityType = ComplexityType.TIME) -> ComplexityResult:
        """
        Classify a series of measurement points.

        Also usable on points gathered elsewhere, as long as they are
        ordered by increasing input size.

        Args:
            points: Measurements in increasing input size order
            complexity_type: Whether to classify time or memory values

        Returns:
            ComplexityResult with class, mean growth ratio, R² and report

        Raises:
            InsufficientDataError: If fewer than two points are given
        """
        if len(points) < 2:
            raise InsufficientDataError(
                f"At least 2 measurement points are required for classification, got {len(points)}",
                points=len(points)
            )

        points = tuple(points)
        sizes = [p.input_size for p in points]
        values = [p.value(complexity_type) for p in points]

        ratios = statistics.growth_ratios(values)
        mean_ratio = statistics.mean(ratios)
        variance = statistics.population_variance(ratios)
        size_step = statistics.mean(statistics.growth_ratios(sizes))
        exponent = growth_exponent(mean_ratio, size_step)

        complexity_class = self._classify(sizes, values, mean_ratio, variance, size_step, exponent)
        r_squared = _r_squared(complexity_class, sizes, values)

        report = _build_report(complexity_type, complexity_class, mean_ratio, r_squared, points)
        self.logger.info(
            f"{complexity_type.value.capitalize()} complexity classified as {complexity_class.notation} "
            f"(growth rate {mean_ratio:.2f}, exponent {exponent:.2f}, R² {r_squared:.3f})"
        )

        return ComplexityResult(
            complexity_class=complexity_class,
            growth_rate=mean_ratio,
            r_squared=r_squared,
            measurement_points=points,
            report=report,
            complexity_type=complexity_type,
        )

    def format_report(self, result: ComplexityResult) -> str:
        """Render the plain-text table report of a result."""
        return _build_report(
            result.complexity_type,
            result.complexity_class,
            result.growth_rate,
            result.r_squared,
            result.measurement_points,
        )

    def _classify(self, sizes: List[int], values: List[float], mean_ratio: float,
                  variance: float, size_step: float, exponent: float) -> ComplexityClass:
        def correlates(complexity_class: ComplexityClass) -> bool:
            return _basis_correlation(complexity_class, sizes, values) > CORRELATION_THRESHOLD

        if mean_ratio < 1.1 and variance < 0.1:
            return ComplexityClass.CONSTANT
        if exponent < 0.6 and correlates(ComplexityClass.LOGARITHMIC):
            return ComplexityClass.LOGARITHMIC
        if 0.9 * size_step <= mean_ratio <= 1.1 * size_step and variance < 0.2 * (size_step / 2) ** 2:
            return ComplexityClass.LINEAR
        if mean_ratio > 1.1 * size_step and exponent < 1.6 and correlates(ComplexityClass.LINEARITHMIC):
            return ComplexityClass.LINEARITHMIC
        if 1.6 <= exponent < 2.5 and correlates(ComplexityClass.QUADRATIC):
            return ComplexityClass.QUADRATIC
        if 2.5 <= exponent < 3.5 and correlates(ComplexityClass.CUBIC):
            return ComplexityClass.CUBIC
        if exponent >= 3.5:
            return ComplexityClass.EXPONENTIAL
        return ComplexityClass.UNKNOWN

    def _measure_time_point(self, input_generator: InputGenerator, algorithm: Algorithm,
                            size: int, config: ComplexityConfig) -> MeasurementPoint:
        for _ in range(config.warmup_runs):
            self._run(algorithm, self._generate(input_generator, size), size)

        time_samples = []
        memory_samples = []
        for _ in range(config.iterations):
            if config.collect_garbage:
                collect_garbage()
            memory_before = self.memory_probe()
            data = self._generate(input_generator, size)
            elapsed = self._time_call(algorithm, data, size, config.min_sample_ns)
            memory_after = self.memory_probe()

            time_samples.append(elapsed)
            memory_samples.append(max(0, memory_after - memory_before))
            del data

        return MeasurementPoint(
            input_size=size,
            average_time=statistics.median(time_samples),
            average_memory=statistics.median(memory_samples),
            standard_deviation=statistics.sample_std(time_samples),
            raw_time_samples=tuple(time_samples),
            raw_memory_samples=tuple(memory_samples),
        )

    def _release_memory_probe(self) -> None:
        # Probes holding process-wide state (tracemalloc) expose stop()
        stop = getattr(self.memory_probe, 'stop', None)
        if callable(stop):
            stop()

    def _time_call(self,algorithm: Algorithm, data: Any, size: int, min_sample_ns: int) -> int:
        # Repeat on the same input until the sample is long enough, then report per-call time
        repeats = 1
        while True:
            start_time = self.timer()
            for _ in range(repeats):
                self._run(algorithm, data, size)
            elapsed = self.timer() - start_time

            if elapsed >= min_sample_ns or repeats >= MAX_CALIBRATION_REPEATS:
                return round(elapsed / repeats)
            repeats *= 2

    def _generate(self, input_generator: InputGenerator, size: int) -> Any:
        try:
            return input_generator(size)
        except Exception as e:
            raise MeasurementError(
                f"Input generator failed for size {size}: {e}",
                input_size=size,
                phase='input_generation',
                original_error=e
            ) from e

    def _run(self, algorithm: Algorithm, data: Any, size: int) -> Any:
        try:
            return algorithm(data)
        except Exception as e:
            raise MeasurementError(
                f"Algorithm failed for input size {size}: {e}",
                input_size=size,
                phase='algorithm',
                original_error=e
            ) from e


def growth_exponent(mean_ratio: float, size_step: float) -> float:
    """
    Empirical power of n implied by a mean growth ratio.

    Returns:
        ``log(mean_ratio) / log(size_step)``, or 0.0 when either is not
        above the values that make the logarithm meaningful
    """
    if mean_ratio <= 0 or size_step <= 1:
        return 0.0
    return math.log(mean_ratio) / math.log(size_step)


def _basis_correlation(complexity_class: ComplexityClass, sizes: Sequence[int],
                       values: Sequence[float]) -> float:
    basis = _BASIS_FUNCTIONS[complexity_class]
    return statistics.pearson_correlation([basis(n) for n in sizes], values)


def _r_squared(complexity_class: ComplexityClass, sizes: Sequence[int], values: Sequence[float]) -> float:
    if complexity_class in _BASIS_FUNCTIONS:
        correlation = _basis_correlation(complexity_class, sizes, values)
    else:
        correlation = _basis_correlation(ComplexityClass.LINEAR, sizes, values)
    return correlation ** 2


def _build_report(complexity_type: ComplexityType, complexity_class: ComplexityClass,
                  growth_rate: float, r_squared: float,
                  points: Sequence[MeasurementPoint]) -> str:
    sizes = [p.input_size for p in points]
    size_step = statistics.mean(statistics.growth_ratios(sizes))
    slope, _fit = statistics.log_log_slope(sizes, [p.value(complexity_type) for p in points])

    lines = [
        "=== Complexity Analysis Report ===",
        f"Analysis Type: {complexity_type.value.capitalize()}",
        f"Complexity Class: {complexity_class.notation} ({complexity_class.description})",
        f"Growth Rate: {growth_rate:.2f}",
        f"Growth Exponent: {growth_exponent(growth_rate, size_step):.2f}",
        f"Log-Log Slope: {slope:.2f}",
        f"R²: {r_squared:.3f}",
        f"Measurement Points: {len(points)}",
        f"Input Size Range: {sizes[0]} - {sizes[-1]}" if sizes else "Input Size Range: n/a",
        "",
        f"{'Size':>10} {'Median Time (ns)':>18} {'Median Memory (B)':>18} {'Std Dev':>14}",
        "-" * 63,
    ]
    for point in points:
        lines.append(
            f"{point.input_size:>10} {point.average_time:>18.0f} "
            f"{point.average_memory:>18.0f} {point.standard_deviation:>14.1f}"
        )

    return "\n".join(lines)


def _measured_sizes(config: ComplexityConfig) -> List[int]:
    sizes = config.input_sizes()
    if len(sizes) < 2:
        raise InsufficientDataError(
            f"Configuration yields {len(sizes)} input size(s) ({config.min_size}-{config.max_size}); "
            f"at least 2 are required for classification",
            points=len(sizes)
        )
    return sizes


def _validated(config: ComplexityConfig) -> ComplexityConfig:
    try:
        config.validate()
    except ValueError as e:
        raise ConfigurationError(
            "Invalid complexity analysis configuration",
            invalid_values={k: v for k, v in vars(config).items()},
            validation_errors=[str(e)]
        ) from e
    return config
