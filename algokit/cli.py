"""
Command line interface for algokit.

Usage:
    python -m algokit info [NAME]
    python -m algokit analyze NAME [--min-size N] [--max-size N] [--step N]
                                   [--iterations N] [--space] [--output FILE]
    python -m algokit compare-search TARGET [--size N]

Settings come from ALGOKIT_* environment variables or config/.env; the
sampling options on the command line override them.
"""

import argparse
import json
import random
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from .algorithms import binary_search, linear_search
from .algorithms.catalog import compare_search, get_profile, list_profiles
from .algorithms.merge_sort import merge_sort
from .containers import Deque, HashTable, RingBuffer
from .core.config import ConfigManager
from .core.exceptions import AlgoKitError, ConfigurationError
from .performance.complexity import ComplexityAnalyzer
from .performance.tracker import OperationMetricsTracker, performance_context, reset_tracker
from .types.models import AlgoKitSettings
from .utils.logging import StructuredLogger

Workload = Tuple[Callable[[int], Any], Callable[[Any], Any]]


def _sorted_range(n: int) -> List[int]:
    return list(range(n))


def _shuffled_range(n: int) -> List[int]:
    data = list(range(n))
    random.Random(42).shuffle(data)
    return data


def _filled_table(n: int) -> HashTable:
    table = HashTable()
    for i in range(n):
        table.put(i, i)
    return table


def _cycle_ring_buffer(n: int) -> int:
    buffer = RingBuffer(n)
    for i in range(n):
        buffer.enqueue(i)
    while buffer.dequeue() is not None:
        pass
    return n


def _cycle_deque(n: int) -> int:
    deque = Deque()
    for i in range(n):
        deque.add_back(i)
    while deque.remove_front() is not None:
        pass
    return n


# Input generator and algorithm for each analysable workload
WORKLOADS: Dict[str, Workload] = {
    'linear-search': (_sorted_range, lambda data: linear_search.search(data, -1)),
    'binary-search': (_sorted_range, lambda data: binary_search.search(data, len(data) - 1)),
    'hash-lookup': (_filled_table, lambda table: table.get(table.size() // 2)),
    'merge-sort': (_shuffled_range, merge_sort),
    'ring-buffer': (lambda n: n, _cycle_ring_buffer),
    'deque': (lambda n: n, _cycle_deque),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="algokit",
        description="Data structures, search/sort algorithms and empirical complexity analysis"
    )
    parser.add_argument("--env-file", help="Path to a .env file (default: config/.env)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    info_parser = subparsers.add_parser("info", help="Show documented algorithm complexity")
    info_parser.add_argument("name", nargs="?", help="Algorithm name (default: all)")

    analyze_parser = subparsers.add_parser("analyze", help="Measure and classify a workload's growth")
    analyze_parser.add_argument("name", choices=sorted(WORKLOADS), help="Workload to analyse")
    analyze_parser.add_argument("--min-size", type=int, help="Smallest input size")
    analyze_parser.add_argument("--max-size", type=int, help="Largest input size")
    analyze_parser.add_argument("--step", type=int, help="Size multiplier between rounds")
    analyze_parser.add_argument("--iterations", type=int, help="Measured runs per size")
    analyze_parser.add_argument("--space", action="store_true", help="Also run a space complexity pass")
    analyze_parser.add_argument("--output", "-o", help="Output file for results (JSON)")

    compare_parser = subparsers.add_parser("compare-search", help="Compare linear, binary and hash search")
    compare_parser.add_argument("target", type=int, help="Value to search for")
    compare_parser.add_argument("--size", type=int, default=10000, help="Number of values searched")

    return parser


def _cmd_info(args: argparse.Namespace) -> int:
    profiles = [get_profile(args.name)] if args.name else list_profiles()
    for profile in profiles:
        print(f"{profile.name} ({profile.category})")
        for key, value in profile.to_dict().items():
            if key not in ('name', 'category'):
                print(f"  {key.replace('_', ' ').capitalize()}: {value}")
        print()
    return 0


def _cmd_analyze(args: argparse.Namespace, settings: AlgoKitSettings,
                 tracker: OperationMetricsTracker, logger: StructuredLogger) -> int:
    overrides = {
        'min_size': args.min_size,
        'max_size': args.max_size,
        'step_multiplier': args.step,
        'iterations': args.iterations,
    }
    config = replace(
        settings.to_complexity_config(),
        **{k: v for k, v in overrides.items() if v is not None}
    )

    analyzer = ComplexityAnalyzer.from_settings(settings)
    input_generator, algorithm = WORKLOADS[args.name]
    log = logger.with_context(workload=args.name)
    log.info(f"Analysing {args.name}", min_size=config.min_size, max_size=config.max_size)

    with performance_context(f"analyze.{args.name}", tracker) as measurement:
        if args.space:
            combined = analyzer.measure_combined_complexity(input_generator, algorithm, config)
            results = {'time': combined.time_complexity, 'space': combined.space_complexity}
        else:
            results = {'time': analyzer.measure_time_complexity(input_generator, algorithm, config)}

    for result in results.values():
        print(result.report)
        print()
    log.performance(f"analyze.{args.name}", measurement.execution_time / 1_000_000)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(
                {'workload': args.name, **{k: r.to_dict() for k, r in results.items()}},
                f, indent=2, default=str
            )
        print(f"Results saved to {output_path}")

    return 0


def _cmd_compare_search(args: argparse.Namespace, tracker: OperationMetricsTracker,
                        logger: StructuredLogger) -> int:
    if args.size <= 0:
        raise ConfigurationError("--size must be positive", invalid_values={'size': args.size})

    with performance_context("compare-search", tracker):
        comparison = compare_search(_shuffled_range(args.size), args.target)

    print(f"Searching for {comparison['target']} in {comparison['data_size']} values")
    print(f"{'Algorithm':<15} {'Found':<6} {'Index':>8} {'Time (ns)':>12} {'Comparisons':>12}")
    for name, result in comparison['results'].items():
        index = result['index'] if result['index'] is not None else '-'
        print(f"{name:<15} {str(result['found']):<6} {index:>8} "
              f"{result['time_ns']:>12} {result['comparisons']:>12}")
    print()
    print(f"Fastest: {comparison['fastest']}")
    print(f"Binary vs linear speedup: {comparison['speedup_binary_vs_linear']:.2f}x")
    print(f"Hash vs linear speedup: {comparison['speedup_hash_vs_linear']:.2f}x")
    logger.info("Search comparison finished", fastest=comparison['fastest'], size=args.size)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        settings = ConfigManager(args.env_file).load_settings()
    except ConfigurationError as e:
        print(e.get_troubleshooting_message(), file=sys.stderr)
        return 1

    logger = StructuredLogger(
        "algokit",
        level="DEBUG" if args.verbose else settings.log_level,
        log_dir=settings.log_dir
    )
    tracker = OperationMetricsTracker.from_settings(settings)
    reset_tracker(tracker)

    try:
        if args.command == "info":
            return _cmd_info(args)
        if args.command == "analyze":
            return _cmd_analyze(args, settings, tracker, logger)
        return _cmd_compare_search(args, tracker, logger)
    except ConfigurationError as e:
        logger.error("Invalid configuration", error=e)
        print(e.get_troubleshooting_message(), file=sys.stderr)
        return 1
    except AlgoKitError as e:
        logger.error(f"{args.command} failed", error=e, **e.context)
        return 1
    finally:
        logger.close()


if __name__ == "__main__":
    sys.exit(main())
