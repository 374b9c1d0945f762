"""
Linear search utilities.

Sequential scans with no ordering precondition: exact matches, predicate
matches, counting, minimum/maximum and an instrumented search that reports
its own cost.
"""

import time
from typing import Any, Callable, Iterable, List, Optional, Sequence

from ..types.models import Comparator, SearchMetrics
from .comparators import natural_order

Predicate = Callable[[Any], bool]


def search(items: Sequence[Any], target: Any) -> Optional[int]:
    """
    Find the first index holding a value equal to target.

    Args:
        items: Sequence to scan
        target: Value compared with ``==``

    Returns:
        Index of the first match, or None if target is absent
    """
    if target is None:
        return None
    for index, item in enumerate(items):
        if item == target:
            return index
    return None


def find_all(items: Iterable[Any], target: Any) -> List[int]:
    """Every index whose value equals target, in ascending order."""
    if target is None:
        return []
    return [index for index, item in enumerate(items) if item == target]


def search_with_condition(items: Iterable[Any], predicate: Predicate) -> Optional[int]:
    """Index of the first non-None element satisfying predicate, or None."""
    for index, item in enumerate(items):
        if item is not None and predicate(item):
            return index
    return None


def find_all_with_condition(items: Iterable[Any], predicate: Predicate) -> List[int]:
    return [index for index, item in enumerate(items) if item is not None and predicate(item)]


def _extreme_index(items: Iterable[Any], compare: Comparator, sign: int) -> Optional[int]:
    best_index = None
    best = None
    for index, item in enumerate(items):
        if item is None:
            continue
        if best_index is None or sign * compare(item, best) > 0:
            best_index, best = index, item
    return best_index


def find_min(items: Iterable[Any], comparator: Optional[Comparator] = None) -> Optional[int]:
    """
    Index of the smallest element according to comparator.

    None elements are skipped; the first of several equal minima wins.

    Returns:
        Index of the minimum, or None when there is no non-None element
    """
    return _extreme_index(items, comparator or natural_order, -1)


def find_max(items: Iterable[Any], comparator: Optional[Comparator] = None) -> Optional[int]:
    """Index of the largest element according to comparator, skipping None elements."""
    return _extreme_index(items, comparator or natural_order, 1)


def count(items: Iterable[Any], target: Any) -> int:
    if target is None:
        return 0
    return sum(1 for item in items if item == target)


def count_with_condition(items: Iterable[Any], predicate: Predicate) -> int:
    return sum(1 for item in items if predicate(item))


def contains(items: Sequence[Any], target: Any) -> bool:
    return search(items, target) is not None


def any_match(items: Iterable[Any], predicate: Predicate) -> bool:
    return any(predicate(item) for item in items)


def all_match(items: Iterable[Any], predicate: Predicate) -> bool:
    """True when every element satisfies predicate; vacuously true when empty."""
    return all(predicate(item) for item in items)


def search_with_metrics(items: Sequence[Any], target: Any) -> SearchMetrics:
    """
    Linear search that reports its own cost.

    Args:
        items: Sequence to scan
        target: Value compared with ``==``

    Returns:
        SearchMetrics with the comparison count, elapsed nanoseconds and
        the index found
    """
    comparisons = 0
    result_index = None
    start_time = time.perf_counter_ns()

    if target is not None:
        for index, item in enumerate(items):
            comparisons += 1
            if item == target:
                result_index = index
                break

    execution_time = time.perf_counter_ns() - start_time
    return SearchMetrics(
        comparisons=comparisons,
        execution_time_ns=execution_time,
        found=result_index is not None,
        result_index=result_index,
    )
