"""
Algorithm catalog and search comparison.

Holds the documented complexity profile of each algorithm and container in
the library, and a helper that runs the three search strategies against
the same data so their measured cost can be compared side by side.
"""

import time
from typing import Any, Dict, List, Sequence

from ..containers.hash_table import HashTable
from ..core.exceptions import ValidationError
from ..types.models import AlgorithmProfile
from . import linear_search
from .binary_search import BinarySearch
from .merge_sort import merge_sort

_PROFILES: Dict[str, AlgorithmProfile] = {
    profile.name: profile for profile in (
        AlgorithmProfile(
            name='linear-search',
            category='search',
            time_complexity='O(n)',
            space_complexity='O(1)',
            best_case='O(1) - element at first position',
            average_case='O(n/2)',
            worst_case='O(n) - element at last position or not found',
        ),
        AlgorithmProfile(
            name='binary-search',
            category='search',
            time_complexity='O(log n)',
            space_complexity='O(1)',
            best_case='O(1) - element at middle position',
            average_case='O(log n)',
            worst_case='O(log n)',
            prerequisite='input sorted by the same ordering',
        ),
        AlgorithmProfile(
            name='hash-search',
            category='search',
            time_complexity='O(1) average, O(n) worst case',
            space_complexity='O(n)',
            best_case='O(1) - no collisions',
            average_case='O(1)',
            worst_case='O(n) - all keys hash to the same bucket',
        ),
        AlgorithmProfile(
            name='merge-sort',
            category='sort',
            time_complexity='O(n log n)',
            space_complexity='O(n)',
            best_case='O(n log n)',
            average_case='O(n log n)',
            worst_case='O(n log n)',
            stable=True,
            in_place=False,
        ),
        AlgorithmProfile(
            name='ring-buffer',
            category='container',
            time_complexity='O(1) enqueue/dequeue',
            space_complexity='O(capacity)',
            best_case='O(1)',
            average_case='O(1)',
            worst_case='O(1) - enqueue fails when full',
        ),
        AlgorithmProfile(
            name='deque',
            category='container',
            time_complexity='O(1) amortized at both ends',
            space_complexity='O(n)',
            best_case='O(1)',
            average_case='O(1) amortized',
            worst_case='O(n) - resize and relinearize when full',
        ),
    )
}


def get_profile(name: str) -> AlgorithmProfile:
    """
    Look up the profile of a catalogued algorithm.

    Raises:
        ValidationError: If name is not in the catalog
    """
    try:
        return _PROFILES[name]
    except KeyError:
        raise ValidationError(
            f"Unknown algorithm: {name}",
            field_name='name',
            value=name,
            allowed=sorted(_PROFILES)
        ) from None


def list_profiles() -> List[AlgorithmProfile]:
    return [_PROFILES[name] for name in sorted(_PROFILES)]


def compare_search(data: Sequence[Any], target: Any) -> Dict[str, Any]:
    """
    Run linear, binary and hash search for the same target.

    Binary search runs on a merge-sorted copy of data, so its index refers
    to that copy. The hash table is built before the timed lookup; only
    the lookup itself is timed.

    Args:
        data: Values to search, in any order
        target: Value to look for

    Returns:
        Dictionary with per-algorithm results, the fastest algorithm and
        the speedup of binary and hash search over linear search

    Raises:
        ValidationError: If target is None
    """
    if target is None:
        raise ValidationError("Search target is required", field_name='target')

    results: Dict[str, Dict[str, Any]] = {}

    linear = linear_search.search_with_metrics(data, target)
    results['linear-search'] = {
        'found': linear.found,
        'index': linear.result_index,
        'time_ns': linear.execution_time_ns,
        'comparisons': linear.comparisons,
    }

    sorted_data = merge_sort(data)
    searcher = BinarySearch()
    start_time = time.perf_counter_ns()
    binary_index = searcher.search(sorted_data, target)
    binary_time = time.perf_counter_ns() - start_time
    results['binary-search'] = {
        'found': binary_index is not None,
        'index': binary_index,
        'time_ns': binary_time,
        'comparisons': searcher.comparisons,
    }

    table: HashTable[Any, int] = HashTable()
    for index, value in enumerate(data):
        if value is not None and value not in table:
            table.put(value, index)
    start_time = time.perf_counter_ns()
    hash_index = table.get(target)
    hash_time = time.perf_counter_ns() - start_time
    results['hash-search'] = {
        'found': hash_index is not None,
        'index': hash_index,
        'time_ns': hash_time,
        'comparisons': 1,
    }

    fastest = min(results, key=lambda name: results[name]['time_ns'])
    # Clocks can report 0ns for very fast calls
    linear_time = max(linear.execution_time_ns, 1)
    return {
        'target': target,
        'data_size': len(data),
        'results': results,
        'fastest': fastest,
        'speedup_binary_vs_linear': linear_time / max(binary_time, 1),
        'speedup_hash_vs_linear': linear_time / max(hash_time, 1),
    }
