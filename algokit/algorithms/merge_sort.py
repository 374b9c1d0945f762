"""
Stable top-down merge sort.

The input is split at its midpoint, both halves are sorted recursively and
the results are merged; on ties the merge takes the element from the left
half, which keeps equal elements in their original relative order. The
caller's sequence is never modified.
"""

import math
from typing import Any, Callable, List, Optional, Sequence

from ..types.models import Comparator
from .comparators import case_insensitive, comparing, natural_order


def merge_sort(items: Sequence[Any], comparator: Optional[Comparator] = None,
               key: Optional[Callable[[Any], Any]] = None) -> List[Any]:
    """
    Return a new list with the elements of items in sorted order.

    Args:
        items: Sequence to sort, left untouched
        comparator: Three-way ordering, natural order when omitted
        key: Optional key extractor applied before comparator

    Returns:
        Sorted copy of items
    """
    compare = comparator or natural_order
    if key is not None:
        compare = comparing(key, compare)
    return _sort(list(items), compare)


def sort_strings(items: Sequence[str]) -> List[str]:
    """Sort strings case-insensitively, keeping the input order of case variants."""
    return merge_sort(items, case_insensitive)


def estimate_comparisons(n: int) -> int:
    """Approximate comparisons made sorting n elements: floor(n log2 n)."""
    if n <= 1:
        return 0
    return int(n * math.log2(n))


def _sort(items: List[Any], compare: Comparator) -> List[Any]:
    if len(items) <= 1:
        return items

    mid = len(items) // 2
    left = _sort(items[:mid], compare)
    right = _sort(items[mid:], compare)
    return _merge(left, right, compare)


def _merge(left: List[Any], right: List[Any], compare: Comparator) -> List[Any]:
    merged = []
    i = j = 0
    while i < len(left) and j < len(right):
        # <= keeps the left element first on ties
        if compare(left[i], right[j]) <= 0:
            merged.append(left[i])
            i += 1
        else:
            merged.append(right[j])
            j += 1

    merged.extend(left[i:])
    merged.extend(right[j:])
    return merged
