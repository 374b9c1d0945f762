"""
Binary search over sorted sequences.

Every search narrows a half-open or closed index range until the target is
found or the range is empty, so each call makes O(log n) comparisons. The
sequence must already be sorted by the comparator in use; unsorted input
gives unspecified results, which ``is_sorted`` can rule out in tests.

``BinarySearch`` counts the element comparisons made by the most recent
call. Module-level functions delegate to a shared default instance so
``get_comparisons()`` reports the cost of the last module-level search.
"""

from typing import Any, List, Optional, Sequence

from ..types.models import Comparator
from .comparators import natural_order


class BinarySearch:
    """
    Binary search family with a comparison counter.

    Attributes:
        comparisons (int): Element comparisons performed by the last call
    """

    def __init__(self):
        self.comparisons = 0

    def search(self, items: Sequence[Any], target: Any,
               comparator: Optional[Comparator] = None) -> Optional[int]:
        """
        Find the index of any element equal to target.

        Args:
            items: Sequence sorted by comparator
            target: Value to look for
            comparator: Ordering of items, natural order when omitted

        Returns:
            Index of a matching element, or None if target is absent
        """
        self.comparisons = 0
        if not items or target is None:
            return None

        compare = comparator or natural_order
        low, high = 0, len(items) - 1
        while low <= high:
            mid = low + (high - low) // 2
            result = self._compare(compare, items[mid], target)
            if result == 0:
                return mid
            if result < 0:
                low = mid + 1
            else:
                high = mid - 1
        return None

    def find_first(self, items: Sequence[Any], target: Any,
                   comparator: Optional[Comparator] = None) -> Optional[int]:
        """Index of the leftmost element equal to target, or None."""
        self.comparisons = 0
        if not items or target is None:
            return None

        compare = comparator or natural_order
        index = self._lower_bound(items, target, compare)
        if index < len(items) and self._compare(compare, items[index], target) == 0:
            return index
        return None

    def find_last(self, items: Sequence[Any], target: Any,
                  comparator: Optional[Comparator] = None) -> Optional[int]:
        """Index of the rightmost element equal to target, or None."""
        self.comparisons = 0
        if not items or target is None:
            return None

        compare = comparator or natural_order
        index = self._upper_bound(items, target, compare) - 1
        if index >= 0 and self._compare(compare, items[index], target) == 0:
            return index
        return None

    def range_search(self, items: Sequence[Any], min_value: Any, max_value: Any,
                     comparator: Optional[Comparator] = None) -> List[Any]:
        """
        Collect every element within [min_value, max_value].

        Two independent boundary searches locate the first element not
        below min_value and the last element not above max_value; the
        slice between them is the result, in input order.

        Args:
            items: Sequence sorted by comparator
            min_value: Inclusive lower bound
            max_value: Inclusive upper bound
            comparator: Ordering of items, natural order when omitted

        Returns:
            Matching elements, empty when the range holds nothing
        """
        self.comparisons = 0
        if not items or min_value is None or max_value is None:
            return []

        compare = comparator or natural_order
        if self._compare(compare, min_value, max_value) > 0:
            return []

        start = self._lower_bound(items, min_value, compare)
        end = self._upper_bound(items, max_value, compare)
        if start >= end:
            return []
        return list(items[start:end])

    def is_sorted(self, items: Sequence[Any], comparator: Optional[Comparator] = None) -> bool:
        """True when every adjacent pair is in non-decreasing order."""
        self.comparisons = 0
        compare = comparator or natural_order
        for i in range(1, len(items)):
            if self._compare(compare, items[i - 1], items[i]) > 0:
                return False
        return True

    def _lower_bound(self, items: Sequence[Any], target: Any, compare: Comparator) -> int:
        # First index whose element is not less than target
        low, high = 0, len(items)
        while low < high:
            mid = low + (high - low) // 2
            if self._compare(compare, items[mid], target) < 0:
                low = mid + 1
            else:
                high = mid
        return low

    def _upper_bound(self, items: Sequence[Any], target: Any, compare: Comparator) -> int:
        # First index whose element is greater than target
        low, high = 0, len(items)
        while low < high:
            mid = low + (high - low) // 2
            if self._compare(compare, items[mid], target) <= 0:
                low = mid + 1
            else:
                high = mid
        return low

    def _compare(self, compare: Comparator, a: Any, b: Any) -> int:
        self.comparisons += 1
        return compare(a, b)


# Global instance for the module-level helpers
_default_search = BinarySearch()


def search(items: Sequence[Any], target: Any, comparator: Optional[Comparator] = None) -> Optional[int]:
    return _default_search.search(items, target, comparator)


def find_first(items: Sequence[Any], target: Any, comparator: Optional[Comparator] = None) -> Optional[int]:
    return _default_search.find_first(items, target, comparator)


def find_last(items: Sequence[Any], target: Any, comparator: Optional[Comparator] = None) -> Optional[int]:
    return _default_search.find_last(items, target, comparator)


def range_search(items: Sequence[Any], min_value: Any, max_value: Any,
                 comparator: Optional[Comparator] = None) -> List[Any]:
    return _default_search.range_search(items, min_value, max_value, comparator)


def is_sorted(items: Sequence[Any], comparator: Optional[Comparator] = None) -> bool:
    return _default_search.is_sorted(items, comparator)


def get_comparisons() -> int:
    """Comparisons made by the last module-level search call."""
    return _default_search.comparisons
