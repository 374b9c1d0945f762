"""
Three-way comparators used by the search and sort functions.

A comparator takes two values and returns a negative number, zero or a
positive number when the first sorts before, equal to or after the second.
"""

from typing import Any, Callable

from ..types.models import Comparator


def natural_order(a: Any, b: Any) -> int:
    """Compare with the values' own ``<`` and ``>`` operators."""
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def reverse_order(a: Any, b: Any) -> int:
    return natural_order(b, a)


def case_insensitive(a: str, b: str) -> int:
    """Compare strings ignoring case, like ``str.casefold`` ordering."""
    return natural_order(a.casefold(), b.casefold())


def comparing(key: Callable[[Any], Any], comparator: Comparator = natural_order) -> Comparator:
    """
    Build a comparator that orders values by an extracted key.

    Args:
        key: Function extracting the sort key from each value
        comparator: Ordering applied to the extracted keys

    Returns:
        Comparator over the original values
    """
    def compare(a: Any, b: Any) -> int:
        return comparator(key(a), key(b))

    return compare
