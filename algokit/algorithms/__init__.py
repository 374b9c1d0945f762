"""
Search and sort algorithms.

This package provides:
- Comparators shared by every ordered operation
- The binary search family with a comparison counter
- Linear search utilities with no ordering precondition
- Stable merge sort
- A catalog of documented complexity profiles
"""

from . import binary_search, linear_search
from .binary_search import BinarySearch
from .catalog import compare_search, get_profile, list_profiles
from .comparators import case_insensitive, comparing, natural_order, reverse_order
from .merge_sort import estimate_comparisons, merge_sort, sort_strings

__all__ = [
    'binary_search',
    'linear_search',
    'BinarySearch',
    'compare_search',
    'get_profile',
    'list_profiles',
    'case_insensitive',
    'comparing',
    'natural_order',
    'reverse_order',
    'estimate_comparisons',
    'merge_sort',
    'sort_strings',
]
