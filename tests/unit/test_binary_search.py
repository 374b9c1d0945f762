"""
Unit tests for the binary search family.
"""

import math

import pytest

from algokit.algorithms import binary_search
from algokit.algorithms.binary_search import BinarySearch
from algokit.algorithms.comparators import case_insensitive, comparing, reverse_order


class TestBinarySearch:
    """Test cases for exact-match search."""

    def setup_method(self):
        self.searcher = BinarySearch()

    @pytest.mark.parametrize("target,expected", [(1, 0), (5, 2), (9, 4)])
    def test_finds_present_values(self, target, expected):
        assert self.searcher.search([1, 3, 5, 7, 9], target) == expected

    @pytest.mark.parametrize("target", [0, 4, 10])
    def test_absent_values(self, target):
        assert self.searcher.search([1, 3, 5, 7, 9], target) is None

    def test_empty_and_none_inputs(self):
        assert self.searcher.search([], 1) is None
        assert self.searcher.search([1, 2, 3], None) is None
        assert self.searcher.comparisons == 0

    def test_duplicates_return_some_matching_index(self):
        items = [1, 3, 3, 3, 5, 7]
        index = self.searcher.search(items, 3)
        assert items[index] == 3

    def test_custom_comparator(self):
        items = [9, 7, 5, 3, 1]
        assert self.searcher.search(items, 7, reverse_order) == 1

    def test_key_comparator(self):
        records = [("a", 1), ("b", 4), ("c", 9)]
        by_score = comparing(lambda record: record[1])
        assert self.searcher.search(records, ("?", 4), by_score) == 1

    @pytest.mark.parametrize("n", [16, 1000, 100_000])
    def test_comparisons_are_logarithmic(self, n):
        items = list(range(n))
        self.searcher.search(items, -1)
        assert self.searcher.comparisons <= math.floor(math.log2(n)) + 1


class TestBoundarySearch:
    """Test cases for find_first, find_last and range_search."""

    def setup_method(self):
        self.searcher = BinarySearch()

    def test_first_and_last_occurrence(self):
        items = [1, 3, 3, 3, 5, 7]
        assert self.searcher.find_first(items, 3) == 1
        assert self.searcher.find_last(items, 3) == 3

    def test_first_and_last_absent(self):
        items = [1, 3, 3, 3, 5, 7]
        assert self.searcher.find_first(items, 4) is None
        assert self.searcher.find_last(items, 4) is None
        assert self.searcher.find_first(items, 8) is None
        assert self.searcher.find_last(items, 0) is None

    def test_boundaries_bracket_every_match(self):
        items = sorted([5, 2, 8, 2, 2, 9, 1, 8])
        for value in set(items):
            first = self.searcher.find_first(items, value)
            last = self.searcher.find_last(items, value)
            assert items[first:last + 1] == [value] * items.count(value)
            assert first == 0 or items[first - 1] < value
            assert last == len(items) - 1 or items[last + 1] > value

    def test_range_search(self):
        assert self.searcher.range_search([1, 3, 3, 5, 7, 9], 2, 6) == [3, 3, 5]

    def test_range_search_inclusive_bounds(self):
        assert self.searcher.range_search([1, 3, 3, 5, 7, 9], 3, 7) == [3, 3, 5, 7]

    def test_range_search_empty_results(self):
        items = [1, 3, 5]
        assert self.searcher.range_search(items, 6, 2) == []
        assert self.searcher.range_search(items, 10, 20) == []
        assert self.searcher.range_search(items, 4, 4) == []
        assert self.searcher.range_search([], 1, 2) == []

    def test_range_search_case_insensitive(self):
        words = ["apple", "Banana", "cherry", "Date"]
        assert self.searcher.range_search(words, "b", "CZ", case_insensitive) == ["Banana", "cherry"]

    def test_is_sorted(self):
        assert self.searcher.is_sorted([])
        assert self.searcher.is_sorted([1, 1, 2])
        assert not self.searcher.is_sorted([2, 1])
        assert self.searcher.is_sorted([3, 2, 1], reverse_order)


class TestModuleFunctions:
    """Test cases for the shared module-level searcher."""

    def test_module_functions_delegate(self):
        items = [1, 3, 3, 3, 5, 7]
        assert binary_search.find_first(items, 3) == 1
        assert binary_search.find_last(items, 3) == 3
        assert binary_search.search(items, 7) == 5
        assert binary_search.range_search(items, 3, 5) == [3, 3, 3, 5]
        assert binary_search.is_sorted(items)

    def test_get_comparisons_reports_last_call(self):
        binary_search.search(list(range(1024)), 1023)
        assert 0 < binary_search.get_comparisons() <= 11

        binary_search.search([], 1)
        assert binary_search.get_comparisons() == 0
