"""
Unit tests for linear search utilities.
"""

from algokit.algorithms import linear_search
from algokit.algorithms.comparators import comparing, reverse_order
from algokit.types import SearchMetrics


class TestLinearSearch:
    """Test cases for exact-match scanning."""

    def test_search_returns_first_occurrence(self):
        assert linear_search.search([4, 2, 7, 2], 2) == 1
        assert linear_search.search([4, 2, 7, 2], 9) is None
        assert linear_search.search([], 1) is None
        assert linear_search.search([None, 1], None) is None

    def test_find_all(self):
        assert linear_search.find_all([4, 2, 7, 2, 2], 2) == [1, 3, 4]
        assert linear_search.find_all([4, 2], 5) == []

    def test_contains_and_count(self):
        items = ["a", "b", "a"]
        assert linear_search.contains(items, "a")
        assert not linear_search.contains(items, "z")
        assert linear_search.count(items, "a") == 2
        assert linear_search.count(items, None) == 0

    def test_conditions_return_indices(self):
        items = [1, 8, 3, 12, 5]
        assert linear_search.search_with_condition(items, lambda x: x > 6) == 1
        assert linear_search.search_with_condition(items, lambda x: x > 100) is None
        assert linear_search.find_all_with_condition(items, lambda x: x % 2 == 1) == [0, 2, 4]
        assert linear_search.count_with_condition(items, lambda x: x > 4) == 3

    def test_condition_indices_match_exact_search(self):
        items = [5, 8, 3, 8]
        assert linear_search.search(items, 8) == 1
        assert linear_search.search_with_condition(items, lambda x: x > 6) == 1
        assert linear_search.find_all_with_condition(items, lambda x: x > 6) == [1, 3]

    def test_conditions_skip_none_elements(self):
        items = [None, 4, None, 6]
        assert linear_search.search_with_condition(items, lambda x: x > 5) == 3
        assert linear_search.find_all_with_condition(items, lambda x: x % 2 == 0) == [1, 3]

    def test_any_and_all(self):
        assert linear_search.any_match([1, 2, 3], lambda x: x == 2)
        assert not linear_search.any_match([], lambda x: True)
        assert linear_search.all_match([2, 4], lambda x: x % 2 == 0)
        assert linear_search.all_match([], lambda x: False)


class TestMinMax:
    """Test cases for find_min and find_max."""

    def test_basic(self):
        items = [5, 3, 9, 1, 7]
        assert linear_search.find_min(items) == 3
        assert linear_search.find_max(items) == 2
        assert linear_search.find_min([5, 8, 3, 8]) == 2

    def test_none_elements_skipped(self):
        items = [None, 5, None, 2]
        assert linear_search.find_min(items) == 3
        assert linear_search.find_max(items) == 1
        assert linear_search.find_min([None, None]) is None
        assert linear_search.find_max([]) is None

    def test_first_of_equal_extremes_wins(self):
        records = [("first", 1), ("second", 1), ("third", 3), ("fourth", 3)]
        by_value = comparing(lambda record: record[1])
        assert linear_search.find_min(records, by_value) == 0
        assert linear_search.find_max(records, by_value) == 2
        assert linear_search.find_max([5, 8, 3, 8]) == 1

    def test_custom_comparator(self):
        assert linear_search.find_min([1, 5, 3], reverse_order) == 1


class TestSearchWithMetrics:
    """Test cases for the instrumented search."""

    def test_found(self):
        metrics = linear_search.search_with_metrics([10, 20, 30, 40], 30)
        assert isinstance(metrics, SearchMetrics)
        assert metrics.found
        assert metrics.result_index == 2
        assert metrics.comparisons == 3
        assert metrics.execution_time_ns >= 0

    def test_not_found_scans_everything(self):
        metrics = linear_search.search_with_metrics(list(range(50)), 99)
        assert not metrics.found
        assert metrics.result_index is None
        assert metrics.comparisons == 50
