"""
algokit: data structures, search/sort algorithms and empirical complexity analysis.

Subpackages:
- containers: RingBuffer, Deque, HashTable
- algorithms: comparators, binary and linear search, merge sort, catalog
- performance: operation metrics tracker and complexity analyzer
- core: configuration and exceptions
"""

__version__ = "1.0.0"
