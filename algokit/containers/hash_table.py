"""
Separate-chaining hash table.

Keys are distributed over a list of buckets by ``hash(key) % capacity``;
colliding entries share a bucket's chain. Before a new key is inserted the
table doubles until the load factor bound still holds after the insert,
so ``size <= capacity * load_factor`` is true after every ``put``.
"""

import logging
from typing import TypeVar, Generic, List, Optional, Iterator, Any, Dict, Callable, Tuple

from ..core.exceptions import ConfigurationError, ValidationError

K = TypeVar('K')
V = TypeVar('V')

DEFAULT_INITIAL_CAPACITY = 16
DEFAULT_LOAD_FACTOR = 0.75

logger = logging.getLogger('algokit.containers')


class _Entry(Generic[K, V]):
    __slots__ = ('key', 'value')

    def __init__(self, key: K, value: V):
        self.key = key
        self.value = value

    def __repr__(self) -> str:
        return f"{self.key!r}={self.value!r}"


class HashTable(Generic[K, V]):
    """
    Mapping with average O(1) put, get and remove.

    Attributes:
        load_factor (float): Maximum ratio of entries to buckets
        collisions (int): Inserts of a new key into a non-empty bucket
        resize_count (int): Number of times the bucket array has doubled
    """

    def __init__(self, initial_capacity: int = DEFAULT_INITIAL_CAPACITY,
                 load_factor: float = DEFAULT_LOAD_FACTOR):
        """
        Initialize an empty table.

        Args:
            initial_capacity: Number of buckets allocated up front
            load_factor: Resize threshold, in the range (0, 1]

        Raises:
            ConfigurationError: If either argument is out of range
        """
        invalid_values = {}
        if isinstance(initial_capacity, bool) or not isinstance(initial_capacity, int) or initial_capacity <= 0:
            invalid_values['initial_capacity'] = initial_capacity
        if isinstance(load_factor, bool) or not isinstance(load_factor, (int, float)) \
                or not 0 < load_factor <= 1:
            invalid_values['load_factor'] = load_factor
        if invalid_values:
            raise ConfigurationError(
                "Hash table requires a positive capacity and a load factor in (0, 1]",
                invalid_values=invalid_values
            )

        self.load_factor = float(load_factor)
        self._buckets: List[List[_Entry[K, V]]] = [[] for _ in range(initial_capacity)]
        self._size = 0
        self.collisions = 0
        self.resize_count = 0

    @property
    def capacity(self) -> int:
        return len(self._buckets)

    def put(self, key: K, value: V) -> Optional[V]:
        """
        Insert or replace the value stored under key.

        Args:
            key: Hashable key, must not be None
            value: Value to store

        Returns:
            The previous value for key, or None if key was new

        Raises:
            ValidationError: If key is None
        """
        self._check_key(key)

        bucket = self._buckets[self._index(key, len(self._buckets))]
        for entry in bucket:
            if entry.key == key:
                old_value = entry.value
                entry.value = value
                return old_value

        resized = False
        while self._size + 1 > len(self._buckets) * self.load_factor:
            self._resize(len(self._buckets) * 2)
            resized = True
        if resized:
            bucket = self._buckets[self._index(key, len(self._buckets))]

        if bucket:
            self.collisions += 1
        bucket.append(_Entry(key, value))
        self._size += 1
        return None

    def get(self, key: K) -> Optional[V]:
        """Value stored under key, or None if absent."""
        entry = self._find_entry(key)
        return entry.value if entry is not None else None

    def remove(self, key: K) -> Optional[V]:
        """
        Delete key from the table.

        Returns:
            The removed value, or None if key was absent
        """
        self._check_key(key)

        bucket = self._buckets[self._index(key, len(self._buckets))]
        for i, entry in enumerate(bucket):
            if entry.key == key:
                del bucket[i]
                self._size -= 1
                return entry.value
        return None

    def contains_key(self, key: K) -> bool:
        return self._find_entry(key) is not None

    def keys(self) -> List[K]:
        return [entry.key for bucket in self._buckets for entry in bucket]

    def values(self) -> List[V]:
        return [entry.value for bucket in self._buckets for entry in bucket]

    def items(self) -> List[Tuple[K, V]]:
        return [(entry.key, entry.value) for bucket in self._buckets for entry in bucket]

    def find_first(self, predicate: Callable[[K, V], bool]) -> Optional[V]:
        """
        First value, in bucket order, whose entry satisfies predicate.

        Args:
            predicate: Called with (key, value) for each entry

        Returns:
            The matching value, or None if no entry matches
        """
        for bucket in self._buckets:
            for entry in bucket:
                if predicate(entry.key, entry.value):
                    return entry.value
        return None

    def find_all(self, predicate: Callable[[K, V], bool]) -> List[V]:
        """All values whose (key, value) entry satisfies predicate."""
        return [
            entry.value
            for bucket in self._buckets
            for entry in bucket
            if predicate(entry.key, entry.value)
        ]

    def clear(self) -> None:
        """Remove all entries; capacity and counters are kept."""
        for bucket in self._buckets:
            bucket.clear()
        self._size = 0

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    def current_load_factor(self) -> float:
        return self._size / len(self._buckets)

    def average_chain_length(self) -> float:
        """Mean number of entries in the non-empty buckets."""
        used = sum(1 for bucket in self._buckets if bucket)
        return self._size / used if used else 0.0

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the table.

        Returns:
            Dictionary with size, capacity, load and collision figures
        """
        return {
            'size': self._size,
            'capacity': len(self._buckets),
            'load_factor': self.load_factor,
            'current_load_factor': self.current_load_factor(),
            'collisions': self.collisions,
            'resize_count': self.resize_count,
            'average_chain_length': self.average_chain_length(),
        }

    def _resize(self, new_capacity: int) -> None:
        old_buckets = self._buckets
        self._buckets = [[] for _ in range(new_capacity)]
        for bucket in old_buckets:
            for entry in bucket:
                self._buckets[self._index(entry.key, new_capacity)].append(entry)
        self.resize_count += 1
        logger.debug(f"Hash table resized from {len(old_buckets)} to {new_capacity} buckets")

    def _find_entry(self, key: K) -> Optional[_Entry[K, V]]:
        self._check_key(key)
        for entry in self._buckets[self._index(key, len(self._buckets))]:
            if entry.key == key:
                return entry
        return None

    @staticmethod
    def _index(key: K, capacity: int) -> int:
        return hash(key) % capacity

    @staticmethod
    def _check_key(key: Any) -> None:
        if key is None:
            raise ValidationError("Hash table keys cannot be None", field_name='key')

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: Any) -> bool:
        return self.contains_key(key)

    def __getitem__(self, key: K) -> V:
        entry = self._find_entry(key)
        if entry is None:
            raise KeyError(key)
        return entry.value

    def __setitem__(self, key: K, value: V) -> None:
        self.put(key, value)

    def __delitem__(self, key: K) -> None:
        entry = self._find_entry(key)
        if entry is None:
            raise KeyError(key)
        self.remove(key)

    def __iter__(self) -> Iterator[K]:
        return iter(self.keys())

    def __repr__(self) -> str:
        return f"HashTable(size={self._size}, capacity={len(self._buckets)}, load_factor={self.load_factor})"
