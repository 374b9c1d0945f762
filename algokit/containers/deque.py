"""
Growable double-ended queue over a circular array.

Both ends support O(1) insertion and removal; when the array fills up its
capacity doubles and the items are copied so the logical front lands on
index 0 of the new array.
"""

import logging
from typing import TypeVar, Generic, List, Optional, Iterator, Any, Dict

from ..core.exceptions import ConfigurationError, ValidationError

T = TypeVar('T')

DEFAULT_INITIAL_CAPACITY = 16
GROWTH_FACTOR = 2

logger = logging.getLogger('algokit.containers')


class Deque(Generic[T]):
    """
    Double-ended queue with amortized O(1) operations at both ends.

    ``_front_index`` points at the first item and ``_back_index`` at the
    last one. Not thread-safe.
    """

    __slots__ = ('_items', '_front_index', '_back_index', '_size')

    def __init__(self, initial_capacity: int = DEFAULT_INITIAL_CAPACITY):
        """
        Initialize an empty deque.

        Args:
            initial_capacity: Number of slots allocated up front

        Raises:
            ConfigurationError: If initial_capacity is not a positive integer
        """
        if isinstance(initial_capacity, bool) or not isinstance(initial_capacity, int) or initial_capacity <= 0:
            raise ConfigurationError(
                "Deque capacity must be a positive integer",
                invalid_values={'initial_capacity': initial_capacity}
            )

        self._items: List[Optional[T]] = [None] * initial_capacity
        self._front_index = 0
        self._back_index = initial_capacity - 1
        self._size = 0

    @property
    def capacity(self) -> int:
        return len(self._items)

    def add_front(self, item: T) -> None:
        """
        Insert an item before the current front.

        Raises:
            ValidationError: If item is None
        """
        self._check_item(item)
        if self._size == len(self._items):
            self._grow()

        self._front_index = (self._front_index - 1) % len(self._items)
        self._items[self._front_index] = item
        self._size += 1

        if self._size == 1:
            self._back_index = self._front_index

    def add_back(self, item: T) -> None:
        """
        Insert an item after the current back.

        Raises:
            ValidationError: If item is None
        """
        self._check_item(item)
        if self._size == len(self._items):
            self._grow()

        self._back_index = (self._back_index + 1) % len(self._items)
        self._items[self._back_index] = item
        self._size += 1

        if self._size == 1:
            self._front_index = self._back_index

    def remove_front(self) -> Optional[T]:
        """Remove and return the front item, or None when empty."""
        if self._size == 0:
            return None

        item = self._items[self._front_index]
        self._items[self._front_index] = None
        self._front_index = (self._front_index + 1) % len(self._items)
        self._size -= 1

        if self._size == 0:
            self._reset_cursors()
        return item

    def remove_back(self) -> Optional[T]:
        """Remove and return the back item, or None when empty."""
        if self._size == 0:
            return None

        item = self._items[self._back_index]
        self._items[self._back_index] = None
        self._back_index = (self._back_index - 1) % len(self._items)
        self._size -= 1

        if self._size == 0:
            self._reset_cursors()
        return item

    def peek_front(self) -> Optional[T]:
        if self._size == 0:
            return None
        return self._items[self._front_index]

    def peek_back(self) -> Optional[T]:
        if self._size == 0:
            return None
        return self._items[self._back_index]

    def clear(self) -> None:
        """Remove all items, keeping the current capacity."""
        for i in range(len(self._items)):
            self._items[i] = None
        self._size = 0
        self._reset_cursors()

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    def is_full(self) -> bool:
        """True when the next insertion will trigger a resize."""
        return self._size == len(self._items)

    def to_list(self) -> List[T]:
        """Items from front to back."""
        capacity = len(self._items)
        return [self._items[(self._front_index + i) % capacity] for i in range(self._size)]

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the deque.

        Returns:
            Dictionary with size, capacity and load factor
        """
        return {
            'size': self._size,
            'capacity': len(self._items),
            'load_factor': self._size / len(self._items),
            'is_empty': self._size == 0,
        }

    def _grow(self) -> None:
        old_items = self._items
        old_capacity = len(old_items)
        new_capacity = old_capacity * GROWTH_FACTOR

        # Copy in logical order so the front lands on index 0
        self._items = [None] * new_capacity
        for i in range(self._size):
            self._items[i] = old_items[(self._front_index + i) % old_capacity]

        self._front_index = 0
        self._back_index = self._size - 1
        logger.debug(f"Deque resized from {old_capacity} to {new_capacity} slots")

    def _reset_cursors(self) -> None:
        self._front_index = 0
        self._back_index = len(self._items) - 1

    @staticmethod
    def _check_item(item: Any) -> None:
        if item is None:
            raise ValidationError("Deque items cannot be None", field_name='item')

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[T]:
        return iter(self.to_list())

    def __repr__(self) -> str:
        return f"Deque(size={self._size}, capacity={len(self._items)}, items={self.to_list()!r})"
