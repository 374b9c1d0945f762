"""
Fixed-capacity circular FIFO buffer.

This module provides a ring buffer over a pre-allocated list. Front and
rear cursors wrap around with modular arithmetic so enqueue and dequeue
never shift elements. A full buffer refuses new items instead of growing;
``push_evicting`` is available for callers that want bounded history.
"""

from typing import TypeVar, Generic, List, Optional, Iterator, Any, Dict

from ..core.exceptions import ConfigurationError, ValidationError

T = TypeVar('T')

DEFAULT_CAPACITY = 50


class RingBuffer(Generic[T]):
    """
    Bounded FIFO queue backed by a circular array.

    Not thread-safe; a buffer has a single owner.

    Attributes:
        capacity (int): Maximum number of items the buffer can hold
        _items (list): Pre-allocated slots, ``None`` where unoccupied
        _front (int): Index of the oldest item
        _rear (int): Index of the next free slot
        _count (int): Number of stored items
    """

    __slots__ = ('capacity', '_items', '_front', '_rear', '_count')

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        """
        Initialize an empty ring buffer.

        Args:
            capacity: Maximum number of items the buffer can hold

        Raises:
            ConfigurationError: If capacity is not a positive integer
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ConfigurationError(
                "Ring buffer capacity must be a positive integer",
                invalid_values={'capacity': capacity}
            )

        self.capacity = capacity
        self._items: List[Optional[T]] = [None] * capacity
        self._front = 0
        self._rear = 0
        self._count = 0

    def enqueue(self, item: T) -> bool:
        """
        Append an item at the rear.

        Args:
            item: Item to store, must not be None

        Returns:
            False if the buffer is full and nothing was stored, True otherwise

        Raises:
            ValidationError: If item is None
        """
        if item is None:
            raise ValidationError("Ring buffer items cannot be None", field_name='item')

        if self._count == self.capacity:
            return False

        self._items[self._rear] = item
        self._rear = (self._rear + 1) % self.capacity
        self._count += 1
        return True

    def dequeue(self) -> Optional[T]:
        """
        Remove and return the oldest item.

        Returns:
            The oldest item, or None if the buffer is empty
        """
        if self._count == 0:
            return None

        item = self._items[self._front]
        self._items[self._front] = None
        self._front = (self._front + 1) % self.capacity
        self._count -= 1

        if self._count == 0:
            self._front = 0
            self._rear = 0

        return item

    def push_evicting(self, item: T) -> Optional[T]:
        """
        Append an item, dropping the oldest one when the buffer is full.

        Args:
            item: Item to store, must not be None

        Returns:
            The evicted item, or None if nothing had to be evicted
        """
        if item is None:
            raise ValidationError("Ring buffer items cannot be None", field_name='item')

        evicted = self.dequeue() if self._count == self.capacity else None
        self.enqueue(item)
        return evicted

    def peek(self) -> Optional[T]:
        """Oldest item without removing it, or None when empty."""
        if self._count == 0:
            return None
        return self._items[self._front]

    def peek_rear(self) -> Optional[T]:
        """Newest item without removing it, or None when empty."""
        if self._count == 0:
            return None
        return self._items[(self._rear - 1) % self.capacity]

    def clear(self) -> None:
        """Remove all items and release their references."""
        for i in range(self.capacity):
            self._items[i] = None
        self._front = 0
        self._rear = 0
        self._count = 0

    def size(self) -> int:
        return self._count

    def is_empty(self) -> bool:
        return self._count == 0

    def is_full(self) -> bool:
        return self._count == self.capacity

    def remaining_capacity(self) -> int:
        return self.capacity - self._count

    def utilization(self) -> float:
        """
        Get the fill level of the buffer.

        Returns:
            Percentage of slots in use, between 0.0 and 100.0
        """
        return self._count / self.capacity * 100.0

    def to_list(self) -> List[T]:
        """
        Convert buffer to a list.

        Returns:
            List containing all items from oldest to newest
        """
        return [self._items[(self._front + i) % self.capacity] for i in range(self._count)]

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the buffer.

        Returns:
            Dictionary with buffer statistics
        """
        return {
            'capacity': self.capacity,
            'size': self._count,
            'remaining_capacity': self.remaining_capacity(),
            'is_full': self.is_full(),
            'utilization': self.utilization(),
        }

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[T]:
        return iter(self.to_list())

    def __contains__(self, item: Any) -> bool:
        for i in range(self._count):
            if self._items[(self._front + i) % self.capacity] == item:
                return True
        return False

    def __repr__(self) -> str:
        preview = ", ".join(repr(item) for item in self.to_list()[:5])
        if self._count > 5:
            preview += ", ..."
        return f"RingBuffer(size={self._count}, capacity={self.capacity}, items=[{preview}])"
