"""
Container data structures.

This package provides the circular-array containers and the chained hash
table used throughout algokit:
- RingBuffer: fixed-capacity FIFO queue
- Deque: growable double-ended queue
- HashTable: separate-chaining map with resize-before-insert
"""

from .ring_buffer import RingBuffer
from .deque import Deque
from .hash_table import HashTable

__all__ = [
    'RingBuffer',
    'Deque',
    'HashTable',
]
