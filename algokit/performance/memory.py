"""
Memory sampling helpers.

A memory probe is any zero-argument callable returning a byte count. Two
are provided: process resident set size through psutil, which is what the
metrics tracker uses, and tracemalloc's traced allocations, which isolate
Python allocations from interpreter and allocator noise during analysis.
"""

import gc
import logging
import tracemalloc
from typing import Callable, Union

import psutil

from ..core.exceptions import ValidationError
from ..types.models import MemoryBackend

MemoryProbe = Callable[[], int]

logger = logging.getLogger('algokit.performance')

_process = psutil.Process()


def rss_bytes() -> int:
    """Resident set size of the current process in bytes."""
    return _process.memory_info().rss


class TracemallocProbe:
    """
    Memory probe reporting bytes currently traced by tracemalloc.

    Tracing starts lazily on the first sample; ``stop()`` ends it only if
    this probe was the one that started it.
    """

    def __init__(self):
        self._started_here = False

    def __call__(self) -> int:
        if not tracemalloc.is_tracing():
            tracemalloc.start()
            self._started_here = True
        current, _peak = tracemalloc.get_traced_memory()
        return current

    def stop(self) -> None:
        if self._started_here and tracemalloc.is_tracing():
            tracemalloc.stop()
        self._started_here = False


def get_memory_probe(backend: Union[str, MemoryBackend]) -> MemoryProbe:
    """
    Build the memory probe for a configured backend.

    Args:
        backend: "rss" or "tracemalloc"

    Returns:
        Callable returning a byte count

    Raises:
        ValidationError: If backend is not recognised
    """
    try:
        backend = MemoryBackend(backend)
    except ValueError:
        raise ValidationError(
            f"Unknown memory backend: {backend}",
            field_name='memory_backend',
            value=backend,
            allowed=[b.value for b in MemoryBackend]
        ) from None

    if backend == MemoryBackend.TRACEMALLOC:
        return TracemallocProbe()
    return rss_bytes


def collect_garbage() -> int:
    """
    Run a full garbage collection pass.

    Automatic collection is paused while the manual pass runs and restored
    afterwards.

    Returns:
        Number of unreachable objects found
    """
    gc_enabled = gc.isenabled()
    if gc_enabled:
        gc.disable()

    try:
        collected = gc.collect(2)
    finally:
        if gc_enabled:
            gc.enable()

    logger.debug(f"Garbage collection found {collected} unreachable objects")
    return collected
