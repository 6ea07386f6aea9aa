"""Composite Cache: bounded in-process LRU in front of a durable storage backend.

Invariants:
    - get(): memory hit never touches the backend; backend hit is promoted to memory
    - put(): backend first; memory only after the backend write succeeded
    - A miss is None, never an exception
    - Strict LRU on both get and put; capacity fixed at construction
    - Lock held only around OrderedDict operations, never across backend IO

Design Decisions:
    - OrderedDict + move_to_end/popitem(last=False) for O(1) LRU
    - threading.Lock (not asyncio.Lock): critical sections never await, and the
      cache stays safe when touched from worker threads
    - Concurrent misses on one key may both write the backend; writes are
      idempotent (same key -> same bytes), so no pending/lock state is kept
"""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass

from sandwich.core.errors import BackendIOError, CacheWriteError
from sandwich.core.storage_protocols import StorageBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheStats:
    """Memory tier occupancy."""
    entries: int
    capacity: int


class CompositeCache:
    """Two-tier cache-aside store for encoded composites, keyed by cache key."""

    def __init__(self, backend: StorageBackend, capacity: int):
        if capacity < 1:
            raise ValueError(f"cache capacity must be positive, got {capacity}")
        self.backend = backend
        self.capacity = capacity
        self._memory: OrderedDict[str, bytes] = OrderedDict()
        self._lock = threading.Lock()

    async def get(self, key: str) -> bytes | None:
        """Memory tier first, then backend. None on a miss in both."""
        data = self._memory_get(key)
        if data is not None:
            logger.debug(f"Memory cache hit: {key}", extra={"cache_tier": "memory"})
            return data

        data = await self.backend.fetch_cached(key)
        if data is None:
            logger.debug(f"Cache miss: {key}")
            return None

        logger.debug(f"Backend cache hit: {key}", extra={"cache_tier": "backend"})
        self._memory_put(key, data)
        return data

    async def put(self, key: str, data: bytes) -> None:
        """Persist to the backend, then remember in memory.

        Raises CacheWriteError when the backend write fails; memory is untouched.
        """
        try:
            await self.backend.save_to_cache(key, data)
        except BackendIOError as e:
            raise CacheWriteError(key, e.message) from e
        self._memory_put(key, data)
        logger.info(f"Cached composite: {key}", extra={"cache_key": key})

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(entries=len(self._memory), capacity=self.capacity)

    def clear(self) -> None:
        """Drop the memory tier. The durable tier is never cleared here."""
        with self._lock:
            self._memory.clear()
        logger.info("Memory cache cleared")

    def __contains__(self, key: str) -> bool:
        """Memory-tier membership, without touching recency."""
        with self._lock:
            return key in self._memory

    def _memory_get(self, key: str) -> bytes | None:
        with self._lock:
            data = self._memory.get(key)
            if data is not None:
                self._memory.move_to_end(key)
            return data

    def _memory_put(self, key: str, data: bytes) -> None:
        with self._lock:
            self._memory[key] = data
            self._memory.move_to_end(key)
            while len(self._memory) > self.capacity:
                evicted, _ = self._memory.popitem(last=False)
                logger.debug(f"Evicted from memory cache: {evicted}")
