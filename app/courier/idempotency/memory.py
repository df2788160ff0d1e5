"""In-process idempotency cache with TTL expiry."""

import heapq
import threading
from typing import Any, Dict, List, Optional, Tuple

from courier.clock import Clock, SystemClock
from courier.idempotency.cache import IdempotencyCache
from courier.logging import get_module_logger

logger = get_module_logger()


class InMemoryIdempotencyCache(IdempotencyCache):
    """Thread-safe dict-backed cache.

    Entries expire ``ttl_seconds`` after they were set, measured on the
    injected clock's monotonic time. A read of an expired key drops it, and
    every write purges all entries that have expired, so the cache only
    holds live entries plus whatever expired since the last write.

    Args:
        clock: Time source, SystemClock by default
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or SystemClock()
        self._entries: Dict[str, Tuple[float, Dict[str, Any]]] = {}
        # (expires_at, key) min-heap; stale pairs from overwrites are skipped
        self._expiry_heap: List[Tuple[float, str]] = []
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            expires_at, response = entry
            if self._clock.monotonic() >= expires_at:
                del self._entries[key]
                self._misses += 1
                logger.debug("idempotency_cache_expired", key=key)
                return None

            self._hits += 1
            return response

    def set(self, key: str, response: Dict[str, Any], ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        with self._lock:
            now = self._clock.monotonic()
            purged = self._purge_expired(now)
            expires_at = now + ttl_seconds
            self._entries[key] = (expires_at, response)
            heapq.heappush(self._expiry_heap, (expires_at, key))
        if purged:
            logger.debug("idempotency_cache_purged", purged=purged)
        logger.debug("idempotency_cache_set", key=key, ttl_seconds=ttl_seconds)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._expiry_heap.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "backend": "memory",
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
            }

    def _purge_expired(self, now: float) -> int:
        """Drop expired entries. Caller holds the lock."""
        purged = 0
        while self._expiry_heap and self._expiry_heap[0][0] <= now:
            expires_at, key = heapq.heappop(self._expiry_heap)
            entry = self._entries.get(key)
            if entry is not None and entry[0] == expires_at:
                del self._entries[key]
                purged += 1
        return purged
