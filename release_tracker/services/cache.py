"""
In-Process Response Cache

Caches normalized Google Books responses to cut upstream calls.

Features:
- Time-to-live expiry checked on every read (lazy eviction)
- Periodic sweep that evicts expired entries nobody reads again
- Thread-safe: every operation holds one lock
- Injectable clock for tests

Cache Strategy:
- Key: the fully resolved upstream URL, so different queries and pages are
  different entries
- TTL: 1 hour (CACHE_TTL_SECONDS)
- No size bound and no LRU; memory is bounded by the sweep interval

The cache is process-local. Each application instance owns one, created in
the lifespan handler and stored on app.state.
"""

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    stored_at: float


class TTLCache:
    """
    Key/value store whose entries expire ttl_seconds after they were written.

    An entry is served while its age is below the TTL. Once the age reaches
    the TTL the entry is gone: get() evicts it on the spot and sweep() evicts
    it in bulk.

    Example:
        cache = TTLCache(ttl_seconds=3600)
        cache.put(url, payload)
        cache.get(url)  # payload, until an hour has passed
    """

    def __init__(
        self,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at >= self.ttl_seconds

    def get(self, key: str) -> Any | None:
        """
        Get a value from the cache.

        Args:
            key: Cache key

        Returns:
            Cached value, or None if absent or expired
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                logger.debug(f"Cache MISS: {key}")
                return None

            if self._is_expired(entry, self._clock()):
                del self._entries[key]
                logger.debug(f"Cache EXPIRED: {key}")
                return None

            logger.debug(f"Cache HIT: {key}")
            return entry.value

    def put(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous entry for the key."""
        with self._lock:
            self._entries[key] = CacheEntry(value=value, stored_at=self._clock())
        logger.debug(f"Cache SET: {key} (TTL: {self.ttl_seconds}s)")

    def sweep(self) -> int:
        """
        Evict every expired entry, read or not.

        Returns:
            Number of entries evicted
        """
        with self._lock:
            now = self._clock()
            expired = [
                key for key, entry in self._entries.items()
                if self._is_expired(entry, now)
            ]
            for key in expired:
                del self._entries[key]

        if expired:
            logger.info(f"Cleaned {len(expired)} expired cache entries")
        return len(expired)

    @property
    def size(self) -> int:
        """Number of stored entries, including expired ones not yet swept."""
        with self._lock:
            return len(self._entries)


# =============================================================================
# Background Sweep
# =============================================================================

async def run_periodic_sweep(cache: TTLCache, interval_seconds: float) -> None:
    """
    Sweep the cache every interval_seconds until cancelled.

    Started as an asyncio task in the application lifespan and cancelled
    on shutdown.
    """
    logger.info(f"Cache sweep scheduled every {interval_seconds}s")
    while True:
        await asyncio.sleep(interval_seconds)
        cache.sweep()
