"""
core/cache.py

In-process TTL cache for provider responses.

Entries store (value, created_at).  An entry is stale once
``clock() - created_at > ttl`` and is then dropped and reported as a miss.
None is a legitimate cached value (a post that does not exist), so misses
are signalled with the MISSING sentinel rather than None.

The clock is injectable so expiry can be tested without sleeping.
"""
from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


# ---------------------------------------------------------------------------
# Cache key builder
# ---------------------------------------------------------------------------

def make_cache_key(operation: str, *args: Any) -> str:
    """Return a readable key such as ``games-1-10`` or ``search-portal``."""
    return "-".join([operation, *(str(a) for a in args)])


# ---------------------------------------------------------------------------
# TTL cache
# ---------------------------------------------------------------------------

class TTLCache:
    """asyncio-safe mapping with per-entry TTL and optional LRU bound."""

    def __init__(
        self,
        ttl: float,
        max_size: Optional[int] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self._ttl = ttl
        self._max_size = max_size
        self._clock = clock
        self._store: OrderedDict[str, tuple[Any, float]] = OrderedDict()
        self._lock = asyncio.Lock()

    @property
    def ttl(self) -> float:
        return self._ttl

    def is_fresh(self, created_at: float) -> bool:
        return self._clock() - created_at <= self._ttl

    async def get(self, key: str) -> Any:
        """Return the cached value, or MISSING if absent or stale."""
        async with self._lock:
            if key not in self._store:
                logger.debug("Cache MISS: %s", key)
                return MISSING
            value, created_at = self._store[key]
            if not self.is_fresh(created_at):
                del self._store[key]
                logger.debug("Cache EXPIRED: %s", key)
                return MISSING
            self._store.move_to_end(key)
            logger.debug("Cache HIT: %s", key)
            return value

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            if key in self._store:
                self._store.move_to_end(key)
            self._store[key] = (value, self._clock())
            if self._max_size is not None and len(self._store) > self._max_size:
                self._store.popitem(last=False)  # evict oldest

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._store.pop(key, None)

    async def clear(self) -> None:
        async with self._lock:
            self._store.clear()

    def keys(self) -> list[str]:
        return list(self._store.keys())

    @property
    def size(self) -> int:
        return len(self._store)

    def stats(self) -> dict:
        now = self._clock()
        fresh = sum(1 for _, created_at in self._store.values() if now - created_at <= self._ttl)
        return {
            "entries": self.size,
            "fresh_entries": fresh,
            "ttl_seconds": self._ttl,
            "max_size": self._max_size,
        }
