"""Tests for core/cache.py"""
import pytest
from nexus_games_mcp.core.cache import MISSING, TTLCache, make_cache_key


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.mark.asyncio
async def test_set_get():
    cache = TTLCache(ttl=60)
    await cache.set("games-1-10", {"data": "value1"})
    assert await cache.get("games-1-10") == {"data": "value1"}


@pytest.mark.asyncio
async def test_miss_returns_sentinel():
    cache = TTLCache(ttl=60)
    assert await cache.get("nonexistent") is MISSING


@pytest.mark.asyncio
async def test_none_is_cacheable():
    cache = TTLCache(ttl=60)
    await cache.set("game-404", None)
    assert await cache.get("game-404") is None


@pytest.mark.asyncio
async def test_fresh_until_ttl_then_expired():
    clock = FakeClock()
    cache = TTLCache(ttl=300, clock=clock)
    await cache.set("k", "v")

    clock.advance(300)
    assert await cache.get("k") == "v"

    clock.advance(0.001)
    assert await cache.get("k") is MISSING
    assert cache.size == 0  # stale entry dropped


@pytest.mark.asyncio
async def test_set_refreshes_timestamp():
    clock = FakeClock()
    cache = TTLCache(ttl=10, clock=clock)
    await cache.set("k", 1)
    clock.advance(8)
    await cache.set("k", 2)
    clock.advance(8)
    assert await cache.get("k") == 2


@pytest.mark.asyncio
async def test_lru_eviction():
    cache = TTLCache(ttl=60, max_size=3)
    for i in range(4):
        await cache.set(f"key{i}", i)
    # key0 should have been evicted (LRU)
    assert await cache.get("key0") is MISSING
    assert await cache.get("key3") == 3


@pytest.mark.asyncio
async def test_delete_and_clear():
    cache = TTLCache(ttl=60)
    await cache.set("key1", "v1")
    await cache.set("key2", "v2")
    await cache.delete("key1")
    await cache.delete("never-set")
    assert cache.keys() == ["key2"]
    await cache.clear()
    assert cache.size == 0


@pytest.mark.asyncio
async def test_stats():
    clock = FakeClock()
    cache = TTLCache(ttl=5, max_size=100, clock=clock)
    await cache.set("a", 1)
    clock.advance(10)
    await cache.set("b", 2)
    assert cache.stats() == {"entries": 2, "fresh_entries": 1, "ttl_seconds": 5, "max_size": 100}


def test_cache_key_format():
    assert make_cache_key("games", 1, 10) == "games-1-10"
    assert make_cache_key("game", 123) == "game-123"
    assert make_cache_key("categories") == "categories"


def test_cache_key_different_args():
    assert make_cache_key("search", "portal") != make_cache_key("search", "portal 2")
    assert make_cache_key("category", 12, 1, 10) != make_cache_key("category", 12, 2, 10)
