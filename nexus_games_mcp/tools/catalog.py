"""
tools/catalog.py

MCP tools: get_categories, health_check, and the cache management tools
(clear_cache, _cache_clear_key, _cache_stats).
"""
from __future__ import annotations

from typing import Any

from ..core.config import provider_metadata
from ..core.formatters import format_categories_json
from ..core.provider import WordPressProvider


async def handle_get_categories(provider: WordPressProvider, arguments: dict[str, Any]) -> dict:
    """Returns {count, categories: [{id, name, slug, link}, ...]}."""
    return format_categories_json(await provider.get_categories())


async def handle_health_check(provider: WordPressProvider, arguments: dict[str, Any]) -> dict:
    healthy = await provider.health_check()
    return {"healthy": healthy, **provider_metadata(provider.get_config())}


async def handle_clear_cache(provider: WordPressProvider, arguments: dict[str, Any]) -> dict:
    await provider.clear_cache()
    return {"status": "ok", "message": "Cache cleared"}


async def handle_cache_clear_key(provider: WordPressProvider, arguments: dict[str, Any]) -> dict:
    """
    Input schema:
        key  (str) required — e.g. "games-1-10", "game-123", "categories"
    """
    key = str(arguments.get("key", "")).strip()
    if not key:
        return {"error": "key is required"}
    await provider.clear_cache_key(key)
    return {"status": "ok", "message": f"Cache key {key!r} cleared"}


async def handle_cache_stats(provider: WordPressProvider, arguments: dict[str, Any]) -> dict:
    return provider.cache_stats()
