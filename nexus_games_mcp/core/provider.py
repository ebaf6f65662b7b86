"""
core/provider.py

WordPressProvider: the query surface over a WordPress game site.

Every query is memoised in a TTLCache under a readable key:

    games-{page}-{limit}            get_games
    game-{id}                       get_game_by_id (None results included)
    search-{query}                  search_games
    category-{id}-{page}-{limit}    get_games_by_category
    categories                      get_categories

Concurrent misses on the same key are not coalesced; each issues its own
request and the last one to finish owns the slot.
"""
from __future__ import annotations

import logging
import math
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from .cache import MISSING, Clock, TTLCache, make_cache_key
from .config import (
    CATEGORIES_PER_PAGE,
    DEFAULT_CATEGORIES_ENDPOINT,
    DEFAULT_HEADERS,
    PROVIDER_NAME,
    ProviderConfig,
)
from .errors import ProviderError, TransportError
from .fetcher import NOT_FOUND, build_http_client, fetch_json
from .models import Category, Game, PaginatedResponse
from .transformer import transform_post, transform_posts, transform_terms

logger = logging.getLogger(__name__)


class WordPressProvider:
    """
    Game provider backed by the WordPress REST API.

    Build one per process and hand it to whoever needs it::

        async with WordPressProvider(OYUNINDIR_CONFIG) as provider:
            games = await provider.get_games(1, 10)

    Pass *client* to reuse an existing httpx.AsyncClient (it will not be
    closed by the provider) and *clock* to control cache expiry in tests.
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        config: ProviderConfig,
        client: Optional[httpx.AsyncClient] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        config.validate()
        self._config = config
        self._clock = clock
        self._cache = TTLCache(config.cache_expiry, clock=clock)
        self._owns_client = client is None
        self._client = client or build_http_client(config.request_timeout)
        logger.info("%s initialised for %s", self.name, config.base_url)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "WordPressProvider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def get_config(self) -> ProviderConfig:
        return self._config.copy()

    async def update_config(self, **changes: Any) -> None:
        """Apply *changes* to the config and drop every cached entry."""
        config = self._config.copy(**changes)
        config.validate()
        self._config = config
        self._cache = TTLCache(config.cache_expiry, clock=self._clock)
        logger.info("%s config updated, cache cleared", self.name)

    # ------------------------------------------------------------------
    # Request helpers
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        headers = dict(DEFAULT_HEADERS)
        if self._config.api_key:
            headers["Authorization"] = f"Bearer {self._config.api_key}"
        headers.update(self._config.headers)
        return headers

    def _params(self, **params: Any) -> Dict[str, Any]:
        if self._config.embed:
            params["_embed"] = "1"
        return {k: v for k, v in params.items() if v is not None}

    async def _get(self, path: str, context: str, allow_not_found: bool = False, **params: Any) -> Any:
        return await fetch_json(
            self._client,
            self._url(path),
            provider=self.name,
            context=context,
            params=params,
            headers=self._headers(),
            timeout=self._config.request_timeout,
            allow_not_found=allow_not_found,
        )

    def _expect_list(self, payload: Any, context: str) -> List[Any]:
        if not isinstance(payload, list):
            raise TransportError(
                self.name, context, f"Unexpected response: expected a list, got {type(payload).__name__}"
            )
        return payload

    async def _cached(self, key: str, load: Callable[[], Awaitable[Any]]) -> Any:
        value = await self._cache.get(key)
        if value is not MISSING:
            return value
        value = await load()
        await self._cache.set(key, value)
        return value

    async def _fetch_games(self, context: str, **params: Any) -> tuple:
        payload = await self._get(self._config.api_endpoint, context, **self._params(**params))
        return tuple(transform_posts(self._expect_list(payload, context)))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_games(self, page: int = 1, limit: int = 10) -> List[Game]:
        """One page of the newest games (at most posts_per_page items)."""
        async def load() -> tuple:
            return await self._fetch_games(
                "Failed to fetch games",
                page=page,
                per_page=min(limit, self._config.posts_per_page),
            )

        return list(await self._cached(make_cache_key("games", page, limit), load))

    async def get_game_by_id(self, game_id: int) -> Optional[Game]:
        """The game with post id *game_id*, or None if the site returns 404."""
        context = f"Failed to fetch game with id {game_id}"

        async def load() -> Optional[Game]:
            # Single resources are addressed by path, not by an ?id= parameter
            payload = await self._get(
                f"{self._config.api_endpoint.rstrip('/')}/{game_id}",
                context,
                allow_not_found=True,
                **self._params(),
            )
            if payload is NOT_FOUND:
                return None
            if not isinstance(payload, dict):
                raise TransportError(
                    self.name, context, f"Unexpected response: expected an object, got {type(payload).__name__}"
                )
            return transform_post(payload)

        return await self._cached(make_cache_key("game", game_id), load)

    async def search_games(self, query: str) -> List[Game]:
        """Full-text search; a blank query returns [] without a request."""
        if not query or not query.strip():
            return []

        async def load() -> tuple:
            return await self._fetch_games(
                f"Failed to search games: {query}",
                search=query,
                per_page=self._config.posts_per_page,
            )

        return list(await self._cached(make_cache_key("search", query), load))

    async def get_games_by_category(self, category_id: int, page: int = 1, limit: int = 10) -> List[Game]:
        async def load() -> tuple:
            return await self._fetch_games(
                f"Failed to fetch games for category {category_id}",
                page=page,
                per_page=min(limit, self._config.posts_per_page),
                categories=category_id,
            )

        return list(await self._cached(make_cache_key("category", category_id, page, limit), load))

    async def get_categories(self) -> List[Category]:
        """Up to 100 flat category terms."""
        context = "Failed to fetch categories"

        async def load() -> tuple:
            payload = await self._get(DEFAULT_CATEGORIES_ENDPOINT, context, per_page=CATEGORIES_PER_PAGE)
            return tuple(transform_terms(self._expect_list(payload, context)))

        return list(await self._cached(make_cache_key("categories"), load))

    async def get_games_paginated(self, page: int = 1, limit: int = 10) -> PaginatedResponse[Game]:
        """
        get_games() plus navigation metadata.

        The REST listing is not asked for its real total, so ``total`` is the
        size of this page and ``has_next_page`` means "this page was full".
        """
        games = await self.get_games(page, limit)
        return PaginatedResponse(
            data=tuple(games),
            page=page,
            limit=limit,
            total=len(games),
            total_pages=math.ceil(len(games) / limit) if limit else 0,
            has_next_page=len(games) == limit,
            has_previous_page=page > 1,
        )

    async def health_check(self) -> bool:
        """True if a one-item listing can be fetched."""
        try:
            await self.get_games(1, 1)
        except ProviderError as exc:
            logger.warning("%s health check failed: %s", self.name, exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Cache management
    # ------------------------------------------------------------------

    async def clear_cache(self) -> None:
        await self._cache.clear()

    async def clear_cache_key(self, key: str) -> None:
        await self._cache.delete(key)

    def cache_stats(self) -> dict:
        return {"keys": self._cache.keys(), **self._cache.stats()}
