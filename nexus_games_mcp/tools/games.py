"""
tools/games.py

MCP tools for the game query surface: get_games, get_game_by_id,
search_games, get_games_by_category, get_games_paginated.

Each handler takes the provider instance the server was started with and
the raw tool arguments, and returns a JSON-ready dict.  Provider errors
propagate to the server's call_tool, which reports them as tool errors.
"""
from __future__ import annotations

import logging
from typing import Any

from ..core.formatters import (
    format_game_markdown,
    format_games_json,
    format_games_markdown,
    format_paginated_json,
)
from ..core.provider import WordPressProvider

logger = logging.getLogger(__name__)


def _page_args(arguments: dict[str, Any]) -> tuple[int, int]:
    return int(arguments.get("page", 1)), int(arguments.get("limit", 10))


def _games_response(games: list, arguments: dict[str, Any], heading: str) -> dict:
    if str(arguments.get("output_format", "json")).lower() == "markdown":
        return {"count": len(games), "content": format_games_markdown(games, heading)}
    return format_games_json(games)


async def handle_get_games(provider: WordPressProvider, arguments: dict[str, Any]) -> dict:
    """
    Input schema:
        page           (int) optional — 1-based page (default 1)
        limit          (int) optional — games per page (default 10)
        output_format  (str) optional — json | markdown (default json)
    """
    page, limit = _page_args(arguments)
    games = await provider.get_games(page, limit)
    logger.info("get_games page=%d limit=%d → %d games", page, limit, len(games))
    return _games_response(games, arguments, f"Games, page {page}")


async def handle_get_game_by_id(provider: WordPressProvider, arguments: dict[str, Any]) -> dict:
    """
    Input schema:
        id             (int) required — WordPress post id
        output_format  (str) optional — json | markdown (default json)

    Returns {"found": false} when the post does not exist.
    """
    if "id" not in arguments:
        return {"error": "id is required"}
    game_id = int(arguments["id"])

    game = await provider.get_game_by_id(game_id)
    if game is None:
        return {"id": game_id, "found": False}
    if str(arguments.get("output_format", "json")).lower() == "markdown":
        return {"id": game_id, "found": True, "content": format_game_markdown(game)}
    return {"id": game_id, "found": True, "game": game.to_dict()}


async def handle_search_games(provider: WordPressProvider, arguments: dict[str, Any]) -> dict:
    """
    Input schema:
        query          (str) required
        output_format  (str) optional — json | markdown (default json)
    """
    query = str(arguments.get("query", ""))
    games = await provider.search_games(query)
    response = _games_response(games, arguments, f'Search: "{query.strip()}"')
    response["query"] = query
    return response


async def handle_get_games_by_category(provider: WordPressProvider, arguments: dict[str, Any]) -> dict:
    """
    Input schema:
        category_id    (int) required
        page, limit, output_format — as for get_games
    """
    if "category_id" not in arguments:
        return {"error": "category_id is required"}
    category_id = int(arguments["category_id"])
    page, limit = _page_args(arguments)

    games = await provider.get_games_by_category(category_id, page, limit)
    response = _games_response(games, arguments, f"Category {category_id}, page {page}")
    response["category_id"] = category_id
    return response


async def handle_get_games_paginated(provider: WordPressProvider, arguments: dict[str, Any]) -> dict:
    """
    Input schema:
        page   (int) optional (default 1)
        limit  (int) optional (default 10)

    ``total`` and ``has_next_page`` are estimated from the fetched page.
    """
    page, limit = _page_args(arguments)
    return format_paginated_json(await provider.get_games_paginated(page, limit))
