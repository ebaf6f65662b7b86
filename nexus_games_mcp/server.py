"""
nexus_games_mcp/server.py

MCP server entry point.

Exposes:
  Tools:
    • get_games              — one page of games
    • get_game_by_id         — a single game by WordPress post id
    • search_games           — full-text search
    • get_categories         — category list (up to 100)
    • get_games_by_category  — one page of a category
    • get_games_paginated    — get_games plus pagination metadata
    • health_check           — can the site be reached?
    • clear_cache            — drop every cached response

  Management tools:
    • _cache_clear_key       — drop one cached response
    • _cache_stats           — cache statistics

  Resources (read-only):
    • cache://stats          — cache statistics
    • provider://config      — active provider configuration

The provider is built once in main() from NEXUS_PROVIDER_* environment
variables and handed to create_app().
"""
from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, Awaitable, Callable, Dict

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Resource, TextContent, Tool

from .core.config import config_from_environment, provider_metadata
from .core.provider import WordPressProvider
from .tools.catalog import (
    handle_cache_clear_key,
    handle_cache_stats,
    handle_clear_cache,
    handle_get_categories,
    handle_health_check,
)
from .tools.games import (
    handle_get_game_by_id,
    handle_get_games,
    handle_get_games_by_category,
    handle_get_games_paginated,
    handle_search_games,
)

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "WARNING").upper(), logging.WARNING),
    format="%(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

Handler = Callable[[WordPressProvider, Dict[str, Any]], Awaitable[dict]]

# ---------------------------------------------------------------------------
# Tool input schemas
# ---------------------------------------------------------------------------

_PAGE = {"type": "integer", "description": "1-based page number (default 1)", "default": 1}
_LIMIT = {"type": "integer", "description": "Games per page (default 10)", "default": 10}
_OUTPUT_FORMAT = {
    "type": "string",
    "enum": ["json", "markdown"],
    "description": "Response format: json (structured) or markdown (default json)",
    "default": "json",
}

TOOLS = [
    Tool(
        name="get_games",
        description=(
            "Fetch one page of the newest games from the site. Each game carries its "
            "download links (with host kind and availability), system requirements, "
            "categories, tags and screenshot gallery."
        ),
        inputSchema={
            "type": "object",
            "properties": {"page": _PAGE, "limit": _LIMIT, "output_format": _OUTPUT_FORMAT},
        },
    ),
    Tool(
        name="get_game_by_id",
        description="Fetch a single game by its WordPress post id. Returns found=false if it does not exist.",
        inputSchema={
            "type": "object",
            "properties": {
                "id": {"type": "integer", "description": "WordPress post id"},
                "output_format": _OUTPUT_FORMAT,
            },
            "required": ["id"],
        },
    ),
    Tool(
        name="search_games",
        description="Full-text search over game posts. An empty query returns no results.",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search query"},
                "output_format": _OUTPUT_FORMAT,
            },
            "required": ["query"],
        },
    ),
    Tool(
        name="get_categories",
        description="List the site's game categories (up to 100, flat).",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="get_games_by_category",
        description="Fetch one page of games in a category (see get_categories for ids).",
        inputSchema={
            "type": "object",
            "properties": {
                "category_id": {"type": "integer", "description": "Category id"},
                "page": _PAGE,
                "limit": _LIMIT,
                "output_format": _OUTPUT_FORMAT,
            },
            "required": ["category_id"],
        },
    ),
    Tool(
        name="get_games_paginated",
        description=(
            "Like get_games but wrapped with page, limit, total, total_pages, has_next_page "
            "and has_previous_page. Totals are estimated from the fetched page."
        ),
        inputSchema={"type": "object", "properties": {"page": _PAGE, "limit": _LIMIT}},
    ),
    Tool(
        name="health_check",
        description="Check that the site answers a minimal listing request.",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="clear_cache",
        description="Drop every cached response so the next queries hit the site.",
        inputSchema={"type": "object", "properties": {}},
    ),
]

MANAGEMENT_TOOLS = [
    Tool(
        name="_cache_clear_key",
        description="[Management] Drop one cached response, e.g. 'games-1-10', 'game-123', 'categories'.",
        inputSchema={
            "type": "object",
            "properties": {"key": {"type": "string"}},
            "required": ["key"],
        },
    ),
    Tool(
        name="_cache_stats",
        description="[Management] Return current cache statistics.",
        inputSchema={"type": "object", "properties": {}},
    ),
]

TOOLS.extend(MANAGEMENT_TOOLS)

HANDLERS: Dict[str, Handler] = {
    "get_games": handle_get_games,
    "get_game_by_id": handle_get_game_by_id,
    "search_games": handle_search_games,
    "get_categories": handle_get_categories,
    "get_games_by_category": handle_get_games_by_category,
    "get_games_paginated": handle_get_games_paginated,
    "health_check": handle_health_check,
    "clear_cache": handle_clear_cache,
    "_cache_clear_key": handle_cache_clear_key,
    "_cache_stats": handle_cache_stats,
}

# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------

RESOURCES = [
    Resource(
        uri="cache://stats",
        name="Cache Statistics",
        description="Read-only cache statistics (entries, fresh entries, TTL, cached keys).",
        mimeType="application/json",
    ),
    Resource(
        uri="provider://config",
        name="Provider Configuration",
        description="The active provider configuration (API key redacted).",
        mimeType="application/json",
    ),
]


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

async def dispatch_tool(provider: WordPressProvider, name: str, arguments: Dict[str, Any]) -> dict:
    handler = HANDLERS.get(name)
    if handler is None:
        return {"error": f"Unknown tool: {name}"}
    return await handler(provider, arguments or {})


def read_resource_data(provider: WordPressProvider, uri: str) -> str:
    if uri == "cache://stats":
        return json.dumps(provider.cache_stats(), indent=2)
    if uri == "provider://config":
        config = provider.get_config()
        return json.dumps({**provider_metadata(config), "config": config.to_dict()}, indent=2)
    return json.dumps({"error": f"Unknown resource: {uri}"})


# ---------------------------------------------------------------------------
# Server setup
# ---------------------------------------------------------------------------

def create_app(provider: WordPressProvider) -> Server:
    app = Server("nexus-games-mcp")

    @app.list_tools()
    async def list_tools() -> list[Tool]:
        return TOOLS

    @app.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
        try:
            result = await dispatch_tool(provider, name, arguments)
            return CallToolResult(
                content=[TextContent(type="text", text=json.dumps(result, ensure_ascii=False, indent=2))]
            )
        except Exception as exc:
            logger.exception("Tool %r raised: %s", name, exc)
            return CallToolResult(
                content=[TextContent(type="text", text=json.dumps({"error": str(exc)}, ensure_ascii=False))],
                isError=True,
            )

    @app.list_resources()
    async def list_resources() -> list[Resource]:
        return RESOURCES

    @app.read_resource()
    async def read_resource(uri: Any) -> list[ReadResourceContents]:
        return [ReadResourceContents(content=read_resource_data(provider, str(uri)), mime_type="application/json")]

    return app


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

async def _serve() -> None:
    config = config_from_environment()
    logger.info("Starting nexus-games-mcp server for %s", config.base_url)
    async with WordPressProvider(config) as provider:
        app = create_app(provider)
        async with stdio_server() as (read_stream, write_stream):
            await app.run(
                read_stream,
                write_stream,
                app.create_initialization_options(),
            )


def main() -> None:
    asyncio.run(_serve())


if __name__ == "__main__":
    main()
