"""Tests for the MCP tool handlers and server dispatch"""
import json

import httpx
import pytest
import pytest_asyncio
from nexus_games_mcp.core.config import ProviderConfig
from nexus_games_mcp.core.provider import WordPressProvider
from nexus_games_mcp.server import HANDLERS, TOOLS, dispatch_tool, read_resource_data

BASE_URL = "https://games.example.test"

POSTS = [
    {
        "id": i,
        "slug": f"game-{i}",
        "title": {"rendered": f"Game {i}"},
        "content": {"rendered": f'<a href="https://pixeldrain.com/u/{i}">Alternatif: Link1</a>'},
        "excerpt": {"rendered": ""},
        "date": "2024-01-01T00:00:00",
        "author": 1,
    }
    for i in range(1, 4)
]


def _handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/wp-json/wp/v2/categories":
        return httpx.Response(200, json=[{"id": 12, "name": "PC", "slug": "pc", "link": ""}])
    if path == "/wp-json/wp/v2/posts":
        return httpx.Response(200, json=POSTS[: int(request.url.params.get("per_page", 10))])
    if path == "/wp-json/wp/v2/posts/1":
        return httpx.Response(200, json=POSTS[0])
    return httpx.Response(404, json={"code": "rest_post_invalid_id"})


@pytest_asyncio.fixture
async def provider():
    client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
    yield WordPressProvider(ProviderConfig(base_url=BASE_URL), client=client)
    await client.aclose()


def test_every_tool_has_a_handler():
    assert sorted(t.name for t in TOOLS) == sorted(HANDLERS)


@pytest.mark.asyncio
async def test_get_games_json(provider):
    result = await dispatch_tool(provider, "get_games", {"page": 1, "limit": 2})
    assert result["count"] == 2
    assert result["games"][0]["download_links"][0]["kind"] == "direct1"
    json.dumps(result)


@pytest.mark.asyncio
async def test_get_games_markdown(provider):
    result = await dispatch_tool(provider, "get_games", {"output_format": "markdown"})
    assert result["count"] == 3
    assert "## Game 1" in result["content"]


@pytest.mark.asyncio
async def test_get_game_by_id(provider):
    found = await dispatch_tool(provider, "get_game_by_id", {"id": 1})
    assert found["found"] is True
    assert found["game"]["title"] == "Game 1"

    missing = await dispatch_tool(provider, "get_game_by_id", {"id": 42})
    assert missing == {"id": 42, "found": False}

    assert "error" in await dispatch_tool(provider, "get_game_by_id", {})


@pytest.mark.asyncio
async def test_search_games(provider):
    result = await dispatch_tool(provider, "search_games", {"query": "  "})
    assert result == {"count": 0, "games": [], "query": "  "}


@pytest.mark.asyncio
async def test_games_by_category(provider):
    result = await dispatch_tool(provider, "get_games_by_category", {"category_id": 12, "limit": 1})
    assert result["category_id"] == 12
    assert result["count"] == 1
    assert "error" in await dispatch_tool(provider, "get_games_by_category", {})


@pytest.mark.asyncio
async def test_paginated(provider):
    result = await dispatch_tool(provider, "get_games_paginated", {"page": 1, "limit": 3})
    assert result["total"] == 3
    assert result["has_next_page"] is True
    assert result["has_previous_page"] is False


@pytest.mark.asyncio
async def test_categories_and_health(provider):
    categories = await dispatch_tool(provider, "get_categories", {})
    assert categories["categories"][0]["id"] == 12

    health = await dispatch_tool(provider, "health_check", {})
    assert health["healthy"] is True
    assert health["name"] == "WordPress Provider"


@pytest.mark.asyncio
async def test_cache_management_tools(provider):
    await dispatch_tool(provider, "get_games", {"page": 1, "limit": 10})

    stats = await dispatch_tool(provider, "_cache_stats", {})
    assert stats["keys"] == ["games-1-10"]

    cleared = await dispatch_tool(provider, "_cache_clear_key", {"key": "games-1-10"})
    assert cleared["status"] == "ok"
    assert (await dispatch_tool(provider, "_cache_stats", {}))["entries"] == 0
    assert "error" in await dispatch_tool(provider, "_cache_clear_key", {})

    await dispatch_tool(provider, "get_categories", {})
    await dispatch_tool(provider, "clear_cache", {})
    assert (await dispatch_tool(provider, "_cache_stats", {}))["entries"] == 0


@pytest.mark.asyncio
async def test_unknown_tool(provider):
    result = await dispatch_tool(provider, "does_not_exist", {})
    assert result == {"error": "Unknown tool: does_not_exist"}


@pytest.mark.asyncio
async def test_resources(provider):
    stats = json.loads(read_resource_data(provider, "cache://stats"))
    assert stats["entries"] == 0

    config = json.loads(read_resource_data(provider, "provider://config"))
    assert config["base_url"] == BASE_URL
    assert config["config"]["has_api_key"] is False

    assert "error" in json.loads(read_resource_data(provider, "nope://x"))
