"""Tests for core/formatters.py"""
import json
from nexus_games_mcp.core.formatters import (
    format_categories_json,
    format_game_markdown,
    format_games_json,
    format_games_markdown,
    format_paginated_json,
)
from nexus_games_mcp.core.models import (
    Author,
    Category,
    DownloadLink,
    Game,
    PaginatedResponse,
    SystemRequirements,
)


def _make_game(game_id: int = 1, **overrides) -> Game:
    fields = dict(
        id=game_id,
        title=f"Game {game_id}",
        slug=f"game-{game_id}",
        cover_image="https://cdn/cover.jpg",
        thumbnail="https://cdn/thumb.jpg",
        description="A long description.",
        excerpt="Short excerpt.",
        published_date="2024-01-01T00:00:00",
        author=Author(id=1, name="admin", slug="admin"),
        categories=(Category(id=12, name="PC", slug="pc", link="https://x/pc"),),
        download_links=(
            DownloadLink(kind="direct1", url="https://pixeldrain.com/u/a", label="<<< Alternatif: Link1 >>>"),
            DownloadLink(kind="torrent", url="https://t/x", label="<<< Torrent: İndir >>>", available=False),
        ),
        system_requirements=SystemRequirements(os="Windows 10", ram="8 GB", directx="DirectX 11"),
        permalink=f"https://x/game-{game_id}/",
    )
    fields.update(overrides)
    return Game(**fields)


def test_format_games_json_structure():
    output = format_games_json([_make_game(1), _make_game(2)])
    assert output["count"] == 2
    assert [g["id"] for g in output["games"]] == [1, 2]
    assert output["games"][0]["system_requirements"]["directx"] == "DirectX 11"
    json.dumps(output)  # serialisable


def test_format_game_markdown():
    output = format_game_markdown(_make_game())
    assert output.startswith("## Game 1\n")
    assert "**Categories**: PC" in output
    assert "Short excerpt." in output
    assert "- [direct1] <<< Alternatif: Link1 >>>: https://pixeldrain.com/u/a" in output
    assert "~~<<< Torrent: İndir >>>~~" in output
    assert "- **RAM**: 8 GB" in output
    assert "**CPU**" not in output  # empty fields skipped


def test_format_game_markdown_truncates_description():
    game = _make_game(excerpt="", description="x" * 2000, system_requirements=None, download_links=())
    output = format_game_markdown(game, max_description=100)
    assert "x" * 100 + "..." in output
    assert "x" * 101 not in output
    assert "### System Requirements" not in output


def test_format_games_markdown():
    output = format_games_markdown([_make_game(1), _make_game(2)], "Games, page 1")
    assert output.startswith("# Games, page 1\n")
    assert "**Games**: 2" in output
    assert "## Game 1" in output
    assert "## Game 2" in output


def test_format_paginated_json():
    response = PaginatedResponse(
        data=(_make_game(1),), page=2, limit=1, total=1, total_pages=1,
        has_next_page=True, has_previous_page=True,
    )
    output = format_paginated_json(response)
    assert output["page"] == 2
    assert output["has_next_page"] is True
    assert output["data"][0]["title"] == "Game 1"


def test_format_categories_json():
    output = format_categories_json([Category(id=12, name="PC", slug="pc", link="https://x/pc")])
    assert output == {"count": 1, "categories": [{"id": 12, "name": "PC", "slug": "pc", "link": "https://x/pc"}]}
