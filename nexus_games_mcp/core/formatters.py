"""
core/formatters.py

Output formatters for tool responses: json (structured dict) and markdown.
"""
from __future__ import annotations

from io import StringIO
from typing import List, Optional, Sequence

from .models import Category, Game, PaginatedResponse


def format_games_json(games: Sequence[Game]) -> dict:
    return {"count": len(games), "games": [g.to_dict() for g in games]}


def format_game_markdown(game: Game, max_description: int = 1500) -> str:
    buf = StringIO()
    buf.write(f"## {game.title}\n")
    buf.write(f"*{game.published_date} · {game.author.name} · {game.permalink}*\n\n")
    if game.categories:
        buf.write("**Categories**: " + ", ".join(c.name for c in game.categories) + "\n\n")

    if game.excerpt:
        buf.write(game.excerpt)
        buf.write("\n\n")
    elif game.description:
        desc = game.description
        if len(desc) > max_description:
            desc = desc[:max_description] + "..."
        buf.write(desc)
        buf.write("\n\n")

    if game.download_links:
        buf.write("### Downloads\n")
        for link in game.download_links:
            label = link.label if link.available else f"~~{link.label}~~"
            buf.write(f"- [{link.kind}] {label}: {link.url}\n")
        buf.write("\n")

    req = game.system_requirements
    if req is not None:
        buf.write("### System Requirements\n")
        for name, value in (
            ("OS", req.os), ("CPU", req.cpu), ("GPU", req.gpu),
            ("RAM", req.ram), ("Storage", req.storage), ("DirectX", req.directx),
        ):
            if value:
                buf.write(f"- **{name}**: {value}\n")
        buf.write("\n")
    return buf.getvalue()


def format_games_markdown(games: Sequence[Game], heading: Optional[str] = None) -> str:
    buf = StringIO()
    if heading:
        buf.write(f"# {heading}\n\n")
    buf.write(f"**Games**: {len(games)}\n\n---\n\n")
    for game in games:
        buf.write(format_game_markdown(game))
        buf.write("---\n\n")
    return buf.getvalue()


def format_paginated_json(response: PaginatedResponse) -> dict:
    return response.to_dict()


def format_categories_json(categories: List[Category]) -> dict:
    return {"count": len(categories), "categories": [c.to_dict() for c in categories]}
