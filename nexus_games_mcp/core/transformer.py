"""
core/transformer.py

WordPress post payload → Game.

Pure functions over the JSON returned by ``/wp-json/wp/v2/posts`` (with
``_embed``).  Missing or malformed embedded data degrades to defaults
instead of failing the whole post.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from .gallery import extract_gallery
from .links import extract_links
from .models import Author, AvatarUrls, Category, Game, Tag
from .normalizer import normalize
from .requirements import extract_requirements

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _first(value: Any) -> Dict[str, Any]:
    """First element of an embedded list, or {}."""
    if isinstance(value, list) and value:
        return _as_dict(value[0])
    return {}


def _rendered(post: Dict[str, Any], key: str) -> str:
    field = post.get(key)
    if isinstance(field, dict):
        return str(field.get("rendered") or "")
    if isinstance(field, str):
        return field
    return ""


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _str(value: Any) -> str:
    return str(value) if value is not None else ""


# ---------------------------------------------------------------------------
# Embedded sub-payloads
# ---------------------------------------------------------------------------

def transform_term(term: Dict[str, Any]) -> Category:
    return Category(
        id=_int(term.get("id")),
        name=normalize(_str(term.get("name"))),
        slug=_str(term.get("slug")),
        link=_str(term.get("link")),
    )


def transform_terms(terms: Any) -> List[Category]:
    if not isinstance(terms, list):
        return []
    return [transform_term(t) for t in terms if isinstance(t, dict)]


def _transform_tags(terms: Any) -> List[Tag]:
    return [Tag(id=c.id, name=c.name, slug=c.slug, link=c.link) for c in transform_terms(terms)]


def transform_author(post: Dict[str, Any]) -> Author:
    data = _first(_as_dict(post.get("_embedded")).get("author"))
    # WordPress embeds {"code": "rest_user_invalid_id", ...} for hidden authors
    if not data or "name" not in data:
        return Author.unknown(_int(post.get("author")))
    avatars = _as_dict(data.get("avatar_urls"))
    return Author(
        id=_int(data.get("id"), _int(post.get("author"))),
        name=_str(data.get("name")),
        slug=_str(data.get("slug")),
        link=_str(data.get("link")),
        avatar_urls=AvatarUrls(
            size24=_str(avatars.get("24")),
            size48=_str(avatars.get("48")),
            size96=_str(avatars.get("96")),
        ),
    )


def _featured_images(embedded: Dict[str, Any]) -> tuple:
    media = _first(embedded.get("wp:featuredmedia"))
    cover = _str(media.get("source_url"))
    sizes = _as_dict(_as_dict(media.get("media_details")).get("sizes"))
    thumbnail = _str(_as_dict(sizes.get("thumbnail")).get("source_url")) or cover
    return cover, thumbnail


def _term_group(embedded: Dict[str, Any], index: int) -> Sequence[Any]:
    groups = embedded.get("wp:term")
    if isinstance(groups, list) and len(groups) > index and isinstance(groups[index], list):
        return groups[index]
    return []


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def transform_post(post: Dict[str, Any]) -> Game:
    """Build a Game from one WordPress post payload."""
    embedded = _as_dict(post.get("_embedded"))
    content = _rendered(post, "content")
    cover, thumbnail = _featured_images(embedded)

    game = Game(
        id=_int(post.get("id")),
        title=normalize(_rendered(post, "title")),
        slug=_str(post.get("slug")),
        cover_image=cover,
        thumbnail=thumbnail,
        description=normalize(content),
        excerpt=normalize(_rendered(post, "excerpt")),
        published_date=_str(post.get("date")),
        author=transform_author(post),
        categories=tuple(transform_terms(_term_group(embedded, 0))),
        tags=tuple(_transform_tags(_term_group(embedded, 1))),
        download_links=tuple(extract_links(content)),
        system_requirements=extract_requirements(content),
        permalink=_str(post.get("link")),
        media_gallery=tuple(extract_gallery(content)),
    )
    logger.debug(
        "Transformed post %d: %d links, requirements=%s, %d images",
        game.id, len(game.download_links), game.system_requirements is not None, len(game.media_gallery),
    )
    return game


def transform_posts(posts: Any) -> List[Game]:
    if not isinstance(posts, list):
        return []
    return [transform_post(p) for p in posts if isinstance(p, dict)]
