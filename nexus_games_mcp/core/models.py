"""
core/models.py

Frozen dataclasses for everything the provider returns: Game and its
parts, plus the PaginatedResponse envelope.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, Optional, Tuple, TypeVar

DownloadLinkKind = Literal[
    "direct", "direct1", "direct2", "direct3",
    "torrent", "mediafire", "googledrive", "pixeldrain", "turbobit",
    "other",
]

DOWNLOAD_LINK_KINDS: Tuple[str, ...] = (
    "direct", "direct1", "direct2", "direct3",
    "torrent", "mediafire", "googledrive", "pixeldrain", "turbobit",
    "other",
)


@dataclass(frozen=True)
class DownloadLink:
    """One anchor found in a post body."""
    kind: DownloadLinkKind
    url: str
    label: str
    available: bool = True

    def to_dict(self) -> dict:
        return {"kind": self.kind, "url": self.url, "label": self.label, "available": self.available}


@dataclass(frozen=True)
class SystemRequirements:
    """Minimum PC requirements.  An empty string means the field was not found."""
    os: str = ""
    cpu: str = ""
    gpu: str = ""
    ram: str = ""
    storage: str = ""
    directx: Optional[str] = None
    additional: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "os": self.os,
            "cpu": self.cpu,
            "gpu": self.gpu,
            "ram": self.ram,
            "storage": self.storage,
            "directx": self.directx,
            "additional": self.additional,
        }


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    slug: str
    link: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "slug": self.slug, "link": self.link}


@dataclass(frozen=True)
class Tag:
    id: int
    name: str
    slug: str
    link: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "slug": self.slug, "link": self.link}


@dataclass(frozen=True)
class AvatarUrls:
    size24: str = ""
    size48: str = ""
    size96: str = ""

    def to_dict(self) -> dict:
        return {"24": self.size24, "48": self.size48, "96": self.size96}


@dataclass(frozen=True)
class Author:
    id: int
    name: str
    slug: str
    link: str = ""
    avatar_urls: AvatarUrls = AvatarUrls()

    @classmethod
    def unknown(cls, author_id: int = 0) -> "Author":
        """Placeholder used when the post does not embed author data."""
        return cls(id=author_id, name="Unknown", slug="unknown")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "link": self.link,
            "avatar_urls": self.avatar_urls.to_dict(),
        }


@dataclass(frozen=True)
class Game:
    """A game rebuilt from one WordPress post.  All text fields are plain text."""
    id: int
    title: str
    slug: str
    cover_image: str
    thumbnail: str
    description: str
    excerpt: str
    published_date: str
    author: Author
    categories: Tuple[Category, ...] = ()
    tags: Tuple[Tag, ...] = ()
    download_links: Tuple[DownloadLink, ...] = ()
    system_requirements: Optional[SystemRequirements] = None
    permalink: str = ""
    media_gallery: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "cover_image": self.cover_image,
            "thumbnail": self.thumbnail,
            "description": self.description,
            "excerpt": self.excerpt,
            "published_date": self.published_date,
            "author": self.author.to_dict(),
            "categories": [c.to_dict() for c in self.categories],
            "tags": [t.to_dict() for t in self.tags],
            "download_links": [l.to_dict() for l in self.download_links],
            "system_requirements": (
                self.system_requirements.to_dict() if self.system_requirements else None
            ),
            "permalink": self.permalink,
            "media_gallery": list(self.media_gallery),
        }


T = TypeVar("T")


@dataclass(frozen=True)
class PaginatedResponse(Generic[T]):
    """One page of results plus navigation metadata."""
    data: Tuple[T, ...]
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    def to_dict(self) -> dict:
        return {
            "data": [item.to_dict() for item in self.data],  # type: ignore[attr-defined]
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "total_pages": self.total_pages,
            "has_next_page": self.has_next_page,
            "has_previous_page": self.has_previous_page,
        }
