"""
core/links.py

Download-link extraction from a post body.

Posts list their mirrors as anchors whose label is entity-encoded
pseudo-markup, e.g.::

    <a href="https://pixeldrain.com/u/x"><strong>&lt;&lt;&lt; Alternatif: Link1 &gt;&gt;&gt;</strong></a>

Dead mirrors are struck through with ``<del>``.
"""
from __future__ import annotations

import re
import urllib.parse
from typing import Callable, List, Optional, Tuple

from .models import DOWNLOAD_LINK_KINDS, DownloadLink
from .normalizer import collapse_whitespace, decode_entities, strip_tags

# ---------------------------------------------------------------------------
# Compiled regex patterns
# ---------------------------------------------------------------------------

RE_ANCHOR = re.compile(
    r"""<a\s[^>]*?\bhref\s*=\s*["']([^"']+)["'][^>]*>(.*?)</a\s*>""",
    re.IGNORECASE | re.DOTALL,
)
RE_DEL_OPEN   = re.compile(r"<del\b[^>]*>", re.IGNORECASE)
RE_DEL_CLOSE  = re.compile(r"</del\s*>", re.IGNORECASE)
RE_LINK_NUMBER = re.compile(r"Link\s*(\d+)", re.IGNORECASE)

# How far back from an anchor to look for an enclosing <del>
DEL_LOOKBEHIND = 50

LINK_SCHEMES = ("http", "https", "ftp", "magnet")

# Host substring → kind, checked in order
URL_KINDS: Tuple[Tuple[str, str], ...] = (
    ("pixeldrain", "pixeldrain"),
    ("mediafire", "mediafire"),
    ("drive.google.com", "googledrive"),
)


# ---------------------------------------------------------------------------
# Kind classification
# ---------------------------------------------------------------------------

def _torrent_label(label: str, url: str) -> Optional[str]:
    return "torrent" if "torrent" in label.lower() else None


def _turbobit_url(label: str, url: str) -> Optional[str]:
    return "turbobit" if "turbobit" in url else None


def _alternatif_label(label: str, url: str) -> Optional[str]:
    if "alternatif" not in label.lower():
        return None
    match = RE_LINK_NUMBER.search(label)
    if match:
        kind = f"direct{int(match.group(1))}"
        if kind in DOWNLOAD_LINK_KINDS:
            return kind
    return "direct"


def _url_host(label: str, url: str) -> Optional[str]:
    for needle, kind in URL_KINDS:
        if needle in url:
            return kind
    if "torrent" in url.lower():
        return "torrent"
    return None


# First rule returning a kind wins
LINK_RULES: Tuple[Callable[[str, str], Optional[str]], ...] = (
    _torrent_label,
    _turbobit_url,
    _alternatif_label,
    _url_host,
)


def classify_link(label: str, url: str) -> str:
    """Return the download-link kind for a (label, url) pair."""
    for rule in LINK_RULES:
        kind = rule(label, url)
        if kind is not None:
            return kind
    return "direct"


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def clean_label(inner_html: str) -> str:
    """
    Turn anchor inner HTML into a label.

    Entities are decoded *before* tags are stripped so that ``&lt;&lt;&lt;``
    becomes literal ``<<<`` text that the tag pattern does not touch.
    """
    return collapse_whitespace(strip_tags(decode_entities(inner_html)))


def is_struck_through(html: str, start: int, anchor_html: str) -> bool:
    """True if the anchor at *start* sits inside an unclosed <del>."""
    if RE_DEL_OPEN.search(anchor_html):
        return True
    window = html[max(0, start - DEL_LOOKBEHIND):start]
    last_open = max((m.start() for m in RE_DEL_OPEN.finditer(window)), default=-1)
    last_close = max((m.start() for m in RE_DEL_CLOSE.finditer(window)), default=-1)
    return last_open > last_close


def _is_absolute(url: str) -> bool:
    try:
        parsed = urllib.parse.urlparse(url)
    except ValueError:
        return False
    if parsed.scheme == "magnet":
        return True
    return parsed.scheme in LINK_SCHEMES and bool(parsed.netloc)


def extract_links(html: Optional[str]) -> List[DownloadLink]:
    """Return every labelled, absolute anchor in *html* as a DownloadLink."""
    if not html:
        return []

    links: List[DownloadLink] = []
    for match in RE_ANCHOR.finditer(html):
        url = decode_entities(match.group(1)).strip()
        if not url or not _is_absolute(url):
            continue

        label = clean_label(match.group(2))
        if not label:
            continue

        links.append(
            DownloadLink(
                kind=classify_link(label, url),
                url=url,
                label=label,
                available=not is_struck_through(html, match.start(), match.group(0)),
            )
        )
    return links
