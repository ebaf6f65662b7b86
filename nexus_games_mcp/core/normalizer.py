"""
core/normalizer.py

HTML fragment → plain text.

normalize() removes every tag, namespaced (``<o:p>``) and custom
(``<lite-youtube>``) ones included, before decoding entities.
strip_tags() only removes tokens that look like real tags (``<name ...>`` /
``</name>``), so decorative pseudo-markup such as
``<<< Alternatif: Link1 >>>`` survives when entities are decoded first.
All regex patterns are compiled once at module import.
"""
from __future__ import annotations

import re
from typing import Optional

# ---------------------------------------------------------------------------
# Entity table
# ---------------------------------------------------------------------------

ENTITIES = {
    "&lt;": "<",
    "&gt;": ">",
    "&amp;": "&",
    "&nbsp;": " ",
    "&quot;": '"',
    "&#8211;": "-",
    "&#8230;": "...",
    "&hellip;": "...",
    "&#60;": "<",
    "&#62;": ">",
    "&#38;": "&",
    "&#160;": " ",
    "&#34;": '"',
    "&#038;": "&",
    "&#8216;": "'",
    "&#8217;": "'",
    "&#8220;": '"',
    "&#8221;": '"',
}

# ---------------------------------------------------------------------------
# Compiled regex patterns
# ---------------------------------------------------------------------------

RE_ENTITY      = re.compile("|".join(re.escape(e) for e in ENTITIES), re.IGNORECASE)
RE_BR          = re.compile(r"<br\s*/?>", re.IGNORECASE)
RE_P_END       = re.compile(r"</p\s*>", re.IGNORECASE)
RE_COMMENTS    = re.compile(r"<!--.*?-->", re.DOTALL)
RE_TAG         = re.compile(r"</?[a-z][a-z0-9]*(?:\s[^>]*)?/?>", re.IGNORECASE)
# Any bracketed token that does not open with "<<" or "< "; catches <o:p> and <custom-element>
RE_ANY_TAG     = re.compile(r"<[^<>\s][^<>]*>")
RE_BLOCKS      = re.compile(r"<(script|style|noscript)[^>]*>.*?</\1\s*>", re.DOTALL | re.IGNORECASE)
RE_HSPACE      = re.compile(r"[^\S\n]+")
RE_SPACE_NL    = re.compile(r" *\n *")
RE_MULTI_NL    = re.compile(r"\n{3,}")
RE_WHITESPACE  = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def decode_entities(text: str) -> str:
    """Decode the fixed entity table in a single pass (no double decoding)."""
    return RE_ENTITY.sub(lambda m: ENTITIES[m.group(0).lower()], text)


def strip_tags(text: str, repl: str = "") -> str:
    """Remove tag-grammar tokens and comments, leaving any other ``<``/``>`` text."""
    text = RE_COMMENTS.sub(repl, text)
    return RE_TAG.sub(repl, text)


def collapse_whitespace(text: str) -> str:
    return RE_WHITESPACE.sub(" ", text).strip()


def normalize(html: Optional[str]) -> str:
    """
    Convert an HTML fragment into plain text.

    Pipeline:
      1. Drop <script>/<style> blocks and comments
      2. <br> → newline, </p> → blank line
      3. Strip every remaining tag
      4. Decode entities
      5. Collapse horizontal whitespace, keep at most one blank line
    """
    if not html:
        return ""
    text = RE_BLOCKS.sub("", html)
    text = RE_COMMENTS.sub("", text)
    text = RE_BR.sub("\n", text)
    text = RE_P_END.sub("\n\n", text)
    text = RE_ANY_TAG.sub("", text)
    text = decode_entities(text)
    text = RE_HSPACE.sub(" ", text)
    text = RE_SPACE_NL.sub("\n", text)
    text = RE_MULTI_NL.sub("\n\n", text)
    return text.strip()
