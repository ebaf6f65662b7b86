"""
core/requirements.py

System-requirements extraction from a post body.

Requirement blocks are free prose, mostly Turkish, usually one item per
<br> line with the value *before* the keyword::

    – Intel i5-6500 / AMD A10-58OOK ++ İşlemci Hızı
    – Bellek vb 16 GB ++ RAM

and sometimes English ``Label: value`` pairs.  The block has no closing
tag, so the search is confined to a slice that ends at the next <hr>, the
next bold-led paragraph, or MAX_SECTION_CHARS.

Each field has an ordered tuple of FieldRule; the first rule that yields
a non-empty value wins.
"""
from __future__ import annotations

import re
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from .models import SystemRequirements
from .normalizer import collapse_whitespace, decode_entities, strip_tags

MAX_SECTION_CHARS = 3000

# ---------------------------------------------------------------------------
# Section location
# ---------------------------------------------------------------------------

RE_SECTION_HEADING = re.compile(
    r"(?:PC\s*)?Sistem\s*(?:vb\s*)?Gereksinim(?:i|leri)"
    r"|(?:PC\s*)?System\s*(?:vb\s*)?Requirements?",
    re.IGNORECASE,
)
RE_SECTION_END = re.compile(r"<hr\b[^>]*>|<p[^>]*>\s*<(?:strong|b)\b", re.IGNORECASE)
RE_BR          = re.compile(r"<br\s*/?>", re.IGNORECASE)
RE_EN_DASH     = re.compile("[–—]")


def find_section(html: str) -> Optional[str]:
    """Return the raw HTML of the requirements section, or None."""
    heading = RE_SECTION_HEADING.search(html)
    if heading is None:
        return None
    rest = html[heading.start():]
    # The heading itself may sit inside <p><strong>; only look past it
    end = RE_SECTION_END.search(rest, heading.end() - heading.start())
    if end is not None:
        return rest[:end.start()]
    return rest[:MAX_SECTION_CHARS]


def section_text(section_html: str) -> str:
    """Flatten the section to one line of plain text."""
    text = RE_BR.sub("\n", section_html)
    text = strip_tags(text, " ")
    text = decode_entities(text)
    text = RE_EN_DASH.sub("-", text)
    return collapse_whitespace(text)


# ---------------------------------------------------------------------------
# Rule machinery
# ---------------------------------------------------------------------------

# ASCII: letter classes must not swallow Turkish letters (ı, ş, ç ...);
# Turkish keywords are spelled out literally instead.
FLAGS = re.IGNORECASE | re.ASCII


class FieldRule(NamedTuple):
    """A compiled pattern and a builder that turns its match into a value."""
    pattern: re.Pattern
    build: Callable[[re.Match], str]

    def apply(self, text: str) -> str:
        match = self.pattern.search(text)
        if match is None:
            return ""
        return self.build(match).strip()


def _group(match: re.Match) -> str:
    return match.group(1) or ""


def _first_option(match: re.Match) -> str:
    """'Intel Core i5-4460 / AMD FX-6300' → 'Intel Core i5-4460'."""
    return (match.group(1) or "").split(" / ")[0].split("/")[0]


def _first_two_tokens(match: re.Match) -> str:
    """'Intel i5-6500' → 'Intel i5'."""
    parts = (match.group(1) or "").split()
    return " ".join(parts[:2])


BRAND_NAMES = ("GeForce", "Radeon", "Arc")
SERIES_NAMES = ("GTX", "RTX", "RX", "HD", "GT")
SIZE_UNITS = ("GB", "MB", "TB")


def _gpu_name(match: re.Match) -> str:
    """Reduce 'Nvidia GeForce GTX 650' to the brand token 'GeForce'."""
    value = (match.group(1) or "").strip()
    parts = value.split()
    if len(parts) < 2:
        return value
    if parts[0].isdigit() and parts[1].upper() in SIZE_UNITS:
        return f"{value} Vram"
    second = parts[1]
    third = parts[2] if len(parts) >= 3 else ""
    if second in BRAND_NAMES:
        return second
    if second in SERIES_NAMES and third in BRAND_NAMES:
        return third
    if second in SERIES_NAMES:
        return second
    if third in BRAND_NAMES:
        return third
    return second


def _vram(match: re.Match) -> str:
    return f"{match.group(1)} Vram"


def _directx(match: re.Match) -> str:
    return f"DirectX {match.group(1)}"


def _rule(pattern: str, build: Callable[[re.Match], str] = _group) -> FieldRule:
    return FieldRule(re.compile(pattern, FLAGS), build)


def _before(value: str, keywords: Tuple[str, ...], build=_group) -> Tuple[FieldRule, ...]:
    """One rule per keyword for values written before it: '16 GB ++ RAM'."""
    return tuple(_rule(rf"{value}\s*(?:\+\+)?\s*{kw}", build) for kw in keywords)


# Keyword sets
CPU_KEYWORDS = ("İşlemci", "Processor", "CPU")
GPU_KEYWORDS = ("Ekran Kart[ıi]", "Graphics", "GPU")
RAM_KEYWORDS = ("RAM", "Bellek", "Memory")
STORAGE_KEYWORDS = ("Depo", "Storage", "Disk", "Alan")

# 'Label: value' form; the value runs up to the next known label or ' - '
_LABELS = (
    r"OS|İşletim Sistemi|Operating System|Processor|İşlemci|CPU"
    r"|Memory|Bellek|RAM|Graphics|Ekran Kart[ıi]|Video Card|GPU|DirectX"
    r"|Storage|Depolama|Disk Space|Hard Drive|Network|Sound Card|Additional Notes|Ek Notlar"
)
_LABEL_VALUE = rf"\s*:\s*([^:]+?)(?=\s+(?:{_LABELS})\s*:|\s+-\s|$)"

_SIZE = r"\d+\s*(?:GB|MB)"
_DISK = r"\d+\s*(?:GB|MB|TB)"
_TWO_WORDS = r"([A-Za-z]+\s+[A-Za-z0-9\-]+)"
_SLASH_TAIL = r"\s*/\s*[A-Za-z0-9\s\-\.]+?"


# ---------------------------------------------------------------------------
# Field rules, in priority order
# ---------------------------------------------------------------------------

OS_RULES: Tuple[FieldRule, ...] = (
    _rule(r"\b(?:OS|İşletim Sistemi|Operating System)" + _LABEL_VALUE),
    _rule(r"(Windows?.{1,80}?64-bit)"),
    _rule(r"(Windows?.{1,80}?bit)"),
    _rule(r"(Windows?\s+\d+(?:\.\d+)?(?:[-/]\d+(?:\.\d+)?)*)"),
)

CPU_RULES: Tuple[FieldRule, ...] = (
    _rule(r"(?:Processor|İşlemci|CPU)" + _LABEL_VALUE, _first_option),
    *_before(_TWO_WORDS + _SLASH_TAIL, CPU_KEYWORDS, _first_two_tokens),
    _rule(_TWO_WORDS + r"\s*(?:\+\+)?\s*GHZ", _first_two_tokens),
    _rule(r"(\d+\.\d+\s*GHZ)", _first_two_tokens),
    _rule(r"(\d+\.\s*GHZ)", _first_two_tokens),
    _rule(r"([^\s-]+)\s*GPU\s*(?:\+\+)?\s*İşlemci", _first_two_tokens),
    *_before(r"([^\s-]+)", CPU_KEYWORDS, _first_two_tokens),
)

GPU_RULES: Tuple[FieldRule, ...] = (
    _rule(r"(?:Graphics|Ekran Kart[ıi]|Video Card|GPU)" + _LABEL_VALUE, _first_option),
    _rule(r"(\d+\s*GB)\s*(?:\+\+)?\s*Vram", _vram),
    *_before(r"([A-Za-z0-9\s\-\.]+?)" + _SLASH_TAIL, GPU_KEYWORDS, _gpu_name),
    *_before(r"([^\s-]+)", GPU_KEYWORDS, _gpu_name),
)

RAM_RULES: Tuple[FieldRule, ...] = (
    _rule(rf"(?:Memory|Bellek|RAM)\s*:\s*({_SIZE})"),
    *_before(rf"({_SIZE})", RAM_KEYWORDS),
)

STORAGE_RULES: Tuple[FieldRule, ...] = (
    _rule(rf"(?:Storage|Depolama|Disk Space|Hard Drive)\s*:\s*(\d+(?:\.\d+)?\s*(?:GB|MB|TB))"),
    *_before(rf"({_DISK})", STORAGE_KEYWORDS),
    _rule(rf"Oyunun Boyutu\s*:?\s*(\d+(?:\.\d+)?\s*(?:GB|MB|TB))"),
    _rule(r"(\d+\.\d+\s*(?:GB|MB|TB))"),
)

DIRECTX_RULES: Tuple[FieldRule, ...] = (
    _rule(r"\bDX\s*(\d+(?:\.\d+)?)", _directx),
    _rule(r"DirectX\s*:?\s*(?:Version\s*)?(\d+(?:\.\d+)?)", _directx),
)

ADDITIONAL_RULES: Tuple[FieldRule, ...] = (
    _rule(r"(?:Additional Notes|Ek Notlar)" + _LABEL_VALUE),
)

FIELD_RULES: Dict[str, Tuple[FieldRule, ...]] = {
    "os": OS_RULES,
    "cpu": CPU_RULES,
    "gpu": GPU_RULES,
    "ram": RAM_RULES,
    "storage": STORAGE_RULES,
    "directx": DIRECTX_RULES,
}


def extract_field(text: str, rules: Tuple[FieldRule, ...]) -> str:
    """Apply *rules* in order and return the first non-empty value."""
    for rule in rules:
        value = rule.apply(text)
        if value:
            return value
    return ""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_requirements(html: Optional[str]) -> Optional[SystemRequirements]:
    """
    Return the post's system requirements, or None.

    None is returned both when no requirements heading exists and when the
    section was found but none of the six primary fields matched.
    """
    if not html:
        return None
    section = find_section(html)
    if section is None:
        return None

    text = section_text(section)
    values = {name: extract_field(text, rules) for name, rules in FIELD_RULES.items()}
    if not any(values.values()):
        return None

    return SystemRequirements(
        os=values["os"],
        cpu=values["cpu"],
        gpu=values["gpu"],
        ram=values["ram"],
        storage=values["storage"],
        directx=values["directx"] or None,
        additional=extract_field(text, ADDITIONAL_RULES) or None,
    )
