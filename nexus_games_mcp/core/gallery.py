"""
core/gallery.py

Screenshot gallery: every distinct <img> URL in a post body, in order of
first appearance, minus author avatars.
"""
from __future__ import annotations

import re
from typing import List, Optional, Set

RE_IMG = re.compile(r"""<img\b[^>]*?\bsrc\s*=\s*["']([^"']+)["'][^>]*>""", re.IGNORECASE)

EXCLUDED_MARKERS = ("avatar",)


def extract_gallery(html: Optional[str]) -> List[str]:
    if not html:
        return []
    seen: Set[str] = set()
    images: List[str] = []
    for match in RE_IMG.finditer(html):
        url = match.group(1).strip()
        if not url or url in seen or any(m in url for m in EXCLUDED_MARKERS):
            continue
        seen.add(url)
        images.append(url)
    return images
