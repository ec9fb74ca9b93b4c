"""Small helpers shared by every brand extractor."""
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urljoin, urlsplit

_PARENTHESES = re.compile(r"\([^)]*\)")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_BACKGROUND_URL = re.compile(r"url\(\s*['\"]?([^'\")]+)['\"]?\s*\)", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")

EMPTY_MARKERS = {"", "-", "–", "—", "n/a", "na"}


def absolutize_url(url: Optional[str], base: str) -> Optional[str]:
    """Resolve protocol-relative, root-relative and relative URLs against ``base``.

    ``data:`` URIs and blanks yield ``None``.
    """
    if not url:
        return None
    url = url.strip()
    if not url or url.startswith(("data:", "javascript:")):
        return None
    if url.startswith("//"):
        scheme = urlsplit(base).scheme or "https"
        return f"{scheme}:{url}"
    if url.startswith(("http://", "https://")):
        return url
    return urljoin(base, url)


def parse_nutrition_value(text: Optional[str]) -> Optional[float]:
    """Parse one nutrition table cell.

    Parenthesised daily-value percentages, unit suffixes and thousands
    separators are dropped; "-" and empty cells are ``None``.
    """
    if text is None:
        return None
    cleaned = _PARENTHESES.sub("", str(text)).replace(",", "").strip()
    if cleaned.lower() in EMPTY_MARKERS:
        return None
    match = _NUMBER.search(cleaned)
    if not match:
        return None
    return float(match.group(0))


def parse_kcal(text: Optional[str]) -> Optional[int]:
    value = parse_nutrition_value(text)
    return int(round(value)) if value is not None else None


def background_image_url(style: Optional[str]) -> Optional[str]:
    """Pull the url(...) out of an inline ``background-image`` style."""
    if not style:
        return None
    match = _BACKGROUND_URL.search(style)
    return match.group(1).strip() if match else None


def collapse_whitespace(text: Optional[str]) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def first_line(text: Optional[str]) -> str:
    for line in (text or "").splitlines():
        if line.strip():
            return line.strip()
    return ""
