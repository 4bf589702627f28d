"""URL clean-up for links reported by the model.

Model replies routinely wrap links in markdown, append sentence punctuation,
cut them short with an ellipsis or fall back to template domains. Anything
that does not survive clean-up as an absolute http(s) URL becomes ``""``.

Updates: v0.1 - 2025-11-20 - Added strict sanitiser and suspect-link heuristic.
Updates: v0.2 - 2025-12-02 - Kept parentheses inside URL paths and caught dangling "..".
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

ELLIPSIS_MARKERS: tuple[str, ...] = ("...", "…")
TRUNCATION_THRESHOLD = 20
SUSPECT_MIN_LENGTH = 15
PLACEHOLDER_MARKERS: tuple[str, ...] = (
    "example.com",
    "your-url",
    "yoururl",
    "url-here",
    "insert-url",
    "placeholder",
)

_MARKDOWN_LINK = re.compile(r"\[[^\]]*\]\(\s*([^)\s]+)\s*\)")
_BARE_PAREN = re.compile(r"\(\s*([^()\s]+)\s*\)")
_SCHEME = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)
_TRAILING_PUNCTUATION = ".,;!"


def has_ellipsis(text: str) -> bool:
    """True for ``...``/``…`` anywhere, or a trailing ``..`` left by punctuation trimming."""

    if any(marker in text for marker in ELLIPSIS_MARKERS):
        return True
    return text.rstrip("/").endswith("..")


def _looks_like_url(text: str) -> bool:
    return bool(_SCHEME.match(text)) or "." in text


def _is_standalone_url(text: str) -> bool:
    if _SCHEME.match(text):
        return True
    return not text.startswith("(") and not any(ch.isspace() for ch in text)


def _extract_wrapped_url(text: str) -> str:
    match = _MARKDOWN_LINK.search(text)
    if match:
        return match.group(1)
    # Parentheses inside a URL path belong to the path.
    if _is_standalone_url(text):
        return text
    for candidate in _BARE_PAREN.findall(text):
        if _looks_like_url(candidate):
            return candidate
    return text


def _is_absolute_http_url(text: str) -> bool:
    if any(ch.isspace() for ch in text):
        return False
    try:
        parts = urlsplit(text)
        # Accessing the port validates it.
        parts.port
    except ValueError:
        return False
    if parts.scheme.lower() not in {"http", "https"}:
        return False
    host = parts.hostname or ""
    return "." in host and not host.startswith(".") and not host.endswith(".")


def sanitize_url(raw: str) -> str:
    """Return a cleaned absolute http(s) URL, or ``""`` when ``raw`` is unusable."""

    if not isinstance(raw, str):
        return ""
    text = raw.strip()
    if not text:
        return ""

    text = _extract_wrapped_url(text).strip()
    if has_ellipsis(text) and len(text) < TRUNCATION_THRESHOLD:
        return ""
    if text and text[-1] in _TRAILING_PUNCTUATION and not text.endswith(".."):
        text = text[:-1]
    lowered = text.lower()
    if any(marker in lowered for marker in PLACEHOLDER_MARKERS):
        return ""

    if not _SCHEME.match(text) and "." in text:
        text = f"https://{text}"

    if not _is_absolute_http_url(text):
        return ""
    return text


def is_suspect_url(url: str) -> bool:
    """Flag URLs that are empty, too short, scheme-less or visibly truncated."""

    if not url:
        return True
    if len(url) < SUSPECT_MIN_LENGTH:
        return True
    if not url.lower().startswith(("http://", "https://")):
        return True
    return has_ellipsis(url)


__all__ = [
    "ELLIPSIS_MARKERS",
    "PLACEHOLDER_MARKERS",
    "SUSPECT_MIN_LENGTH",
    "TRUNCATION_THRESHOLD",
    "has_ellipsis",
    "is_suspect_url",
    "sanitize_url",
]
