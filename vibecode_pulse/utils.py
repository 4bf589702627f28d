"""Utility helpers shared across VibeCode Pulse modules.

Updates: v0.1 - 2025-11-20 - Seeded module with environment and timestamp helpers.
Updates: v0.2 - 2025-11-24 - Added published date sanitisation for verified items.
"""

from __future__ import annotations

import os
import re
from datetime import datetime, timezone
from typing import Optional


_SENSITIVE_ENV_PATTERN = re.compile(
    r"(KEY|TOKEN|SECRET|PASSWORD)$", re.IGNORECASE
)


def read_optional_env(name: str) -> Optional[str]:
    """Return trimmed environment variable or ``None`` when unset/blank."""

    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def read_int_env(name: str, default: int, *, minimum: int = 0) -> int:
    """Return an integer environment value, falling back on blank or malformed input."""

    raw = read_optional_env(name)
    if raw is None:
        return default
    try:
        return max(minimum, int(raw))
    except ValueError:
        return default


def read_bool_env(name: str, default: bool = False) -> bool:
    raw = read_optional_env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def sanitize_env_value(name: str, value: Optional[str]) -> Optional[str]:
    """Mask sensitive environment values for safe logging.

    Returns:
        - "***" for sensitive keys with a value
        - None for empty values
        - Truncated long values (> 80 chars)
        - Original value otherwise
    """
    if not value:
        return None
    if _SENSITIVE_ENV_PATTERN.search(name):
        return "***"
    if len(value) > 80:
        return value[:77] + "…"
    return value


def isoformat_utc(timestamp: datetime) -> str:
    """Render an aware datetime as a canonical UTC ISO-8601 string with ``Z``."""

    iso_value = timestamp.astimezone(timezone.utc).replace(microsecond=0).isoformat()
    return iso_value[:-6] + "Z" if iso_value.endswith("+00:00") else iso_value


def parse_iso8601_utc(value: Optional[str]) -> Optional[datetime]:
    """Parse ISO-8601 strings into aware UTC datetimes."""

    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    normalized = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        timestamp = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def sanitize_published_at(value: Optional[str], now: Optional[datetime] = None) -> str:
    """Return an ISO timestamp for ``value`` that never lies after ``now``.

    Missing, unparsable and future-dated inputs collapse to ``now``.
    """

    reference = now or datetime.now(timezone.utc)
    timestamp = parse_iso8601_utc(value)
    if timestamp is None or timestamp > reference:
        return isoformat_utc(reference)
    return isoformat_utc(timestamp)


__all__ = [
    "read_optional_env",
    "read_int_env",
    "read_bool_env",
    "isoformat_utc",
    "parse_iso8601_utc",
    "sanitize_published_at",
    "sanitize_env_value",
]
