"""Feed filtering and display ordering.

Updates: v0.1 - 2025-11-20 - Extracted pure filtering helpers from the sync pipeline.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Collection, List, Optional, Sequence

from .models import FeedFilters, NewsItem, TimeWindow
from .utils import parse_iso8601_utc

_SECONDS_PER_DAY = 86400.0


def age_in_days(item: NewsItem, now: datetime) -> Optional[float]:
    timestamp = parse_iso8601_utc(item.published_at)
    if timestamp is None:
        return None
    return (now - timestamp).total_seconds() / _SECONDS_PER_DAY


def matches_filters(
    item: NewsItem, filters: FeedFilters, favorites: Collection[str] = ()
) -> bool:
    """Return True when ``item`` satisfies every active filter dimension."""

    if filters.favorites_only and item.id not in favorites:
        return False
    if filters.category is not None and item.category is not filters.category:
        return False
    if filters.tool is not None and item.tool is not filters.tool:
        return False
    if filters.platform is not None and item.platform is not filters.platform:
        return False
    if filters.query:
        needle = filters.query.lower()
        if needle not in item.title.lower() and needle not in item.snippet.lower():
            return False
    return True


def within_window(item: NewsItem, window: TimeWindow, now: datetime) -> bool:
    threshold = window.max_age_days
    if threshold is None:
        return True
    age = age_in_days(item, now)
    return age is not None and age <= threshold


def _recency_key(item: NewsItem) -> float:
    timestamp = parse_iso8601_utc(item.published_at)
    return timestamp.timestamp() if timestamp is not None else float("-inf")


def sort_feed(items: Sequence[NewsItem]) -> List[NewsItem]:
    """New items first, then most recent first; ties keep input order."""

    return sorted(items, key=lambda item: (not item.is_new, -_recency_key(item)))


def present(
    items: Sequence[NewsItem],
    filters: Optional[FeedFilters] = None,
    favorites: Collection[str] = (),
    now: Optional[datetime] = None,
) -> List[NewsItem]:
    """Filter ``items`` and return them in display order."""

    active = filters or FeedFilters()
    reference = now or datetime.now(timezone.utc)
    favorite_ids = set(favorites)
    selected = [
        item
        for item in items
        if matches_filters(item, active, favorite_ids)
        and within_window(item, active.window, reference)
    ]
    return sort_feed(selected)


__all__ = [
    "age_in_days",
    "matches_filters",
    "present",
    "sort_feed",
    "within_window",
]
