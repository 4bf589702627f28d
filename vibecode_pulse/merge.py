"""Incremental merge of verified items into persisted feed history.

Updates: v0.1 - 2025-11-20 - Added id-keyed merge with new-item flagging.
Updates: v0.3 - 2025-11-27 - Added retention cap that spares favorites.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Collection, Dict, List, Sequence

from .models import NewsItem
from .utils import parse_iso8601_utc

logger = logging.getLogger(__name__)


def merge_feed(history: Sequence[NewsItem], incoming: Sequence[NewsItem]) -> List[NewsItem]:
    """Fold ``incoming`` into ``history`` keyed by id.

    Retained items lose their ``is_new`` flag; unseen ids are added with
    ``is_new=True``. When an id already exists the stored entry wins, so a
    re-fetch with reworded text never churns a stable record.
    """

    merged: Dict[str, NewsItem] = {}
    for item in history:
        if item.id in merged:
            continue
        merged[item.id] = replace(item, is_new=False) if item.is_new else item

    added = 0
    for item in incoming:
        if item.id in merged:
            continue
        merged[item.id] = replace(item, is_new=True)
        added += 1

    logger.debug("Merged %d incoming item(s); %d new.", len(incoming), added)
    return list(merged.values())


def count_new(items: Sequence[NewsItem]) -> int:
    return sum(1 for item in items if item.is_new)


def _age_key(item: NewsItem) -> float:
    timestamp = parse_iso8601_utc(item.published_at)
    return timestamp.timestamp() if timestamp is not None else float("-inf")


def trim_history(
    items: Sequence[NewsItem], max_items: int, keep_ids: Collection[str] = ()
) -> List[NewsItem]:
    """Cap history at ``max_items``, evicting the oldest non-favorite items first.

    ``max_items <= 0`` disables trimming. Favorites listed in ``keep_ids`` are
    never evicted, even if that leaves more than ``max_items`` entries.
    """

    if max_items <= 0 or len(items) <= max_items:
        return list(items)

    overflow = len(items) - max_items
    candidates = sorted(
        (item for item in items if item.id not in keep_ids), key=_age_key
    )
    evicted = {item.id for item in candidates[:overflow]}
    if evicted:
        logger.info("Evicting %d old item(s) from feed history.", len(evicted))
    return [item for item in items if item.id not in evicted]


__all__ = ["count_new", "merge_feed", "trim_history"]
