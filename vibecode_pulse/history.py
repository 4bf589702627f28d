"""Load and save feed history and favorites through a key/value store.

Stored payloads are JSON arrays. Corrupt or unexpected payloads are treated
as empty so a damaged store degrades to a first run instead of failing sync.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Sequence

from .config import FAVORITES_KEY, HISTORY_KEY
from .models import NewsItem
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


def _load_json_list(store: KeyValueStore, key: str) -> List[Any]:
    raw = store.load(key)
    if raw is None or not raw.strip():
        return []
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Stored payload for '%s' is not valid JSON; starting empty.", key)
        return []
    if not isinstance(payload, list):
        logger.warning("Stored payload for '%s' is not a list; starting empty.", key)
        return []
    return payload


def load_history(store: KeyValueStore, key: str = HISTORY_KEY) -> List[NewsItem]:
    items: List[NewsItem] = []
    for entry in _load_json_list(store, key):
        if not isinstance(entry, dict):
            continue
        item = NewsItem.from_dict(entry)
        if item is not None:
            items.append(item)
    return items


def save_history(
    store: KeyValueStore, items: Sequence[NewsItem], key: str = HISTORY_KEY
) -> None:
    payload = json.dumps([item.as_dict() for item in items], ensure_ascii=False)
    store.save(key, payload)


def load_favorites(store: KeyValueStore, key: str = FAVORITES_KEY) -> List[str]:
    favorites: List[str] = []
    for entry in _load_json_list(store, key):
        if isinstance(entry, str) and entry not in favorites:
            favorites.append(entry)
    return favorites


def save_favorites(
    store: KeyValueStore, favorites: Sequence[str], key: str = FAVORITES_KEY
) -> None:
    store.save(key, json.dumps(list(favorites)))


def toggle_favorite(
    store: KeyValueStore, item_id: str, key: Optional[str] = None
) -> List[str]:
    """Add or remove ``item_id`` from the persisted favorites and return the new list."""

    favorites_key = key or FAVORITES_KEY
    favorites = load_favorites(store, favorites_key)
    if item_id in favorites:
        favorites = [existing for existing in favorites if existing != item_id]
    else:
        favorites.append(item_id)
    save_favorites(store, favorites, favorites_key)
    return favorites


__all__ = [
    "load_favorites",
    "load_history",
    "save_favorites",
    "save_history",
    "toggle_favorite",
]
