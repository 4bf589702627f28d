"""Key/value persistence backends for feed history and favorites.

All backends share the ``load(key) -> str | None`` / ``save(key, text)``
contract. Backend failures are logged and surface as a cache miss on load so
a broken store never takes the sync pipeline down with it.

Updates: v0.1 - 2025-11-20 - Adapted Redis helpers into pluggable stores.
Updates: v0.2 - 2025-11-24 - Added JSON file store for single-user installs.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

import redis

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def load(self, key: str) -> Optional[str]:
        ...

    def save(self, key: str, text: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def save(self, key: str, text: str) -> None:
        self._values[key] = text


class JsonFileStore:
    """Persist every key as a string entry of one JSON object on disk."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as exc:
            logger.warning("Unable to read state file '%s': %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("State file '%s' is not a JSON object; ignoring.", self.path)
            return {}
        return {key: value for key, value in data.items() if isinstance(value, str)}

    def load(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def save(self, key: str, text: str) -> None:
        with self._lock:
            values = self._read_all()
            values[key] = text
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
                with tmp_path.open("w", encoding="utf-8") as handle:
                    json.dump(values, handle, ensure_ascii=False, indent=2)
                tmp_path.replace(self.path)
            except OSError as exc:
                logger.warning("Unable to write state file '%s': %s", self.path, exc)


class RedisStore:
    """Store values as plain Redis strings, optionally under a key prefix."""

    def __init__(self, url: str, *, prefix: str = "", client: Optional[Any] = None) -> None:
        self.url = url
        self.prefix = prefix
        self._client = client
        self._lock = threading.Lock()

    def _get_client(self) -> Optional[Any]:
        if self._client is not None:
            return self._client
        with self._lock:
            if self._client is not None:
                return self._client
            try:
                self._client = redis.from_url(self.url, decode_responses=True)
            except Exception as exc:  # pragma: no cover - redis connection failure
                logger.warning("Unable to connect to Redis store: %s", exc)
                self._client = None
        return self._client

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def load(self, key: str) -> Optional[str]:
        client = self._get_client()
        if client is None:
            return None
        try:
            raw = client.get(self._key(key))
        except redis.RedisError as exc:
            logger.warning("Redis read failed for '%s': %s", key, exc)
            return None
        if raw is None:
            return None
        return raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)

    def save(self, key: str, text: str) -> None:
        client = self._get_client()
        if client is None:
            logger.warning("Redis store unavailable; '%s' not persisted.", key)
            return
        try:
            client.set(self._key(key), text)
        except redis.RedisError as exc:
            logger.warning("Redis write failed for '%s': %s", key, exc)


def build_store(redis_url: Optional[str], state_path: Union[str, Path]) -> KeyValueStore:
    """Pick Redis when a URL is configured, otherwise the local JSON file."""

    if redis_url:
        logger.debug("Using Redis store for feed state.")
        return RedisStore(redis_url)
    logger.debug("Using JSON file store at '%s'.", state_path)
    return JsonFileStore(state_path)


__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore", "RedisStore", "build_store"]
