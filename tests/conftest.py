"""Pytest configuration and shared fixtures.

- Prepend project root to sys.path so 'vibecode_pulse' is importable with testpaths.
- Provide a factory for verified feed items with sensible defaults.
- Provide a fixed reference clock so recency checks are deterministic.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

import pytest


def _ensure_project_root_on_syspath() -> None:
    """Prepend repository root to sys.path for package imports."""
    tests_dir = Path(__file__).resolve().parent
    project_root = tests_dir.parent
    root_str = str(project_root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_syspath()

from vibecode_pulse.identifiers import derive_item_id  # noqa: E402
from vibecode_pulse.models import Category, NewsItem, Platform, Tool  # noqa: E402

FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def make_item() -> Callable[..., NewsItem]:
    def _factory(title: str = "Cursor ships agent mode", **overrides: Any) -> NewsItem:
        url = overrides.pop("url", f"https://news.dev/{title.lower().replace(' ', '-')}")
        fields = {
            "id": derive_item_id(url, title),
            "title": title,
            "snippet": "Short detail",
            "source": "DevBlog",
            "platform": Platform.NEWS,
            "url": url,
            "category": Category.NEWS,
            "tool": Tool.CURSOR,
            "published_at": "2025-05-30T12:00:00Z",
            "is_new": False,
        }
        fields.update(overrides)
        return NewsItem(**fields)

    return _factory
