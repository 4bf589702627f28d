"""Domain models backing the VibeCode Pulse feed.

The dataclasses here describe every stage of a sync cycle: the candidate
records pulled out of model text, the grounding citations returned alongside
it, and the verified items that are merged into history and persisted.

Updates: v0.1 - 2025-11-20 - Collected feed, citation and filter models.
Updates: v0.2 - 2025-11-24 - Replaced loose tag strings with closed enums.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

DEFAULT_SNIPPET = "Community update regarding AI developer tool telemetry."
DEFAULT_SOURCE = "Community Intel"


def _tag_key(text: str) -> str:
    return re.sub(r"[\s_\-.]+", "", text).lower()


class _TagEnum(str, Enum):
    """String enum with a lenient ``coerce`` that never raises."""

    @classmethod
    def fallback(cls) -> "_TagEnum":
        raise NotImplementedError

    @classmethod
    def coerce(cls, value: Any) -> "_TagEnum":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or not value.strip():
            return cls.fallback()
        key = _tag_key(value)
        for member in cls:
            if _tag_key(member.value) == key:
                return member
        return cls.fallback()


class Platform(_TagEnum):
    X = "X"
    REDDIT = "Reddit"
    GITHUB = "GitHub"
    HACKER_NEWS = "HackerNews"
    OFFICIAL = "Official"
    DISCORD = "Discord"
    META = "Meta"
    LINKEDIN = "LinkedIn"
    YOUTUBE = "YouTube"
    NEWS = "News"

    @classmethod
    def fallback(cls) -> "Platform":
        return cls.NEWS


class Category(_TagEnum):
    OFFICIAL = "official"
    SOCIAL = "social"
    TUTORIAL = "tutorial"
    COMMUNITY = "community"
    NEWS = "news"

    @classmethod
    def fallback(cls) -> "Category":
        return cls.COMMUNITY


class Tool(_TagEnum):
    CLAUDE_CODE = "Claude Code"
    CURSOR = "Cursor"
    AIDER = "Aider"
    WINDSURF = "Windsurf"
    BOLT = "Bolt"
    V0 = "v0"
    GOOGLE_AI_STUDIO = "Google AI Studio"
    OPENAI = "OpenAI"
    REPLIT = "Replit"
    GENERAL_AI = "General AI"

    @classmethod
    def fallback(cls) -> "Tool":
        return cls.GENERAL_AI


class TimeWindow(str, Enum):
    """Recency windows with slack thresholds expressed in days."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    SIX_MONTHS = "6months"
    ALL = "all"

    @property
    def max_age_days(self) -> Optional[float]:
        return _WINDOW_THRESHOLDS.get(self)

    @classmethod
    def coerce(cls, value: Any) -> "TimeWindow":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            candidate = value.strip().lower()
            for member in cls:
                if member.value == candidate or member.name.lower() == candidate:
                    return member
        return cls.ALL


_WINDOW_THRESHOLDS: Dict[TimeWindow, float] = {
    TimeWindow.DAY: 1.2,
    TimeWindow.WEEK: 7.5,
    TimeWindow.MONTH: 31.0,
    TimeWindow.SIX_MONTHS: 183.0,
}


@dataclass(frozen=True)
class AppMetadata:
    name: str
    version: str
    author: str
    description: str


@dataclass(frozen=True)
class Citation:
    uri: str
    title: str = ""


@dataclass(frozen=True)
class GroundedResponse:
    text: str
    citations: List[Citation] = field(default_factory=list)


@dataclass(frozen=True)
class CandidateRecord:
    title: str
    snippet: str = DEFAULT_SNIPPET
    source_name: str = DEFAULT_SOURCE
    platform: str = Platform.NEWS.value
    raw_url: str = ""
    category: str = Category.COMMUNITY.value
    tool: str = Tool.GENERAL_AI.value
    published_at_raw: Optional[str] = None


@dataclass(frozen=True)
class NewsItem:
    id: str
    title: str
    snippet: str
    source: str
    platform: Platform
    url: str
    category: Category
    tool: Tool
    published_at: str
    is_new: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "snippet": self.snippet,
            "source": self.source,
            "platform": self.platform.value,
            "url": self.url,
            "category": self.category.value,
            "tool": self.tool.value,
            "published_at": self.published_at,
            "is_new": self.is_new,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> Optional["NewsItem"]:
        item_id = payload.get("id")
        title = payload.get("title")
        if not isinstance(item_id, str) or not item_id:
            return None
        if not isinstance(title, str) or not title.strip():
            return None
        url = payload.get("url") if isinstance(payload.get("url"), str) else ""
        snippet = payload.get("snippet") if isinstance(payload.get("snippet"), str) else DEFAULT_SNIPPET
        source = payload.get("source") if isinstance(payload.get("source"), str) else DEFAULT_SOURCE
        published_at = (
            payload.get("published_at") if isinstance(payload.get("published_at"), str) else ""
        )
        return cls(
            id=item_id,
            title=title,
            snippet=snippet,
            source=source,
            platform=Platform.coerce(payload.get("platform")),
            url=url,
            category=Category.coerce(payload.get("category")),
            tool=Tool.coerce(payload.get("tool")),
            published_at=published_at,
            is_new=bool(payload.get("is_new", False)),
        )


_CATEGORY_LABELS: Dict[str, Category] = {
    "official": Category.OFFICIAL,
    "social": Category.SOCIAL,
    "tutorials": Category.TUTORIAL,
    "tutorial": Category.TUTORIAL,
    "news": Category.NEWS,
    "community": Category.COMMUNITY,
}

FAVORITES_LABEL = "Favorites"


@dataclass(frozen=True)
class FeedFilters:
    category: Optional[Category] = None
    tool: Optional[Tool] = None
    platform: Optional[Platform] = None
    query: str = ""
    favorites_only: bool = False
    window: TimeWindow = TimeWindow.ALL

    @classmethod
    def from_labels(
        cls,
        *,
        category: Optional[str] = None,
        tool: Optional[str] = None,
        platform: Optional[str] = None,
        query: str = "",
        window: Optional[str] = None,
    ) -> "FeedFilters":
        """Build filters from sidebar labels such as ``All Tools`` or ``Favorites``.

        "All" style labels and unknown values disable the dimension instead of
        falling back to a tag, so a typo never hides the whole feed.
        """

        category_label = (category or "").strip().lower()
        favorites_only = category_label == FAVORITES_LABEL.lower()
        category_value = None if favorites_only else _CATEGORY_LABELS.get(category_label)
        return cls(
            category=category_value,
            tool=_match_tag(Tool, tool),
            platform=_match_tag(Platform, platform),
            query=(query or "").strip(),
            favorites_only=favorites_only,
            window=TimeWindow.coerce(window),
        )


def _match_tag(enum_cls: type, label: Optional[str]) -> Optional[Any]:
    if not isinstance(label, str) or not label.strip():
        return None
    key = _tag_key(label)
    for member in enum_cls:
        if _tag_key(member.value) == key:
            return member
    return None


@dataclass(frozen=True)
class BriefingPoint:
    title: str
    content: str
    alert: bool = False


@dataclass(frozen=True)
class SyncResult:
    items: List[NewsItem]
    added_count: int
    citations: List[Citation] = field(default_factory=list)


__all__ = [
    "AppMetadata",
    "BriefingPoint",
    "CandidateRecord",
    "Category",
    "Citation",
    "DEFAULT_SNIPPET",
    "DEFAULT_SOURCE",
    "FAVORITES_LABEL",
    "FeedFilters",
    "GroundedResponse",
    "NewsItem",
    "Platform",
    "SyncResult",
    "TimeWindow",
    "Tool",
]
