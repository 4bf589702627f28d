"""Prompt builders for sync and briefing requests.

Only the output-format contract matters to the rest of the package: the sync
prompt must ask for one ``[ITEM]`` line per record with ``>>>`` separators,
and the briefing prompt for ``PULSE ||`` lines.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .models import Category, NewsItem, Platform, Tool
from .parser import FIELD_SEPARATOR, ITEM_MARKER, MAX_BRIEFING_POINTS, PULSE_MARKER

DEFAULT_TOOL_QUERY = (
    '"Claude Code", "Cursor AI", "Windsurf", "Aider", "Bolt.new", '
    '"Google AI Studio", "OpenAI"'
)


def _choices(values: Sequence[str]) -> str:
    return ", ".join(values[:-1]) + f", or {values[-1]}"


def build_sync_prompt(tool: Optional[Tool] = None, category: Optional[Category] = None) -> str:
    targeted = tool is not None or category is not None
    tool_query = f'specifically focus on "{tool.value}"' if tool is not None else DEFAULT_TOOL_QUERY
    category_query = (
        f'prioritize finding "{category.value}" type content'
        if category is not None
        else "find news, social updates, and tutorials"
    )
    depth = (
        "This is a DEEP SYNC: hunt for niche discussions, bugs, and advanced workflows."
        if targeted
        else "General hunt for the latest ecosystem updates."
    )
    sep = f" {FIELD_SEPARATOR} "
    fields = sep.join(
        [
            "Title",
            "Short Detail",
            "Source",
            f"Platform ({_choices([p.value for p in Platform])})",
            "Full URL copied exactly from a search result",
            f"Category ({_choices([c.value for c in Category])})",
            f"Tool Name ({_choices([t.value for t in Tool if t is not Tool.GENERAL_AI])})",
            "ISO Date",
        ]
    )
    return (
        "Search Google for high-density community updates (last 6 months) about "
        f"{tool_query}.\n{depth}\n{category_query}.\n\n"
        "TARGETS: Reddit, X, GitHub, Hacker News, Discord, and official changelogs.\n\n"
        "OUTPUT FORMAT (one record per line, never wrap lines, never shorten URLs):\n"
        f"{ITEM_MARKER} {fields}"
    )


def build_deep_dive_prompt(item: NewsItem) -> str:
    return (
        "Provide a developer-centric deep dive (2-3 sentences) on this update: "
        f"\"{item.title}\". Tool: {item.tool.value}. Explain the significance."
    )


def build_readability_prompt(item: NewsItem) -> str:
    target = item.url or f"\"{item.title}\""
    return (
        f"Summarize the technical content and core takeaways from: {target}. "
        "Focus on developer impact. Markdown format."
    )


def build_explain_prompt(word: str, context: str = "") -> str:
    prompt = f"Define \"{word.strip()}\" in the context of AI coding tools. Max 15 words."
    if context.strip():
        prompt += f"\nContext: {context.strip()}"
    return prompt


def build_briefing_prompt(
    items: Sequence[NewsItem], tool_label: str, category_label: str
) -> str:
    context = "\n".join(f"[{item.platform.value}] {item.title}" for item in items)
    return (
        f"Analyze these community signals for Tool: {tool_label} and Category: "
        f"{category_label}:\n{context}\n\n"
        f"Summarize the current mood into {MAX_BRIEFING_POINTS} distinct points. "
        "Mention the tool and context in the headlines if relevant.\n\n"
        f"FORMAT (exactly {MAX_BRIEFING_POINTS} lines):\n"
        f"{PULSE_MARKER} Headline || Short Insight || (Optional: alert)"
    )


__all__ = [
    "build_briefing_prompt",
    "build_deep_dive_prompt",
    "build_explain_prompt",
    "build_readability_prompt",
    "build_sync_prompt",
]
