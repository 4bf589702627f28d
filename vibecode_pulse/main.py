"""Command-line entrypoint wiring for VibeCode Pulse.

Updates: v0.1 - 2025-11-20 - Added metadata and sync-and-print main routine.
Updates: v0.2 - 2025-11-24 - Remembered filter preferences between runs.
Updates: v0.3 - 2025-12-02 - Added term, deep dive and readability lookups; briefing falls back to full history.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List, Optional, Sequence

from .config import (
    API_KEY,
    MAX_HISTORY_ITEMS,
    MODEL_NAME,
    REDIS_URL,
    RESOLVE_CITATIONS,
    STATE_PATH,
)
from .filtering import present
from .history import load_favorites, load_history, toggle_favorite
from .http_client import resolve_citations
from .models import AppMetadata, FeedFilters, NewsItem
from .pipeline import FeedPipeline, SyncError
from .settings_store import load_settings, save_settings
from .storage import build_store
from .upstream import LiteLLMUpstream, configure_litellm_debug
from .utils import sanitize_env_value

logger = logging.getLogger(__name__)

APP_VERSION = "0.3"
APP_METADATA = AppMetadata(
    name="VibeCode Pulse",
    version=f"v{APP_VERSION}",
    author="VibeCode Pulse contributors",
    description=(
        "Grounded news radar for AI developer tools with verified links "
        "and persistent feed history."
    ),
)

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def configure_logging(debug: bool = False) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    for handler in list(root_logger.handlers):
        if getattr(handler, "_pulse_console", False):
            root_logger.removeHandler(handler)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%H:%M:%S"))
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_handler._pulse_console = True  # type: ignore[attr-defined]
    root_logger.addHandler(console_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vibecode-pulse", description=APP_METADATA.description)
    parser.add_argument("--tool", help="Tool filter, e.g. 'Cursor' or 'All Tools'.")
    parser.add_argument("--category", help="Category filter, e.g. 'Tutorials' or 'Favorites'.")
    parser.add_argument("--platform", help="Platform filter, e.g. 'Reddit'.")
    parser.add_argument("--window", help="Recency window: day, week, month, 6months or all.")
    parser.add_argument("--search", default="", help="Free-text search over title and snippet.")
    parser.add_argument("--offline", action="store_true", help="Skip sync and show stored history.")
    parser.add_argument("--briefing", action="store_true", help="Print a three-point briefing.")
    parser.add_argument("--favorite", metavar="ID", help="Toggle an item id in favorites and exit.")
    parser.add_argument("--deep-dive", metavar="ID", help="Explain why a stored item matters and exit.")
    parser.add_argument("--read", metavar="ID", help="Print a grounded summary of a stored item and exit.")
    parser.add_argument("--explain", metavar="TERM", help="Define a term in AI coding context and exit.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser


def format_item(item: NewsItem, favorites: Sequence[str] = ()) -> str:
    markers = ("*" if item.id in favorites else " ") + ("N" if item.is_new else " ")
    link = item.url or "(no link)"
    return (
        f"{markers} [{item.platform.value}] {item.title}\n"
        f"     {item.tool.value} | {item.category.value} | {item.source} | "
        f"{item.published_at} | {item.id}\n"
        f"     {link}"
    )


def _find_item(items: Sequence[NewsItem], item_id: str) -> Optional[NewsItem]:
    return next((item for item in items if item.id == item_id), None)


async def run_lookup(pipeline: FeedPipeline, items: Sequence[NewsItem], args: argparse.Namespace) -> int:
    """Answer a single --explain, --deep-dive or --read request."""

    item: Optional[NewsItem] = None
    if not args.explain:
        item_id = args.deep_dive or args.read
        item = _find_item(items, item_id)
        if item is None:
            logger.error("No stored item with id '%s'.", item_id)
            return 1

    try:
        if args.explain:
            print(await pipeline.explain(args.explain))
        elif args.deep_dive:
            print(await pipeline.deep_dive(item))
        else:
            text, sources = await pipeline.readability(item)
            print(text)
            for source in sources:
                print(f"  - {source.title or 'Context'}: {source.uri}")
    except Exception as exc:  # pragma: no cover - network/LLM failure
        logger.error("Request failed: %s", exc)
        return 1
    return 0


async def run(args: argparse.Namespace) -> int:
    settings = load_settings()
    for option, key in (
        ("tool", "tool"),
        ("category", "category"),
        ("platform", "platform"),
        ("window", "time_window"),
    ):
        value = getattr(args, option)
        if value is not None:
            settings[key] = value

    filters = FeedFilters.from_labels(
        category=settings["category"],
        tool=settings["tool"],
        platform=settings["platform"],
        query=args.search,
        window=settings["time_window"],
    )
    store = build_store(REDIS_URL, STATE_PATH)

    if args.favorite:
        favorites = toggle_favorite(store, args.favorite)
        state = "added to" if args.favorite in favorites else "removed from"
        print(f"{args.favorite} {state} favorites.")
        return 0

    pipeline = FeedPipeline(
        LiteLLMUpstream(),
        store,
        max_history=MAX_HISTORY_ITEMS,
        citation_resolver=resolve_citations if RESOLVE_CITATIONS else None,
    )

    items: List[NewsItem] = load_history(store)
    if args.explain or args.deep_dive or args.read:
        return await run_lookup(pipeline, items, args)

    save_settings(settings)
    if not args.offline:
        try:
            result = await pipeline.sync(filters.tool, filters.category)
        except SyncError as exc:
            logger.error("%s", exc)
            if not items:
                return 1
        else:
            items = result.items
            print(f"Sync complete: {result.added_count} new item(s), {len(result.citations)} citation(s).")

    favorites = load_favorites(store)
    feed = present(items, filters, favorites)
    for item in feed:
        print(format_item(item, favorites))
    if not feed:
        print("No signals for this filter combination.")

    if args.briefing:
        await print_briefing(pipeline, feed, items, filters)
    return 0


async def print_briefing(
    pipeline: FeedPipeline,
    feed: Sequence[NewsItem],
    items: Sequence[NewsItem],
    filters: FeedFilters,
) -> None:
    """Print the pulse briefing, over the whole history when the filtered feed is empty."""

    if feed:
        context = feed
        tool_label = filters.tool.value if filters.tool else "Global Ecosystem"
        category_label = filters.category.value if filters.category else "All Categories"
    else:
        context = present(items)
        tool_label, category_label = "Global Ecosystem", "All Categories"
    if not context:
        return
    try:
        points = await pipeline.briefing(context, tool_label, category_label)
    except Exception as exc:  # pragma: no cover - network/LLM failure
        logger.warning("Briefing failed: %s", exc)
        return
    for point in points:
        flag = "!" if point.alert else "-"
        print(f"{flag} {point.title}: {point.content}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Launch one VibeCode Pulse sync-and-display cycle."""

    args = build_parser().parse_args(argv)
    settings = load_settings()
    debug = args.debug or bool(settings.get("debug_mode", False))
    configure_logging(debug)
    configure_litellm_debug(bool(settings.get("litellm_debug", False)))
    logger.debug("Bootstrapping VibeCode Pulse %s", APP_METADATA.version)
    logger.debug(
        "Model=%s PULSE_API_KEY=%s redis=%s",
        MODEL_NAME,
        sanitize_env_value("PULSE_API_KEY", API_KEY),
        "on" if REDIS_URL else "off",
    )
    return asyncio.run(run(args))


__all__ = [
    "APP_METADATA",
    "APP_VERSION",
    "build_parser",
    "configure_logging",
    "format_item",
    "main",
    "print_briefing",
    "run",
    "run_lookup",
]
