"""Sync orchestration: fetch, parse, verify, merge and persist.

``FeedPipeline`` wires the injected upstream callable and key/value store to
the pure parsing, verification and merge steps. One sync runs at a time; the
read-merge-persist sequence happens inside a single ``sync`` call.

Updates: v0.1 - 2025-11-20 - Added grounded sync cycle.
Updates: v0.2 - 2025-11-24 - Added pulse briefing and busy guard.
Updates: v0.3 - 2025-11-27 - Applied retention cap and optional citation resolution.
Updates: v0.4 - 2025-12-02 - Added deep dive, readability summary and term explanation.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from .config import (
    BRIEFING_CONTEXT_ITEMS,
    MAX_HISTORY_ITEMS,
    MAX_RETRIES,
    RETRY_INITIAL_DELAY_MS,
)
from .history import load_favorites, load_history, save_history
from .merge import count_new, merge_feed, trim_history
from .models import BriefingPoint, Category, Citation, GroundedResponse, NewsItem, SyncResult, Tool
from .parser import parse_briefing, parse_records
from .prompts import (
    build_briefing_prompt,
    build_deep_dive_prompt,
    build_explain_prompt,
    build_readability_prompt,
    build_sync_prompt,
)
from .retry import invoke_with_retry
from .storage import KeyValueStore
from .upstream import UpstreamCall
from .verifier import verify_records

logger = logging.getLogger(__name__)

CitationResolver = Callable[[Sequence[Citation]], Awaitable[List[Citation]]]

DEEP_DIVE_FALLBACK = "Insight synthesized."
READABILITY_FALLBACK = "Summary failed."
EXPLAIN_FALLBACK = "Term defined."


class SyncError(RuntimeError):
    """A sync cycle failed; the caller should offer a retry."""

    def __init__(self, message: str = "Sync failed, please retry.", *, obtained: int = 0) -> None:
        super().__init__(message)
        self.obtained = obtained


class SyncInProgressError(SyncError):
    def __init__(self) -> None:
        super().__init__("A sync is already running.")


class FeedPipeline:
    """Run grounded sync cycles against an injected upstream and store."""

    def __init__(
        self,
        upstream: UpstreamCall,
        store: KeyValueStore,
        *,
        max_retries: int = MAX_RETRIES,
        initial_delay_ms: int = RETRY_INITIAL_DELAY_MS,
        max_history: int = MAX_HISTORY_ITEMS,
        citation_resolver: Optional[CitationResolver] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.upstream = upstream
        self.store = store
        self.max_retries = max_retries
        self.initial_delay_ms = initial_delay_ms
        self.max_history = max_history
        self.citation_resolver = citation_resolver
        self.clock = clock
        self.last_citations: List[Citation] = []
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    async def _call(self, prompt: str, *, grounded: bool) -> GroundedResponse:
        return await invoke_with_retry(
            lambda: self.upstream(prompt, grounded=grounded),
            self.max_retries,
            self.initial_delay_ms,
        )

    async def fetch(
        self, tool: Optional[Tool] = None, category: Optional[Category] = None
    ) -> List[NewsItem]:
        """Request, parse and verify one batch without touching history."""

        response = await self._call(build_sync_prompt(tool, category), grounded=True)
        citations = list(response.citations)
        if citations and self.citation_resolver is not None:
            citations = await self.citation_resolver(citations)
        self.last_citations = citations
        records = parse_records(response.text)
        items = verify_records(records, citations, self.clock())
        logger.info(
            "Fetched %d record(s), %d verified, against %d citation(s).",
            len(records),
            len(items),
            len(citations),
        )
        return items

    async def sync(
        self, tool: Optional[Tool] = None, category: Optional[Category] = None
    ) -> SyncResult:
        """Fetch a batch, merge it into stored history and persist the result.

        History is only rewritten when the batch yields at least one item, so
        an empty reply never clears the "new" markers of the previous cycle.
        """

        if self._busy:
            raise SyncInProgressError()
        self._busy = True
        try:
            try:
                incoming = await self.fetch(tool, category)
            except Exception as exc:
                logger.error("Sync failed: %s", exc)
                raise SyncError(obtained=0) from exc

            history = load_history(self.store)
            if not incoming:
                logger.info("Sync returned no usable items; history unchanged.")
                return SyncResult(items=history, added_count=0, citations=self.last_citations)

            merged = merge_feed(history, incoming)
            merged = trim_history(merged, self.max_history, load_favorites(self.store))
            save_history(self.store, merged)
            added = count_new(merged)
            logger.info("Sync merged %d new item(s); history holds %d.", added, len(merged))
            return SyncResult(items=merged, added_count=added, citations=self.last_citations)
        finally:
            self._busy = False

    async def briefing(
        self, items: Sequence[NewsItem], tool_label: str = "Global Ecosystem",
        category_label: str = "All Categories",
    ) -> List[BriefingPoint]:
        """Ask the model for a three-point summary of the leading items."""

        context = list(items[:BRIEFING_CONTEXT_ITEMS])
        if not context:
            return []
        prompt = build_briefing_prompt(context, tool_label, category_label)
        response = await self._call(prompt, grounded=False)
        return parse_briefing(response.text)

    async def deep_dive(self, item: NewsItem) -> str:
        """Two or three sentences on why ``item`` matters to developers."""

        response = await self._call(build_deep_dive_prompt(item), grounded=False)
        return response.text.strip() or DEEP_DIVE_FALLBACK

    async def readability(self, item: NewsItem) -> Tuple[str, List[Citation]]:
        """Grounded markdown summary of the linked article plus its sources."""

        response = await self._call(build_readability_prompt(item), grounded=True)
        return response.text.strip() or READABILITY_FALLBACK, list(response.citations)

    async def explain(self, word: str, context: str = "") -> str:
        response = await self._call(build_explain_prompt(word, context), grounded=False)
        return response.text.strip() or EXPLAIN_FALLBACK


__all__ = ["FeedPipeline", "SyncError", "SyncInProgressError"]
