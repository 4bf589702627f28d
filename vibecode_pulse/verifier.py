"""Grounding-based link verification for candidate records.

A plausible but dead link is worse than an honestly missing one, so every
model-stated URL is reconciled against the search citations returned with
the reply. Exact citation matches pass through; otherwise the citation whose
title best overlaps the record title replaces the link when there is any
overlap or when the stated link looks broken.

Updates: v0.1 - 2025-11-20 - Added citation matching and id recomputation.
Updates: v0.2 - 2025-11-24 - Made tie-breaks follow citation input order.
Updates: v0.3 - 2025-12-02 - Sanitised citation URIs before substitution.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Set, Tuple

from .identifiers import derive_item_id
from .models import (
    DEFAULT_SOURCE,
    CandidateRecord,
    Category,
    Citation,
    NewsItem,
    Platform,
    Tool,
)
from .urls import has_ellipsis, is_suspect_url, sanitize_url
from .utils import sanitize_published_at

logger = logging.getLogger(__name__)

MIN_MATCH_WORD_LENGTH = 4

_WORD = re.compile(r"[^\W_]+", re.UNICODE)


def _words(text: str) -> Set[str]:
    return {word for word in _WORD.findall(text.lower())}


def title_overlap(citation_title: str, record_title: str) -> int:
    """Count distinct long citation-title words that also appear in the record title."""

    record_words = _words(record_title)
    return sum(
        1
        for word in _words(citation_title)
        if len(word) >= MIN_MATCH_WORD_LENGTH and word in record_words
    )


def best_citation(
    record_title: str, citations: Sequence[Citation]
) -> Optional[Tuple[Citation, int]]:
    """Return the highest-overlap citation, first in input order on ties."""

    best: Optional[Tuple[Citation, int]] = None
    for citation in citations:
        if not citation.uri:
            continue
        score = title_overlap(citation.title, record_title)
        if best is None or score > best[1]:
            best = (citation, score)
    return best


def _is_generic_source(source: str) -> bool:
    return not source.strip() or source.strip() == DEFAULT_SOURCE


def _resolve_link(
    record: CandidateRecord, url: str, citations: Sequence[Citation]
) -> Tuple[str, str]:
    source = record.source_name
    citations = [
        Citation(uri=sanitize_url(citation.uri), title=citation.title) for citation in citations
    ]
    if not citations:
        return url, source
    if url and any(citation.uri == url for citation in citations):
        return url, source

    match = best_citation(record.title, citations)
    if match is None:
        return url, source
    citation, score = match
    if score > 0 or is_suspect_url(url):
        logger.debug(
            "Substituting link for %r: %r -> %r (overlap=%d).",
            record.title[:60],
            url,
            citation.uri,
            score,
        )
        if citation.title.strip() and _is_generic_source(source):
            source = citation.title.strip()
        return citation.uri, source
    return url, source


def verify_record(
    record: CandidateRecord,
    citations: Sequence[Citation],
    now: Optional[datetime] = None,
) -> Optional[NewsItem]:
    title = record.title.strip()
    if not title:
        return None

    url, source = _resolve_link(record, sanitize_url(record.raw_url), citations)
    if has_ellipsis(url):
        url = ""

    return NewsItem(
        id=derive_item_id(url, title),
        title=title,
        snippet=record.snippet,
        source=source,
        platform=Platform.coerce(record.platform),
        url=url,
        category=Category.coerce(record.category),
        tool=Tool.coerce(record.tool),
        published_at=sanitize_published_at(record.published_at_raw, now),
    )


def verify_records(
    records: Sequence[CandidateRecord],
    citations: Sequence[Citation],
    now: Optional[datetime] = None,
) -> List[NewsItem]:
    """Turn candidate records into verified items, dropping untitled ones."""

    reference = now or datetime.now(timezone.utc)
    items: List[NewsItem] = []
    for record in records:
        item = verify_record(record, citations, reference)
        if item is not None:
            items.append(item)
    dropped = len(records) - len(items)
    if dropped:
        logger.info("Dropped %d untitled record(s) during verification.", dropped)
    return items


__all__ = [
    "best_citation",
    "title_overlap",
    "verify_record",
    "verify_records",
]
