"""Line protocol parsing for grounded model replies.

Each record sits on one line, introduced by an explicit marker and split on
a multi-character separator so commas and pipes in model prose never shift
columns::

    [ITEM] title >>> snippet >>> source >>> platform >>> url >>> category >>> tool >>> date

Replies from older prompts use ``[DATA]`` with ``||`` separators; both forms
are read. Malformed lines reduce yield and never raise.

Updates: v0.1 - 2025-11-20 - Added record and briefing parsers.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Tuple

from .models import (
    DEFAULT_SNIPPET,
    DEFAULT_SOURCE,
    BriefingPoint,
    CandidateRecord,
    Category,
    Platform,
    Tool,
)

logger = logging.getLogger(__name__)

ITEM_MARKER = "[ITEM]"
FIELD_SEPARATOR = ">>>"
LEGACY_ITEM_MARKER = "[DATA]"
LEGACY_FIELD_SEPARATOR = "||"
MIN_FIELDS = 5

PULSE_MARKER = "PULSE ||"
MAX_BRIEFING_POINTS = 3

_PROTOCOLS: Tuple[Tuple[str, str], ...] = (
    (ITEM_MARKER, FIELD_SEPARATOR),
    (LEGACY_ITEM_MARKER, LEGACY_FIELD_SEPARATOR),
)
_TITLE_MARKUP = re.compile(r"^[\s#*\-•·◦▪‣>]+")


def clean_title(title: str) -> str:
    return _TITLE_MARKUP.sub("", title).strip()


def _split_line(line: str) -> Optional[List[str]]:
    for marker, separator in _PROTOCOLS:
        index = line.find(marker)
        if index < 0:
            continue
        remainder = line[index + len(marker):]
        return [part.strip() for part in remainder.split(separator)]
    return None


def _field(fields: Sequence[str], index: int) -> str:
    return fields[index] if index < len(fields) else ""


def parse_line(line: str) -> Optional[CandidateRecord]:
    fields = _split_line(line)
    if fields is None:
        return None
    if len(fields) < MIN_FIELDS:
        logger.debug("Skipping record with %d fields: %r", len(fields), line[:80])
        return None
    published = _field(fields, 7)
    return CandidateRecord(
        title=clean_title(fields[0]),
        snippet=fields[1] or DEFAULT_SNIPPET,
        source_name=fields[2] or DEFAULT_SOURCE,
        platform=fields[3] or Platform.NEWS.value,
        raw_url=fields[4],
        category=_field(fields, 5).lower() or Category.COMMUNITY.value,
        tool=_field(fields, 6) or Tool.GENERAL_AI.value,
        published_at_raw=published or None,
    )


def parse_records(text: str) -> List[CandidateRecord]:
    """Return candidate records for every well-formed protocol line in ``text``."""

    if not isinstance(text, str) or not text:
        return []
    records: List[CandidateRecord] = []
    for line in text.splitlines():
        record = parse_line(line)
        if record is not None:
            records.append(record)
    logger.debug("Parsed %d candidate records from model reply.", len(records))
    return records


def parse_briefing(text: str) -> List[BriefingPoint]:
    """Read up to three ``PULSE || headline || insight || alert`` lines."""

    if not isinstance(text, str):
        return []
    points: List[BriefingPoint] = []
    for line in text.splitlines():
        if PULSE_MARKER not in line:
            continue
        parts = line.split(LEGACY_FIELD_SEPARATOR)
        if len(parts) < 3:
            continue
        points.append(
            BriefingPoint(
                title=parts[1].strip(),
                content=parts[2].strip(),
                alert=len(parts) > 3 and "alert" in parts[3].lower(),
            )
        )
        if len(points) >= MAX_BRIEFING_POINTS:
            break
    return points


__all__ = [
    "FIELD_SEPARATOR",
    "ITEM_MARKER",
    "MIN_FIELDS",
    "clean_title",
    "parse_briefing",
    "parse_line",
    "parse_records",
]
