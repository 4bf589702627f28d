"""Shared HTTP session management and citation link resolution.

Grounding citations often point at search redirect endpoints rather than the
article itself. When citation resolution is enabled, each citation URI is
followed to its final destination before link verification so exact matches
against model-stated URLs become possible.

Updates: v0.2 - 2025-11-24 - Adapted pooled session helpers for citation resolution.
"""

from __future__ import annotations

import asyncio
import atexit
import logging
import threading
from typing import List, Sequence, Set
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup
from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from .config import USER_AGENT
from .models import Citation

logger = logging.getLogger(__name__)

_HTTP_THREAD_LOCAL = threading.local()
_HTTP_SESSION_LOCK = threading.Lock()
_HTTP_SESSIONS: Set[Session] = set()
_RETRY_STATUSES: Set[int] = {408, 429, 500, 502, 503}


def _build_retry() -> Retry:
    return Retry(  # pragma: no cover - network configuration
        total=2,
        backoff_factor=0.3,
        status_forcelist=list(_RETRY_STATUSES),
        allowed_methods=["HEAD", "GET", "OPTIONS"],
        raise_on_status=False,
    )


def get_http_session() -> Session:
    """Return a thread-local shared requests session configured with retries."""

    session = getattr(_HTTP_THREAD_LOCAL, "session", None)
    if session is not None:
        return session
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=4, pool_maxsize=8, max_retries=_build_retry())
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    with _HTTP_SESSION_LOCK:
        _HTTP_SESSIONS.add(session)
    _HTTP_THREAD_LOCAL.session = session
    return session


def close_all_sessions() -> None:
    """Close pooled HTTP sessions at shutdown."""

    with _HTTP_SESSION_LOCK:
        sessions: Sequence[Session] = tuple(_HTTP_SESSIONS)
        _HTTP_SESSIONS.clear()
    for session in sessions:
        session.close()


def meta_refresh_target(html: str, base_url: str) -> str:
    """Return the absolute target of an HTML meta refresh, or ``""``."""

    soup = BeautifulSoup(html, "html.parser")
    refresh = soup.find(
        "meta",
        attrs={"http-equiv": lambda v: isinstance(v, str) and v.lower() == "refresh"},
    )
    if refresh is None:
        return ""
    content = refresh.get("content", "")
    if "url=" not in content.lower():
        return ""
    target = content.split("=", 1)[1].strip().strip("'\"")
    return urljoin(base_url, target) if target else ""


def resolve_final_url(url: str, timeout: int = 10) -> str:
    """Resolve the final article URL by following redirects and meta refresh.

    Performs a HEAD first, then GET. Falls back to the original URL on failure.
    """

    session = get_http_session()
    headers = {"User-Agent": USER_AGENT}
    try:
        head_resp = session.head(url, headers=headers, allow_redirects=True, timeout=timeout)
        if head_resp.url and head_resp.url != url:
            return head_resp.url
    except requests.RequestException as exc:
        logger.debug("HEAD failed for '%s': %s", url, exc)

    try:
        get_resp = session.get(url, headers=headers, allow_redirects=True, timeout=timeout)
    except requests.RequestException as exc:
        logger.debug("GET failed for '%s': %s", url, exc)
        return url

    final_url = get_resp.url or url
    return meta_refresh_target(get_resp.text, final_url) or final_url


async def resolve_citations(citations: Sequence[Citation], timeout: int = 10) -> List[Citation]:
    """Return citations with each URI replaced by its resolved destination."""

    async def _resolve(citation: Citation) -> Citation:
        final = await asyncio.to_thread(resolve_final_url, citation.uri, timeout)
        if final != citation.uri:
            logger.debug("Resolved citation '%s' -> '%s'.", citation.uri, final)
        return Citation(uri=final, title=citation.title)

    return list(await asyncio.gather(*(_resolve(citation) for citation in citations)))


atexit.register(close_all_sessions)


__all__ = [
    "close_all_sessions",
    "get_http_session",
    "meta_refresh_target",
    "resolve_citations",
    "resolve_final_url",
]
