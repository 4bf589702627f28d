"""Bounded exponential backoff for flaky upstream model calls.

Updates: v0.1 - 2025-11-20 - Ported retry wrapper for grounded model requests.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .config import MAX_RETRIES, RETRYABLE_STATUSES, RETRY_INITIAL_DELAY_MS

logger = logging.getLogger(__name__)

T = TypeVar("T")

_OVERLOADED_MARKER = "overloaded"


def _error_status(error: BaseException) -> Optional[int]:
    for attr in ("status", "status_code", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    response = getattr(error, "response", None)
    status = getattr(response, "status_code", None)
    if isinstance(status, int):
        return status
    return None


def is_retryable_error(error: BaseException) -> bool:
    """Return True for rate limiting, unavailability or "overloaded" failures."""

    if _error_status(error) in RETRYABLE_STATUSES:
        return True
    return _OVERLOADED_MARKER in str(error).lower()


async def invoke_with_retry(
    fn: Callable[[], Awaitable[T]],
    max_retries: int = MAX_RETRIES,
    initial_delay_ms: int = RETRY_INITIAL_DELAY_MS,
    *,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """Await ``fn()``, retrying retryable failures with doubling delays.

    At most ``max_retries`` retries happen (``max_retries + 1`` attempts in
    total). The original exception propagates unchanged once the budget is
    spent or when the failure is not retryable.
    """

    delay_ms = initial_delay_ms
    attempt = 0
    while True:
        try:
            return await fn()
        except Exception as exc:
            if attempt >= max_retries or not is_retryable_error(exc):
                raise
            attempt += 1
            logger.warning(
                "Upstream call failed (%s); retry %d/%d in %.1fs.",
                exc,
                attempt,
                max_retries,
                delay_ms / 1000,
            )
            await sleep(delay_ms / 1000)
            delay_ms *= 2


__all__ = ["invoke_with_retry", "is_retryable_error"]
