"""Unit tests for the retrying upstream invoker."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import List

import pytest

from vibecode_pulse.retry import invoke_with_retry, is_retryable_error


class StatusError(Exception):
    def __init__(self, status: int) -> None:
        super().__init__(f"upstream returned {status}")
        self.status_code = status


class _Flaky:
    def __init__(self, failures: List[Exception], result: str = "ok") -> None:
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


@pytest.fixture
def delays() -> List[float]:
    return []


@pytest.fixture
def fake_sleep(delays: List[float]):
    async def _sleep(seconds: float) -> None:
        delays.append(seconds)

    return _sleep


def test_success_returns_without_sleeping(fake_sleep, delays: List[float]) -> None:
    """A first-try success returns immediately."""
    fn = _Flaky([])
    assert asyncio.run(invoke_with_retry(fn, sleep=fake_sleep)) == "ok"
    assert fn.calls == 1
    assert delays == []


def test_retryable_failures_back_off_exponentially(fake_sleep, delays: List[float]) -> None:
    """Delays double from the initial value between attempts."""
    fn = _Flaky([StatusError(503), StatusError(429)])
    assert asyncio.run(invoke_with_retry(fn, 3, 1500, sleep=fake_sleep)) == "ok"
    assert fn.calls == 3
    assert delays == [1.5, 3.0]


def test_exhausted_retries_reraise_original_error(fake_sleep, delays: List[float]) -> None:
    """After max_retries the last original exception propagates unchanged."""
    errors = [StatusError(429) for _ in range(4)]
    fn = _Flaky(list(errors))
    with pytest.raises(StatusError) as excinfo:
        asyncio.run(invoke_with_retry(fn, 3, 1500, sleep=fake_sleep))
    assert excinfo.value is errors[-1]
    assert fn.calls == 4
    assert delays == [1.5, 3.0, 6.0]


def test_non_retryable_error_is_not_retried(fake_sleep, delays: List[float]) -> None:
    """Other failures surface on the first attempt."""
    fn = _Flaky([ValueError("bad request")])
    with pytest.raises(ValueError):
        asyncio.run(invoke_with_retry(fn, sleep=fake_sleep))
    assert fn.calls == 1
    assert delays == []


def test_zero_retry_budget(fake_sleep, delays: List[float]) -> None:
    """max_retries=0 means a single attempt."""
    fn = _Flaky([StatusError(503)])
    with pytest.raises(StatusError):
        asyncio.run(invoke_with_retry(fn, 0, sleep=fake_sleep))
    assert fn.calls == 1


def test_retryable_classification() -> None:
    """Status codes, nested responses and overload text are recognised."""
    assert is_retryable_error(StatusError(429))
    assert is_retryable_error(StatusError(503))
    assert not is_retryable_error(StatusError(500))
    assert is_retryable_error(RuntimeError("The model is Overloaded, try later"))
    nested = RuntimeError("http error")
    nested.response = SimpleNamespace(status_code=503)  # type: ignore[attr-defined]
    assert is_retryable_error(nested)
    assert not is_retryable_error(KeyError("missing"))
