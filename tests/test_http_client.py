"""Unit tests for citation link resolution helpers."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any, List

import pytest
import requests

from vibecode_pulse import http_client
from vibecode_pulse.http_client import meta_refresh_target, resolve_citations, resolve_final_url
from vibecode_pulse.models import Citation


class FakeSession:
    def __init__(self, head_url: str = "", get_url: str = "", text: str = "", fail_head: bool = False) -> None:
        self.head_url = head_url
        self.get_url = get_url
        self.text = text
        self.fail_head = fail_head
        self.calls: List[str] = []

    def head(self, url: str, **_kwargs: Any) -> SimpleNamespace:
        self.calls.append("head")
        if self.fail_head:
            raise requests.ConnectionError("boom")
        return SimpleNamespace(url=self.head_url or url)

    def get(self, url: str, **_kwargs: Any) -> SimpleNamespace:
        self.calls.append("get")
        return SimpleNamespace(url=self.get_url or url, text=self.text)


def test_meta_refresh_target_is_made_absolute() -> None:
    """Relative meta refresh targets are joined onto the base URL."""
    html = '<html><head><meta http-equiv="Refresh" content="0; url=/post/1"></head></html>'
    assert meta_refresh_target(html, "https://blog.dev/r") == "https://blog.dev/post/1"
    assert meta_refresh_target("<html></html>", "https://blog.dev/r") == ""


def test_head_redirect_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    """A redirect followed by HEAD resolves without a GET."""
    session = FakeSession(head_url="https://final.dev/article")
    monkeypatch.setattr(http_client, "get_http_session", lambda: session)
    assert resolve_final_url("https://search.redirect/abc") == "https://final.dev/article"
    assert session.calls == ["head"]


def test_get_with_meta_refresh(monkeypatch: pytest.MonkeyPatch) -> None:
    """When HEAD fails, GET plus meta refresh is used."""
    html = '<meta http-equiv="refresh" content="0;URL=\'https://final.dev/x\'">'
    session = FakeSession(fail_head=True, text=html)
    monkeypatch.setattr(http_client, "get_http_session", lambda: session)
    assert resolve_final_url("https://search.redirect/abc") == "https://final.dev/x"


def test_resolve_citations_keeps_titles(monkeypatch: pytest.MonkeyPatch) -> None:
    """Resolution swaps URIs and preserves titles and order."""
    monkeypatch.setattr(http_client, "resolve_final_url", lambda url, timeout=10: url + "/final")
    citations = [Citation(uri="https://a.dev", title="A"), Citation(uri="https://b.dev", title="B")]
    resolved = asyncio.run(resolve_citations(citations))
    assert resolved == [
        Citation(uri="https://a.dev/final", title="A"),
        Citation(uri="https://b.dev/final", title="B"),
    ]
