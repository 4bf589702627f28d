"""Unit tests for the LiteLLM upstream adapter."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any, Dict

import pytest

from vibecode_pulse import upstream
from vibecode_pulse.models import Citation
from vibecode_pulse.upstream import (
    GROUNDING_TOOL,
    LiteLLMUpstream,
    extract_citations,
    extract_completion_text,
    prepare_completion_kwargs,
)

GROUNDING = [
    {
        "groundingChunks": [
            {"web": {"uri": "https://dev.example/cursor-agent-mode", "title": "Cursor Ships Agent Mode"}},
            {"retrievedContext": {"uri": "gs://bucket/doc"}},
            {"web": {"uri": "#", "title": "Reference"}},
            {"web": {"uri": "https://dev.example/cursor-agent-mode", "title": "Duplicate"}},
            {"web": {"uri": "https://reddit.com/r/cursor/1", "title": None}},
        ]
    }
]


def _response(content: Any, **extra: Any) -> Dict[str, Any]:
    return {"choices": [{"message": {"content": content}}], **extra}


def test_prepare_completion_kwargs_adds_grounding_tool() -> None:
    """Grounded calls carry the search tool; None values are dropped."""
    kwargs = prepare_completion_kwargs(
        prompt="hi", grounded=True, model="gemini/gemini-2.5-flash", timeout=30, api_base="https://proxy/"
    )
    assert kwargs["tools"] == [GROUNDING_TOOL]
    assert kwargs["api_base"] == "https://proxy"
    assert "api_key" not in kwargs
    assert "temperature" not in kwargs
    plain = prepare_completion_kwargs(prompt="hi", grounded=False, model="m", timeout=30)
    assert "tools" not in plain


def test_extract_completion_text_variants() -> None:
    """String, multi-part and missing content are all handled."""
    assert extract_completion_text(_response("  text  ")) == "text"
    assert extract_completion_text(_response([{"text": "a"}, "b"])) == "ab"
    assert extract_completion_text({"choices": []}) == ""
    message = SimpleNamespace(content="obj")
    assert extract_completion_text(SimpleNamespace(choices=[SimpleNamespace(message=message)])) == "obj"


def test_extract_citations_reads_web_chunks_in_order() -> None:
    """Only web chunks with real URIs are kept, deduplicated in order."""
    citations = extract_citations(_response("x", vertex_ai_grounding_metadata=GROUNDING))
    assert citations == [
        Citation(uri="https://dev.example/cursor-agent-mode", title="Cursor Ships Agent Mode"),
        Citation(uri="https://reddit.com/r/cursor/1", title=""),
    ]


def test_extract_citations_from_hidden_params() -> None:
    """Metadata stored in hidden params is found as well."""
    response = SimpleNamespace(
        choices=[], _hidden_params={"vertex_ai_grounding_metadata": GROUNDING}
    )
    assert len(extract_citations(response)) == 2
    assert extract_citations(_response("x")) == []


def test_litellm_upstream_call(monkeypatch: pytest.MonkeyPatch) -> None:
    """The adapter forwards kwargs and wraps text plus citations."""
    captured: Dict[str, Any] = {}

    async def fake_acompletion(**kwargs: Any) -> Dict[str, Any]:
        captured.update(kwargs)
        return _response("[ITEM] a", vertex_ai_grounding_metadata=GROUNDING)

    monkeypatch.setattr(upstream.litellm, "acompletion", fake_acompletion)
    caller = LiteLLMUpstream(model="gemini/test", timeout=5, api_key="secret", api_base=None)

    grounded = asyncio.run(caller("prompt", grounded=True))
    assert grounded.text == "[ITEM] a"
    assert len(grounded.citations) == 2
    assert captured["model"] == "gemini/test"
    assert captured["api_key"] == "secret"
    assert captured["messages"] == [{"role": "user", "content": "prompt"}]

    plain = asyncio.run(caller("prompt", grounded=False))
    assert plain.citations == []
