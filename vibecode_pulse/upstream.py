"""LiteLLM adapter for grounded model requests.

The pipeline only needs an async callable returning reply text plus the
search citations the model was grounded on. ``LiteLLMUpstream`` provides one
on top of ``litellm.acompletion``, enabling Google Search grounding for Gemini
models and reading citations from the grounding metadata LiteLLM attaches to
the response.

Updates: v0.1 - 2025-11-20 - Adapted LiteLLM request helpers for grounded sync.
Updates: v0.2 - 2025-11-24 - Read grounding chunks from hidden params as well.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

import litellm

from .config import API_BASE, API_KEY, MODEL_NAME, REQUEST_TIMEOUT_SECONDS
from .models import Citation, GroundedResponse

logger = logging.getLogger(__name__)

litellm.drop_params = True

GROUNDING_TOOL: Dict[str, Any] = {"googleSearch": {}}


class UpstreamCall(Protocol):
    async def __call__(self, prompt: str, *, grounded: bool) -> GroundedResponse:
        ...


def configure_litellm_debug(enabled: bool) -> None:
    logger_level = logging.DEBUG if enabled else logging.INFO
    for logger_name in ("LiteLLM", "litellm"):
        llm_logger = logging.getLogger(logger_name)
        # Keep LiteLLM's own loggers in step with the CLI debug toggle.
        llm_logger.setLevel(logger_level)
        for handler in llm_logger.handlers:
            handler.setLevel(logger_level)
    if enabled and hasattr(litellm, "_turn_on_debug"):
        litellm._turn_on_debug()


def prepare_completion_kwargs(
    *,
    prompt: str,
    grounded: bool,
    model: str,
    timeout: int,
    api_key: Optional[str] = None,
    api_base: Optional[str] = None,
    temperature: Optional[float] = None,
) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "timeout": timeout,
        "temperature": temperature,
    }
    if grounded:
        kwargs["tools"] = [dict(GROUNDING_TOOL)]
    if api_key:
        kwargs["api_key"] = api_key
    if api_base:
        kwargs["api_base"] = api_base.rstrip("/")
    return {key: value for key, value in kwargs.items() if value is not None}


def _get(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def extract_completion_text(response: Any) -> str:
    choices = _get(response, "choices")
    if not isinstance(choices, list) or not choices:
        return ""
    message = _get(choices[0], "message")
    content = _get(message, "content")

    if isinstance(content, str):
        return content.strip()

    if isinstance(content, Sequence):
        parts: List[str] = []
        for item in content:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict):
                text = item.get("text")
                if isinstance(text, str):
                    parts.append(text)
        return "".join(parts).strip()

    return ""


def _grounding_metadata(response: Any) -> List[Any]:
    metadata = _get(response, "vertex_ai_grounding_metadata")
    if metadata is None:
        hidden = _get(response, "_hidden_params")
        if isinstance(hidden, dict):
            metadata = hidden.get("vertex_ai_grounding_metadata")
    if metadata is None:
        return []
    if isinstance(metadata, list):
        return metadata
    return [metadata]


def _iter_chunks(metadata: Iterable[Any]) -> Iterable[Any]:
    for entry in metadata:
        chunks = _get(entry, "groundingChunks") or _get(entry, "grounding_chunks") or []
        if isinstance(chunks, list):
            yield from chunks


def extract_citations(response: Any) -> List[Citation]:
    """Collect web citations from the response's grounding chunks, in order."""

    citations: List[Citation] = []
    seen: set[str] = set()
    for chunk in _iter_chunks(_grounding_metadata(response)):
        web = _get(chunk, "web")
        if web is None:
            continue
        uri = _get(web, "uri")
        if not isinstance(uri, str) or not uri.strip() or uri.strip() == "#":
            continue
        uri = uri.strip()
        if uri in seen:
            continue
        seen.add(uri)
        title = _get(web, "title")
        citations.append(Citation(uri=uri, title=title.strip() if isinstance(title, str) else ""))
    return citations


class LiteLLMUpstream:
    """Async grounded completion backed by LiteLLM."""

    def __init__(
        self,
        *,
        model: str = MODEL_NAME,
        timeout: int = REQUEST_TIMEOUT_SECONDS,
        api_key: Optional[str] = API_KEY,
        api_base: Optional[str] = API_BASE,
    ) -> None:
        self.model = model
        self.timeout = timeout
        self.api_key = api_key
        self.api_base = api_base

    async def __call__(self, prompt: str, *, grounded: bool) -> GroundedResponse:
        kwargs = prepare_completion_kwargs(
            prompt=prompt,
            grounded=grounded,
            model=self.model,
            timeout=self.timeout,
            api_key=self.api_key,
            api_base=self.api_base,
        )
        logger.info(
            "Requesting %s completion from '%s'.",
            "grounded" if grounded else "plain",
            self.model,
        )
        response = await asyncio.wait_for(litellm.acompletion(**kwargs), timeout=self.timeout)
        text = extract_completion_text(response)
        citations = extract_citations(response) if grounded else []
        logger.debug("Received %d chars and %d citation(s).", len(text), len(citations))
        return GroundedResponse(text=text, citations=citations)


__all__ = [
    "GROUNDING_TOOL",
    "LiteLLMUpstream",
    "UpstreamCall",
    "configure_litellm_debug",
    "extract_citations",
    "extract_completion_text",
    "prepare_completion_kwargs",
]
