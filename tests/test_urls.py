"""Unit tests for the URL sanitiser and suspect-link heuristic."""

from __future__ import annotations

import pytest

from vibecode_pulse.urls import is_suspect_url, sanitize_url


@pytest.mark.parametrize("raw", ["", "   ", "\n\t"])
def test_blank_input_yields_empty(raw: str) -> None:
    """Empty and whitespace-only input should yield an empty string."""
    assert sanitize_url(raw) == ""


def test_markdown_link_is_unwrapped() -> None:
    """The inner URL of a markdown link is kept, the label discarded."""
    assert sanitize_url("[Release notes](https://dev.to/cursor/notes)") == "https://dev.to/cursor/notes"


def test_bare_parenthesised_url_is_unwrapped() -> None:
    """A URL wrapped in parentheses inside prose is extracted."""
    raw = "see thread (https://news.ycombinator.com/item?id=42)"
    assert sanitize_url(raw) == "https://news.ycombinator.com/item?id=42"


def test_parentheses_inside_url_path_are_kept() -> None:
    """Parentheses that are part of the path are not mistaken for wrapping."""
    url = "https://en.wikipedia.org/wiki/Cursor_(editor)"
    assert sanitize_url(url) == url


def test_dotted_parenthetical_in_path_does_not_become_host() -> None:
    """A dotted segment in path parentheses is never promoted to a host."""
    url = "https://en.wikipedia.org/wiki/Python_(version_3.12)"
    assert sanitize_url(url) == url
    assert sanitize_url("en.wikipedia.org/wiki/Python_(version_3.12)") == (
        "https://en.wikipedia.org/wiki/Python_(version_3.12)"
    )


def test_only_one_trailing_punctuation_char_is_trimmed() -> None:
    """A single trailing sentence character is removed."""
    assert sanitize_url("https://github.com/org/repo.") == "https://github.com/org/repo"
    assert sanitize_url("https://github.com/org/repo!!") == "https://github.com/org/repo!"


@pytest.mark.parametrize("raw", ["http://x.co/...", "https://t.co/…", "github.com/…"])
def test_short_truncated_urls_are_rejected(raw: str) -> None:
    """Short strings carrying an ellipsis are treated as truncated."""
    assert sanitize_url(raw) == ""


def test_long_url_with_ellipsis_survives_sanitiser() -> None:
    """Only short ellipsis strings are rejected by the sanitiser itself."""
    url = "https://blog.dev/.../agent-mode"
    assert sanitize_url(url) == url
    assert is_suspect_url(url)


@pytest.mark.parametrize(
    "raw",
    ["https://www.example.com/post", "https://your-url-here.com/a", "placeholder.dev/link"],
)
def test_placeholder_domains_are_rejected(raw: str) -> None:
    """Template domains never make it into the feed."""
    assert sanitize_url(raw) == ""


def test_bare_domain_gets_https_scheme() -> None:
    """A scheme-less domain/path is promoted to https."""
    assert sanitize_url("example.org/post") == "https://example.org/post"


@pytest.mark.parametrize(
    "raw", ["not a url", "ftp://files.org/x", "https://localhost/x", "https://bad host.com/x"]
)
def test_strict_parse_rejects_non_http_urls(raw: str) -> None:
    """Anything that is not an absolute http(s) URL with a dotted host is dropped."""
    assert sanitize_url(raw) == ""


def test_is_suspect_url() -> None:
    """Empty, short, scheme-less and truncated links are suspect."""
    assert is_suspect_url("")
    assert is_suspect_url("https://a.co")
    assert is_suspect_url("www.github.com/features")
    assert is_suspect_url("https://github.com/.../features")
    assert not is_suspect_url("https://github.com/features")


def test_trailing_ellipsis_is_not_trimmed_into_dots() -> None:
    """Punctuation trimming leaves an ellipsis intact so it stays detectable."""
    url = "https://github.com/getcursor/..."
    assert sanitize_url(url) == url
    assert is_suspect_url(url)
    assert is_suspect_url("https://github.com/getcursor/..")
