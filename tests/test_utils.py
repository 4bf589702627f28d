"""Unit tests for utility functions in vibecode_pulse.utils.

Covers:
- read_optional_env / read_int_env / read_bool_env
- sanitize_env_value
- isoformat_utc / parse_iso8601_utc
- sanitize_published_at
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from vibecode_pulse.utils import (
    isoformat_utc,
    parse_iso8601_utc,
    read_bool_env,
    read_int_env,
    read_optional_env,
    sanitize_env_value,
    sanitize_published_at,
)


def test_read_optional_env_returns_trimmed_value(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment value should be trimmed and returned when non-blank."""
    monkeypatch.setenv("TEST_ENV_VAR", "  value  ")
    assert read_optional_env("TEST_ENV_VAR") == "value"


def test_read_optional_env_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    """Blank or unset environment variables should yield None."""
    monkeypatch.setenv("BLANK_ENV_VAR", "   ")
    monkeypatch.delenv("MISSING_ENV_VAR", raising=False)
    assert read_optional_env("BLANK_ENV_VAR") is None
    assert read_optional_env("MISSING_ENV_VAR") is None


def test_read_int_env_falls_back_on_malformed(monkeypatch: pytest.MonkeyPatch) -> None:
    """Malformed integers use the default; values are clamped to the minimum."""
    monkeypatch.setenv("INT_VAR", "abc")
    assert read_int_env("INT_VAR", 7) == 7
    monkeypatch.setenv("INT_VAR", "-3")
    assert read_int_env("INT_VAR", 7, minimum=1) == 1
    monkeypatch.setenv("INT_VAR", "42")
    assert read_int_env("INT_VAR", 7) == 42


def test_read_bool_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Common truthy spellings enable a flag."""
    monkeypatch.setenv("BOOL_VAR", "Yes")
    assert read_bool_env("BOOL_VAR") is True
    monkeypatch.setenv("BOOL_VAR", "0")
    assert read_bool_env("BOOL_VAR", True) is False


def test_sanitize_env_value_masks_secrets() -> None:
    """Secrets are masked, long values truncated, blanks dropped."""
    assert sanitize_env_value("PULSE_API_KEY", "sk-123") == "***"
    assert sanitize_env_value("PULSE_MODEL", "") is None
    assert sanitize_env_value("PULSE_MODEL", "x" * 100).endswith("…")
    assert sanitize_env_value("PULSE_MODEL", "gemini") == "gemini"


def test_isoformat_utc_uses_z_suffix() -> None:
    """UTC timestamps render with a Z suffix and no microseconds."""
    stamp = datetime(2025, 1, 2, 3, 4, 5, 678, tzinfo=timezone(timedelta(hours=2)))
    assert isoformat_utc(stamp) == "2025-01-02T01:04:05Z"


def test_parse_iso8601_utc_variants() -> None:
    """Z suffixes, naive values and dates all parse as UTC."""
    assert parse_iso8601_utc("2025-01-01T00:00:00Z") == datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert parse_iso8601_utc("2025-01-01") == datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert parse_iso8601_utc("not a date") is None
    assert parse_iso8601_utc(None) is None


def test_sanitize_published_at_clamps_to_now() -> None:
    """Invalid and future dates collapse to now; past dates are kept."""
    now = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
    assert sanitize_published_at("2025-05-01T08:30:00Z", now) == "2025-05-01T08:30:00Z"
    assert sanitize_published_at("2030-01-01", now) == "2025-06-01T12:00:00Z"
    assert sanitize_published_at("yesterday", now) == "2025-06-01T12:00:00Z"
    assert sanitize_published_at(None, now) == "2025-06-01T12:00:00Z"
