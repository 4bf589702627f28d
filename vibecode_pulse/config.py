"""Configuration primitives and defaults for VibeCode Pulse.

This module centralises environment-driven settings, storage keys and default
user preferences so other layers can import them without side effects beyond
reading the environment once.

Updates: v0.1 - 2025-11-20 - Extracted configuration and defaults into a standalone module.
Updates: v0.3 - 2025-11-27 - Added retention cap and citation resolution toggles.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping

from dotenv import load_dotenv

from .utils import read_bool_env, read_int_env, read_optional_env

load_dotenv()

# --- Upstream model --------------------------------------------------------------------------

MODEL_NAME = read_optional_env("PULSE_MODEL") or "gemini/gemini-2.5-flash"
API_KEY = read_optional_env("PULSE_API_KEY")
API_BASE = read_optional_env("PULSE_API_BASE")
REQUEST_TIMEOUT_SECONDS = read_int_env("PULSE_REQUEST_TIMEOUT", 60, minimum=5)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36"
)

# --- Retry policy ----------------------------------------------------------------------------

MAX_RETRIES = read_int_env("PULSE_MAX_RETRIES", 3)
RETRY_INITIAL_DELAY_MS = read_int_env("PULSE_RETRY_DELAY_MS", 1500)
RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 503})

# --- Feed history ----------------------------------------------------------------------------

HISTORY_KEY = os.getenv("PULSE_HISTORY_KEY", "vibe-news-history")
FAVORITES_KEY = os.getenv("PULSE_FAVORITES_KEY", "vibe-favs")
MAX_HISTORY_ITEMS = read_int_env("PULSE_MAX_HISTORY", 500)
BRIEFING_CONTEXT_ITEMS = 15

RESOLVE_CITATIONS = read_bool_env("PULSE_RESOLVE_CITATIONS", False)

REDIS_URL = read_optional_env("REDIS_URL")

# --- Local state paths -----------------------------------------------------------------------

_LOCAL_APPDATA = os.getenv("LOCALAPPDATA")
_XDG_CONFIG_HOME = os.getenv("XDG_CONFIG_HOME")

if os.name == "nt":
    base_dir = (
        Path(_LOCAL_APPDATA)
        if _LOCAL_APPDATA
        else Path.home() / "AppData" / "Local"
    )
else:
    base_dir = (
        Path(_XDG_CONFIG_HOME)
        if _XDG_CONFIG_HOME
        else Path.home() / ".config"
    )

STATE_PATH = Path(os.getenv("PULSE_STATE_PATH", str(base_dir / "VibeCodePulse" / "state.json")))
SETTINGS_PATH = Path(os.getenv("PULSE_SETTINGS", str(base_dir / "VibeCodePulse" / "settings.json")))

DEFAULT_SETTINGS: Dict[str, Any] = {
    "category": "All",
    "tool": "All Tools",
    "platform": "All Platforms",
    "time_window": "all",
    "debug_mode": False,
    "litellm_debug": False,
}


def merge_settings(overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Apply overrides on top of the default settings."""

    merged = DEFAULT_SETTINGS.copy()
    merged.update({key: value for key, value in overrides.items() if key in merged})
    return merged


__all__ = [
    "API_BASE",
    "API_KEY",
    "BRIEFING_CONTEXT_ITEMS",
    "DEFAULT_SETTINGS",
    "FAVORITES_KEY",
    "HISTORY_KEY",
    "MAX_HISTORY_ITEMS",
    "MAX_RETRIES",
    "MODEL_NAME",
    "REDIS_URL",
    "REQUEST_TIMEOUT_SECONDS",
    "RESOLVE_CITATIONS",
    "RETRYABLE_STATUSES",
    "RETRY_INITIAL_DELAY_MS",
    "SETTINGS_PATH",
    "STATE_PATH",
    "USER_AGENT",
    "merge_settings",
]
