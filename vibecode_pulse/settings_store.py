"""Persistent preference helpers for VibeCode Pulse.

Updates: v0.1 - 2025-11-20 - Moved preference persistence into its own module.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .config import DEFAULT_SETTINGS, SETTINGS_PATH

logger = logging.getLogger(__name__)


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load user preferences from disk, falling back to defaults."""

    settings_path = path or SETTINGS_PATH
    settings = DEFAULT_SETTINGS.copy()
    try:
        if settings_path.exists():
            with settings_path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
            if isinstance(data, dict):
                for key in settings:
                    if key in data:
                        settings[key] = data[key]
    except Exception as exc:  # pragma: no cover - IO issues
        logger.warning("Unable to load settings: %s", exc)
    return settings


def save_settings(settings: Dict[str, Any], path: Optional[Path] = None) -> None:
    """Persist user preferences to disk."""

    settings_path = path or SETTINGS_PATH
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with settings_path.open("w", encoding="utf-8") as handle:
            json.dump(settings, handle, indent=2)
    except Exception as exc:  # pragma: no cover - IO issues
        logger.warning("Unable to save settings: %s", exc)


__all__ = ["load_settings", "save_settings"]
