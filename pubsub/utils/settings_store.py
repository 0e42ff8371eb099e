"""In-memory cache for bus settings (JSON file plus environment overrides)."""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Any

from pubsub.utils.log_utils import tprint

DEFAULT_SETTINGS_PATH = "config/bus_settings.json"

DEFAULTS: dict[str, Any] = {
    "log_level": "INFO",
    "error_policy": "isolate",
}

# Environment variable -> settings key.
ENV_OVERRIDES = {
    "PUBSUB_LOG_LEVEL": "log_level",
    "PUBSUB_ERROR_POLICY": "error_policy",
}

_lock = threading.Lock()
_settings_cache: dict[str, Any] = {}


def settings_path() -> Path:
    return Path(os.getenv("PUBSUB_SETTINGS") or DEFAULT_SETTINGS_PATH)


def _load_json(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    data = json.loads(text)
    return data if isinstance(data, dict) else {}


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for env_name, key in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is not None and raw.strip():
            overrides[key] = raw.strip()
    return overrides


def refresh_settings() -> dict[str, Any]:
    """Reload settings from disk and the environment, replacing the cache."""
    data = dict(DEFAULTS)
    data.update(_load_json(settings_path()))
    data.update(_env_overrides())
    with _lock:
        _settings_cache.clear()
        _settings_cache.update(data)
        return dict(_settings_cache)


def get_settings() -> dict[str, Any]:
    """Return a copy of the cached settings."""
    with _lock:
        cached = dict(_settings_cache)
    if not cached:
        return refresh_settings()
    return cached


def clear_settings() -> None:
    with _lock:
        _settings_cache.clear()


def is_deep_logging() -> bool:
    """Return True when log_level requests deep tracing."""
    level = str(get_settings().get("log_level", "")).upper()
    return level == "DEEP"


def deep_log(message: str) -> None:
    if is_deep_logging():
        tprint(message)
