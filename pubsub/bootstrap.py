"""Composition root: load environment and settings, then install the bus."""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

from pubsub.event_bus import EventBus
from pubsub.runtime_state import set_bus
from pubsub.utils.log_utils import log
from pubsub.utils.settings_store import deep_log, is_deep_logging, refresh_settings


def _env_candidates() -> list[Path]:
    cwd = Path.cwd()
    home = Path.home()
    return [cwd / "env/.env", cwd / ".env", home / ".pubsub.env"]


def _load_env_files() -> list[Path]:
    """Load .env files that exist; variables already set are kept."""
    loaded: list[Path] = []
    for path in _env_candidates():
        if path.exists():
            load_dotenv(dotenv_path=str(path), override=False)
            loaded.append(path)
    return loaded


def bootstrap() -> EventBus:
    """Build the process-wide bus from settings and install it."""
    loaded = _load_env_files()
    settings = refresh_settings()
    bus = EventBus(
        error_policy=str(settings.get("error_policy", "isolate")),
        deep_trace=is_deep_logging(),
    )
    set_bus(bus)
    deep_log(f"[DEEP][BOOT] env files={[str(p) for p in loaded]} settings={settings}")
    log("BOOT", f"Event bus ready (error_policy={bus.error_policy})", "INFO")
    return bus
