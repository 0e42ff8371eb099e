"""Process-wide handle to the application's event bus."""

from __future__ import annotations

import threading

from pubsub.event_bus import EventBus

_lock = threading.Lock()
_BUS: EventBus | None = None


def get_bus() -> EventBus:
    """Return the installed bus, creating a default one on first use."""
    global _BUS
    with _lock:
        if _BUS is None:
            _BUS = EventBus()
        return _BUS


def set_bus(bus: EventBus) -> None:
    global _BUS
    with _lock:
        _BUS = bus


def reset_bus() -> None:
    global _BUS
    with _lock:
        _BUS = None
