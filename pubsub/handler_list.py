"""Observable, append-only list of callbacks for one event name."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

Callback = Callable[[Any], Any]


@dataclass(frozen=True)
class ListChange:
    """A single mutation of a HandlerList."""

    event: str
    op: str
    index: int
    value: Callback


ListObserver = Callable[[ListChange], None]


class HandlerList(Sequence):
    """Ordered callbacks registered for ``event``.

    Reads follow the ``Sequence`` protocol. The only mutation is
    :meth:`append`, and every append is reported to observers attached
    with :meth:`watch`. Observers run after the callback is stored, on the
    thread that appended.
    """

    def __init__(self, event: str) -> None:
        self.event = event
        self._lock = threading.RLock()
        self._callbacks: list[Callback] = []
        self._observers: list[ListObserver] = []

    def __getitem__(self, index):
        with self._lock:
            return self._callbacks[index]

    def __len__(self) -> int:
        with self._lock:
            return len(self._callbacks)

    def __iter__(self) -> Iterator[Callback]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"HandlerList(event={self.event!r}, size={len(self)})"

    def snapshot(self) -> tuple[Callback, ...]:
        """Return the callbacks as they are right now."""
        with self._lock:
            return tuple(self._callbacks)

    def append(self, callback: Callback) -> None:
        with self._lock:
            self._callbacks.append(callback)
            change = ListChange(
                event=self.event,
                op="append",
                index=len(self._callbacks) - 1,
                value=callback,
            )
            observers = list(self._observers)
        for observer in observers:
            observer(change)

    def watch(self, observer: ListObserver) -> Callable[[], None]:
        """Attach ``observer``; the returned function detaches it again."""
        with self._lock:
            self._observers.append(observer)

        def _detach() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return _detach
