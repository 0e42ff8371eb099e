"""Small event bus: named events, ordered callbacks, synchronous dispatch."""

from __future__ import annotations

import asyncio
import inspect
import threading
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from pubsub.handler_list import Callback, HandlerList
from pubsub.utils.log_utils import error, tprint, warn

ERROR_POLICIES = {"isolate", "raise"}

BusObserver = Callable[[HandlerList], None]


def _callback_name(callback: Callback) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)


class EventBus:
    """Registry mapping event names to :class:`HandlerList` instances.

    Callbacks run on the publishing thread in subscription order. With
    ``error_policy="isolate"`` a failing callback is logged and the rest
    still run; with ``"raise"`` the first failure propagates out of
    :meth:`publish` and stops that dispatch. ``deep_trace`` prints a
    ``[BUS][DEEP]`` line for every subscribe and publish.
    """

    def __init__(self, *, error_policy: str = "isolate", deep_trace: bool = False) -> None:
        if error_policy not in ERROR_POLICIES:
            raise ValueError(
                f"Unknown error_policy {error_policy!r}; expected one of {sorted(ERROR_POLICIES)}"
            )
        self.error_policy = error_policy
        self.deep_trace = deep_trace
        self._lock = threading.RLock()
        self._events: dict[str, HandlerList] = {}
        self._watchers: list[BusObserver] = []
        self._tasks: set[asyncio.Future] = set()

    @property
    def events(self) -> Mapping[str, HandlerList]:
        return MappingProxyType(self._events)

    def subscribe(self, event: str, callback: Callback) -> None:
        with self._lock:
            handlers = self._events.get(event)
            if handlers is None:
                # Filled before it is stored in the registry.
                handlers = HandlerList(event)
                handlers.append(callback)
                self._events[event] = handlers
                watchers = list(self._watchers)
            else:
                watchers = None
        if watchers is None:
            handlers.append(callback)
        else:
            for watcher in watchers:
                watcher(handlers)
        if self.deep_trace:
            tprint(f"[DEEP][BUS] subscribe event={event} callback={_callback_name(callback)}")

    def publish(self, event: str, data: Any = None) -> None:
        with self._lock:
            handlers = self._events.get(event)
        if handlers is None:
            warn(f"No subscribers for event: {event}")
            return

        callbacks = handlers.snapshot()
        if self.deep_trace:
            tprint(f"[DEEP][BUS] publish event={event} callbacks={len(callbacks)}")
        for callback in callbacks:
            self._invoke(event, callback, data)

    def _invoke(self, event: str, callback: Callback, data: Any) -> None:
        if self.error_policy == "raise":
            result = callback(data)
        else:
            try:
                result = callback(data)
            except Exception as exc:
                error(f"Callback {_callback_name(callback)} failed for event {event}: {exc!r}")
                return
        if inspect.isawaitable(result):
            self._schedule(event, result)

    def _schedule(self, event: str, awaitable: Any) -> None:
        """Start an awaitable returned by a callback without waiting on it."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            close = getattr(awaitable, "close", None)
            if close is not None:
                close()
            warn(f"Dropped awaitable from callback for event {event}: no running event loop")
            return
        task = asyncio.ensure_future(awaitable, loop=loop)
        # The loop only keeps a weak reference to running tasks.
        self._tasks.add(task)
        task.add_done_callback(lambda done: self._report_task(event, done))

    def _report_task(self, event: str, task: asyncio.Future) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            error(f"Async callback failed for event {event}: {exc!r}")

    def watch(self, observer: BusObserver) -> Callable[[], None]:
        """Call ``observer`` with each newly created HandlerList."""
        with self._lock:
            self._watchers.append(observer)

        def _detach() -> None:
            with self._lock:
                if observer in self._watchers:
                    self._watchers.remove(observer)

        return _detach

    def has_subscribers(self, event: str) -> bool:
        return self.subscriber_count(event) > 0

    def subscriber_count(self, event: str) -> int:
        with self._lock:
            handlers = self._events.get(event)
        return len(handlers) if handlers is not None else 0

    def event_names(self) -> list[str]:
        with self._lock:
            return list(self._events)
