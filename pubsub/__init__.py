"""In-process publish/subscribe event bus."""

from pubsub.event_bus import EventBus
from pubsub.handler_list import HandlerList, ListChange
from pubsub.runtime_state import get_bus, reset_bus, set_bus

__all__ = ["EventBus", "HandlerList", "ListChange", "get_bus", "reset_bus", "set_bus"]
