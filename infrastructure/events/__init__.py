from .event_bus_interface import EventBus, EventDispatchError
from .local_event_bus import LocalEventBus, get_event_bus


__all__ = ["EventBus", "EventDispatchError", "LocalEventBus", "get_event_bus"]
