import logging
from typing import Callable, Dict, List

from django.utils import timezone

from .event_bus_interface import EventBus, EventDispatchError


logger = logging.getLogger(__name__)


class LocalEventBus(EventBus):
    """In-process event bus.

    Handlers run synchronously in the publishing thread, so a caller that
    publishes after ``transaction.atomic`` has exited sees every side effect
    written (or the failure raised) before it returns.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}

    def publish(self, event_type: str, payload: dict, occurred_at=None):
        """Deliver the event envelope to every handler subscribed to ``event_type``."""
        message = {
            "event_type": event_type,
            "occurred_at": (occurred_at or timezone.now()).isoformat(),
            "payload": payload,
        }
        handlers = self._subscribers.get(event_type, [])
        if not handlers:
            logger.debug(f"No handlers for event: {event_type}")
            return

        for handler in handlers:
            try:
                handler(message)
            except Exception as e:
                logger.error(f"Handler error for {event_type}: {str(e)}", exc_info=True)
                raise EventDispatchError(event_type, e) from e
        logger.info(f"Published event: {event_type} to {len(handlers)} handler(s)")

    def subscribe(self, event_type: str, handler: Callable):
        """Subscribe handler to event type. Subscribing the same handler twice is a no-op."""
        handlers = self._subscribers.setdefault(event_type, [])
        if handler in handlers:
            return
        handlers.append(handler)
        logger.info(f"Registered handler for event: {event_type}")

    def unsubscribe(self, event_type: str, handler: Callable):
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event_type: str) -> List[Callable]:
        return list(self._subscribers.get(event_type, []))


# Singleton instance
_event_bus_instance = None


def get_event_bus() -> EventBus:
    """Get singleton event bus instance."""
    global _event_bus_instance
    if _event_bus_instance is None:
        _event_bus_instance = LocalEventBus()
    return _event_bus_instance
