from abc import ABC, abstractmethod
from typing import Callable, Iterable


class EventDispatchError(Exception):
    """Raised when a subscriber fails while handling a published event."""

    def __init__(self, event_type: str, original: Exception):
        super().__init__(f"Handler failed for {event_type}: {original}")
        self.event_type = event_type
        self.original = original


class EventBus(ABC):
    """Abstract interface for event bus."""

    @abstractmethod
    def publish(self, event_type: str, payload: dict):
        """Publish event to subscribers."""
        pass

    @abstractmethod
    def subscribe(self, event_type: str, handler: Callable):
        """Subscribe handler to event type."""
        pass

    def dispatch(self, events: Iterable) -> int:
        """Publish a batch of ``DomainEvent`` objects in order. Returns how many were published."""
        count = 0
        for event in events:
            self.publish(event.event_type, event.payload, occurred_at=event.occurred_at)
            count += 1
        return count
