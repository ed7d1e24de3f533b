from datetime import datetime, timezone

import pytest

from infrastructure.events import EventDispatchError, LocalEventBus
from marketplace.domain.events import DomainEvent


@pytest.mark.unit
class TestLocalEventBus:
    def setup_method(self):
        self.bus = LocalEventBus()
        self.received = []

    def _record(self, event):
        self.received.append(event)

    def test_publish_delivers_envelope(self):
        self.bus.subscribe("NEW_MESSAGE", self._record)
        when = datetime(2025, 1, 1, tzinfo=timezone.utc)

        self.bus.publish("NEW_MESSAGE", {"recipient_id": "u1"}, occurred_at=when)

        assert self.received == [
            {"event_type": "NEW_MESSAGE", "occurred_at": when.isoformat(), "payload": {"recipient_id": "u1"}}
        ]

    def test_publish_without_handlers_is_a_no_op(self):
        self.bus.publish("NEW_MESSAGE", {})
        assert self.received == []

    def test_subscribe_twice_delivers_once(self):
        self.bus.subscribe("NEW_MESSAGE", self._record)
        self.bus.subscribe("NEW_MESSAGE", self._record)

        self.bus.publish("NEW_MESSAGE", {})

        assert len(self.received) == 1

    def test_unsubscribe(self):
        self.bus.subscribe("NEW_MESSAGE", self._record)
        self.bus.unsubscribe("NEW_MESSAGE", self._record)

        self.bus.publish("NEW_MESSAGE", {})

        assert self.received == []
        assert self.bus.handlers_for("NEW_MESSAGE") == []

    def test_handler_failure_raises_dispatch_error(self):
        def broken(event):
            raise RuntimeError("database is down")

        self.bus.subscribe("NEW_PROPOSAL", broken)

        with pytest.raises(EventDispatchError) as exc_info:
            self.bus.publish("NEW_PROPOSAL", {})

        assert exc_info.value.event_type == "NEW_PROPOSAL"
        assert isinstance(exc_info.value.original, RuntimeError)

    def test_dispatch_publishes_domain_events_in_order(self):
        self.bus.subscribe("A", self._record)
        self.bus.subscribe("B", self._record)

        self.bus.dispatch([DomainEvent(event_type="A", payload={"n": 1}), DomainEvent(event_type="B", payload={"n": 2})])

        assert [e["event_type"] for e in self.received] == ["A", "B"]
        assert self.received[1]["payload"] == {"n": 2}
