import logging

from infrastructure.events import get_event_bus
from marketplace.domain.events import EventTypes
from marketplace.domain.state_machine import TransactionStatus


logger = logging.getLogger(__name__)

NOTIFIED_EVENTS = [
    EventTypes.NEW_PROPOSAL,
    EventTypes.PROPOSAL_ACCEPTED,
    EventTypes.PROPOSAL_REJECTED,
    EventTypes.NEW_REVIEW,
    EventTypes.NEW_MESSAGE,
] + [EventTypes.transaction(status) for status in TransactionStatus.values]


def handle_notification_event(event_data):
    """Turn any marketplace or chat event into a notification for its recipient.

    Errors propagate so the bus reports the failure back to the publisher.
    """
    from infrastructure.container import container

    notification = container.notification_service().notify(event_data)
    logger.info(f"[Notification Listener] {event_data['event_type']} -> user {notification.user_id}")


def register_notification_listeners(event_bus=None):
    """Register the notification listener for every event type."""
    event_bus = event_bus or get_event_bus()
    for event_type in NOTIFIED_EVENTS:
        event_bus.subscribe(event_type, handle_notification_event)
    logger.info("Notification event listeners registered")
