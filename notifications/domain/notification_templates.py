"""
Titles and message texts for every event on the bus.

Transaction events are keyed by status (``TRANSACTION_<STATUS>``); a status
without its own entry falls back to the generic "Transaction Updated" text.
"""

from typing import Dict, Tuple

from marketplace.domain.events import EventTypes


NOTIFICATION_TEMPLATES: Dict[str, Tuple[str, str]] = {
    EventTypes.NEW_PROPOSAL: (
        "New Proposal Received",
        "{actor_name} has submitted a proposal for your request: {subject}",
    ),
    EventTypes.PROPOSAL_ACCEPTED: (
        "Proposal Accepted",
        "{actor_name} has accepted your proposal for: {subject}",
    ),
    EventTypes.PROPOSAL_REJECTED: (
        "Proposal Rejected",
        "{actor_name} has rejected your proposal for: {subject}",
    ),
    EventTypes.transaction("IN_PROGRESS"): (
        "Transaction Started",
        "{actor_name} has made payment and started the transaction for: {subject}",
    ),
    EventTypes.transaction("COMPLETED"): (
        "Transaction Completed",
        "{actor_name} has marked the transaction as completed for: {subject}",
    ),
    EventTypes.transaction("CANCELLED"): (
        "Transaction Cancelled",
        "{actor_name} has cancelled the transaction for: {subject}",
    ),
    EventTypes.NEW_REVIEW: (
        "New Review Received",
        "{actor_name} has left a {rating}-star review for: {subject}",
    ),
    EventTypes.NEW_MESSAGE: (
        "New Message",
        "You have a new message from {actor_name}",
    ),
}

TRANSACTION_FALLBACK = (
    "Transaction Updated",
    "{actor_name} has updated the transaction status to {status} for: {subject}",
)


class UnknownEventType(KeyError):
    pass


class _Defaults(dict):
    def __missing__(self, key):
        return ""


def render_notification(event_type: str, payload: dict) -> Tuple[str, str]:
    """
    Word a notification for ``event_type``.

    Placeholders missing from ``payload`` render as empty strings.

    Raises:
        UnknownEventType: if the event type has no template
    """
    template = NOTIFICATION_TEMPLATES.get(event_type)
    if template is None:
        if not event_type.startswith(EventTypes.TRANSACTION_PREFIX):
            raise UnknownEventType(event_type)
        template = TRANSACTION_FALLBACK

    values = _Defaults(payload)
    values.setdefault("actor_name", "Someone")
    if event_type.startswith(EventTypes.TRANSACTION_PREFIX):
        values.setdefault("status", event_type[len(EventTypes.TRANSACTION_PREFIX) :])
    title, message = template
    return title, message.format_map(values)
