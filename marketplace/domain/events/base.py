from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from django.utils import timezone


class EventTypes:
    """Event names published on the event bus. They double as notification types."""

    NEW_PROPOSAL = "NEW_PROPOSAL"
    PROPOSAL_ACCEPTED = "PROPOSAL_ACCEPTED"
    PROPOSAL_REJECTED = "PROPOSAL_REJECTED"
    NEW_REVIEW = "NEW_REVIEW"
    NEW_MESSAGE = "NEW_MESSAGE"
    TRANSACTION_PREFIX = "TRANSACTION_"

    @classmethod
    def transaction(cls, status: str) -> str:
        return f"{cls.TRANSACTION_PREFIX}{status}"


@dataclass
class DomainEvent:
    """Base class for all domain events.

    ``payload`` always carries ``recipient_id`` (who should hear about it),
    ``actor_name`` and ``subject`` (used to word the notification) and
    ``data`` (foreign keys echoed back to clients for deep-linking).
    """

    event_type: str
    occurred_at: datetime = field(default_factory=timezone.now)
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def recipient_id(self) -> str:
        return self.payload.get("recipient_id")

    def to_dict(self) -> dict:
        return {"event_type": self.event_type, "occurred_at": self.occurred_at.isoformat(), "payload": self.payload}
