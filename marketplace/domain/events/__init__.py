from .base import DomainEvent, EventTypes
from .marketplace_events import (
    ProposalDecidedEvent,
    ProposalSubmittedEvent,
    ReviewSubmittedEvent,
    TransactionStatusChangedEvent,
)


__all__ = [
    "DomainEvent",
    "EventTypes",
    "ProposalDecidedEvent",
    "ProposalSubmittedEvent",
    "ReviewSubmittedEvent",
    "TransactionStatusChangedEvent",
]
