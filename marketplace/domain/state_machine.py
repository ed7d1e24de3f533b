"""
Status enums and legal transitions for the marketplace workflow.

Each entity has one enum and one transition table. ``transition`` is the only
place a status is validated, so handlers never re-derive the rules from
scattered conditionals.

Example:
    >>> transition(RequestStatus.OPEN, RequestStatus.IN_PROGRESS)
    <RequestStatus.IN_PROGRESS: 'IN_PROGRESS'>
    >>> transition(TransactionStatus.COMPLETED, TransactionStatus.CANCELLED)
    Traceback (most recent call last):
    InvalidTransition: ...
"""

from typing import Dict, FrozenSet, Optional, Type, TypeVar

from django.db import models


class RequestStatus(models.TextChoices):
    OPEN = "OPEN", "Open"
    IN_PROGRESS = "IN_PROGRESS", "In progress"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"


class ProposalStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    ACCEPTED = "ACCEPTED", "Accepted"
    REJECTED = "REJECTED", "Rejected"
    COMPLETED = "COMPLETED", "Completed"


class TransactionStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    IN_PROGRESS = "IN_PROGRESS", "In progress"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"
    DISPUTED = "DISPUTED", "Disputed"


REQUEST_TRANSITIONS: Dict[RequestStatus, FrozenSet[RequestStatus]] = {
    RequestStatus.OPEN: frozenset({RequestStatus.IN_PROGRESS, RequestStatus.CANCELLED}),
    RequestStatus.IN_PROGRESS: frozenset({RequestStatus.COMPLETED, RequestStatus.CANCELLED}),
    RequestStatus.COMPLETED: frozenset(),
    RequestStatus.CANCELLED: frozenset(),
}

PROPOSAL_TRANSITIONS: Dict[ProposalStatus, FrozenSet[ProposalStatus]] = {
    ProposalStatus.PENDING: frozenset({ProposalStatus.ACCEPTED, ProposalStatus.REJECTED}),
    ProposalStatus.ACCEPTED: frozenset({ProposalStatus.COMPLETED}),
    ProposalStatus.REJECTED: frozenset(),
    ProposalStatus.COMPLETED: frozenset(),
}

TRANSACTION_TRANSITIONS: Dict[TransactionStatus, FrozenSet[TransactionStatus]] = {
    TransactionStatus.PENDING: frozenset({TransactionStatus.IN_PROGRESS, TransactionStatus.CANCELLED}),
    TransactionStatus.IN_PROGRESS: frozenset(
        {TransactionStatus.COMPLETED, TransactionStatus.CANCELLED, TransactionStatus.DISPUTED}
    ),
    TransactionStatus.DISPUTED: frozenset({TransactionStatus.COMPLETED, TransactionStatus.CANCELLED}),
    TransactionStatus.COMPLETED: frozenset(),
    TransactionStatus.CANCELLED: frozenset(),
}

_TABLES = {
    RequestStatus: REQUEST_TRANSITIONS,
    ProposalStatus: PROPOSAL_TRANSITIONS,
    TransactionStatus: TRANSACTION_TRANSITIONS,
}

S = TypeVar("S", RequestStatus, ProposalStatus, TransactionStatus)


class InvalidTransition(Exception):
    """Raised when a status change is not in the entity's transition table."""

    def __init__(self, entity: str, current: str, target: str):
        super().__init__(f"Cannot change {entity} status from {current} to {target}")
        self.entity = entity
        self.current = current
        self.target = target


class InvalidStatus(ValueError):
    """Raised when a raw value does not name a member of the status enum."""


def _entity_name(enum_cls) -> str:
    return {
        RequestStatus: "service request",
        ProposalStatus: "proposal",
        TransactionStatus: "transaction",
    }[enum_cls]


def can_transition(current: S, target: S) -> bool:
    enum_cls = type(target)
    return enum_cls(target) in _TABLES[enum_cls][enum_cls(current)]


def transition(current: S, target: S) -> S:
    """Return ``target`` if moving from ``current`` is legal, else raise ``InvalidTransition``."""
    enum_cls = type(target)
    current = enum_cls(current)
    if target not in _TABLES[enum_cls][current]:
        raise InvalidTransition(_entity_name(enum_cls), current.value, target.value)
    return target


def parse_status(enum_cls: Type[S], raw: Optional[str]) -> S:
    """Validate a client-supplied status string."""
    if not isinstance(raw, str) or raw not in enum_cls.values:
        raise InvalidStatus(f"Invalid status value: {raw!r}")
    return enum_cls(raw)
