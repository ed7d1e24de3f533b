from dataclasses import dataclass

from .base import DomainEvent, EventTypes


def _name(user) -> str:
    return user.display_name if user is not None else "Someone"


@dataclass
class ProposalSubmittedEvent(DomainEvent):
    """Event: a provider bid on a request. Tells the request owner."""

    def __init__(self, proposal, request):
        super().__init__(
            event_type=EventTypes.NEW_PROPOSAL,
            payload={
                "recipient_id": str(request.requested_by_id),
                "actor_name": proposal.provider.name or "A service provider",
                "subject": request.title,
                "data": {
                    "request_id": str(request.id),
                    "proposal_id": str(proposal.id),
                    "provider_id": str(proposal.provider_id),
                },
            },
        )


@dataclass
class ProposalDecidedEvent(DomainEvent):
    """Event: the request owner accepted or rejected a proposal. Tells the provider."""

    def __init__(self, proposal, request, accepted: bool):
        super().__init__(
            event_type=EventTypes.PROPOSAL_ACCEPTED if accepted else EventTypes.PROPOSAL_REJECTED,
            payload={
                "recipient_id": str(proposal.provider_id),
                "actor_name": _name(request.requested_by),
                "subject": request.title,
                "data": {
                    "request_id": str(request.id),
                    "proposal_id": str(proposal.id),
                    "client_id": str(request.requested_by_id),
                },
            },
        )


@dataclass
class TransactionStatusChangedEvent(DomainEvent):
    """Event: a transaction moved to a new status. Tells the party that did not act."""

    def __init__(self, transaction, actor, subject: str):
        super().__init__(
            event_type=EventTypes.transaction(transaction.status),
            payload={
                "recipient_id": str(transaction.counterparty_id(actor)),
                "actor_name": _name(actor),
                "subject": subject,
                "status": str(transaction.status),
                "data": {
                    "transaction_id": str(transaction.id),
                    "status": str(transaction.status),
                    "client_id": str(transaction.client_id),
                    "provider_id": str(transaction.provider_id),
                },
            },
        )


@dataclass
class ReviewSubmittedEvent(DomainEvent):
    """Event: one party rated the other. Tells the reviewed party."""

    def __init__(self, transaction, reviewer, rating: int, subject: str):
        super().__init__(
            event_type=EventTypes.NEW_REVIEW,
            payload={
                "recipient_id": str(transaction.counterparty_id(reviewer)),
                "actor_name": _name(reviewer),
                "subject": subject,
                "rating": rating,
                "data": {
                    "transaction_id": str(transaction.id),
                    "reviewer_id": str(reviewer.pk),
                    "rating": rating,
                },
            },
        )
