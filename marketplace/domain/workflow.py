"""
Workflow planning for proposals and transactions.

Every ``plan_*`` function takes entities that are already loaded, moves them
through the state machine in memory and returns a ``WorkflowPlan``:

* ``mutations``: zero-argument callables that persist the changes; the caller
  hands them to ``commit_unit_of_work`` so they land together or not at all.
* ``events``: domain events to publish once the unit of work has committed.

Nothing here reads from or writes to the database, so the rules can be
tested with unsaved model instances.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional

from django.utils import timezone

from marketplace.domain.events import (
    DomainEvent,
    ProposalDecidedEvent,
    ReviewSubmittedEvent,
    TransactionStatusChangedEvent,
)
from marketplace.domain.models import ServiceTransaction
from marketplace.domain.state_machine import (
    ProposalStatus,
    RequestStatus,
    TransactionStatus,
    transition,
)


@dataclass
class WorkflowPlan:
    mutations: List[Callable[[], Any]] = field(default_factory=list)
    events: List[DomainEvent] = field(default_factory=list)
    result: Any = None


def _save(instance, *fields: str) -> Callable[[], Any]:
    update_fields = list(fields) + ["updated_at"]
    return lambda: instance.save(update_fields=update_fields)


def _create(instance) -> Callable[[], Any]:
    def mutation():
        instance.save(force_insert=True)
        return instance

    return mutation


def plan_proposal_acceptance(proposal, request, competing: Iterable) -> WorkflowPlan:
    """
    Accept ``proposal`` on ``request``.

    The proposal becomes ACCEPTED, a PENDING transaction is created for its
    price, the request moves to IN_PROGRESS and every other PENDING proposal
    in ``competing`` is rejected. Proposals in any other status are left alone.
    """
    proposal.status = transition(proposal.status, ProposalStatus.ACCEPTED)
    request.status = transition(request.status, RequestStatus.IN_PROGRESS)

    service_transaction = ServiceTransaction(
        proposal=proposal,
        client_id=request.requested_by_id,
        provider_id=proposal.provider_id,
        amount=proposal.price,
        status=TransactionStatus.PENDING,
    )

    plan = WorkflowPlan(result=service_transaction)
    plan.mutations.append(_save(proposal, "status"))
    plan.mutations.append(_create(service_transaction))
    plan.mutations.append(_save(request, "status"))
    plan.events.append(ProposalDecidedEvent(proposal, request, accepted=True))

    for other in competing:
        if other.pk == proposal.pk or other.status != ProposalStatus.PENDING:
            continue
        other.status = transition(other.status, ProposalStatus.REJECTED)
        plan.mutations.append(_save(other, "status"))
        plan.events.append(ProposalDecidedEvent(other, request, accepted=False))

    return plan


def plan_proposal_rejection(proposal) -> WorkflowPlan:
    proposal.status = transition(proposal.status, ProposalStatus.REJECTED)
    return WorkflowPlan(
        mutations=[_save(proposal, "status")],
        events=[ProposalDecidedEvent(proposal, proposal.request, accepted=False)],
        result=proposal,
    )


def _complete_transaction(plan: WorkflowPlan, service_transaction, proposal, request, now) -> None:
    service_transaction.status = transition(service_transaction.status, TransactionStatus.COMPLETED)
    service_transaction.completed_at = now
    proposal.status = transition(proposal.status, ProposalStatus.COMPLETED)
    request.status = transition(request.status, RequestStatus.COMPLETED)
    plan.mutations.append(_save(service_transaction, "status", "completed_at"))
    plan.mutations.append(_save(proposal, "status"))
    plan.mutations.append(_save(request, "status"))


def plan_proposal_completion(proposal, service_transaction, actor, now=None) -> WorkflowPlan:
    """Provider marks the work done: proposal, transaction and request all become COMPLETED."""
    request = proposal.request
    plan = WorkflowPlan(result=proposal)
    _complete_transaction(plan, service_transaction, proposal, request, now or timezone.now())
    plan.events.append(TransactionStatusChangedEvent(service_transaction, actor, subject=request.title))
    return plan


def plan_transaction_status_change(service_transaction, new_status: TransactionStatus, actor, now=None) -> WorkflowPlan:
    """
    Move a transaction to ``new_status``.

    COMPLETED stamps ``completed_at`` and cascades to the linked proposal and
    request. Other moves touch only the transaction.
    """
    proposal = service_transaction.proposal
    request = proposal.request
    plan = WorkflowPlan(result=service_transaction)

    if new_status == TransactionStatus.COMPLETED:
        _complete_transaction(plan, service_transaction, proposal, request, now or timezone.now())
    else:
        service_transaction.status = transition(service_transaction.status, new_status)
        plan.mutations.append(_save(service_transaction, "status"))

    plan.events.append(TransactionStatusChangedEvent(service_transaction, actor, subject=request.title))
    return plan


def plan_transaction_review(
    service_transaction, actor, rating: Optional[int] = None, review: Optional[str] = None
) -> WorkflowPlan:
    """
    Record the acting party's own rating and/or review.

    The client writes ``client_rating``/``client_review`` and the provider
    writes ``provider_rating``/``provider_review``; neither can touch the
    other's fields and neither is required to go first. The transaction
    status is not changed.
    """
    prefix = "client" if str(actor.pk) == str(service_transaction.client_id) else "provider"
    plan = WorkflowPlan(result=service_transaction)
    changed = []

    if rating is not None:
        setattr(service_transaction, f"{prefix}_rating", rating)
        changed.append(f"{prefix}_rating")
    if review is not None:
        setattr(service_transaction, f"{prefix}_review", review)
        changed.append(f"{prefix}_review")

    if changed:
        plan.mutations.append(_save(service_transaction, *changed))
    if rating is not None:
        subject = service_transaction.proposal.request.title
        plan.events.append(ReviewSubmittedEvent(service_transaction, actor, rating, subject=subject))
    return plan
