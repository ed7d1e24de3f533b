"""Workflow plans are built from unsaved instances; nothing here hits the database."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from marketplace.domain.events import EventTypes
from marketplace.domain.state_machine import InvalidTransition, ProposalStatus, RequestStatus, TransactionStatus
from marketplace.domain.workflow import (
    plan_proposal_acceptance,
    plan_proposal_completion,
    plan_proposal_rejection,
    plan_transaction_review,
    plan_transaction_status_change,
)
from marketplace.models import ServiceProposal, ServiceRequest, ServiceTransaction

User = get_user_model()


def make_user(name):
    return User(username=name, email=f"{name}@example.com", name=name.title())


@pytest.mark.unit
class TestProposalAcceptancePlan:
    def setup_method(self):
        self.client = make_user("client")
        self.request = ServiceRequest(requested_by=self.client, title="Fix roof", status=RequestStatus.OPEN)
        self.winner = ServiceProposal(
            request=self.request, provider=make_user("winner"), price=Decimal("500.00"), status=ProposalStatus.PENDING
        )
        self.rival = ServiceProposal(
            request=self.request, provider=make_user("rival"), price=Decimal("450.00"), status=ProposalStatus.PENDING
        )
        self.already_rejected = ServiceProposal(
            request=self.request, provider=make_user("late"), price=Decimal("300.00"), status=ProposalStatus.REJECTED
        )

    def test_accepts_proposal_and_starts_request(self):
        plan = plan_proposal_acceptance(self.winner, self.request, [self.rival, self.already_rejected])

        assert self.winner.status == ProposalStatus.ACCEPTED
        assert self.request.status == RequestStatus.IN_PROGRESS
        assert self.rival.status == ProposalStatus.REJECTED
        assert self.already_rejected.status == ProposalStatus.REJECTED

    def test_creates_pending_transaction_for_proposal_price(self):
        plan = plan_proposal_acceptance(self.winner, self.request, [])

        service_transaction = plan.result
        assert isinstance(service_transaction, ServiceTransaction)
        assert service_transaction.status == TransactionStatus.PENDING
        assert service_transaction.amount == Decimal("500.00")
        assert service_transaction.client_id == self.client.pk
        assert service_transaction.provider_id == self.winner.provider_id

    def test_one_write_per_changed_row(self):
        plan = plan_proposal_acceptance(self.winner, self.request, [self.rival, self.already_rejected])

        # winner, transaction, request, rival
        assert len(plan.mutations) == 4

    def test_events_tell_every_provider(self):
        plan = plan_proposal_acceptance(self.winner, self.request, [self.rival])

        assert [e.event_type for e in plan.events] == [EventTypes.PROPOSAL_ACCEPTED, EventTypes.PROPOSAL_REJECTED]
        assert plan.events[0].recipient_id == str(self.winner.provider_id)
        assert plan.events[1].recipient_id == str(self.rival.provider_id)
        assert plan.events[0].payload["actor_name"] == "Client"
        assert plan.events[0].payload["subject"] == "Fix roof"

    def test_competing_list_may_include_the_winner(self):
        plan = plan_proposal_acceptance(self.winner, self.request, [self.winner, self.rival])

        assert len(plan.events) == 2

    def test_request_no_longer_open_is_refused(self):
        self.request.status = RequestStatus.CANCELLED

        with pytest.raises(InvalidTransition):
            plan_proposal_acceptance(self.winner, self.request, [self.rival])


@pytest.mark.unit
class TestProposalRejectionPlan:
    def test_rejects_and_notifies_provider(self):
        request = ServiceRequest(requested_by=make_user("owner"), title="Paint fence", status=RequestStatus.OPEN)
        proposal = ServiceProposal(request=request, provider=make_user("painter"), status=ProposalStatus.PENDING)

        plan = plan_proposal_rejection(proposal)

        assert proposal.status == ProposalStatus.REJECTED
        assert request.status == RequestStatus.OPEN
        assert plan.events[0].event_type == EventTypes.PROPOSAL_REJECTED

    def test_accepted_proposal_cannot_be_rejected(self):
        request = ServiceRequest(requested_by=make_user("owner"), title="Paint fence")
        proposal = ServiceProposal(request=request, provider=make_user("painter"), status=ProposalStatus.ACCEPTED)

        with pytest.raises(InvalidTransition):
            plan_proposal_rejection(proposal)


@pytest.mark.unit
class TestTransactionPlans:
    def setup_method(self):
        self.client = make_user("client")
        self.provider = make_user("provider")
        self.request = ServiceRequest(requested_by=self.client, title="Tutoring", status=RequestStatus.IN_PROGRESS)
        self.proposal = ServiceProposal(request=self.request, provider=self.provider, status=ProposalStatus.ACCEPTED)
        self.transaction = ServiceTransaction(
            proposal=self.proposal,
            client=self.client,
            provider=self.provider,
            amount=Decimal("200.00"),
            status=TransactionStatus.IN_PROGRESS,
        )
        self.now = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

    def test_completion_cascades_to_proposal_and_request(self):
        plan = plan_transaction_status_change(self.transaction, TransactionStatus.COMPLETED, self.client, now=self.now)

        assert self.transaction.status == TransactionStatus.COMPLETED
        assert self.transaction.completed_at == self.now
        assert self.proposal.status == ProposalStatus.COMPLETED
        assert self.request.status == RequestStatus.COMPLETED
        assert len(plan.mutations) == 3

    def test_completion_notifies_the_other_party(self):
        plan = plan_transaction_status_change(self.transaction, TransactionStatus.COMPLETED, self.client, now=self.now)

        event = plan.events[0]
        assert event.event_type == "TRANSACTION_COMPLETED"
        assert event.recipient_id == str(self.provider.pk)
        assert event.payload["status"] == "COMPLETED"

    def test_dispute_touches_only_the_transaction(self):
        plan = plan_transaction_status_change(self.transaction, TransactionStatus.DISPUTED, self.provider)

        assert self.transaction.status == TransactionStatus.DISPUTED
        assert self.transaction.completed_at is None
        assert self.proposal.status == ProposalStatus.ACCEPTED
        assert self.request.status == RequestStatus.IN_PROGRESS
        assert len(plan.mutations) == 1
        assert plan.events[0].recipient_id == str(self.client.pk)

    def test_completed_transaction_cannot_be_cancelled(self):
        self.transaction.status = TransactionStatus.COMPLETED

        with pytest.raises(InvalidTransition):
            plan_transaction_status_change(self.transaction, TransactionStatus.CANCELLED, self.client)

    def test_provider_completion_plan(self):
        plan = plan_proposal_completion(self.proposal, self.transaction, self.provider, now=self.now)

        assert plan.result is self.proposal
        assert self.proposal.status == ProposalStatus.COMPLETED
        assert self.transaction.status == TransactionStatus.COMPLETED
        assert plan.events[0].recipient_id == str(self.client.pk)

    def test_provider_completion_needs_started_transaction(self):
        self.transaction.status = TransactionStatus.PENDING

        with pytest.raises(InvalidTransition):
            plan_proposal_completion(self.proposal, self.transaction, self.provider)


@pytest.mark.unit
class TestReviewPlan:
    def setup_method(self):
        self.client = make_user("client")
        self.provider = make_user("provider")
        request = ServiceRequest(requested_by=self.client, title="Garden", status=RequestStatus.COMPLETED)
        proposal = ServiceProposal(request=request, provider=self.provider, status=ProposalStatus.COMPLETED)
        self.transaction = ServiceTransaction(
            proposal=proposal, client=self.client, provider=self.provider, status=TransactionStatus.COMPLETED
        )

    def test_client_writes_client_fields(self):
        plan = plan_transaction_review(self.transaction, self.client, rating=5, review="Great work")

        assert self.transaction.client_rating == 5
        assert self.transaction.client_review == "Great work"
        assert self.transaction.provider_rating is None
        assert self.transaction.status == TransactionStatus.COMPLETED
        assert plan.events[0].event_type == EventTypes.NEW_REVIEW
        assert plan.events[0].recipient_id == str(self.provider.pk)

    def test_provider_writes_provider_fields(self):
        plan_transaction_review(self.transaction, self.provider, rating=4)

        assert self.transaction.provider_rating == 4
        assert self.transaction.client_rating is None

    def test_review_text_alone_raises_no_event(self):
        plan = plan_transaction_review(self.transaction, self.client, review="Punctual")

        assert len(plan.mutations) == 1
        assert plan.events == []

    def test_nothing_to_record(self):
        plan = plan_transaction_review(self.transaction, self.client)

        assert plan.mutations == []
        assert plan.events == []
