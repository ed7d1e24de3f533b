import uuid
from types import SimpleNamespace

import pytest

from marketplace.domain.authorization import Operation, authorize
from marketplace.domain.state_machine import ProposalStatus, RequestStatus
from utils.service_base import ErrorCodes


def make_user():
    return SimpleNamespace(pk=uuid.uuid4(), is_authenticated=True)


def make_transaction(client, provider):
    parties = (client.pk, provider.pk)
    return SimpleNamespace(
        client_id=client.pk,
        provider_id=provider.pk,
        is_party=lambda user: user.pk in parties,
    )


@pytest.mark.unit
class TestAuthorizeProposals:
    def setup_method(self):
        self.owner = make_user()
        self.provider = make_user()
        self.stranger = make_user()
        self.request = SimpleNamespace(requested_by_id=self.owner.pk, status=RequestStatus.OPEN)
        self.proposal = SimpleNamespace(
            provider_id=self.provider.pk,
            request=self.request,
            status=ProposalStatus.PENDING,
            has_transaction=False,
        )

    def test_anonymous_user_needs_authentication(self):
        anonymous = SimpleNamespace(pk=None, is_authenticated=False)

        result = authorize(anonymous, Operation.VIEW_PROPOSAL, self.proposal)

        assert result.error == ErrorCodes.AUTHENTICATION_REQUIRED

    def test_missing_user_needs_authentication(self):
        assert authorize(None, Operation.VIEW_PROPOSAL, self.proposal).error == ErrorCodes.AUTHENTICATION_REQUIRED

    def test_provider_and_owner_can_view(self):
        assert authorize(self.provider, Operation.VIEW_PROPOSAL, self.proposal).ok
        assert authorize(self.owner, Operation.VIEW_PROPOSAL, self.proposal).ok

    def test_stranger_cannot_view(self):
        result = authorize(self.stranger, Operation.VIEW_PROPOSAL, self.proposal)

        assert result.error == ErrorCodes.PERMISSION_DENIED

    def test_only_owner_decides(self):
        assert authorize(self.owner, Operation.DECIDE_PROPOSAL, self.proposal).ok

        result = authorize(self.provider, Operation.DECIDE_PROPOSAL, self.proposal)
        assert result.error == ErrorCodes.PERMISSION_DENIED
        assert result.error_detail == "Only the service request owner can accept or reject proposals"

    def test_only_provider_completes(self):
        assert authorize(self.provider, Operation.COMPLETE_PROPOSAL, self.proposal).ok
        assert authorize(self.owner, Operation.COMPLETE_PROPOSAL, self.proposal).error == ErrorCodes.PERMISSION_DENIED

    def test_delete_refused_once_accepted(self):
        self.proposal.status = ProposalStatus.ACCEPTED

        result = authorize(self.provider, Operation.DELETE_PROPOSAL, self.proposal)

        assert result.error == ErrorCodes.CONFLICT

    def test_delete_refused_with_transaction(self):
        self.proposal.has_transaction = True

        assert authorize(self.provider, Operation.DELETE_PROPOSAL, self.proposal).error == ErrorCodes.CONFLICT

    def test_delete_by_other_user_is_forbidden(self):
        assert authorize(self.owner, Operation.DELETE_PROPOSAL, self.proposal).error == ErrorCodes.PERMISSION_DENIED


@pytest.mark.unit
class TestAuthorizeSubmission:
    def setup_method(self):
        self.owner = make_user()
        self.provider = make_user()
        self.request = SimpleNamespace(requested_by_id=self.owner.pk, status=RequestStatus.OPEN)

    def test_open_request_accepts_bids(self):
        assert authorize(self.provider, Operation.SUBMIT_PROPOSAL, self.request).ok

    def test_closed_request_is_a_conflict(self):
        self.request.status = RequestStatus.IN_PROGRESS

        result = authorize(self.provider, Operation.SUBMIT_PROPOSAL, self.request)

        assert result.error == ErrorCodes.CONFLICT

    def test_owner_cannot_bid_on_own_request(self):
        result = authorize(self.owner, Operation.SUBMIT_PROPOSAL, self.request)

        assert result.error_detail == "You cannot submit a proposal to your own service request"

    def test_second_bid_is_a_conflict(self):
        result = authorize(self.provider, Operation.SUBMIT_PROPOSAL, self.request, already_proposed=True)

        assert result.error == ErrorCodes.CONFLICT


@pytest.mark.unit
class TestAuthorizeTransactions:
    def setup_method(self):
        self.client = make_user()
        self.provider = make_user()
        self.transaction = make_transaction(self.client, self.provider)

    def test_both_parties_can_view_and_update(self):
        for user in (self.client, self.provider):
            assert authorize(user, Operation.VIEW_TRANSACTION, self.transaction).ok
            assert authorize(user, Operation.UPDATE_TRANSACTION, self.transaction).ok

    def test_outsider_is_forbidden(self):
        outsider = make_user()

        assert authorize(outsider, Operation.VIEW_TRANSACTION, self.transaction).error == ErrorCodes.PERMISSION_DENIED

    @pytest.mark.parametrize(
        "operation",
        [Operation.START_TRANSACTION, Operation.COMPLETE_TRANSACTION, Operation.PAY_TRANSACTION],
    )
    def test_client_only_operations(self, operation):
        assert authorize(self.client, operation, self.transaction).ok
        assert authorize(self.provider, operation, self.transaction).error == ErrorCodes.PERMISSION_DENIED


@pytest.mark.unit
class TestAuthorizeMessagingAndNotifications:
    def test_conversation_participants_only(self):
        alice, bob, eve = make_user(), make_user(), make_user()
        conversation = SimpleNamespace(user1_id=alice.pk, user2_id=bob.pk)

        assert authorize(alice, Operation.VIEW_CONVERSATION, conversation).ok
        assert authorize(bob, Operation.VIEW_CONVERSATION, conversation).ok
        assert authorize(eve, Operation.VIEW_CONVERSATION, conversation).error == ErrorCodes.PERMISSION_DENIED

    def test_notification_owner_only(self):
        owner, other = make_user(), make_user()
        notification = SimpleNamespace(user_id=owner.pk)

        assert authorize(owner, Operation.UPDATE_NOTIFICATION, notification).ok
        assert authorize(other, Operation.UPDATE_NOTIFICATION, notification).error == ErrorCodes.PERMISSION_DENIED

    def test_ids_compare_as_strings(self):
        owner = make_user()
        notification = SimpleNamespace(user_id=str(owner.pk))

        assert authorize(owner, Operation.UPDATE_NOTIFICATION, notification).ok
