"""
Authorization guard for marketplace, messaging and notification operations.

``authorize`` never touches the database: callers load the target (and pass
any extra facts such as ``already_proposed``) before asking. The outcome is a
``ServiceResult`` so that "unauthenticated", "forbidden" and "conflict" stay
distinguishable from "not found", which is the caller's job to report.
"""

from enum import Enum

from marketplace.domain.state_machine import ProposalStatus, RequestStatus
from utils.service_base import ErrorCodes, ServiceResult, service_err, service_ok


class Operation(str, Enum):
    VIEW_PROPOSAL = "view_proposal"
    DECIDE_PROPOSAL = "decide_proposal"
    COMPLETE_PROPOSAL = "complete_proposal"
    UPDATE_PROPOSAL = "update_proposal"
    DELETE_PROPOSAL = "delete_proposal"
    SUBMIT_PROPOSAL = "submit_proposal"
    EDIT_REQUEST = "edit_request"
    EDIT_OFFERING = "edit_offering"
    VIEW_TRANSACTION = "view_transaction"
    UPDATE_TRANSACTION = "update_transaction"
    START_TRANSACTION = "start_transaction"
    COMPLETE_TRANSACTION = "complete_transaction"
    PAY_TRANSACTION = "pay_transaction"
    VIEW_CONVERSATION = "view_conversation"
    UPDATE_NOTIFICATION = "update_notification"


def _forbidden(message: str) -> ServiceResult:
    return service_err(ErrorCodes.PERMISSION_DENIED, message)


def _conflict(message: str) -> ServiceResult:
    return service_err(ErrorCodes.CONFLICT, message)


def _is(user, user_id) -> bool:
    return user_id is not None and str(user.pk) == str(user_id)


def _request_owner_id(proposal):
    return proposal.request.requested_by_id


def _check_submit(user, request, already_proposed=False, **_):
    if request.status != RequestStatus.OPEN:
        return _conflict("This service request is no longer accepting proposals")
    if _is(user, request.requested_by_id):
        return _conflict("You cannot submit a proposal to your own service request")
    if already_proposed:
        return _conflict("You have already submitted a proposal for this service request")
    return service_ok()


def _check_view_proposal(user, proposal, **_):
    if _is(user, proposal.provider_id) or _is(user, _request_owner_id(proposal)):
        return service_ok()
    return _forbidden("You are not authorized to view this proposal")


def _check_update_proposal(user, proposal, **_):
    if _is(user, proposal.provider_id) or _is(user, _request_owner_id(proposal)):
        return service_ok()
    return _forbidden("You are not authorized to update this proposal")


def _check_decide_proposal(user, proposal, **_):
    if not _is(user, _request_owner_id(proposal)):
        return _forbidden("Only the service request owner can accept or reject proposals")
    return service_ok()


def _check_complete_proposal(user, proposal, **_):
    if not _is(user, proposal.provider_id):
        return _forbidden("Only the service provider can mark a proposal as completed")
    return service_ok()


def _check_delete_proposal(user, proposal, **_):
    if not _is(user, proposal.provider_id):
        return _forbidden("You are not authorized to delete this proposal")
    if proposal.status == ProposalStatus.ACCEPTED or proposal.has_transaction:
        return _conflict("Cannot delete an accepted proposal or one with an active transaction")
    return service_ok()


def _check_edit_request(user, request, **_):
    if not _is(user, request.requested_by_id):
        return _forbidden("You are not authorized to modify this service request")
    return service_ok()


def _check_edit_offering(user, offering, **_):
    if not _is(user, offering.provider_id):
        return _forbidden("You are not authorized to modify this service offering")
    return service_ok()


def _check_view_transaction(user, transaction, **_):
    if not transaction.is_party(user):
        return _forbidden("You are not authorized to view this transaction")
    return service_ok()


def _check_update_transaction(user, transaction, **_):
    if not transaction.is_party(user):
        return _forbidden("You are not authorized to update this transaction")
    return service_ok()


def _check_start_transaction(user, transaction, **_):
    if not _is(user, transaction.client_id):
        return _forbidden("Only the client can start the transaction")
    return service_ok()


def _check_complete_transaction(user, transaction, **_):
    if not _is(user, transaction.client_id):
        return _forbidden("Only the client can mark the transaction as completed")
    return service_ok()


def _check_pay_transaction(user, transaction, **_):
    if not _is(user, transaction.client_id):
        return _forbidden("Only the client can make a payment")
    return service_ok()


def _check_view_conversation(user, conversation, **_):
    if _is(user, conversation.user1_id) or _is(user, conversation.user2_id):
        return service_ok()
    return _forbidden("You are not a participant in this conversation")


def _check_update_notification(user, notification, **_):
    if not _is(user, notification.user_id):
        return _forbidden("You are not authorized to update this notification")
    return service_ok()


_RULES = {
    Operation.SUBMIT_PROPOSAL: _check_submit,
    Operation.VIEW_PROPOSAL: _check_view_proposal,
    Operation.UPDATE_PROPOSAL: _check_update_proposal,
    Operation.DECIDE_PROPOSAL: _check_decide_proposal,
    Operation.COMPLETE_PROPOSAL: _check_complete_proposal,
    Operation.DELETE_PROPOSAL: _check_delete_proposal,
    Operation.EDIT_REQUEST: _check_edit_request,
    Operation.EDIT_OFFERING: _check_edit_offering,
    Operation.VIEW_TRANSACTION: _check_view_transaction,
    Operation.UPDATE_TRANSACTION: _check_update_transaction,
    Operation.START_TRANSACTION: _check_start_transaction,
    Operation.COMPLETE_TRANSACTION: _check_complete_transaction,
    Operation.PAY_TRANSACTION: _check_pay_transaction,
    Operation.VIEW_CONVERSATION: _check_view_conversation,
    Operation.UPDATE_NOTIFICATION: _check_update_notification,
}


def authorize(user, operation: Operation, target, **context) -> ServiceResult:
    """Decide whether ``user`` may perform ``operation`` on ``target``."""
    if user is None or not getattr(user, "is_authenticated", False):
        return service_err(ErrorCodes.AUTHENTICATION_REQUIRED, "Authentication required")
    return _RULES[operation](user, target, **context)
