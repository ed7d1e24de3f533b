"""
TransactionService - engagements created by accepted proposals

Covers status moves (start, complete, cancel, dispute), the independent
client/provider reviews and the simulated payment that starts a transaction.
"""

from typing import Any, Dict, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Q

from infrastructure.payments import PaymentException, PaymentFactory, PaymentProviderInterface
from marketplace.domain.authorization import Operation, authorize
from marketplace.domain.state_machine import InvalidStatus, TransactionStatus, parse_status
from marketplace.domain.workflow import WorkflowPlan, plan_transaction_review, plan_transaction_status_change
from marketplace.infra.observability.metrics import (
    payments_processed_total,
    reviews_submitted_total,
    transaction_status_changes_total,
)
from marketplace.models import ServiceTransaction
from utils.pagination import paginate
from utils.transaction_utils import commit_unit_of_work, log_transaction_performance

from .base import (
    CONFLICT_ERRORS,
    BaseService,
    ErrorCodes,
    MarketplaceService,
    ServiceResult,
    authentication_error,
    get_or_none,
    service_err,
    service_ok,
)

ROLE_CLIENT = "client"
ROLE_PROVIDER = "provider"

_STATUS_OPERATIONS = {
    TransactionStatus.IN_PROGRESS: Operation.START_TRANSACTION,
    TransactionStatus.COMPLETED: Operation.COMPLETE_TRANSACTION,
}


def _transaction_queryset():
    return ServiceTransaction.objects.select_related(
        "client", "provider", "proposal", "proposal__request", "proposal__request__requested_by"
    )


def _rating_bounds():
    options = getattr(settings, "MARKETPLACE", {})
    return options.get("RATING_MIN", 1), options.get("RATING_MAX", 5)


def validate_rating(value) -> bool:
    low, high = _rating_bounds()
    return isinstance(value, int) and not isinstance(value, bool) and low <= value <= high


class TransactionService(MarketplaceService):
    """
    Service for transaction status, reviews and payment.

    Status rules:
    - IN_PROGRESS and COMPLETED may only be set by the client
    - CANCELLED may be set by either party unless the transaction is COMPLETED
    - DISPUTED may be set by either party while IN_PROGRESS

    Each party only ever writes its own rating and review.
    """

    def __init__(self, event_bus=None, payment_provider: Optional[PaymentProviderInterface] = None):
        super().__init__(event_bus=event_bus)
        self.payment_provider = payment_provider or PaymentFactory.create()

    @BaseService.log_performance
    def list_transactions(
        self, user, role: Optional[str] = None, status: Optional[str] = None, page: int = 1, limit: int = 10
    ) -> ServiceResult[Dict[str, Any]]:
        denied = authentication_error(user)
        if denied:
            return denied

        if role == ROLE_CLIENT:
            queryset = _transaction_queryset().filter(client=user)
        elif role == ROLE_PROVIDER:
            queryset = _transaction_queryset().filter(provider=user)
        elif role in (None, "", "all"):
            queryset = _transaction_queryset().filter(Q(client=user) | Q(provider=user))
        else:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Role must be 'client' or 'provider'")

        try:
            if status and status != "all":
                queryset = queryset.filter(status=parse_status(TransactionStatus, status))
            items, pagination = paginate(queryset, page, limit)
        except InvalidStatus:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Invalid status value")
        except Exception as e:
            return self.internal_error("list_transactions", e)

        return service_ok({"items": items, "pagination": pagination})

    @BaseService.log_performance
    def get_transaction(self, user, transaction_id) -> ServiceResult[ServiceTransaction]:
        denied = authentication_error(user)
        if denied:
            return denied

        service_transaction = get_or_none(_transaction_queryset(), pk=transaction_id)
        if service_transaction is None:
            return service_err(ErrorCodes.NOT_FOUND, "Transaction not found")

        allowed = authorize(user, Operation.VIEW_TRANSACTION, service_transaction)
        if not allowed.ok:
            return allowed
        return service_ok(service_transaction)

    @BaseService.log_performance
    def update_transaction(
        self,
        user,
        transaction_id,
        status: Optional[str] = None,
        client_rating=None,
        client_review: Optional[str] = None,
        provider_rating=None,
        provider_review: Optional[str] = None,
    ) -> ServiceResult[ServiceTransaction]:
        """
        Change status and/or record the acting party's review.

        Fields addressed to the other party (a client sending
        ``provider_rating``, for example) are ignored.
        """
        denied = authentication_error(user)
        if denied:
            return denied

        target = None
        if status is not None:
            try:
                target = parse_status(TransactionStatus, status)
            except InvalidStatus:
                return service_err(ErrorCodes.VALIDATION_ERROR, "Invalid status value")

        service_transaction = get_or_none(_transaction_queryset(), pk=transaction_id)
        if service_transaction is None:
            return service_err(ErrorCodes.NOT_FOUND, "Transaction not found")

        allowed = authorize(user, Operation.UPDATE_TRANSACTION, service_transaction)
        if not allowed.ok:
            return allowed

        is_client = str(user.pk) == str(service_transaction.client_id)
        rating = client_rating if is_client else provider_rating
        review = client_review if is_client else provider_review

        if rating is not None and not validate_rating(rating):
            low, high = _rating_bounds()
            return service_err(ErrorCodes.VALIDATION_ERROR, f"Rating must be between {low} and {high}")
        if target is None and rating is None and review is None:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Status, rating or review is required")

        if target is not None:
            operation = _STATUS_OPERATIONS.get(target)
            if operation is not None:
                allowed = authorize(user, operation, service_transaction)
                if not allowed.ok:
                    return allowed

        try:
            with transaction.atomic():
                locked = _transaction_queryset().select_for_update().get(pk=service_transaction.pk)
                if target == TransactionStatus.CANCELLED and locked.status == TransactionStatus.COMPLETED:
                    return service_err(ErrorCodes.CONFLICT, "Cannot cancel a completed transaction")

                plan = WorkflowPlan(result=locked)
                if target is not None:
                    status_plan = plan_transaction_status_change(locked, target, actor=user)
                    plan.mutations.extend(status_plan.mutations)
                    plan.events.extend(status_plan.events)
                review_plan = plan_transaction_review(locked, user, rating=rating, review=review)
                plan.mutations.extend(review_plan.mutations)
                plan.events.extend(review_plan.events)

                commit_unit_of_work(plan.mutations)
        except CONFLICT_ERRORS as e:
            return self.conflict_from(e)
        except Exception as e:
            return self.internal_error("update_transaction", e)

        if target is not None:
            transaction_status_changes_total.labels(status=target).inc()
            self.logger.info(f"Transaction {locked.id} moved to {target} by {user.pk}")
        if rating is not None:
            reviews_submitted_total.labels(role=ROLE_CLIENT if is_client else ROLE_PROVIDER).inc()

        failure = self.publish(plan.events)
        return failure or service_ok(locked)

    @log_transaction_performance
    def process_payment(self, user, transaction_id, payment_method) -> ServiceResult[Dict[str, Any]]:
        """
        Pay for a PENDING transaction and start it.

        Returns:
            ServiceResult with ``{"transaction", "payment"}`` where ``payment``
            is the provider's PaymentReceipt
        """
        denied = authentication_error(user)
        if denied:
            return denied

        if not transaction_id or not payment_method:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Transaction ID and payment method are required")

        service_transaction = get_or_none(_transaction_queryset(), pk=transaction_id)
        if service_transaction is None:
            return service_err(ErrorCodes.NOT_FOUND, "Transaction not found")

        allowed = authorize(user, Operation.PAY_TRANSACTION, service_transaction)
        if not allowed.ok:
            return allowed

        try:
            with transaction.atomic():
                locked = _transaction_queryset().select_for_update().get(pk=service_transaction.pk)
                if locked.status != TransactionStatus.PENDING:
                    return service_err(ErrorCodes.CONFLICT, "Payment can only be made for pending transactions")

                receipt = self.payment_provider.charge(locked.id, locked.amount, payment_method)
                plan = plan_transaction_status_change(locked, TransactionStatus.IN_PROGRESS, actor=user)
                commit_unit_of_work(plan.mutations)
        except PaymentException as e:
            return service_err(ErrorCodes.VALIDATION_ERROR, str(e))
        except CONFLICT_ERRORS as e:
            return self.conflict_from(e)
        except Exception as e:
            return self.internal_error("process_payment", e)

        payments_processed_total.labels(method=payment_method).inc()
        transaction_status_changes_total.labels(status=TransactionStatus.IN_PROGRESS).inc()
        self.logger.info(f"Payment {receipt.payment_id} processed for transaction {locked.id}")

        failure = self.publish(plan.events)
        return failure or service_ok({"transaction": locked, "payment": receipt})
