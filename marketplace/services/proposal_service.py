"""
ProposalService - bids on service requests

Handles listing, submission, the accept/reject/complete workflow and
deletion of proposals. Acceptance is the one multi-row change in the
marketplace: it locks the request and its pending proposals, re-checks that
the request is still OPEN, and commits every write as one unit of work.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError, Q

from marketplace.domain.authorization import Operation, authorize
from marketplace.domain.events import ProposalSubmittedEvent
from marketplace.domain.state_machine import (
    InvalidStatus,
    ProposalStatus,
    RequestStatus,
    TransactionStatus,
    parse_status,
    transition,
)
from marketplace.domain.workflow import (
    plan_proposal_acceptance,
    plan_proposal_completion,
    plan_proposal_rejection,
)
from marketplace.infra.observability.metrics import proposal_price, proposals_decided_total, proposals_submitted_total
from marketplace.models import ServiceProposal, ServiceRequest, ServiceTransaction
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
from .provider_stats_service import ProviderStatsService


def _proposal_queryset():
    return ServiceProposal.objects.select_related("request", "request__requested_by", "provider")


class ProposalService(MarketplaceService):
    """
    Service for the proposal lifecycle.

    Responsibilities:
    - List proposals visible to the user (as provider or request owner)
    - Submit a proposal on an OPEN request
    - Accept, reject or complete a proposal
    - Delete a proposal that was never accepted

    All operations return ServiceResult.
    """

    def __init__(self, event_bus=None, stats_service: Optional[ProviderStatsService] = None):
        super().__init__(event_bus=event_bus)
        self.stats_service = stats_service or ProviderStatsService()

    @BaseService.log_performance
    def list_proposals(
        self,
        user,
        request_id=None,
        provider_id=None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> ServiceResult[Dict[str, Any]]:
        """
        List proposals where ``user`` is the provider or owns the parent request.

        Returns:
            ServiceResult with ``items``, ``pagination`` and ``provider_stats``
        """
        denied = authentication_error(user)
        if denied:
            return denied

        queryset = _proposal_queryset().filter(Q(provider=user) | Q(request__requested_by=user))
        try:
            if request_id:
                queryset = queryset.filter(request_id=request_id)
            if provider_id:
                queryset = queryset.filter(provider_id=provider_id)
            if status and status != "all":
                queryset = queryset.filter(status=parse_status(ProposalStatus, status))
            items, pagination = paginate(queryset, page, limit)
        except InvalidStatus:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Invalid status value")
        except (DjangoValidationError, ValueError):
            return service_err(ErrorCodes.VALIDATION_ERROR, "Invalid filter value")
        except Exception as e:
            return self.internal_error("list_proposals", e)

        stats = self.stats_service.stats_for(p.provider_id for p in items)
        return service_ok({"items": items, "pagination": pagination, "provider_stats": stats})

    @BaseService.log_performance
    def get_proposal(self, user, proposal_id) -> ServiceResult[Dict[str, Any]]:
        denied = authentication_error(user)
        if denied:
            return denied

        proposal = get_or_none(_proposal_queryset(), pk=proposal_id)
        if proposal is None:
            return service_err(ErrorCodes.NOT_FOUND, "Proposal not found")

        allowed = authorize(user, Operation.VIEW_PROPOSAL, proposal)
        if not allowed.ok:
            return allowed

        stats = self.stats_service.stats_for([proposal.provider_id])
        return service_ok({"proposal": proposal, "provider_stats": stats})

    @BaseService.log_performance
    def submit_proposal(self, user, request_id, description, price, delivery_time) -> ServiceResult[ServiceProposal]:
        """
        Submit a bid on an OPEN request.

        Fails with validation_error (missing fields), not_found (no such request)
        or conflict (request not OPEN, own request, duplicate bid).
        """
        denied = authentication_error(user)
        if denied:
            return denied

        if not request_id or not description or price in (None, "") or not delivery_time:
            return service_err(
                ErrorCodes.VALIDATION_ERROR, "Request ID, description, price, and delivery time are required"
            )
        try:
            price = Decimal(str(price))
        except (InvalidOperation, ValueError):
            return service_err(ErrorCodes.VALIDATION_ERROR, "Price must be a number")
        if not price.is_finite() or price <= 0:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Price must be greater than zero")

        service_request = get_or_none(ServiceRequest.objects.all(), pk=request_id)
        if service_request is None:
            return service_err(ErrorCodes.NOT_FOUND, "Service request not found")

        already_proposed = ServiceProposal.objects.filter(request=service_request, provider=user).exists()
        allowed = authorize(user, Operation.SUBMIT_PROPOSAL, service_request, already_proposed=already_proposed)
        if not allowed.ok:
            return allowed

        try:
            with transaction.atomic():
                proposal = ServiceProposal.objects.create(
                    request=service_request,
                    provider=user,
                    description=description,
                    price=price,
                    delivery_time=delivery_time,
                    status=ProposalStatus.PENDING,
                )
        except IntegrityError:
            return service_err(ErrorCodes.CONFLICT, "You have already submitted a proposal for this service request")
        except Exception as e:
            return self.internal_error("submit_proposal", e)

        proposals_submitted_total.inc()
        proposal_price.observe(float(price))
        self.logger.info(f"Proposal {proposal.id} submitted on request {service_request.id}")

        failure = self.publish([ProposalSubmittedEvent(proposal, service_request)])
        return failure or service_ok(proposal)

    @BaseService.log_performance
    def update_status(self, user, proposal_id, status) -> ServiceResult[Dict[str, Any]]:
        """
        Move a proposal to ``status``.

        ACCEPTED/REJECTED are for the request owner, COMPLETED for the provider.
        The value of ``result.value`` is ``{"proposal", "transaction"}``;
        ``transaction`` is set when one was created or completed.
        """
        denied = authentication_error(user)
        if denied:
            return denied

        try:
            target = parse_status(ProposalStatus, status)
        except InvalidStatus:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Valid status is required")

        proposal = get_or_none(_proposal_queryset(), pk=proposal_id)
        if proposal is None:
            return service_err(ErrorCodes.NOT_FOUND, "Proposal not found")

        if target in (ProposalStatus.ACCEPTED, ProposalStatus.REJECTED):
            operation = Operation.DECIDE_PROPOSAL
        elif target == ProposalStatus.COMPLETED:
            operation = Operation.COMPLETE_PROPOSAL
        else:
            operation = Operation.UPDATE_PROPOSAL
        allowed = authorize(user, operation, proposal)
        if not allowed.ok:
            return allowed

        if target == ProposalStatus.ACCEPTED:
            return self._accept(proposal.pk)
        if target == ProposalStatus.REJECTED:
            return self._reject(proposal.pk)
        if target == ProposalStatus.COMPLETED:
            return self._complete(user, proposal.pk)

        try:
            transition(proposal.status, target)
        except CONFLICT_ERRORS as e:
            return self.conflict_from(e)
        return service_ok({"proposal": proposal, "transaction": None})

    @log_transaction_performance
    def _accept(self, proposal_id) -> ServiceResult[Dict[str, Any]]:
        try:
            with transaction.atomic():
                # Lock the parent request first, then its proposals, in a fixed order.
                request_id = ServiceProposal.objects.values_list("request_id", flat=True).get(pk=proposal_id)
                service_request = ServiceRequest.objects.select_for_update().get(pk=request_id)
                proposal = ServiceProposal.objects.select_for_update().get(pk=proposal_id)

                if service_request.status != RequestStatus.OPEN:
                    return service_err(ErrorCodes.CONFLICT, "This service request is no longer accepting proposals")
                if proposal.status != ProposalStatus.PENDING:
                    return service_err(ErrorCodes.CONFLICT, "Only pending proposals can be accepted")

                competing = list(
                    ServiceProposal.objects.select_for_update()
                    .filter(request=service_request, status=ProposalStatus.PENDING)
                    .exclude(pk=proposal.pk)
                )
                proposal.request = service_request
                plan = plan_proposal_acceptance(proposal, service_request, competing)
                commit_unit_of_work(plan.mutations)
        except CONFLICT_ERRORS as e:
            return self.conflict_from(e)
        except Exception as e:
            return self.internal_error("accept_proposal", e)

        proposals_decided_total.labels(status=ProposalStatus.ACCEPTED).inc()
        proposals_decided_total.labels(status=ProposalStatus.REJECTED).inc(len(plan.events) - 1)
        self.logger.info(
            f"Proposal {proposal.id} accepted; transaction {plan.result.id} created, "
            f"{len(plan.events) - 1} competing proposal(s) rejected"
        )

        failure = self.publish(plan.events)
        return failure or service_ok({"proposal": proposal, "transaction": plan.result})

    def _reject(self, proposal_id) -> ServiceResult[Dict[str, Any]]:
        try:
            with transaction.atomic():
                proposal = ServiceProposal.objects.select_for_update().get(pk=proposal_id)
                plan = plan_proposal_rejection(proposal)
                commit_unit_of_work(plan.mutations)
        except CONFLICT_ERRORS as e:
            return self.conflict_from(e)
        except Exception as e:
            return self.internal_error("reject_proposal", e)

        proposals_decided_total.labels(status=ProposalStatus.REJECTED).inc()
        failure = self.publish(plan.events)
        return failure or service_ok({"proposal": proposal, "transaction": None})

    @log_transaction_performance
    def _complete(self, user, proposal_id) -> ServiceResult[Dict[str, Any]]:
        try:
            with transaction.atomic():
                request_id = ServiceProposal.objects.values_list("request_id", flat=True).get(pk=proposal_id)
                service_request = ServiceRequest.objects.select_for_update().get(pk=request_id)
                proposal = ServiceProposal.objects.select_for_update().get(pk=proposal_id)
                service_transaction = get_or_none(ServiceTransaction.objects.select_for_update(), proposal=proposal)
                if service_transaction is None:
                    return service_err(ErrorCodes.CONFLICT, "Only accepted proposals can be marked as completed")
                if service_transaction.status == TransactionStatus.DISPUTED:
                    return service_err(
                        ErrorCodes.CONFLICT, "A disputed transaction can only be completed by the client"
                    )

                proposal.request = service_request
                plan = plan_proposal_completion(proposal, service_transaction, actor=user)
                commit_unit_of_work(plan.mutations)
        except CONFLICT_ERRORS as e:
            return self.conflict_from(e)
        except Exception as e:
            return self.internal_error("complete_proposal", e)

        proposals_decided_total.labels(status=ProposalStatus.COMPLETED).inc()
        failure = self.publish(plan.events)
        return failure or service_ok({"proposal": proposal, "transaction": service_transaction})

    @BaseService.log_performance
    def delete_proposal(self, user, proposal_id) -> ServiceResult[None]:
        denied = authentication_error(user)
        if denied:
            return denied

        proposal = get_or_none(_proposal_queryset(), pk=proposal_id)
        if proposal is None:
            return service_err(ErrorCodes.NOT_FOUND, "Proposal not found")

        allowed = authorize(user, Operation.DELETE_PROPOSAL, proposal)
        if not allowed.ok:
            return allowed

        try:
            with transaction.atomic():
                proposal.delete()
        except ProtectedError:
            return service_err(
                ErrorCodes.CONFLICT, "Cannot delete an accepted proposal or one with an active transaction"
            )
        except Exception as e:
            return self.internal_error("delete_proposal", e)

        self.logger.info(f"Proposal {proposal_id} deleted by provider {user.pk}")
        return service_ok(None)
