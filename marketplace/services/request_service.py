"""
RequestService - client-authored service requests

CRUD for service requests. The only status change allowed through this
service is the owner withdrawing an OPEN request (OPEN -> CANCELLED); every
other move happens through the proposal and transaction workflows.
"""

from typing import Any, Dict, Optional

from django.db import transaction
from django.db.models import Count, ProtectedError

from marketplace.domain.authorization import Operation, authorize
from marketplace.domain.state_machine import InvalidStatus, RequestStatus, parse_status, transition
from marketplace.filters import ServiceRequestFilter
from marketplace.models import ServiceProposal, ServiceRequest, ServiceTransaction
from utils.pagination import paginate
from utils.responses import first_error_message

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

EDITABLE_FIELDS = ("title", "description", "category", "budget", "deadline")


def _request_queryset():
    return (
        ServiceRequest.objects.select_related("requested_by")
        .annotate(proposal_count=Count("proposals"))
        .order_by("-created_at")
    )


class RequestService(MarketplaceService):
    def __init__(self, event_bus=None, stats_service: Optional[ProviderStatsService] = None):
        super().__init__(event_bus=event_bus)
        self.stats_service = stats_service or ProviderStatsService()

    @BaseService.log_performance
    def list_requests(
        self, user, filters: Optional[Dict[str, Any]] = None, page: int = 1, limit: int = 10
    ) -> ServiceResult[Dict[str, Any]]:
        """
        List service requests, newest first.

        Args:
            filters: query values for ``ServiceRequestFilter``
                (``category``, ``status``, ``user_id``, ``search``)

        Returns:
            ServiceResult with ``items`` (annotated with ``proposal_count``) and ``pagination``
        """
        denied = authentication_error(user)
        if denied:
            return denied

        filterset = ServiceRequestFilter(filters or {}, queryset=_request_queryset())
        if not filterset.is_valid():
            return service_err(ErrorCodes.VALIDATION_ERROR, first_error_message(filterset.errors))

        try:
            items, pagination = paginate(filterset.qs, page, limit)
        except Exception as e:
            return self.internal_error("list_requests", e)
        return service_ok({"items": items, "pagination": pagination})

    @BaseService.log_performance
    def get_request(self, user, request_id) -> ServiceResult[Dict[str, Any]]:
        """
        Fetch one request with the proposals the viewer may see.

        The owner sees every proposal; anyone else sees only their own.
        """
        denied = authentication_error(user)
        if denied:
            return denied

        service_request = get_or_none(_request_queryset(), pk=request_id)
        if service_request is None:
            return service_err(ErrorCodes.NOT_FOUND, "Service request not found")

        proposals = ServiceProposal.objects.filter(request=service_request).select_related("provider")
        if service_request.requested_by_id != user.pk:
            proposals = proposals.filter(provider=user)
        proposals = list(proposals)

        stats = self.stats_service.stats_for(p.provider_id for p in proposals)
        return service_ok({"request": service_request, "proposals": proposals, "provider_stats": stats})

    @BaseService.log_performance
    def create_request(
        self, user, title=None, description=None, category=None, budget=None, deadline=None
    ) -> ServiceResult[ServiceRequest]:
        denied = authentication_error(user)
        if denied:
            return denied

        if not title or not description or not category:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Title, description, and category are required")
        if budget is not None and budget < 0:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Budget cannot be negative")

        try:
            service_request = ServiceRequest.objects.create(
                requested_by=user,
                title=title,
                description=description,
                category=category,
                budget=budget,
                deadline=deadline,
                status=RequestStatus.OPEN,
            )
        except Exception as e:
            return self.internal_error("create_request", e)

        self.logger.info(f"Service request {service_request.id} created by {user.pk}")
        return service_ok(service_request)

    @BaseService.log_performance
    def update_request(self, user, request_id, **changes) -> ServiceResult[ServiceRequest]:
        """
        Edit an owned request.

        ``status`` may only be set to CANCELLED, and only while the request is OPEN.
        """
        denied = authentication_error(user)
        if denied:
            return denied

        target = None
        if changes.get("status") is not None:
            try:
                target = parse_status(RequestStatus, changes["status"])
            except InvalidStatus:
                return service_err(ErrorCodes.VALIDATION_ERROR, "Invalid status value")
            if target not in (RequestStatus.CANCELLED, RequestStatus.OPEN):
                return service_err(ErrorCodes.VALIDATION_ERROR, "A service request can only be cancelled")
        if changes.get("budget") is not None and changes["budget"] < 0:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Budget cannot be negative")

        service_request = get_or_none(ServiceRequest.objects.all(), pk=request_id)
        if service_request is None:
            return service_err(ErrorCodes.NOT_FOUND, "Service request not found")

        allowed = authorize(user, Operation.EDIT_REQUEST, service_request)
        if not allowed.ok:
            return allowed

        try:
            with transaction.atomic():
                service_request = ServiceRequest.objects.select_for_update().get(pk=service_request.pk)
                update_fields = []
                for field_name in EDITABLE_FIELDS:
                    if field_name in changes:
                        setattr(service_request, field_name, changes[field_name])
                        update_fields.append(field_name)

                if target is not None and target != service_request.status:
                    if target == RequestStatus.CANCELLED and service_request.status != RequestStatus.OPEN:
                        return service_err(ErrorCodes.CONFLICT, "Only open service requests can be cancelled")
                    service_request.status = transition(service_request.status, target)
                    update_fields.append("status")

                if update_fields:
                    service_request.save(update_fields=update_fields + ["updated_at"])
        except CONFLICT_ERRORS as e:
            return self.conflict_from(e)
        except Exception as e:
            return self.internal_error("update_request", e)

        return service_ok(_request_queryset().get(pk=service_request.pk))

    @BaseService.log_performance
    def delete_request(self, user, request_id) -> ServiceResult[None]:
        denied = authentication_error(user)
        if denied:
            return denied

        service_request = get_or_none(ServiceRequest.objects.all(), pk=request_id)
        if service_request is None:
            return service_err(ErrorCodes.NOT_FOUND, "Service request not found")

        allowed = authorize(user, Operation.EDIT_REQUEST, service_request)
        if not allowed.ok:
            return allowed

        if ServiceTransaction.objects.filter(proposal__request=service_request).exists():
            return service_err(ErrorCodes.CONFLICT, "Cannot delete a service request with an active transaction")

        try:
            with transaction.atomic():
                service_request.delete()
        except ProtectedError:
            return service_err(ErrorCodes.CONFLICT, "Cannot delete a service request with an active transaction")
        except Exception as e:
            return self.internal_error("delete_request", e)

        self.logger.info(f"Service request {request_id} deleted by {user.pk}")
        return service_ok(None)
