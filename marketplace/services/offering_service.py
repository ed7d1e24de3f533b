"""
OfferingService - provider-authored service listings
"""

from typing import Any, Dict, Optional

from django.db import transaction

from marketplace.domain.authorization import Operation, authorize
from marketplace.filters import ServiceOfferingFilter
from marketplace.models import ServiceOffering
from utils.pagination import paginate
from utils.responses import first_error_message

from .base import (
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

EDITABLE_FIELDS = ("title", "description", "category", "price", "delivery_time", "features", "is_active")


class OfferingService(MarketplaceService):
    """
    Service for offerings.

    Only active offerings are listed. A deactivated offering stays
    reachable by id for its provider so it can be re-activated.
    """

    def __init__(self, event_bus=None, stats_service: Optional[ProviderStatsService] = None):
        super().__init__(event_bus=event_bus)
        self.stats_service = stats_service or ProviderStatsService()

    @BaseService.log_performance
    def list_offerings(
        self, user, filters: Optional[Dict[str, Any]] = None, page: int = 1, limit: int = 10
    ) -> ServiceResult[Dict[str, Any]]:
        denied = authentication_error(user)
        if denied:
            return denied

        queryset = ServiceOffering.objects.filter(is_active=True).select_related("provider")
        filterset = ServiceOfferingFilter(filters or {}, queryset=queryset)
        if not filterset.is_valid():
            return service_err(ErrorCodes.VALIDATION_ERROR, first_error_message(filterset.errors))

        try:
            items, pagination = paginate(filterset.qs, page, limit)
        except Exception as e:
            return self.internal_error("list_offerings", e)

        stats = self.stats_service.stats_for(o.provider_id for o in items)
        return service_ok({"items": items, "pagination": pagination, "provider_stats": stats})

    @BaseService.log_performance
    def get_offering(self, user, offering_id) -> ServiceResult[Dict[str, Any]]:
        """
        Fetch one offering with its provider's stats and latest client reviews.

        Returns:
            ServiceResult with ``{"offering", "provider_stats", "reviews"}``
        """
        denied = authentication_error(user)
        if denied:
            return denied

        offering = get_or_none(ServiceOffering.objects.select_related("provider"), pk=offering_id)
        if offering is None or (not offering.is_active and offering.provider_id != user.pk):
            return service_err(ErrorCodes.NOT_FOUND, "Service offering not found")

        reviews = self.stats_service.recent_reviews(offering.provider_id)
        if not reviews.ok:
            return reviews

        stats = self.stats_service.stats_for([offering.provider_id])
        return service_ok({"offering": offering, "provider_stats": stats, "reviews": reviews.value})

    @BaseService.log_performance
    def create_offering(
        self, user, title=None, description=None, category=None, price=None, delivery_time=None, features=None
    ) -> ServiceResult[ServiceOffering]:
        denied = authentication_error(user)
        if denied:
            return denied

        if not title or not description or not category or price is None or not delivery_time:
            return service_err(
                ErrorCodes.VALIDATION_ERROR, "Title, description, category, price, and delivery time are required"
            )
        if price <= 0:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Price must be greater than zero")

        try:
            offering = ServiceOffering.objects.create(
                provider=user,
                title=title,
                description=description,
                category=category,
                price=price,
                delivery_time=delivery_time,
                features=list(features or []),
                is_active=True,
            )
        except Exception as e:
            return self.internal_error("create_offering", e)

        self.logger.info(f"Service offering {offering.id} created by {user.pk}")
        return service_ok(offering)

    @BaseService.log_performance
    def update_offering(self, user, offering_id, **changes) -> ServiceResult[ServiceOffering]:
        denied = authentication_error(user)
        if denied:
            return denied

        if changes.get("price") is not None and changes["price"] <= 0:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Price must be greater than zero")

        offering = get_or_none(ServiceOffering.objects.select_related("provider"), pk=offering_id)
        if offering is None:
            return service_err(ErrorCodes.NOT_FOUND, "Service offering not found")

        allowed = authorize(user, Operation.EDIT_OFFERING, offering)
        if not allowed.ok:
            return allowed

        update_fields = [name for name in EDITABLE_FIELDS if name in changes and changes[name] is not None]
        for name in update_fields:
            setattr(offering, name, changes[name])

        try:
            if update_fields:
                offering.save(update_fields=update_fields + ["updated_at"])
        except Exception as e:
            return self.internal_error("update_offering", e)
        return service_ok(offering)

    @BaseService.log_performance
    def delete_offering(self, user, offering_id) -> ServiceResult[None]:
        denied = authentication_error(user)
        if denied:
            return denied

        offering = get_or_none(ServiceOffering.objects.all(), pk=offering_id)
        if offering is None:
            return service_err(ErrorCodes.NOT_FOUND, "Service offering not found")

        allowed = authorize(user, Operation.EDIT_OFFERING, offering)
        if not allowed.ok:
            return allowed

        try:
            with transaction.atomic():
                offering.delete()
        except Exception as e:
            return self.internal_error("delete_offering", e)

        self.logger.info(f"Service offering {offering_id} deleted by {user.pk}")
        return service_ok(None)
