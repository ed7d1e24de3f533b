"""
Base class for marketplace services.

Re-exports the shared ServiceResult helpers and adds event publication: a
service commits its unit of work first and only then publishes the planned
events, so a failing subscriber can never roll the committed change back.
"""

from typing import Iterable, Optional

from django.core.exceptions import ValidationError

from infrastructure.events import EventBus, EventDispatchError, get_event_bus
from marketplace.domain.state_machine import InvalidTransition
from marketplace.infra.observability.metrics import event_dispatch_failures_total
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.transaction_utils import TransactionError


def get_or_none(queryset, **lookup):
    """Fetch one row, treating a malformed id the same as a missing row."""
    try:
        return queryset.get(**lookup)
    except (queryset.model.DoesNotExist, ValidationError, ValueError):
        return None


def authentication_error(user) -> Optional[ServiceResult]:
    if user is None or not getattr(user, "is_authenticated", False):
        return service_err(ErrorCodes.AUTHENTICATION_REQUIRED, "Authentication required")
    return None


class MarketplaceService(BaseService):
    def __init__(self, event_bus: Optional[EventBus] = None):
        super().__init__()
        self.event_bus = event_bus or get_event_bus()

    def publish(self, events: Iterable) -> Optional[ServiceResult]:
        """
        Publish events after the mutation has committed.

        Returns None on success, or an ``internal_error`` result when a
        subscriber failed. The committed mutation stands either way.
        """
        try:
            self.event_bus.dispatch(events)
        except EventDispatchError as e:
            event_dispatch_failures_total.labels(event_type=e.event_type).inc()
            self.logger.error(f"Side effects for {e.event_type} failed after commit: {e.original}")
            return service_err(
                ErrorCodes.INTERNAL_ERROR,
                "The change was saved but notifications could not be delivered",
            )
        return None

    @staticmethod
    def conflict_from(exc: Exception) -> ServiceResult:
        """Translate a rejected status move or constraint violation into a ``conflict`` result."""
        if isinstance(exc, TransactionError):
            return service_err(ErrorCodes.CONFLICT, "This change conflicts with the current state of the record")
        return service_err(ErrorCodes.CONFLICT, str(exc))


CONFLICT_ERRORS = (InvalidTransition, TransactionError)


__all__ = [
    "BaseService",
    "CONFLICT_ERRORS",
    "ErrorCodes",
    "MarketplaceService",
    "ServiceResult",
    "authentication_error",
    "get_or_none",
    "service_err",
    "service_ok",
]
