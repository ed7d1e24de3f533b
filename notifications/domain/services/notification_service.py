"""
NotificationService - per-user notification inbox

``notify`` is the event-bus entry point: it turns one event envelope into one
Notification row for the event's recipient. It raises on failure so the bus
can report the failed side effect to the publishing service. The remaining
methods back the polling API and return ServiceResult.
"""

from typing import Any, Dict

from django.conf import settings

from marketplace.domain.authorization import Operation, authorize
from marketplace.infra.observability.metrics import notifications_created_total
from marketplace.services.base import authentication_error, get_or_none
from notifications.domain.models import Notification
from notifications.domain.notification_templates import render_notification
from utils.pagination import paginate
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok


class NotificationError(Exception):
    """Raised when an event cannot be turned into a notification."""


class NotificationService(BaseService):
    def notify(self, envelope: Dict[str, Any]) -> Notification:
        """
        Create the notification described by an event envelope.

        Args:
            envelope: ``{"event_type", "occurred_at", "payload"}`` as published on the bus

        Raises:
            NotificationError: if the payload names no recipient
            UnknownEventType: if the event type has no template
        """
        event_type = envelope["event_type"]
        payload = envelope.get("payload") or {}
        recipient_id = payload.get("recipient_id")
        if not recipient_id:
            raise NotificationError(f"Event {event_type} has no recipient")

        title, message = render_notification(event_type, payload)
        notification = Notification.objects.create(
            user_id=recipient_id,
            type=event_type,
            title=title,
            message=message,
            data=payload.get("data") or {},
        )
        notifications_created_total.labels(type=event_type).inc()
        self.logger.debug(f"Notification {notification.id} ({event_type}) created for {recipient_id}")
        return notification

    @BaseService.log_performance
    def list_notifications(
        self, user, page: int = 1, limit: int = None, unread_only: bool = False
    ) -> ServiceResult[Dict[str, Any]]:
        """
        Newest-first page of the user's notifications.

        Returns:
            ServiceResult with ``items``, ``pagination`` and ``unread_count``
        """
        denied = authentication_error(user)
        if denied:
            return denied

        limit = limit or settings.MARKETPLACE.get("NOTIFICATION_PAGE_SIZE", 20)
        queryset = Notification.objects.filter(user=user).order_by("-created_at")
        if unread_only:
            queryset = queryset.filter(is_read=False)

        try:
            items, pagination = paginate(queryset, page, limit)
            unread = Notification.objects.filter(user=user, is_read=False).count()
        except Exception as e:
            return self.internal_error("list_notifications", e)
        return service_ok({"items": items, "pagination": pagination, "unread_count": unread})

    @BaseService.log_performance
    def mark_read(self, user, notification_id, is_read: bool = True) -> ServiceResult[Notification]:
        denied = authentication_error(user)
        if denied:
            return denied

        notification = get_or_none(Notification.objects.all(), pk=notification_id)
        if notification is None:
            return service_err(ErrorCodes.NOT_FOUND, "Notification not found")

        allowed = authorize(user, Operation.UPDATE_NOTIFICATION, notification)
        if not allowed.ok:
            return allowed

        if notification.is_read != is_read:
            notification.is_read = is_read
            notification.save(update_fields=["is_read"])
        return service_ok(notification)

    @BaseService.log_performance
    def mark_all_read(self, user) -> ServiceResult[int]:
        """Mark every unread notification of ``user`` as read. Returns the number updated."""
        denied = authentication_error(user)
        if denied:
            return denied

        try:
            updated = Notification.objects.filter(user=user, is_read=False).update(is_read=True)
        except Exception as e:
            return self.internal_error("mark_all_read", e)
        return service_ok(updated)

    def unread_count(self, user) -> ServiceResult[int]:
        denied = authentication_error(user)
        if denied:
            return denied
        return service_ok(Notification.objects.filter(user=user, is_read=False).count())
