import logging

from django.apps import AppConfig


logger = logging.getLogger(__name__)


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"

    def ready(self):
        # Register event listeners
        from notifications.infra.listeners import register_notification_listeners

        register_notification_listeners()
