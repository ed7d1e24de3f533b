from django.urls import path

from notifications.api.views.notification_views import (
    MarkAllReadAPIView,
    NotificationDetailAPIView,
    NotificationListAPIView,
    UnreadCountAPIView,
)

app_name = "notifications"

urlpatterns = [
    path("", NotificationListAPIView.as_view(), name="notification_list"),
    path("unread-count/", UnreadCountAPIView.as_view(), name="unread_count"),
    path("mark-all-read/", MarkAllReadAPIView.as_view(), name="mark_all_read"),
    path("<uuid:pk>/", NotificationDetailAPIView.as_view(), name="notification_detail"),
]
