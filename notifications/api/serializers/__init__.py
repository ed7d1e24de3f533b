from rest_framework import serializers

from notifications.domain.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ("id", "type", "title", "message", "data", "is_read", "created_at")
        read_only_fields = ("id", "type", "title", "message", "data", "created_at")


class NotificationUpdateSerializer(serializers.Serializer):
    is_read = serializers.BooleanField(default=True)


class UnreadCountSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()


__all__ = ["NotificationSerializer", "NotificationUpdateSerializer", "UnreadCountSerializer"]
