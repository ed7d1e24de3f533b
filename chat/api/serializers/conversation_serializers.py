from rest_framework import serializers

from authentication.api.serializers import UserSummarySerializer
from chat.domain.models import Conversation, Message


class MessageSerializer(serializers.ModelSerializer):
    conversation_id = serializers.UUIDField(read_only=True)
    sender = UserSummarySerializer(read_only=True)

    class Meta:
        model = Message
        fields = ("id", "conversation_id", "sender", "content", "created_at", "is_read")
        read_only_fields = fields


class ConversationSerializer(serializers.ModelSerializer):
    """Conversation as seen by ``context["request"].user``."""

    other_user = serializers.SerializerMethodField()
    last_message = serializers.SerializerMethodField()
    unread_count = serializers.SerializerMethodField()

    class Meta:
        model = Conversation
        fields = ("id", "other_user", "last_message", "unread_count", "created_at", "updated_at")
        read_only_fields = fields

    def _viewer(self):
        request = self.context.get("request")
        return request.user if request else None

    def get_other_user(self, obj):
        viewer = self._viewer()
        if viewer is None:
            return None
        return UserSummarySerializer(obj.other_user(viewer)).data

    def get_last_message(self, obj):
        last_msg = obj.messages.select_related("sender").order_by("-created_at").first()
        if last_msg:
            return MessageSerializer(last_msg).data
        return None

    def get_unread_count(self, obj):
        viewer = self._viewer()
        if viewer is None:
            return 0
        # Messages from the other participant that the viewer has not opened
        return obj.messages.exclude(sender=viewer).filter(is_read=False).count()


class ConversationDetailSerializer(ConversationSerializer):
    messages = serializers.SerializerMethodField()

    class Meta(ConversationSerializer.Meta):
        fields = ConversationSerializer.Meta.fields + ("messages",)
        read_only_fields = fields

    def get_messages(self, obj):
        return MessageSerializer(self.context.get("messages", []), many=True).data


class SendMessageSerializer(serializers.Serializer):
    conversation_id = serializers.UUIDField(required=False, allow_null=True)
    content = serializers.CharField(required=False, allow_blank=True, trim_whitespace=True)


class StartConversationSerializer(serializers.Serializer):
    user_id = serializers.UUIDField(required=False, allow_null=True)
