from .conversation_serializers import (
    ConversationDetailSerializer,
    ConversationSerializer,
    MessageSerializer,
    SendMessageSerializer,
    StartConversationSerializer,
)

__all__ = [
    "ConversationDetailSerializer",
    "ConversationSerializer",
    "MessageSerializer",
    "SendMessageSerializer",
    "StartConversationSerializer",
]
