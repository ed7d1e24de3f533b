from typing import Any, Dict

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from chat.domain.events import MessageSentEvent
from chat.domain.models import Conversation, Message
from marketplace.domain.authorization import Operation, authorize
from marketplace.infra.observability.metrics import messages_sent_total
from marketplace.services.base import (
    BaseService,
    ErrorCodes,
    MarketplaceService,
    ServiceResult,
    authentication_error,
    get_or_none,
    service_err,
    service_ok,
)
from utils.pagination import paginate


User = get_user_model()


def _conversation_queryset():
    return Conversation.objects.select_related("user1", "user2")


class ChatService(MarketplaceService):
    """
    Two-party messaging.

    Conversations are keyed by the unordered user pair; sending a message
    bumps ``updated_at`` and notifies the other participant.
    """

    @BaseService.log_performance
    def get_or_create_conversation(self, user_a, user_b) -> ServiceResult[Dict[str, Any]]:
        """
        Return the conversation between two users, creating it when absent.

        Concurrent callers for the same pair converge on one row: the
        canonical ordering plus the unique constraint make the second insert
        fail, and ``get_or_create`` then reads the winner's row.

        Returns:
            ServiceResult with ``{"conversation", "created"}``
        """
        denied = authentication_error(user_a)
        if denied:
            return denied
        if user_b is None:
            return service_err(ErrorCodes.NOT_FOUND, "User not found")
        if user_a.pk == user_b.pk:
            return service_err(ErrorCodes.VALIDATION_ERROR, "You cannot start a conversation with yourself")

        user1, user2 = Conversation.canonical_pair(user_a, user_b)
        try:
            conversation, created = Conversation.objects.get_or_create(user1=user1, user2=user2)
        except Exception as e:
            return self.internal_error("get_or_create_conversation", e)

        if created:
            self.logger.info(f"Conversation {conversation.id} started between {user1.pk} and {user2.pk}")
        return service_ok({"conversation": conversation, "created": created})

    def start_conversation(self, user, other_user_id) -> ServiceResult[Dict[str, Any]]:
        """Resolve ``other_user_id`` and delegate to ``get_or_create_conversation``."""
        denied = authentication_error(user)
        if denied:
            return denied
        if not other_user_id:
            return service_err(ErrorCodes.VALIDATION_ERROR, "User ID is required")
        return self.get_or_create_conversation(user, get_or_none(User.objects.all(), pk=other_user_id))

    @BaseService.log_performance
    def send_message(self, conversation_id, sender, content) -> ServiceResult[Message]:
        denied = authentication_error(sender)
        if denied:
            return denied

        content = (content or "").strip()
        if not conversation_id or not content:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Conversation ID and content are required")

        conversation = get_or_none(_conversation_queryset(), pk=conversation_id)
        if conversation is None:
            return service_err(ErrorCodes.NOT_FOUND, "Conversation not found")

        allowed = authorize(sender, Operation.VIEW_CONVERSATION, conversation)
        if not allowed.ok:
            return allowed

        try:
            with transaction.atomic():
                message = Message.objects.create(conversation=conversation, sender=sender, content=content)
                conversation.updated_at = timezone.now()
                conversation.save(update_fields=["updated_at"])
        except Exception as e:
            return self.internal_error("send_message", e)

        messages_sent_total.inc()
        failure = self.publish([MessageSentEvent(message, conversation)])
        return failure or service_ok(message)

    @BaseService.log_performance
    def open_conversation(self, conversation_id, viewer) -> ServiceResult[Dict[str, Any]]:
        """
        Read a conversation.

        Marks every message the other participant sent as read and returns
        ``{"conversation", "messages"}`` with messages oldest first.
        """
        denied = authentication_error(viewer)
        if denied:
            return denied

        conversation = get_or_none(_conversation_queryset(), pk=conversation_id)
        if conversation is None:
            return service_err(ErrorCodes.NOT_FOUND, "Conversation not found")

        allowed = authorize(viewer, Operation.VIEW_CONVERSATION, conversation)
        if not allowed.ok:
            return allowed

        try:
            unread = Message.objects.filter(conversation=conversation, is_read=False).exclude(sender=viewer)
            marked = unread.update(is_read=True)
            messages = list(conversation.messages.select_related("sender").order_by("created_at"))
        except Exception as e:
            return self.internal_error("open_conversation", e)

        if marked:
            self.logger.debug(f"Marked {marked} message(s) read in conversation {conversation.id}")
        return service_ok({"conversation": conversation, "messages": messages})

    @BaseService.log_performance
    def list_conversations(self, user, page: int = 1, limit: int = 10) -> ServiceResult[Dict[str, Any]]:
        """Conversations the user takes part in, most recently active first."""
        denied = authentication_error(user)
        if denied:
            return denied

        queryset = _conversation_queryset().filter(Q(user1=user) | Q(user2=user)).order_by("-updated_at")
        try:
            items, pagination = paginate(queryset, page, limit)
        except Exception as e:
            return self.internal_error("list_conversations", e)
        return service_ok({"items": items, "pagination": pagination})
