import uuid

from django.conf import settings
from django.db import models
from django.db.models import F, Q


class Conversation(models.Model):
    """
    1-on-1 conversation between two users.

    The pair is stored in canonical order (``user1.id < user2.id``) so each
    unordered pair maps to exactly one row.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user1 = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="conversations_as_user1"
    )
    user2 = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="conversations_as_user2"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-updated_at"]
        app_label = "chat"
        constraints = [
            models.UniqueConstraint(fields=["user1", "user2"], name="unique_conversation_pair"),
            models.CheckConstraint(condition=~Q(user1=F("user2")), name="conversation_distinct_users"),
        ]
        indexes = [
            models.Index(fields=["-updated_at"], name="conversation_updated_idx"),
        ]

    def __str__(self):
        return f"Conversation between {self.user1_id} and {self.user2_id}"

    @staticmethod
    def canonical_pair(user_a, user_b):
        """Order two users so the lower id comes first"""
        return (user_a, user_b) if user_a.pk < user_b.pk else (user_b, user_a)

    def other_user(self, user):
        return self.user2 if user.pk == self.user1_id else self.user1


class Message(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    conversation = models.ForeignKey(Conversation, on_delete=models.CASCADE, related_name="messages")
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="sent_messages")
    content = models.TextField()

    # Meta
    created_at = models.DateTimeField(auto_now_add=True)
    is_read = models.BooleanField(default=False)

    class Meta:
        ordering = ["created_at"]
        app_label = "chat"
        indexes = [
            models.Index(fields=["conversation", "created_at"], name="message_conversation_idx"),
        ]

    def __str__(self):
        preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"{self.sender_id}: {preview}"
