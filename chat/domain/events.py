from dataclasses import dataclass

from marketplace.domain.events import DomainEvent, EventTypes


@dataclass
class MessageSentEvent(DomainEvent):
    """Event: a message was sent. Tells the other participant."""

    def __init__(self, message, conversation):
        sender = message.sender
        super().__init__(
            event_type=EventTypes.NEW_MESSAGE,
            payload={
                "recipient_id": str(conversation.other_user(sender).pk),
                "actor_name": sender.display_name,
                "subject": message.content[:100],
                "data": {
                    "conversation_id": str(conversation.id),
                    "message_id": str(message.id),
                    "sender_id": str(sender.pk),
                },
            },
        )
