import logging
from datetime import datetime, timedelta
from typing import List, Optional

from flask import current_app
from sqlalchemy.orm import Session

from ..models import Message
from ..models.models import utcnow
from .access import load_participant_conversation
from .conversation_repository import ConversationRepository
from .message_repository import MessageRepository
from .validators import parse_timestamp, require_id, require_text

logger = logging.getLogger(__name__)

DEFAULT_MAX_MESSAGE_LENGTH = 2000
TIMESTAMP_STEP = timedelta(microseconds=1)


def next_message_time(last_message_at: Optional[datetime]) -> datetime:
    """
    Creation time for the next message of a conversation.

    Never earlier than the wall clock and always strictly after the previous
    message, so a "created_at > cursor" fetch never has to break a tie.
    """
    now = utcnow()
    if last_message_at is not None and now <= last_message_at:
        return last_message_at + TIMESTAMP_STEP
    return now


class MessageService:
    def __init__(self, session: Session):
        self.session = session
        self.conversations = ConversationRepository(session)
        self.messages = MessageRepository(session)

    def _max_length(self) -> int:
        return current_app.config.get('CHAT_MAX_MESSAGE_LENGTH', DEFAULT_MAX_MESSAGE_LENGTH)

    def append(self, conversation_id, sender_id: int, content) -> Message:
        """Stores a message and moves the conversation's last activity to it, in one transaction."""
        conversation_id = require_id(conversation_id, "conversationId")
        text = require_text(content, "content", max_length=self._max_length())

        conversation = load_participant_conversation(self.conversations, conversation_id, sender_id)
        self.conversations.lock_for_append(conversation.id)
        created_at = next_message_time(conversation.last_message_at)
        message = Message(
            conversation_id=conversation.id,
            sender_id=sender_id,
            content=text,
            created_at=created_at,
            read=False,
        )
        self.messages.add(message)
        conversation.last_message_at = created_at
        self.session.commit()

        logger.info(f"Message {message.id} appended to conversation {conversation.id} by user {sender_id}.")
        return message

    def fetch_since(self, conversation_id, reader_id: int, after=None) -> List[Message]:
        """Messages strictly newer than ``after`` in creation order; ``[]`` when there are none."""
        conversation_id = require_id(conversation_id, "conversationId")
        cursor = parse_timestamp(after)
        load_participant_conversation(self.conversations, conversation_id, reader_id)
        return self.messages.find_by_conversation(conversation_id, after=cursor)
