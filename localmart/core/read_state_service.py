import logging

from sqlalchemy.orm import Session

from .access import load_participant_conversation
from .conversation_repository import ConversationRepository
from .message_repository import MessageRepository
from .validators import require_id

logger = logging.getLogger(__name__)


class ReadStateService:
    def __init__(self, session: Session):
        self.session = session
        self.conversations = ConversationRepository(session)
        self.messages = MessageRepository(session)

    def mark_read(self, conversation_id, reader_id: int) -> int:
        """
        Marks every unread message the reader received in the conversation as read.
        The reader's own messages are never touched. Returns how many rows changed.
        """
        conversation_id = require_id(conversation_id, "conversationId")
        load_participant_conversation(self.conversations, conversation_id, reader_id)
        updated = self.messages.mark_read(conversation_id, reader_id)
        self.session.commit()
        if updated:
            logger.info(f"User {reader_id} read {updated} message(s) in conversation {conversation_id}.")
        return updated

    def unread_count(self, conversation_id, reader_id: int) -> int:
        conversation_id = require_id(conversation_id, "conversationId")
        load_participant_conversation(self.conversations, conversation_id, reader_id)
        return self.messages.count_unread(conversation_id, reader_id)
