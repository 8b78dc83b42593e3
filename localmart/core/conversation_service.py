import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models import Conversation
from ..models.models import ROLES
from .access import can_open_conversation, require_participant
from .conversation_repository import ConversationRepository
from .errors import InvalidInputError, NotFoundError, PermissionDeniedError
from .message_repository import MessageRepository
from .post_repository import PostRepository
from .user_repository import UserRepository
from .validators import require_id

logger = logging.getLogger(__name__)


class ConversationService:
    def __init__(self, session: Session):
        self.session = session
        self.conversations = ConversationRepository(session)
        self.messages = MessageRepository(session)
        self.posts = PostRepository()
        self.users = UserRepository()

    def resolve_or_create(self, request_id, responder_id, caller_id: int) -> Conversation:
        """
        Returns the conversation for (request, responder), creating it on first contact.

        At most one row exists per pair. When two first contacts race, the
        unique constraint rejects the later insert, which is rolled back and
        answered with the row that won.
        """
        request_id = require_id(request_id, "requestId")
        responder_id = require_id(responder_id, "responderId")

        existing = self.conversations.find_by_pair(request_id, responder_id)
        if existing is not None:
            return require_participant(existing, caller_id)

        post = self.posts.find_by_id(request_id)
        if post is None:
            raise NotFoundError("Request not found.")
        responder = self.users.find_by_id(responder_id)
        if responder is None:
            raise NotFoundError("Responder not found.")
        if responder_id == post.customer_id:
            raise InvalidInputError("A customer cannot respond to their own request.")
        if not responder.is_shopkeeper:
            raise InvalidInputError("Only shopkeepers can respond to a request.")
        if not can_open_conversation(post, responder_id, caller_id):
            raise PermissionDeniedError("Only the request owner or the responder can open this conversation.")

        conversation = Conversation(
            customer_post_id=post.id,
            customer_id=post.customer_id,
            shopkeeper_id=responder_id,
        )
        try:
            self.conversations.add(conversation)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.info(f"Conversation for request {request_id} and responder {responder_id} already created, reusing it.")
            existing = self.conversations.find_by_pair(request_id, responder_id)
            if existing is None:
                raise
            return require_participant(existing, caller_id)

        logger.info(f"Created conversation {conversation.id} for request {request_id} and responder {responder_id}.")
        return conversation

    def list_summaries(self, user_id: int, role: Optional[str] = None) -> List[Dict[str, Any]]:
        """Conversation summaries for the dashboard, most recent activity first."""
        if role:
            role = role.upper()
            if role not in ROLES:
                raise InvalidInputError(f"'role' must be one of {', '.join(ROLES)}.")
        else:
            role = None

        summaries = []
        for conversation in self.conversations.list_for_user(user_id, role=role):
            last_message = self.messages.find_latest(conversation.id)
            counterpart = conversation.counterpart_of(user_id)
            post = conversation.customer_post
            summary = conversation.to_dict()
            summary.update({
                "customer_post": {"id": post.id, "title": post.title} if post else None,
                "counterpart": counterpart.to_summary() if counterpart else None,
                "last_message": last_message.to_dict() if last_message else None,
                "unread_count": self.messages.count_unread(conversation.id, user_id),
            })
            summaries.append(summary)
        return summaries
