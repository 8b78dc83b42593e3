from typing import List, Optional

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from ..models import Conversation


class ConversationRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, conversation_id: int) -> Optional[Conversation]:
        return self.session.get(Conversation, conversation_id)

    def lock_for_append(self, conversation_id: int) -> Optional[Conversation]:
        """
        Takes the conversation's write lock, then reloads it.

        The no-op UPDATE holds the row lock on PostgreSQL and the database
        write lock on SQLite until the transaction ends, so appends to one
        conversation read `last_message_at` one at a time on either backend.
        """
        self.session.execute(
            update(Conversation)
            .where(Conversation.id == conversation_id)
            .values(last_message_at=Conversation.last_message_at)
            .execution_options(synchronize_session=False)
        )
        stmt = (
            select(Conversation)
            .where(Conversation.id == conversation_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_by_pair(self, customer_post_id: int, shopkeeper_id: int) -> Optional[Conversation]:
        stmt = select(Conversation).where(
            Conversation.customer_post_id == customer_post_id,
            Conversation.shopkeeper_id == shopkeeper_id,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_user(self, user_id: int, role: Optional[str] = None) -> List[Conversation]:
        if role == 'CUSTOMER':
            condition = Conversation.customer_id == user_id
        elif role == 'SHOPKEEPER':
            condition = Conversation.shopkeeper_id == user_id
        else:
            condition = or_(Conversation.customer_id == user_id, Conversation.shopkeeper_id == user_id)
        stmt = (
            select(Conversation)
            .where(condition)
            .order_by(Conversation.last_message_at.desc(), Conversation.id.desc())
        )
        return list(self.session.execute(stmt).scalars())

    def add(self, conversation: Conversation) -> Conversation:
        self.session.add(conversation)
        self.session.flush()
        return conversation
