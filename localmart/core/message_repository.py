from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from ..models import Message


class MessageRepository:
    def __init__(self, session: Session):
        self.session = session

    def add(self, message: Message) -> Message:
        self.session.add(message)
        self.session.flush()
        return message

    def find_by_conversation(self, conversation_id: int, after: Optional[datetime] = None) -> List[Message]:
        """Messages of a conversation in creation order, optionally strictly after ``after``."""
        stmt = select(Message).where(Message.conversation_id == conversation_id)
        if after is not None:
            stmt = stmt.where(Message.created_at > after)
        stmt = stmt.order_by(Message.created_at.asc(), Message.id.asc())
        return list(self.session.execute(stmt).scalars())

    def find_latest(self, conversation_id: int) -> Optional[Message]:
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def mark_read(self, conversation_id: int, reader_id: int) -> int:
        # loaded instances pick up the new flag once the caller commits
        stmt = (
            update(Message)
            .where(
                Message.conversation_id == conversation_id,
                Message.sender_id != reader_id,
                Message.read.is_(False),
            )
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return result.rowcount or 0

    def count_unread(self, conversation_id: int, reader_id: int) -> int:
        stmt = select(func.count(Message.id)).where(
            Message.conversation_id == conversation_id,
            Message.sender_id != reader_id,
            Message.read.is_(False),
        )
        return self.session.execute(stmt).scalar_one()
