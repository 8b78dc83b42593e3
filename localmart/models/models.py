# localmart/models/models.py
from ..extensions import db
from datetime import datetime, timezone
from werkzeug.security import generate_password_hash, check_password_hash

ROLE_CUSTOMER = 'CUSTOMER'
ROLE_SHOPKEEPER = 'SHOPKEEPER'
ROLES = (ROLE_CUSTOMER, ROLE_SHOPKEEPER)

POST_OPEN = 'OPEN'
POST_FULFILLED = 'FULFILLED'


def utcnow():
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat(timespec='microseconds') if value else None


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_CUSTOMER)
    shop_name = db.Column(db.String(120))
    address = db.Column(db.String(255))
    phone = db.Column(db.String(20))
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    posts = db.relationship('CustomerPost', backref='customer', lazy='dynamic', cascade="all, delete-orphan")

    @property
    def is_shopkeeper(self):
        return self.role == ROLE_SHOPKEEPER

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_summary(self):
        return {
            "id": self.id,
            "name": self.name,
            "shop_name": self.shop_name,
        }

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "shop_name": self.shop_name,
            "address": self.address,
            "phone": self.phone,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }


class CustomerPost(db.Model):
    __tablename__ = 'customer_posts'
    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default=POST_OPEN)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "created_at": isoformat(self.created_at),
        }


class ShopResponse(db.Model):
    """A shopkeeper's answer to a customer request: whether they have it, a note and photo links."""
    __tablename__ = 'shop_responses'
    __table_args__ = (
        db.UniqueConstraint('customer_post_id', 'shopkeeper_id', name='uq_shop_responses_post_shopkeeper'),
    )

    id = db.Column(db.Integer, primary_key=True)
    customer_post_id = db.Column(db.Integer, db.ForeignKey('customer_posts.id', ondelete='CASCADE'), nullable=False, index=True)
    shopkeeper_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    is_available = db.Column(db.Boolean, nullable=False)
    message = db.Column(db.Text)
    image_urls = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    customer_post = db.relationship(
        'CustomerPost',
        backref=db.backref('responses', lazy='dynamic', cascade="all, delete-orphan"),
    )
    shopkeeper = db.relationship('User')

    def to_dict(self):
        return {
            "id": self.id,
            "customer_post_id": self.customer_post_id,
            "shopkeeper_id": self.shopkeeper_id,
            "shopkeeper": self.shopkeeper.to_summary() if self.shopkeeper else None,
            "is_available": self.is_available,
            "message": self.message,
            "image_urls": list(self.image_urls or []),
            "created_at": isoformat(self.created_at),
        }


class Conversation(db.Model):
    __tablename__ = 'conversations'
    __table_args__ = (
        db.UniqueConstraint('customer_post_id', 'shopkeeper_id', name='uq_conversations_post_shopkeeper'),
    )

    id = db.Column(db.Integer, primary_key=True)
    customer_post_id = db.Column(db.Integer, db.ForeignKey('customer_posts.id', ondelete='CASCADE'), nullable=False)
    customer_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    shopkeeper_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    last_message_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    customer_post = db.relationship('CustomerPost')
    customer = db.relationship('User', foreign_keys=[customer_id])
    shopkeeper = db.relationship('User', foreign_keys=[shopkeeper_id])
    messages = db.relationship(
        'Message',
        backref='conversation',
        lazy=True,
        order_by=lambda: [Message.created_at, Message.id],
        cascade="all, delete-orphan",
    )

    @property
    def participant_ids(self):
        return (self.customer_id, self.shopkeeper_id)

    def counterpart_of(self, user_id):
        if user_id == self.customer_id:
            return self.shopkeeper
        if user_id == self.shopkeeper_id:
            return self.customer
        return None

    def to_dict(self, include_messages=False):
        data = {
            "id": self.id,
            "customer_post_id": self.customer_post_id,
            "customer_id": self.customer_id,
            "shopkeeper_id": self.shopkeeper_id,
            "customer": self.customer.to_summary() if self.customer else None,
            "shopkeeper": self.shopkeeper.to_summary() if self.shopkeeper else None,
            "created_at": isoformat(self.created_at),
            "last_message_at": isoformat(self.last_message_at),
        }
        if include_messages:
            data["messages"] = [message.to_dict() for message in self.messages]
        return data


class Message(db.Model):
    __tablename__ = 'messages'
    __table_args__ = (
        db.Index('ix_messages_conversation_created', 'conversation_id', 'created_at'),
    )

    id = db.Column(db.Integer, primary_key=True)
    conversation_id = db.Column(db.Integer, db.ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False)
    sender_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    read = db.Column(db.Boolean, default=False, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "conversation_id": self.conversation_id,
            "sender_id": self.sender_id,
            "content": self.content,
            "created_at": isoformat(self.created_at),
            "read": self.read,
        }
