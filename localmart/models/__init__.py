from .models import User, CustomerPost, ShopResponse, Conversation, Message
from ..extensions import db

__all__ = ['User', 'CustomerPost', 'ShopResponse', 'Conversation', 'Message', 'db']
