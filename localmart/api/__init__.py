# localmart/api/__init__.py

from . import auth
from . import posts
from . import responses
from . import chat

__all__ = [
    'auth',
    'posts',
    'responses',
    'chat'
]
