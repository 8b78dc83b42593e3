from .chat_client import ChatClient
from .outcome import ErrorKind, Outcome
from .session import ChatSession, SessionState
from .timeline import ConfirmedEntry, PendingEntry, Timeline

__all__ = [
    'ChatClient',
    'ChatSession',
    'SessionState',
    'ConfirmedEntry',
    'PendingEntry',
    'Timeline',
    'ErrorKind',
    'Outcome',
]
