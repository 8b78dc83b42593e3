# localmart/core/access.py
"""
Participant checks shared by every chat operation.

A conversation has exactly two participants, the customer who owns the
request and the responding shopkeeper; nobody else may read or write it.
"""
from .errors import NotFoundError, PermissionDeniedError


def is_participant(conversation, user_id):
    return user_id is not None and user_id in conversation.participant_ids


def require_participant(conversation, user_id):
    if not is_participant(conversation, user_id):
        raise PermissionDeniedError("You are not a participant of this conversation.")
    return conversation


def can_open_conversation(post, responder_id, user_id):
    """The responder, or the customer who owns the request, may start the chat."""
    return user_id is not None and user_id in (responder_id, post.customer_id)


def load_participant_conversation(conversations, conversation_id, user_id):
    """
    Looks up a conversation and checks that ``user_id`` takes part in it.

    Raises NotFoundError for an unknown id and PermissionDeniedError for
    outsiders, so callers never see a conversation they may not use.
    """
    conversation = conversations.find_by_id(conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found.")
    return require_participant(conversation, user_id)
