from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from ..core.conversation_service import ConversationService
from ..core.errors import InvalidInputError
from ..core.message_service import MessageService
from ..core.read_state_service import ReadStateService
from ..utils.dependencies import container
from .common import get_current_user, handle_service_errors

bp = Blueprint('chat', __name__, url_prefix='/api/v1')


def _first_present(data, *keys):
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _init(user, data):
    request_id = _first_present(data, 'requestId', 'customerPostId')
    responder_id = _first_present(data, 'responderId', 'shopkeeperId')
    conversation = container.resolve(ConversationService).resolve_or_create(
        request_id, responder_id, caller_id=user.id
    )
    return conversation.to_dict(include_messages=True)


def _send(user, data):
    message = container.resolve(MessageService).append(
        data.get('conversationId'), sender_id=user.id, content=data.get('content')
    )
    return message.to_dict()


def _fetch(user, data):
    messages = container.resolve(MessageService).fetch_since(
        data.get('conversationId'), reader_id=user.id, after=data.get('after')
    )
    return [message.to_dict() for message in messages]


def _mark_read(user, data):
    updated = container.resolve(ReadStateService).mark_read(data.get('conversationId'), reader_id=user.id)
    return {"success": True, "updated": updated}


def _unread_count(user, data):
    count = container.resolve(ReadStateService).unread_count(data.get('conversationId'), reader_id=user.id)
    return {"count": count}


ACTIONS = {
    'init': _init,
    'send': _send,
    'fetch': _fetch,
    'markRead': _mark_read,
    'getUnreadCount': _unread_count,
}


@bp.route('/chat', methods=['POST'])
@jwt_required()
@handle_service_errors
def chat_action():
    """
    Single entry point of the polling chat, dispatched on ``action``.
    ---
    tags:
      - chat
    security:
      - bearerAuth: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - action
          properties:
            action:
              type: string
              enum: [init, send, fetch, markRead, getUnreadCount]
            requestId:
              type: integer
              description: "init: the customer request the chat is about (alias: customerPostId)."
            responderId:
              type: integer
              description: "init: the responding shopkeeper (alias: shopkeeperId)."
            conversationId:
              type: integer
              description: "send, fetch, markRead, getUnreadCount: the conversation."
            content:
              type: string
              description: "send: message text, non-empty after trimming."
            after:
              type: string
              format: date-time
              description: "fetch: only return messages created strictly after this timestamp."
    responses:
      200:
        description: >
          init returns the conversation with its ordered messages, send returns the
          created message, fetch returns an ordered (possibly empty) list of messages,
          markRead returns the number of messages marked, getUnreadCount returns a count.
      400:
        description: Invalid input, e.g. empty content, missing ids or unknown action.
      401:
        description: Missing or invalid token.
      403:
        description: The caller is not a participant of the conversation.
      404:
        description: Request or conversation not found.
      503:
        description: The database is temporarily unavailable.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object.")

    handler = ACTIONS.get(data.get('action'))
    if handler is None:
        raise InvalidInputError("Invalid action.")

    user = get_current_user()
    return jsonify({"data": handler(user, data)}), 200


@bp.route('/chat/conversations', methods=['GET'])
@jwt_required()
@handle_service_errors
def list_conversations():
    """
    Lists the caller's conversations, most recent activity first.
    ---
    tags:
      - chat
    security:
      - bearerAuth: []
    parameters:
      - in: query
        name: role
        type: string
        enum: [CUSTOMER, SHOPKEEPER]
        required: false
        description: Only conversations where the caller has this role. Both sides when omitted.
    responses:
      200:
        description: Conversation summaries with last message, unread count and counterpart.
      401:
        description: Missing or invalid token.
    """
    user = get_current_user()
    summaries = container.resolve(ConversationService).list_summaries(user.id, role=request.args.get('role'))
    return jsonify({"data": summaries}), 200
