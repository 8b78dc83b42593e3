import logging
from typing import Any, Dict, Optional

import requests

from .outcome import ErrorKind, Outcome

logger = logging.getLogger(__name__)


class ChatClient:
    """
    HTTP client for the chat API.

    Every method returns an ``Outcome``; transport failures become
    ``ErrorKind.TRANSIENT`` and error responses are tagged from the error code
    the server sends, so callers never have to catch exceptions.
    """

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.set_token(token)

    def set_token(self, token: str) -> None:
        self.session.headers["Authorization"] = f"Bearer {token}"

    def login(self, email: str, password: str) -> Outcome:
        outcome = self._request("POST", "/api/v1/auth/login", json={"email": email, "password": password})
        if outcome.ok:
            self.set_token(outcome.value["token"])
        return outcome

    def init(self, request_id: int, responder_id: int) -> Outcome:
        return self._action("init", requestId=request_id, responderId=responder_id)

    def send(self, conversation_id: int, content: str) -> Outcome:
        return self._action("send", conversationId=conversation_id, content=content)

    def fetch(self, conversation_id: int, after: Optional[str] = None) -> Outcome:
        payload: Dict[str, Any] = {"conversationId": conversation_id}
        if after is not None:
            payload["after"] = after
        outcome = self._action("fetch", **payload)
        if outcome.ok and outcome.value is None:
            return Outcome.success([])
        return outcome

    def mark_read(self, conversation_id: int) -> Outcome:
        return self._action("markRead", conversationId=conversation_id)

    def unread_count(self, conversation_id: int) -> Outcome:
        outcome = self._action("getUnreadCount", conversationId=conversation_id)
        if outcome.ok:
            return Outcome.success(outcome.value.get("count", 0))
        return outcome

    def list_conversations(self, role: Optional[str] = None) -> Outcome:
        params = {"role": role} if role else None
        outcome = self._request("GET", "/api/v1/chat/conversations", params=params)
        if outcome.ok and outcome.value is None:
            return Outcome.success([])
        return outcome

    def _action(self, action: str, **payload) -> Outcome:
        return self._request("POST", "/api/v1/chat", json={"action": action, **payload})

    def _request(self, method: str, path: str, **kwargs) -> Outcome:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            return Outcome.failure(ErrorKind.TRANSIENT, str(e))

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.ok:
            return Outcome.success(body.get("data"))

        error = body.get("error") or {}
        kind = ErrorKind.from_response(response.status_code, error.get("code"))
        message = error.get("message") or f"HTTP {response.status_code}"
        return Outcome.failure(kind, message)
