import logging
import os
import threading
from enum import Enum
from typing import Callable, List, Optional

from .outcome import ErrorKind, Outcome
from .timeline import Entry, Timeline

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = float(os.getenv("LOCALMART_POLL_INTERVAL", "1.0"))


class SessionState(str, Enum):
    INITIALIZING = "initializing"
    IDLE = "idle"
    FETCHING = "fetching"
    HALTED = "halted"
    CLOSED = "closed"


class ChatSession:
    """
    One open chat view: resolves the conversation, polls for new messages on a
    background thread and sends with optimistic local entries.

    ``on_change`` receives the current entries after every visible change and
    ``on_error`` receives the failed ``Outcome`` of an init or a send. Both run
    on whichever thread produced the change.
    """

    def __init__(self, client, user_id: int, request_id: int, responder_id: int,
                 interval: Optional[float] = None,
                 on_change: Optional[Callable[[List[Entry]], None]] = None,
                 on_error: Optional[Callable[[Outcome], None]] = None):
        self.client = client
        self.user_id = user_id
        self.request_id = request_id
        self.responder_id = responder_id
        self.interval = DEFAULT_POLL_INTERVAL if interval is None else interval
        self.on_change = on_change
        self.on_error = on_error

        self.timeline = Timeline()
        self.state = SessionState.INITIALIZING
        self.conversation_id: Optional[int] = None
        self._lock = threading.RLock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def closed(self) -> bool:
        return self._stop.is_set()

    @property
    def entries(self) -> List[Entry]:
        with self._lock:
            return self.timeline.entries

    def open(self) -> Outcome:
        """Resolves the conversation and loads its history. A failure halts the session."""
        outcome = self.client.init(self.request_id, self.responder_id)
        with self._lock:
            if self.closed:
                return outcome
            if not outcome.ok:
                self.state = SessionState.HALTED
            else:
                conversation = outcome.value
                self.conversation_id = conversation["id"]
                self.timeline.merge(conversation.get("messages") or [])
                self.state = SessionState.IDLE
                inbound = bool(self.timeline.inbound_unread(self.user_id))

        if not outcome.ok:
            logger.error(f"Could not open chat for request {self.request_id}: {outcome.message}")
            self._report(outcome)
            return outcome

        self._changed()
        if inbound:
            self._mark_read()
        return outcome

    def start(self) -> Outcome:
        """Opens the session if needed and starts the poll thread."""
        if self.state is SessionState.INITIALIZING:
            outcome = self.open()
            if not outcome.ok:
                return outcome
        with self._lock:
            if self.state not in (SessionState.IDLE, SessionState.FETCHING):
                return Outcome.failure(ErrorKind.INVALID_INPUT, f"Cannot start a session in state {self.state.value}.")
            if self._thread is None:
                self._thread = threading.Thread(
                    target=self._run, name=f"chat-poll-{self.conversation_id}", daemon=True
                )
                self._thread.start()
        return Outcome.success(self.conversation_id)

    def _run(self):
        while not self._stop.wait(self.interval):
            self.poll_once()

    def poll_once(self) -> bool:
        """
        Fetches messages newer than the cursor and merges them by id.
        Failures are logged and left for the next tick. Returns whether anything new arrived.
        """
        with self._lock:
            if self.state is not SessionState.IDLE:
                return False
            self.state = SessionState.FETCHING
            cursor = self.timeline.cursor

        outcome = self.client.fetch(self.conversation_id, after=cursor)

        with self._lock:
            if self.closed:
                return False
            self.state = SessionState.IDLE
            if not outcome.ok:
                logger.warning(f"Polling conversation {self.conversation_id} failed: {outcome.message}")
                return False
            added = self.timeline.merge(outcome.value or [])
            inbound = any(entry.sender_id != self.user_id for entry in added)

        if added:
            self._changed()
        if inbound:
            self._mark_read()
        return bool(added)

    def send(self, text: str) -> Outcome:
        """
        Shows the message immediately, then stores it. On failure the local
        entry is removed and the error reported; nothing is retried.
        """
        content = (text or "").strip()
        if not content:
            return Outcome.failure(ErrorKind.INVALID_INPUT, "Message cannot be empty.")

        with self._lock:
            if self.closed or self.conversation_id is None or self.state is SessionState.HALTED:
                return Outcome.failure(ErrorKind.INVALID_INPUT, "The chat is not open.")
            pending = self.timeline.add_pending(self.user_id, content)
        self._changed()

        outcome = self.client.send(self.conversation_id, content)

        with self._lock:
            if self.closed:
                return outcome
            if outcome.ok:
                self.timeline.confirm(pending.local_id, outcome.value)
            else:
                self.timeline.discard(pending.local_id)

        self._changed()
        if not outcome.ok:
            logger.error(f"Sending to conversation {self.conversation_id} failed: {outcome.message}")
            self._report(outcome)
        return outcome

    def close(self, timeout: Optional[float] = None) -> None:
        """Stops polling. Responses that arrive afterwards are dropped."""
        self._stop.set()
        with self._lock:
            self.state = SessionState.CLOSED
            thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _mark_read(self):
        outcome = self.client.mark_read(self.conversation_id)
        if not outcome.ok:
            logger.warning(f"Marking conversation {self.conversation_id} read failed: {outcome.message}")

    def _changed(self):
        if self.on_change is None or self.closed:
            return
        self.on_change(self.entries)

    def _report(self, outcome: Outcome):
        if self.on_error is not None and not self.closed:
            self.on_error(outcome)
