"""
Local view of a conversation's messages.

Entries are either ``ConfirmedEntry`` (a row the server stored, keyed by its
id) or ``PendingEntry`` (an optimistic message still waiting for the server,
keyed by a local id). Server messages are merged by id, so the same message
returned by two overlapping fetches is shown once.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union


def parse_time(value: str) -> datetime:
    raw = value[:-1] + "+00:00" if value.endswith("Z") else value
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None) - parsed.utcoffset()
    return parsed


@dataclass(frozen=True)
class ConfirmedEntry:
    id: int
    sender_id: int
    content: str
    created_at: str
    read: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ConfirmedEntry":
        return cls(
            id=payload["id"],
            sender_id=payload["sender_id"],
            content=payload["content"],
            created_at=payload["created_at"],
            read=bool(payload.get("read", False)),
        )

    @property
    def sort_key(self):
        return (parse_time(self.created_at), self.id)


@dataclass(frozen=True)
class PendingEntry:
    local_id: str
    sender_id: int
    content: str
    created_at: str


Entry = Union[ConfirmedEntry, PendingEntry]


class Timeline:
    def __init__(self):
        self._confirmed: Dict[int, ConfirmedEntry] = {}
        self._pending: Dict[str, PendingEntry] = {}
        self._cursor: Optional[str] = None

    @property
    def cursor(self) -> Optional[str]:
        """Creation time of the newest message received from a fetch, sent back as ``after``."""
        return self._cursor

    @property
    def entries(self) -> List[Entry]:
        confirmed = sorted(self._confirmed.values(), key=lambda entry: entry.sort_key)
        return confirmed + list(self._pending.values())

    @property
    def pending(self) -> List[PendingEntry]:
        return list(self._pending.values())

    def merge(self, payloads: Iterable[Mapping[str, Any]]) -> List[ConfirmedEntry]:
        """
        Adds fetched messages not seen before and advances the cursor.
        Returns only the newly added entries.
        """
        added = []
        for payload in payloads:
            entry = ConfirmedEntry.from_payload(payload)
            self._advance_cursor(entry)
            if entry.id in self._confirmed:
                # read flags may have changed since the first copy
                self._confirmed[entry.id] = entry
                continue
            self._confirmed[entry.id] = entry
            added.append(entry)
        return added

    def add_pending(self, sender_id: int, content: str) -> PendingEntry:
        entry = PendingEntry(
            local_id=f"local-{uuid.uuid4().hex}",
            sender_id=sender_id,
            content=content,
            created_at=datetime.now(timezone.utc).replace(tzinfo=None).isoformat(timespec="microseconds"),
        )
        self._pending[entry.local_id] = entry
        return entry

    def confirm(self, local_id: str, payload: Mapping[str, Any]) -> ConfirmedEntry:
        """
        Replaces a pending entry with the message the server stored.

        The cursor is left alone: a fetch may not have seen messages the other
        participant sent just before this one, and they must still be fetched.
        """
        self._pending.pop(local_id, None)
        entry = ConfirmedEntry.from_payload(payload)
        self._confirmed.setdefault(entry.id, entry)
        return self._confirmed[entry.id]

    def discard(self, local_id: str) -> Optional[PendingEntry]:
        return self._pending.pop(local_id, None)

    def inbound_unread(self, user_id: int) -> List[ConfirmedEntry]:
        return [entry for entry in self._confirmed.values() if entry.sender_id != user_id and not entry.read]

    def _advance_cursor(self, entry: ConfirmedEntry):
        if self._cursor is None or parse_time(entry.created_at) > parse_time(self._cursor):
            self._cursor = entry.created_at
