"""
In-memory storage backends.

Used by tests and by trackers created without a storage directory.
Each instance is independent; nothing is shared between them.
"""

from typing import Optional

from expense_ledger.models.audit import AuditEvent
from expense_ledger.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStore,
)


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed key-value store, keys kept in insertion order."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None):
        self._data: dict[str, bytes] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError(f"Values must be bytes, got {type(value).__name__}")
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def key(self, index: int) -> Optional[str]:
        """Key at a position in insertion order, None if out of range."""
        keys = self.keys()
        return keys[index] if 0 <= index < len(keys) else None

    def clear(self) -> None:
        self._data.clear()


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_expense(self, expense_id: str) -> list[AuditEvent]:
        return [event for event in self._events if event.expense_id == expense_id]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)
