"""
Abstract Storage Interfaces

DESIGN DECISION: The ledger never touches storage. Everything that does is
defined here as an abstract interface, so that:
1. The storage backend can be swapped (memory, files, anything key-value)
2. Tests use in-memory storage with no global state
3. Business logic stays decoupled from serialization

The interfaces are intentionally small: a byte-string key-value store, a
snapshot adapter on top of it, and an append-only audit sink.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Optional

from expense_ledger.models.audit import AuditEvent
from expense_ledger.models.expense import ExpenseRecord


class KeyValueStore(ABC):
    """
    A store of byte-string values under string keys.

    Any backend (in-memory, files, browser-style local storage) must
    implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """
        Read the value stored under a key.

        Returns:
            The stored bytes, or None if the key is absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """
        Store a value, replacing any previous one.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """All keys currently stored."""
        pass

    def clear(self) -> None:
        for key in self.keys():
            self.delete(key)

    def __len__(self) -> int:
        return len(self.keys())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None


class PersistenceAdapter(ABC):
    """
    Loads and saves a whole ledger snapshot.

    Records saved load back, in the same order, as entries that re-validate
    to exactly equal records. Entries are not checked on load: the ledger
    re-validates each one when it hydrates.
    """

    @abstractmethod
    def load(self) -> list[Any]:
        """
        Load the stored snapshot.

        Returns:
            Entries (records or field mappings) in their saved order;
            empty if nothing was saved yet

        Raises:
            CorruptSnapshotError: If stored data cannot be decoded
        """
        pass

    @abstractmethod
    def save(self, records: Sequence[ExpenseRecord]) -> None:
        """
        Replace the stored snapshot.

        Raises:
            StorageError: If the write fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_expense(self, expense_id: str) -> list[AuditEvent]:
        """
        Get all events for one expense.

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptSnapshotError(StorageError):
    """Stored data could not be decoded into a snapshot."""
    pass
