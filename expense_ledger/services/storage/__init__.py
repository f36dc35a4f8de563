"""
Storage Services Package

Provides abstract interfaces and concrete implementations for persisting
ledger snapshots and audit events. Backends are swappable.
"""

from expense_ledger.services.storage.interface import (
    AuditStorageInterface,
    CorruptSnapshotError,
    KeyValueStore,
    PersistenceAdapter,
    StorageError,
)
from expense_ledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
)
from expense_ledger.services.storage.file_store import FileKeyValueStore
from expense_ledger.services.storage.adapter import (
    KeyValuePersistenceAdapter,
    entries_from_bytes,
    records_to_bytes,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStore",
    "PersistenceAdapter",
    # Exceptions
    "CorruptSnapshotError",
    "StorageError",
    # Implementations
    "FileKeyValueStore",
    "InMemoryAuditStorage",
    "InMemoryKeyValueStore",
    "KeyValuePersistenceAdapter",
    "entries_from_bytes",
    "records_to_bytes",
]
