"""Services package."""

from expense_ledger.services.storage import (
    AuditStorageInterface,
    CorruptSnapshotError,
    FileKeyValueStore,
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
    KeyValuePersistenceAdapter,
    KeyValueStore,
    PersistenceAdapter,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "CorruptSnapshotError",
    "FileKeyValueStore",
    "InMemoryAuditStorage",
    "InMemoryKeyValueStore",
    "KeyValuePersistenceAdapter",
    "KeyValueStore",
    "PersistenceAdapter",
    "StorageError",
]
