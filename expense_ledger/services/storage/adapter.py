"""
Snapshot adapter over a key-value store.

The whole ledger is stored as one JSON array under a single key.
Amounts are written as decimal strings ("25.50"), never floats, so a
saved record loads back exactly equal once the ledger re-validates it.

Loading only checks that the payload is a JSON array. Entries are handed
back as decoded; Ledger.hydrate re-validates each one and skips the bad
ones individually.
"""

from collections.abc import Sequence
from typing import Any

from pydantic import TypeAdapter, ValidationError

from expense_ledger.models.expense import ExpenseRecord
from expense_ledger.services.storage.interface import (
    CorruptSnapshotError,
    KeyValueStore,
    PersistenceAdapter,
)


_RECORDS = TypeAdapter(list[ExpenseRecord])
_ENTRIES = TypeAdapter(list[Any])


def records_to_bytes(records: Sequence[ExpenseRecord]) -> bytes:
    return _RECORDS.dump_json(list(records))


def entries_from_bytes(data: bytes) -> list[Any]:
    """
    Decode a stored snapshot into its raw entries.

    Raises:
        CorruptSnapshotError: If the bytes are not a JSON array
    """
    try:
        return _ENTRIES.validate_json(data)
    except ValidationError as e:
        raise CorruptSnapshotError(
            f"Stored snapshot is not a JSON array ({e.error_count()} errors)"
        ) from e


class KeyValuePersistenceAdapter(PersistenceAdapter):
    """
    Persists a ledger snapshot under one key of a KeyValueStore.

    A key that was never written loads as an empty ledger.
    """

    def __init__(self, store: KeyValueStore, key: str = "expenses"):
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[Any]:
        data = self._store.get(self._key)
        if data is None:
            return []
        return entries_from_bytes(data)

    def save(self, records: Sequence[ExpenseRecord]) -> None:
        self._store.set(self._key, records_to_bytes(records))
