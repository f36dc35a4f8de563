"""
Shared fixtures.

Test strategy:
1. Unit tests for each component (models, validator, ids, ledger, aggregation)
2. Property-based tests (Hypothesis) for the validator's accept/reject boundary
3. Integration tests for the tracker with in-memory and file-backed storage
4. No global state: every test gets its own store
"""

import pytest

from expense_ledger.audit import AuditLogger
from expense_ledger.config import get_settings
from expense_ledger.ledger import IdGenerator, Ledger
from expense_ledger.services.storage import (
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
    KeyValuePersistenceAdapter,
)
from expense_ledger.validation import ExpenseValidator


class FrozenClock:
    """A clock that only moves when told to."""

    def __init__(self, start: float = 1709251200.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def store():
    """Fresh in-memory store, cleared after the test."""
    kv = InMemoryKeyValueStore()
    yield kv
    kv.clear()


@pytest.fixture
def persistence(store):
    return KeyValuePersistenceAdapter(store, key="expenses")


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def ledger(clock):
    return Ledger(validator=ExpenseValidator(200), id_generator=IdGenerator(clock=clock))


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def fresh_settings():
    """Clear the settings cache around a test that changes the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
