"""
Expense Tracker Orchestrator

This module ties together the ledger, a persistence adapter and the audit
logger, and defines the end-to-end flows:
1. Open (load snapshot → re-validate → hydrate ledger)
2. Mutate (validate → commit → audit → autosave)
3. Read (ledger views and aggregations)

DESIGN DECISION: The orchestrator enforces the boundaries:
- The ledger itself never performs I/O; saving happens here
- Nothing enters the ledger without validation, including loaded snapshots
- Every mutation, refused or not, is audited

A failed save is audited and re-raised. When the save follows a mutation,
the in-memory ledger keeps the change and the error is an UnsavedChangeError
carrying the committed LedgerResult; the caller can retry save() once
storage is back.
"""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional, Union

from expense_ledger import aggregation
from expense_ledger.audit import AuditLogger, configure_logging
from expense_ledger.config import LedgerSettings, get_settings
from expense_ledger.ledger import IdGenerator, Ledger
from expense_ledger.models.expense import (
    Category,
    ExpenseRecord,
    ExpenseSummary,
    LedgerErrorCode,
    LedgerResult,
)
from expense_ledger.services.storage import (
    FileKeyValueStore,
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
    KeyValuePersistenceAdapter,
    PersistenceAdapter,
    StorageError,
)
from expense_ledger.validation import ExpenseValidator


class UnsavedChangeError(StorageError):
    """
    A mutation was committed to the ledger but autosave failed.

    Attributes:
        result: The successful LedgerResult (record and id included)
    """

    def __init__(self, message: str, result: LedgerResult):
        super().__init__(message)
        self.result = result


class ExpenseTracker:
    """
    Orchestrates a ledger and its persistence.

    Flow for every mutation:
    1. Delegate to the Ledger (which validates)
    2. Audit the outcome (added/updated/removed, or why it was refused)
    3. Save the snapshot if autosave is on and the mutation succeeded
    """

    def __init__(
        self,
        ledger: Optional[Ledger] = None,
        persistence: Optional[PersistenceAdapter] = None,
        audit_logger: Optional[AuditLogger] = None,
        autosave: bool = True,
    ):
        self._ledger = ledger if ledger is not None else Ledger()
        self._persistence = persistence
        self._audit_logger = audit_logger if audit_logger is not None else AuditLogger()
        self._autosave = autosave

    @classmethod
    def open(
        cls,
        persistence: PersistenceAdapter,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[ExpenseValidator] = None,
        id_generator: Optional[IdGenerator] = None,
        autosave: bool = True,
    ) -> "ExpenseTracker":
        """
        Load the stored snapshot into a fresh ledger.

        Records that no longer validate (or repeat an id) are skipped and
        audited, never admitted.

        Raises:
            CorruptSnapshotError: If the stored snapshot cannot be decoded
        """
        if audit_logger is None:
            audit_logger = AuditLogger()
        ledger = Ledger(validator=validator, id_generator=id_generator)
        skipped = ledger.hydrate(persistence.load())
        audit_logger.log_ledger_loaded(len(ledger), skipped)
        return cls(
            ledger=ledger,
            persistence=persistence,
            audit_logger=audit_logger,
            autosave=autosave,
        )

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    # ========================================================================
    # MUTATIONS
    # ========================================================================

    def add(self, candidate: Any) -> LedgerResult:
        """
        Validate and commit a candidate, then autosave.

        Raises:
            UnsavedChangeError: If the record was committed but autosave failed
        """
        result = self._ledger.add(candidate)
        if result.success:
            self._audit_logger.log_expense_added(result.record)
            self._after_mutation(result)
        else:
            self._audit_logger.log_validation_failed("add", result.issues)
        return result

    def update(self, expense_id: str, patch: Any) -> LedgerResult:
        before = self._ledger.get(expense_id)
        result = self._ledger.update(expense_id, patch)
        if result.success:
            self._audit_logger.log_expense_updated(before, result.record)
            self._after_mutation(result)
        else:
            self._audit_refusal("update", expense_id, result)
        return result

    def remove(self, expense_id: str) -> LedgerResult:
        result = self._ledger.remove(expense_id)
        if result.success:
            self._audit_logger.log_expense_removed(expense_id)
            self._after_mutation(result)
        else:
            self._audit_refusal("remove", expense_id, result)
        return result

    def save(self) -> None:
        """
        Persist the current ledger.

        Raises:
            StorageError: If no persistence is configured or the write fails
        """
        if self._persistence is None:
            raise StorageError("No persistence adapter configured")

        records = self._ledger.all()
        try:
            self._persistence.save(records)
        except StorageError as e:
            self._audit_logger.log_save_failed(str(e))
            raise
        self._audit_logger.log_ledger_saved(len(records))

    def _after_mutation(self, result: LedgerResult) -> None:
        if not self._autosave or self._persistence is None:
            return
        try:
            self.save()
        except StorageError as e:
            raise UnsavedChangeError(
                f"Change to {result.record.id} is committed but not saved: {e}",
                result,
            ) from e

    def _audit_refusal(self, operation: str, expense_id: str, result: LedgerResult) -> None:
        if result.error_code == LedgerErrorCode.NOT_FOUND:
            self._audit_logger.log_not_found(operation, expense_id)
        else:
            self._audit_logger.log_validation_failed(operation, result.issues, expense_id)

    # ========================================================================
    # READS
    # ========================================================================

    def get(self, expense_id: str) -> Optional[ExpenseRecord]:
        return self._ledger.get(expense_id)

    def all(self) -> list[ExpenseRecord]:
        return self._ledger.all()

    def query(self, predicate: Callable[[ExpenseRecord], bool]) -> list[ExpenseRecord]:
        return self._ledger.query(predicate)

    def total(self, records: Optional[Sequence[ExpenseRecord]] = None) -> Decimal:
        return aggregation.total(self._snapshot(records))

    def by_category(
        self,
        records: Optional[Sequence[ExpenseRecord]] = None,
        zero_fill: bool = False,
    ) -> dict[Category, Decimal]:
        return aggregation.by_category(self._snapshot(records), zero_fill=zero_fill)

    def in_date_range(
        self,
        start: Union[str, date],
        end: Union[str, date],
    ) -> list[ExpenseRecord]:
        return aggregation.in_date_range(self._ledger.all(), start, end)

    def summary(self, records: Optional[Sequence[ExpenseRecord]] = None) -> ExpenseSummary:
        return aggregation.summarize(self._snapshot(records))

    def _snapshot(self, records: Optional[Sequence[ExpenseRecord]]) -> Sequence[ExpenseRecord]:
        return self._ledger.all() if records is None else records


def create_tracker(settings: Optional[LedgerSettings] = None) -> ExpenseTracker:
    """
    Build a tracker from settings.

    Uses a FileKeyValueStore under settings.storage_dir when it is set,
    otherwise an in-memory store (nothing survives the process).
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if settings.storage_dir is not None:
        store = FileKeyValueStore(settings.storage_dir)
    else:
        store = InMemoryKeyValueStore()

    return ExpenseTracker.open(
        persistence=KeyValuePersistenceAdapter(store, key=settings.storage_key),
        audit_logger=AuditLogger(InMemoryAuditStorage()),
        validator=ExpenseValidator(settings.max_description_length),
        autosave=settings.autosave,
    )
