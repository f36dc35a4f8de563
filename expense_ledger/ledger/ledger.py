"""
In-memory Expense Ledger

The Ledger is the only place where committed expenses live and the only
code that mutates them.

GUARANTEES:
- Every stored record passed the validator (add, update and hydrate all
  validate; there is no other way in)
- Ids are assigned here, once, and never change
- Iteration follows insertion order; lookup by id is O(1)
- A failed add/update/remove leaves the ledger exactly as it was

The Ledger does no I/O. Loading and saving snapshots is the job of a
persistence adapter (see expense_ledger.services.storage).

Thread safety: every public method holds one re-entrant lock, so mutations
are serialized and never interleave with reads.
"""

import threading
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Callable, Optional

import structlog
from pydantic import BaseModel

from expense_ledger.ledger.ids import IdGenerator
from expense_ledger.models.expense import (
    ExpenseRecord,
    LedgerResult,
    SkippedRecord,
)
from expense_ledger.validation import ExpenseValidator


EDITABLE_FIELDS = ("amount", "description", "category", "date")

logger = structlog.get_logger(__name__)


def _fields_of(value: Any) -> Mapping:
    if isinstance(value, Mapping):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump()
    raise TypeError(f"Expected a mapping of expense fields, got {type(value).__name__}")


class Ledger:
    """
    Ordered, id-indexed collection of committed expenses.

    Example:
        ledger = Ledger()
        result = ledger.add({
            "amount": "50.00",
            "description": "Lunch",
            "category": "Food",
            "date": "2024-03-01",
        })
        if result.success:
            ledger.get(result.record.id)
    """

    def __init__(
        self,
        validator: Optional[ExpenseValidator] = None,
        id_generator: Optional[IdGenerator] = None,
    ):
        self._validator = validator if validator is not None else ExpenseValidator()
        self._ids = id_generator if id_generator is not None else IdGenerator()
        # dict keeps insertion order and gives O(1) lookup
        self._records: dict[str, ExpenseRecord] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_records(
        cls,
        records: Iterable[Any],
        validator: Optional[ExpenseValidator] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> "Ledger":
        """Build a ledger from a persisted snapshot, dropping bad records."""
        ledger = cls(validator=validator, id_generator=id_generator)
        ledger.hydrate(records)
        return ledger

    @property
    def validator(self) -> ExpenseValidator:
        return self._validator

    # ========================================================================
    # MUTATIONS
    # ========================================================================

    def add(self, candidate: Any) -> LedgerResult:
        """
        Validate a candidate and, if it passes, commit it under a fresh id.

        Returns:
            LedgerResult with the committed record, or with error_code
            Invalid and every validation issue (ledger unchanged).
        """
        validation = self._validator.validate(candidate)
        if not validation.is_valid:
            logger.debug("expense_rejected", operation="add", codes=[c.value for c in validation.codes])
            return LedgerResult.invalid(validation.issues)

        with self._lock:
            expense_id = self._fresh_id()
            record = validation.expense.to_record(expense_id)
            self._records[expense_id] = record

        logger.debug("expense_added", expense_id=expense_id)
        return LedgerResult.ok(record)

    def update(self, expense_id: str, patch: Any) -> LedgerResult:
        """
        Merge a patch into an existing expense and re-validate the whole record.

        The patch may name any subset of amount, description, category and
        date, or be a whole record. An id in the patch is ignored: ids never
        change. Other keys are ignored too.

        Returns:
            LedgerResult with the updated record; NotFound if the id is
            unknown; Invalid with issues if the merged record fails
            validation (stored record untouched).

        Raises:
            TypeError: If the id exists and the patch is not a mapping
        """
        with self._lock:
            existing = self._records.get(expense_id)
            if existing is None:
                logger.debug("expense_not_found", operation="update", expense_id=expense_id)
                return LedgerResult.not_found(expense_id)

            changes = _fields_of(patch)
            merged = existing.to_candidate()
            merged.update({key: changes[key] for key in EDITABLE_FIELDS if key in changes})

            validation = self._validator.validate(merged)
            if not validation.is_valid:
                logger.debug(
                    "expense_rejected",
                    operation="update",
                    expense_id=expense_id,
                    codes=[c.value for c in validation.codes],
                )
                return LedgerResult.invalid(validation.issues)

            updated = validation.expense.to_record(expense_id)
            # Reassigning an existing key keeps its position in the order.
            self._records[expense_id] = updated

        logger.debug("expense_updated", expense_id=expense_id)
        return LedgerResult.ok(updated)

    def remove(self, expense_id: str) -> LedgerResult:
        """Remove an expense and return it, or NotFound."""
        with self._lock:
            removed = self._records.pop(expense_id, None)

        if removed is None:
            logger.debug("expense_not_found", operation="remove", expense_id=expense_id)
            return LedgerResult.not_found(expense_id)

        logger.debug("expense_removed", expense_id=expense_id)
        return LedgerResult.ok(removed)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def hydrate(self, records: Iterable[Any]) -> list[SkippedRecord]:
        """
        Load persisted records, keeping their ids.

        Each record is re-validated. Records without an id, with an id that
        is already present, or failing validation are skipped and returned
        so the caller can report them.
        """
        skipped: list[SkippedRecord] = []

        with self._lock:
            for raw in records:
                try:
                    fields = _fields_of(raw)
                except TypeError as e:
                    skipped.append(SkippedRecord(reason=str(e)))
                    continue

                expense_id = fields.get("id")
                if not isinstance(expense_id, str) or not expense_id:
                    skipped.append(SkippedRecord(reason="missing id"))
                    continue
                if expense_id in self._records:
                    skipped.append(SkippedRecord(expense_id=expense_id, reason="duplicate id"))
                    continue

                validation = self._validator.validate(fields)
                if not validation.is_valid:
                    skipped.append(SkippedRecord(
                        expense_id=expense_id,
                        reason="failed validation",
                        issues=validation.issues,
                    ))
                    continue

                self._records[expense_id] = validation.expense.to_record(expense_id)
                self._ids.observe(expense_id)

        for item in skipped:
            logger.warning("record_skipped", expense_id=item.expense_id, reason=item.reason)
        return skipped

    def _fresh_id(self) -> str:
        expense_id = self._ids.next_id()
        # Hydrated ids in a foreign format could still collide.
        while expense_id in self._records:
            expense_id = self._ids.next_id()
        return expense_id

    # ========================================================================
    # READ VIEWS
    # ========================================================================

    def get(self, expense_id: str) -> Optional[ExpenseRecord]:
        with self._lock:
            return self._records.get(expense_id)

    def all(self) -> list[ExpenseRecord]:
        """All expenses in insertion order (a copy; records are immutable)."""
        with self._lock:
            return list(self._records.values())

    def query(self, predicate: Callable[[ExpenseRecord], bool]) -> list[ExpenseRecord]:
        """Expenses matching a predicate, in insertion order."""
        return [record for record in self.all() if predicate(record)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[ExpenseRecord]:
        return iter(self.all())

    def __contains__(self, expense_id: object) -> bool:
        with self._lock:
            return expense_id in self._records
