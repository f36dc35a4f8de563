"""Tests for the audit logger."""

from decimal import Decimal

from expense_ledger.audit import AuditLogger
from expense_ledger.models.audit import AuditEventBuilder, AuditEventType, AuditSeverity
from expense_ledger.models.expense import Category, ExpenseRecord, SkippedRecord
from expense_ledger.services.storage import InMemoryAuditStorage


class BrokenAuditStorage(InMemoryAuditStorage):
    def append_event(self, event):
        raise RuntimeError("sink offline")


def make_record(**overrides) -> ExpenseRecord:
    fields = {
        "id": "id-1",
        "amount": Decimal("50.00"),
        "description": "Lunch",
        "category": Category.FOOD,
        "date": "2024-03-01",
    }
    fields.update(overrides)
    return ExpenseRecord(**fields)


class TestAuditLogger:

    def test_log_without_storage(self):
        assert AuditLogger().log(AuditEventBuilder.expense_removed("id-1")) is True

    def test_log_appends_to_storage(self, audit_logger, audit_storage):
        audit_logger.log_expense_added(make_record())

        event = audit_storage.events[0]
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.details == {"category": "Food", "amount": "50.00"}

    def test_storage_failure_is_not_raised(self):
        logger = AuditLogger(BrokenAuditStorage())
        assert logger.log(AuditEventBuilder.save_failed("boom")) is False

    def test_changed_fields(self, audit_logger, audit_storage):
        before = make_record()
        after = make_record(category=Category.OTHER, date="2024-03-02")

        audit_logger.log_expense_updated(before, after)

        assert audit_storage.events[0].details["changed_fields"] == ["category", "date"]

    def test_load_logs_each_skipped_record(self, audit_logger, audit_storage):
        audit_logger.log_ledger_loaded(
            record_count=2,
            skipped=[
                SkippedRecord(expense_id="x", reason="duplicate id"),
                SkippedRecord(reason="missing id"),
            ],
        )

        assert [e.event_type for e in audit_storage.events] == [
            AuditEventType.RECORD_SKIPPED,
            AuditEventType.RECORD_SKIPPED,
            AuditEventType.LEDGER_LOADED,
        ]
        assert audit_storage.events[-1].severity == AuditSeverity.WARNING

    def test_log_error(self, audit_logger, audit_storage):
        audit_logger.log_error("KeyError", "missing key", {"key": "expenses"})
        event = audit_storage.events[0]
        assert event.severity == AuditSeverity.ERROR
        assert event.details == {"key": "expenses"}


class TestInMemoryAuditStorage:

    def test_recent_events_newest_first(self, audit_storage):
        for expense_id in ["a", "b", "c"]:
            audit_storage.append_event(AuditEventBuilder.expense_removed(expense_id))

        recent = audit_storage.get_recent_events(limit=2)

        assert [e.expense_id for e in recent] == ["c", "b"]
        assert [e.expense_id for e in audit_storage.get_events_by_expense("a")] == ["a"]
