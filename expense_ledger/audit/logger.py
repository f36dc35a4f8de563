"""
Audit Logger

DESIGN DECISION: Every change to the ledger, and every refused change, is
logged. This provides:
1. Traceability of each expense from creation to removal
2. Debugging capability when snapshots are rejected or saves fail
3. A history the user can be shown

The audit logger:
- Always logs locally through structlog
- Optionally appends to an AuditStorageInterface
- Gracefully handles sink failures (logging must never break the ledger)
"""

import logging
from typing import Optional

import structlog

from expense_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from expense_ledger.models.expense import ExpenseRecord, SkippedRecord, ValidationIssue
from expense_ledger.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through stdlib logging at the given level."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("expense_ledger").setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit sink, if one is configured (for history)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Sink for audit events. If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("expense_ledger.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=event.event_id,
                )
                return False

        return True

    def log_expense_added(self, record: ExpenseRecord) -> None:
        self.log(AuditEventBuilder.expense_added(
            expense_id=record.id,
            category=record.category.value,
            amount=str(record.amount),
        ))

    def log_expense_updated(self, before: ExpenseRecord, after: ExpenseRecord) -> None:
        """Log an update, recording which fields actually changed."""
        changed = [
            name for name, value in after.to_candidate().items()
            if before.to_candidate()[name] != value
        ]
        self.log(AuditEventBuilder.expense_updated(
            expense_id=after.id,
            changed_fields=changed,
        ))

    def log_expense_removed(self, expense_id: str) -> None:
        self.log(AuditEventBuilder.expense_removed(expense_id))

    def log_validation_failed(
        self,
        operation: str,
        issues: list[ValidationIssue],
        expense_id: Optional[str] = None,
    ) -> None:
        self.log(AuditEventBuilder.validation_failed(
            operation=operation,
            issues=[issue.model_dump(mode="json") for issue in issues],
            expense_id=expense_id,
        ))

    def log_not_found(self, operation: str, expense_id: str) -> None:
        self.log(AuditEventBuilder.not_found(operation, expense_id))

    def log_ledger_loaded(self, record_count: int, skipped: list[SkippedRecord]) -> None:
        """Log a load, with one extra event per skipped record."""
        for item in skipped:
            self.log(AuditEventBuilder.record_skipped(item.expense_id, item.reason))
        self.log(AuditEventBuilder.ledger_loaded(record_count, len(skipped)))

    def log_ledger_saved(self, record_count: int) -> None:
        self.log(AuditEventBuilder.ledger_saved(record_count))

    def log_save_failed(self, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(error_message))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
