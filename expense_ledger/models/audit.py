"""
Audit Models for the Expense Ledger

Every change to the ledger (and every refused change) is logged for audit
purposes. This provides:
1. Traceability of all mutations
2. Debugging information when a snapshot is rejected or a save fails
3. Ability to reconstruct what happened to an expense

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_event_id() -> str:
    return str(uuid4())


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Mutations
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_REMOVED = "expense_removed"

    # Refused mutations
    VALIDATION_FAILED = "validation_failed"
    EXPENSE_NOT_FOUND = "expense_not_found"

    # Persistence
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_SAVED = "ledger_saved"
    RECORD_SKIPPED = "record_skipped"
    SAVE_FAILED = "save_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: str = Field(
        default_factory=_new_event_id,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Which expense is this about?
    expense_id: Optional[str] = Field(
        default=None,
        description="ID of the expense this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "expense_id": self.expense_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }

    def to_json(self) -> str:
        """Single-line JSON form, as written to an audit sink."""
        return json.dumps(self.to_log_dict(), default=str)


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(record)
        event = AuditEventBuilder.not_found("update", expense_id)
    """

    @staticmethod
    def expense_added(expense_id: str, category: str, amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            expense_id=expense_id,
            description=f"Expense added: {category} {amount}",
            details={
                "category": category,
                "amount": amount,
            },
        )

    @staticmethod
    def expense_updated(expense_id: str, changed_fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            expense_id=expense_id,
            description=f"Expense updated ({len(changed_fields)} field(s) changed)",
            details={
                "changed_fields": changed_fields,
            },
        )

    @staticmethod
    def expense_removed(expense_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REMOVED,
            expense_id=expense_id,
            description="Expense removed",
        )

    @staticmethod
    def validation_failed(
        operation: str,
        issues: list[dict],
        expense_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            expense_id=expense_id,
            description=f"{operation.capitalize()} rejected with {len(issues)} issues",
            details={
                "operation": operation,
                "issues": issues,
            },
        )

    @staticmethod
    def not_found(operation: str, expense_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            expense_id=expense_id,
            description=f"{operation.capitalize()} target not found",
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def ledger_loaded(record_count: int, skipped_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            severity=AuditSeverity.WARNING if skipped_count else AuditSeverity.INFO,
            description=f"Ledger loaded with {record_count} expenses",
            details={
                "record_count": record_count,
                "skipped_count": skipped_count,
            },
        )

    @staticmethod
    def record_skipped(expense_id: Optional[str], reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_SKIPPED,
            severity=AuditSeverity.WARNING,
            expense_id=expense_id,
            description="Persisted expense skipped during load",
            details={
                "reason": reason,
            },
        )

    @staticmethod
    def ledger_saved(record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_SAVED,
            description=f"Ledger saved with {record_count} expenses",
            details={
                "record_count": record_count,
            },
        )

    @staticmethod
    def save_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description="Ledger save failed",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
