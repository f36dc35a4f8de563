"""
Data Models Package

This package contains all Pydantic models used by the expense ledger.
All data flowing through the system must conform to these schemas.
"""

from expense_ledger.models.expense import (
    DATE_FORMAT,
    DEFAULT_MAX_DESCRIPTION_LENGTH,
    Category,
    ExpenseDraft,
    ExpenseRecord,
    ExpenseSummary,
    LedgerErrorCode,
    LedgerResult,
    SkippedRecord,
    ValidationCode,
    ValidationIssue,
    ValidationResult,
)
from expense_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "DATE_FORMAT",
    "DEFAULT_MAX_DESCRIPTION_LENGTH",
    "Category",
    "ExpenseDraft",
    "ExpenseRecord",
    "ExpenseSummary",
    "LedgerErrorCode",
    "LedgerResult",
    "SkippedRecord",
    "ValidationCode",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
