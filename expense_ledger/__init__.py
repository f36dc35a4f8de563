"""
Expense Ledger - Source Package

Validation, storage-agnostic bookkeeping and aggregation for personal
expense records.

DESIGN PRINCIPLES:
1. Nothing enters the ledger without validation
2. All validation problems are reported at once, never just the first
3. Money is Decimal, never float
4. Failures are typed results, not crashes
5. Storage layer is swappable and injected, never global
"""

from expense_ledger.models.expense import (
    Category,
    ExpenseRecord,
    LedgerErrorCode,
    LedgerResult,
    ValidationCode,
    ValidationIssue,
    ValidationResult,
)
from expense_ledger.validation import ExpenseValidator, validate
from expense_ledger.ledger import IdGenerator, Ledger
from expense_ledger.orchestrator import ExpenseTracker, UnsavedChangeError, create_tracker

__version__ = "1.0.0"

__all__ = [
    "Category",
    "ExpenseRecord",
    "ExpenseTracker",
    "ExpenseValidator",
    "IdGenerator",
    "Ledger",
    "LedgerErrorCode",
    "LedgerResult",
    "UnsavedChangeError",
    "ValidationCode",
    "ValidationIssue",
    "ValidationResult",
    "create_tracker",
    "validate",
]
