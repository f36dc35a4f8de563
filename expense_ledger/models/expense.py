"""
Core Data Models for the Expense Ledger

These models define the strict schemas for every expense flowing through
the system. They are designed to:
1. Keep the closed category set in one place
2. Carry money as Decimal, never float
3. Be serializable for persistence and logging
4. Give callers typed results instead of exceptions

DESIGN DECISION: Candidates are plain mappings (whatever a form or a
snapshot hands us). Only the validator turns them into ExpenseDraft, and only
the Ledger turns a draft into an ExpenseRecord by assigning an id.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Canonical textual date form. Lexical order of such strings is chronological.
DATE_FORMAT = "%Y-%m-%d"
# ASCII digits only; \d would also accept other scripts' digits.
DATE_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"

DEFAULT_MAX_DESCRIPTION_LENGTH = 200


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Category(str, Enum):
    """
    Supported expense categories.

    DESIGN DECISION: The set is closed and static. Unknown input is
    rejected by the validator, never coerced into OTHER.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    HEALTHCARE = "Healthcare"
    OTHER = "Other"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class ValidationCode(str, Enum):
    """Reason codes attached to each validation issue."""
    NON_POSITIVE_AMOUNT = "NonPositiveAmount"
    EMPTY_DESCRIPTION = "EmptyDescription"
    TOO_LONG_DESCRIPTION = "TooLongDescription"
    UNKNOWN_CATEGORY = "UnknownCategory"
    INVALID_DATE = "InvalidDate"


class LedgerErrorCode(str, Enum):
    """Why a ledger mutation was refused."""
    NOT_FOUND = "NotFound"
    INVALID = "Invalid"


# =============================================================================
# CORE EXPENSE MODELS
# =============================================================================

class ExpenseDraft(BaseModel):
    """
    A candidate that passed validation, in normalized form.

    Description is trimmed, date is canonical, amount is a Decimal.
    It has no id yet.
    """
    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Strictly positive amount"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="Trimmed description"
    )
    category: Category
    date: str = Field(
        ...,
        pattern=DATE_PATTERN,
        description="Calendar date as YYYY-MM-DD"
    )

    def to_record(self, expense_id: str) -> "ExpenseRecord":
        """Commit this draft under the given id."""
        return ExpenseRecord(id=expense_id, **self.model_dump())


class ExpenseRecord(BaseModel):
    """
    A committed expense.

    CRITICAL: Only the Ledger creates these from validated drafts.
    The id is assigned once and never changes; the model is frozen so
    readers can never observe a half-applied update.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Ledger-assigned identifier"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Strictly positive amount"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="Trimmed description"
    )
    category: Category
    date: str = Field(
        ...,
        pattern=DATE_PATTERN,
        description="Calendar date as YYYY-MM-DD"
    )

    def to_candidate(self) -> dict:
        """Editable fields as a plain mapping (used when merging patches)."""
        return {
            "amount": self.amount,
            "description": self.description,
            "category": self.category,
            "date": self.date,
        }


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single failed rule, tagged with the field it concerns."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    code: ValidationCode = Field(
        ...,
        description="Machine-readable reason"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """
    Outcome of validating one candidate.

    Either is_valid with a normalized expense, or not valid with every
    issue found (never just the first one).
    """

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    expense: Optional[ExpenseDraft] = None

    @property
    def codes(self) -> list[ValidationCode]:
        return [issue.code for issue in self.issues]

    def issues_for(self, field: str) -> list[ValidationIssue]:
        """Issues concerning one field."""
        return [issue for issue in self.issues if issue.field == field]


# =============================================================================
# LEDGER RESULT MODELS
# =============================================================================

class LedgerResult(BaseModel):
    """
    Typed result of a ledger mutation (add, update, remove).

    Failures are values, not exceptions: the caller inspects success and
    either uses the record or shows the issues.
    """

    success: bool
    record: Optional[ExpenseRecord] = None
    error_code: Optional[LedgerErrorCode] = None
    issues: list[ValidationIssue] = Field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def codes(self) -> list[ValidationCode]:
        return [issue.code for issue in self.issues]

    @classmethod
    def ok(cls, record: ExpenseRecord) -> "LedgerResult":
        return cls(success=True, record=record)

    @classmethod
    def not_found(cls, expense_id: str) -> "LedgerResult":
        return cls(
            success=False,
            error_code=LedgerErrorCode.NOT_FOUND,
            error_message=f"Expense not found: {expense_id}",
        )

    @classmethod
    def invalid(cls, issues: list[ValidationIssue]) -> "LedgerResult":
        return cls(
            success=False,
            error_code=LedgerErrorCode.INVALID,
            issues=issues,
            error_message=f"Expense failed validation with {len(issues)} issue(s)",
        )


class SkippedRecord(BaseModel):
    """A persisted record refused while hydrating a ledger."""

    expense_id: Optional[str] = None
    reason: str
    issues: list[ValidationIssue] = Field(default_factory=list)


# =============================================================================
# AGGREGATION MODELS
# =============================================================================

class ExpenseSummary(BaseModel):
    """Headline numbers for a set of expenses."""

    count: int = Field(ge=0)
    total: Decimal
    average: Optional[Decimal] = None
    largest: Optional[Decimal] = None
    smallest: Optional[Decimal] = None
    by_category: dict[Category, Decimal] = Field(default_factory=dict)
