"""
Expense Validation

Every candidate goes through the same four independent rules:
- amount: a finite number strictly greater than zero
- description: non-empty after trimming, and not longer than the limit
- category: a member of the closed Category set
- date: a real calendar date in YYYY-MM-DD form

DESIGN DECISION: All rules run on every call. A candidate with three
problems gets three issues back, so the user fixes everything in one go.

IMPORTANT: Validation NEVER raises for malformed input and NEVER coerces
an unknown category. Malformed input is an expected outcome, reported as
issues. The only changes made to valid input are normalization: trimming
the description, canonicalizing the date, and carrying the amount as a
Decimal.
"""

import math
import re
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel

from expense_ledger.config import get_settings
from expense_ledger.models.expense import (
    DATE_FORMAT,
    DATE_PATTERN,
    DEFAULT_MAX_DESCRIPTION_LENGTH,
    Category,
    ExpenseDraft,
    ValidationCode,
    ValidationIssue,
    ValidationResult,
)


_DATE_SHAPE = re.compile(DATE_PATTERN)


# =============================================================================
# NORMALIZERS - return the canonical value, or None if the input is unusable
# =============================================================================

def normalize_amount(value: Any) -> Optional[Decimal]:
    """
    Convert an amount to a finite Decimal.

    Floats go through their shortest repr, so 25.5 becomes Decimal("25.5")
    rather than the exact binary expansion. bool is not a number here.
    Sign is not checked.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            return None
        amount = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None

    if not amount.is_finite():
        return None
    return amount


def normalize_description(value: Any) -> Optional[str]:
    """Trimmed description, or None if it is not a string."""
    if not isinstance(value, str):
        return None
    return value.strip()


def normalize_category(value: Any) -> Optional[Category]:
    """Exact (case-sensitive) category lookup."""
    if isinstance(value, Category):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Category(value)
    except ValueError:
        return None


def normalize_date(value: Any) -> Optional[str]:
    """
    Canonical YYYY-MM-DD string for a calendar value.

    Accepts date and datetime objects (the time of day is dropped) and
    strings already in YYYY-MM-DD form that name a real date.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or not _DATE_SHAPE.fullmatch(value):
        return None
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return None
    return value


def parse_date(value: Any) -> Optional[date]:
    """Like normalize_date, but returns a date object."""
    normalized = normalize_date(value)
    if normalized is None:
        return None
    return date.fromisoformat(normalized)


# =============================================================================
# VALIDATOR
# =============================================================================

class ExpenseValidator:
    """
    Validates expense candidates against the ledger's rules.

    Stateless apart from the description limit, so one instance can be
    shared by every ledger in the process.
    """

    def __init__(self, max_description_length: Optional[int] = None):
        """
        Initialize validator.

        Args:
            max_description_length: Longest accepted description after
                trimming. If None, taken from settings.
        """
        if max_description_length is None:
            max_description_length = get_settings().max_description_length
        if max_description_length < 1:
            raise ValueError("max_description_length must be at least 1")
        self.max_description_length = max_description_length

    def _as_mapping(self, candidate: Any) -> Mapping:
        if isinstance(candidate, Mapping):
            return candidate
        if isinstance(candidate, BaseModel):
            return candidate.model_dump()
        # Anything else has no usable fields; every rule will report.
        return {}

    def _check_amount(self, value: Any, issues: list[ValidationIssue]) -> Optional[Decimal]:
        amount = normalize_amount(value)
        if amount is None or amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                code=ValidationCode.NON_POSITIVE_AMOUNT,
                message="Amount must be a finite number greater than zero",
            ))
            return None
        return amount

    def _check_description(self, value: Any, issues: list[ValidationIssue]) -> Optional[str]:
        description = normalize_description(value)
        if not description:
            issues.append(ValidationIssue(
                field="description",
                code=ValidationCode.EMPTY_DESCRIPTION,
                message="Description is required",
            ))
            return None
        if len(description) > self.max_description_length:
            issues.append(ValidationIssue(
                field="description",
                code=ValidationCode.TOO_LONG_DESCRIPTION,
                message=(
                    f"Description is {len(description)} characters long; "
                    f"the maximum is {self.max_description_length}"
                ),
            ))
            return None
        return description

    def _check_category(self, value: Any, issues: list[ValidationIssue]) -> Optional[Category]:
        category = normalize_category(value)
        if category is None:
            issues.append(ValidationIssue(
                field="category",
                code=ValidationCode.UNKNOWN_CATEGORY,
                message=f"Category must be one of: {', '.join(Category.values())}",
            ))
        return category

    def _check_date(self, value: Any, issues: list[ValidationIssue]) -> Optional[str]:
        normalized = normalize_date(value)
        if normalized is None:
            issues.append(ValidationIssue(
                field="date",
                code=ValidationCode.INVALID_DATE,
                message="Date must be a real calendar date in YYYY-MM-DD form",
            ))
        return normalized

    def validate(self, candidate: Any) -> ValidationResult:
        """
        Run every rule and collect all issues.

        Args:
            candidate: A mapping with amount, description, category and date.
                Unknown keys (including id) are ignored.

        Returns:
            ValidationResult with the normalized expense, or with every
            issue found.
        """
        fields = self._as_mapping(candidate)
        issues: list[ValidationIssue] = []

        amount = self._check_amount(fields.get("amount"), issues)
        description = self._check_description(fields.get("description"), issues)
        category = self._check_category(fields.get("category"), issues)
        expense_date = self._check_date(fields.get("date"), issues)

        if issues:
            return ValidationResult(is_valid=False, issues=issues)

        return ValidationResult(
            is_valid=True,
            expense=ExpenseDraft(
                amount=amount,
                description=description,
                category=category,
                date=expense_date,
            ),
        )

    def is_valid(self, candidate: Any) -> bool:
        return self.validate(candidate).is_valid

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        One line per issue, ready to show next to a form.
        """
        if result.is_valid:
            return "All checks passed."

        lines = ["Please fix the following:"]
        for issue in result.issues:
            lines.append(f"  - {issue.field}: {issue.message}")
        return "\n".join(lines)


def validate(
    candidate: Any,
    max_description_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH,
) -> ValidationResult:
    """Validate a candidate with the default rules."""
    return ExpenseValidator(max_description_length).validate(candidate)
