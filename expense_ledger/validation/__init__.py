"""Candidate validation and normalization."""

from expense_ledger.validation.validator import (
    ExpenseValidator,
    normalize_amount,
    normalize_category,
    normalize_date,
    normalize_description,
    parse_date,
    validate,
)

__all__ = [
    "ExpenseValidator",
    "normalize_amount",
    "normalize_category",
    "normalize_date",
    "normalize_description",
    "parse_date",
    "validate",
]
