"""
Tests for the expense validator.

Property tests generate arbitrary candidates and check that the
accept/reject boundary is exactly the documented one.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest
from hypothesis import given, strategies as st

from expense_ledger.models.expense import Category, ValidationCode
from expense_ledger.validation import (
    ExpenseValidator,
    normalize_amount,
    normalize_date,
    parse_date,
    validate,
)
from tests.strategies import (
    invalid_amounts,
    invalid_categories,
    invalid_dates,
    invalid_descriptions,
    make_expense,
    valid_expenses,
)


class TestValidCandidates:
    """Valid input is accepted and only normalized."""

    @given(valid_expenses)
    def test_valid_candidate_round_trips(self, candidate):
        result = validate(candidate)

        assert result.is_valid
        assert result.issues == []
        assert result.expense.amount == Decimal(repr(candidate["amount"]))
        assert result.expense.description == candidate["description"].strip()
        assert result.expense.category == Category(candidate["category"])
        assert result.expense.date == candidate["date"]

    def test_concrete_lunch(self):
        result = validate(make_expense(amount=50.00, description="Lunch"))
        assert result.is_valid
        assert result.expense.amount == Decimal("50.0")
        assert result.expense.category is Category.FOOD

    def test_description_is_trimmed(self):
        result = validate(make_expense(description="  Coffee \n"))
        assert result.expense.description == "Coffee"

    def test_description_limit_counts_trimmed_length(self):
        padded = "  " + "x" * 200 + "  "
        assert validate(make_expense(description=padded)).is_valid

    def test_date_objects_are_canonicalized(self):
        assert validate(make_expense(date=date(2024, 3, 1))).expense.date == "2024-03-01"
        assert validate(make_expense(date=datetime(2024, 3, 1, 23, 59))).expense.date == "2024-03-01"

    def test_leap_day_is_accepted(self):
        assert validate(make_expense(date="2024-02-29")).is_valid

    @pytest.mark.parametrize("amount, expected", [
        (Decimal("25.50"), Decimal("25.50")),
        ("25.50", Decimal("25.50")),
        (3, Decimal("3")),
        (0.1, Decimal("0.1")),
    ])
    def test_amount_forms(self, amount, expected):
        result = validate(make_expense(amount=amount))
        assert result.expense.amount == expected

    def test_category_enum_member_accepted(self):
        assert validate(make_expense(category=Category.HEALTHCARE)).is_valid

    def test_unknown_keys_are_ignored(self):
        result = validate(make_expense(id="client-id", notes="extra"))
        assert result.is_valid


class TestInvalidCandidates:
    """Each broken field yields its own reason code."""

    @given(invalid_amounts)
    def test_invalid_amount(self, amount):
        result = validate(make_expense(amount=amount))
        assert not result.is_valid
        assert result.codes == [ValidationCode.NON_POSITIVE_AMOUNT]
        assert result.issues[0].field == "amount"

    @given(invalid_descriptions)
    def test_invalid_description(self, description):
        result = validate(make_expense(description=description))
        assert result.codes == [ValidationCode.EMPTY_DESCRIPTION]

    @given(st.text(min_size=201, max_size=400).filter(lambda s: len(s.strip()) > 200))
    def test_too_long_description(self, description):
        result = validate(make_expense(description=description))
        assert result.codes == [ValidationCode.TOO_LONG_DESCRIPTION]

    @given(invalid_categories)
    def test_invalid_category(self, category):
        result = validate(make_expense(category=category))
        assert result.codes == [ValidationCode.UNKNOWN_CATEGORY]

    @given(invalid_dates)
    def test_invalid_date(self, value):
        result = validate(make_expense(date=value))
        assert result.codes == [ValidationCode.INVALID_DATE]

    def test_zero_amount_concrete(self):
        result = validate({"amount": 0, "description": "x", "category": "Food", "date": "2024-01-01"})
        assert result.codes == [ValidationCode.NON_POSITIVE_AMOUNT]
        assert result.expense is None

    def test_all_violations_are_collected(self):
        """A candidate broken everywhere gets every issue at once."""
        result = validate({
            "amount": -5,
            "description": "   ",
            "category": "Groceries",
            "date": "2024-02-30",
        })
        assert result.codes == [
            ValidationCode.NON_POSITIVE_AMOUNT,
            ValidationCode.EMPTY_DESCRIPTION,
            ValidationCode.UNKNOWN_CATEGORY,
            ValidationCode.INVALID_DATE,
        ]

    @pytest.mark.parametrize("candidate", [None, 42, "expense", ["amount", 1]])
    def test_non_mapping_never_raises(self, candidate):
        result = validate(candidate)
        assert not result.is_valid
        assert len(result.issues) == 4

    def test_empty_mapping(self):
        assert len(validate({}).issues) == 4


class TestExpenseValidator:
    """Tests for the configurable validator."""

    def test_custom_description_limit(self):
        validator = ExpenseValidator(max_description_length=5)
        assert validator.is_valid(make_expense(description="short"))
        result = validator.validate(make_expense(description="longer"))
        assert result.codes == [ValidationCode.TOO_LONG_DESCRIPTION]

    def test_rejects_nonsense_limit(self):
        with pytest.raises(ValueError):
            ExpenseValidator(max_description_length=0)

    def test_default_limit_comes_from_settings(self, monkeypatch, fresh_settings):
        monkeypatch.setenv("EXPENSE_LEDGER_MAX_DESCRIPTION_LENGTH", "10")
        validator = ExpenseValidator()
        assert validator.max_description_length == 10

    def test_user_friendly_summary(self):
        validator = ExpenseValidator(200)
        failed = validator.validate(make_expense(amount=0, category="Nope"))
        summary = validator.get_user_friendly_summary(failed)
        assert summary.startswith("Please fix the following:")
        assert "amount:" in summary
        assert "category:" in summary

        passed = validator.validate(make_expense())
        assert validator.get_user_friendly_summary(passed) == "All checks passed."


class TestNormalizers:
    """Tests for the standalone normalization helpers."""

    def test_normalize_amount_uses_shortest_repr(self):
        assert normalize_amount(0.1 + 0.2) == Decimal("0.30000000000000004")
        assert normalize_amount(19.99) == Decimal("19.99")

    def test_normalize_amount_rejects_non_numbers(self):
        assert normalize_amount(False) is None
        assert normalize_amount("1,000") is None
        assert normalize_amount(Decimal("Infinity")) is None
        assert normalize_amount([1]) is None

    def test_normalize_amount_keeps_sign(self):
        assert normalize_amount(-3) == Decimal("-3")

    def test_normalize_date(self):
        assert normalize_date("1999-12-31") == "1999-12-31"
        assert normalize_date("0000-01-01") is None
        assert normalize_date("２０２４-01-01") is None

    def test_parse_date(self):
        assert parse_date("2024-03-01") == date(2024, 3, 1)
        assert parse_date("nope") is None
