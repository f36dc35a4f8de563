"""
Hypothesis strategies for expense candidates.

Valid strategies stay strictly inside the accepted boundary; invalid ones
each break exactly one field so tests can assert the exact reason code.
"""

from datetime import date
from decimal import Decimal

from hypothesis import strategies as st

from expense_ledger.models.expense import Category


VALID_CATEGORIES = Category.values()

categories = st.sampled_from(VALID_CATEGORIES)

positive_amounts = st.floats(
    min_value=0.01,
    max_value=999999.99,
    allow_nan=False,
    allow_infinity=False,
)

non_empty_descriptions = st.text(min_size=1, max_size=200).filter(lambda s: s.strip())

valid_dates = st.dates(
    min_value=date(2000, 1, 1),
    max_value=date(2099, 12, 31),
).map(lambda d: d.isoformat())

valid_expenses = st.fixed_dictionaries({
    "amount": positive_amounts,
    "description": non_empty_descriptions,
    "category": categories,
    "date": valid_dates,
})

# Amounts far outside everyday ranges: tiny fractions, and exponents beyond
# the default decimal context (Emax 999999).
extreme_amounts = st.one_of(
    st.decimals(min_value=Decimal("1e-30"), allow_nan=False, allow_infinity=False),
    st.builds(
        lambda mantissa, exponent: Decimal(f"{mantissa}e{exponent}"),
        st.integers(min_value=1, max_value=999),
        st.sampled_from([-30, -20, 0, 40, 999999, 1000000]),
    ),
)

extreme_expenses = st.fixed_dictionaries({
    "amount": st.one_of(positive_amounts, extreme_amounts),
    "description": non_empty_descriptions,
    "category": categories,
    "date": valid_dates,
})

complete_expenses = st.fixed_dictionaries({
    "id": st.text(min_size=1, max_size=50),
    "amount": positive_amounts,
    "description": non_empty_descriptions,
    "category": categories,
    "date": valid_dates,
})

invalid_amounts = st.one_of(
    st.just(0),
    st.just(0.0),
    st.just(-0.0),
    st.just(Decimal("-0")),
    st.just(float("nan")),
    st.just(Decimal("NaN")),
    st.just(float("inf")),
    st.floats(max_value=-0.01, allow_nan=False),
    st.decimals(max_value=0, allow_nan=False, allow_infinity=False),
    st.integers(max_value=0),
    st.none(),
    st.just(True),
    st.just("not a number"),
)

whitespace = st.sampled_from([" ", "\t", "\n", "\r", "\x0b", "\x0c", "\u00a0", "\u2003"])

invalid_descriptions = st.one_of(
    st.just(""),
    st.just("   "),
    st.just("\t"),
    st.just("\n"),
    st.text(alphabet=whitespace, max_size=10),
    st.none(),
    st.integers(),
)

invalid_categories = st.one_of(
    st.none(),
    st.just(""),
    st.just("food"),
    st.just("FOOD"),
    st.just(" Food"),
    st.text().filter(lambda s: s not in VALID_CATEGORIES),
    st.integers(),
)

invalid_dates = st.one_of(
    st.none(),
    st.just(""),
    st.just("2024-02-30"),
    st.just("2023-02-29"),
    st.just("2024-13-01"),
    st.just("2024-3-1"),
    st.just("01/03/2024"),
    st.just("2024-03-01T10:00:00"),
    st.just("2024-03-01\n"),
    st.just("\u0662\u0660\u0662\u0664-\u0660\u0663-\u0660\u0661"),
    st.text().filter(lambda s: len(s) != 10),
)


def make_expense(**overrides) -> dict:
    """A valid candidate, with any field overridden."""
    expense = {
        "amount": 50.00,
        "description": "Test expense",
        "category": "Food",
        "date": "2024-03-01",
    }
    expense.update(overrides)
    return expense
