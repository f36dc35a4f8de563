"""
Expense Aggregation

DESIGN DECISION: Aggregation is DETERMINISTIC and read-only.
Every function here takes a snapshot (any sequence of ExpenseRecord, usually
ledger.all() or ledger.query(...)) and returns new values. Nothing is cached
and nothing is mutated, so totals are always recomputed from the records.

Sums are Decimal additions in the widest context the decimal module offers
(maximum precision and exponent range). Addition there never rounds and
never overflows, so the same multiset of records gives the same total in
any order, whatever the magnitude of the amounts.
"""

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Decimal, localcontext
from typing import Union

from expense_ledger.models.expense import Category, ExpenseRecord, ExpenseSummary
from expense_ledger.validation import normalize_date


ZERO = Decimal("0")

DateBound = Union[str, date]


class AggregationError(Exception):
    """Error during aggregation."""
    pass


class InvalidDateRangeError(AggregationError, ValueError):
    """A date range bound is malformed, or start is after end."""
    pass


def _widen(ctx) -> None:
    ctx.Emax = MAX_EMAX
    ctx.Emin = MIN_EMIN


def _exact_sum(amounts: Iterable[Decimal]) -> Decimal:
    with localcontext() as ctx:
        _widen(ctx)
        ctx.prec = MAX_PREC
        return sum(amounts, ZERO)


def _mean(overall: Decimal, count: int) -> Decimal:
    # Default precision, full exponent range.
    with localcontext() as ctx:
        _widen(ctx)
        return overall / count


def total(records: Iterable[ExpenseRecord]) -> Decimal:
    """Sum of all amounts; zero for no records."""
    return _exact_sum(record.amount for record in records)


def by_category(
    records: Iterable[ExpenseRecord],
    zero_fill: bool = False,
) -> dict[Category, Decimal]:
    """
    Total per category, keyed in Category declaration order.

    Categories without records are left out unless zero_fill is set, in
    which case every category appears (with zero where there is nothing).
    """
    groups: dict[Category, list[Decimal]] = {}
    for record in records:
        groups.setdefault(record.category, []).append(record.amount)

    result = {}
    for category in Category:
        if category in groups:
            result[category] = _exact_sum(groups[category])
        elif zero_fill:
            result[category] = ZERO
    return result


def by_month(records: Iterable[ExpenseRecord]) -> dict[str, Decimal]:
    """Total per YYYY-MM month, in chronological order."""
    groups: dict[str, list[Decimal]] = {}
    for record in records:
        groups.setdefault(record.date[:7], []).append(record.amount)
    return {month: _exact_sum(groups[month]) for month in sorted(groups)}


def _bound(value: DateBound, name: str) -> str:
    normalized = normalize_date(value)
    if normalized is None:
        raise InvalidDateRangeError(
            f"{name} must be a calendar date in YYYY-MM-DD form, got {value!r}"
        )
    return normalized


def in_date_range(
    records: Iterable[ExpenseRecord],
    start: DateBound,
    end: DateBound,
) -> list[ExpenseRecord]:
    """
    Records dated from start to end inclusive, oldest first.

    Records sharing a date keep their input order.

    Raises:
        InvalidDateRangeError: If a bound is not a valid date or start > end.
    """
    start_date = _bound(start, "start")
    end_date = _bound(end, "end")
    if start_date > end_date:
        raise InvalidDateRangeError(
            f"Range start {start_date} is after range end {end_date}"
        )

    # Canonical dates compare lexically in chronological order.
    selected = [record for record in records if start_date <= record.date <= end_date]
    return sorted(selected, key=lambda record: record.date)


def summarize(records: Sequence[ExpenseRecord]) -> ExpenseSummary:
    """Count, total, average, extremes and per-category totals."""
    if not records:
        return ExpenseSummary(count=0, total=ZERO)

    amounts = [record.amount for record in records]
    overall = _exact_sum(amounts)
    return ExpenseSummary(
        count=len(amounts),
        total=overall,
        average=_mean(overall, len(amounts)),
        largest=max(amounts),
        smallest=min(amounts),
        by_category=by_category(records),
    )
