"""Aggregation over ledger snapshots."""

from expense_ledger.aggregation.aggregator import (
    AggregationError,
    InvalidDateRangeError,
    by_category,
    by_month,
    in_date_range,
    summarize,
    total,
)

__all__ = [
    "AggregationError",
    "InvalidDateRangeError",
    "by_category",
    "by_month",
    "in_date_range",
    "summarize",
    "total",
]
