"""Ledger package."""

from expense_ledger.ledger.ids import IdGenerator, format_id, parse_id
from expense_ledger.ledger.ledger import EDITABLE_FIELDS, Ledger

__all__ = [
    "EDITABLE_FIELDS",
    "IdGenerator",
    "Ledger",
    "format_id",
    "parse_id",
]
