"""Configuration package."""

from expense_ledger.config.settings import (
    LedgerSettings,
    get_settings,
    validate_settings,
)

__all__ = [
    "LedgerSettings",
    "get_settings",
    "validate_settings",
]
