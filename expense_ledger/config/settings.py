"""
Configuration Management for the Expense Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The category enumeration is deliberately NOT configurable; only limits and
persistence wiring are.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from expense_ledger.models.expense import DEFAULT_MAX_DESCRIPTION_LENGTH


class LedgerSettings(BaseSettings):
    """
    Main ledger settings.

    Loads configuration from EXPENSE_LEDGER_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Validation limits
    max_description_length: int = Field(
        default=DEFAULT_MAX_DESCRIPTION_LENGTH,
        ge=1,
        le=10000,
        description="Maximum description length after trimming"
    )

    # Persistence
    storage_key: str = Field(
        default="expenses",
        min_length=1,
        description="Key under which the ledger snapshot is stored"
    )
    storage_dir: Optional[Path] = Field(
        default=None,
        description="Directory for the file-backed store (in-memory if unset)"
    )
    autosave: bool = Field(
        default=True,
        description="Save the ledger after every successful mutation"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level for ledger and audit logging"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept stdlib level names."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


@lru_cache()
def get_settings() -> LedgerSettings:
    """
    Get ledger settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return LedgerSettings()


def validate_settings() -> dict[str, object]:
    """
    Check that settings load from the current environment.

    Returns {"ledger": True} or {"ledger": False, "ledger_error": message}.
    Useful for startup checks.
    """
    results: dict[str, object] = {}
    try:
        get_settings()
        results["ledger"] = True
    except ValueError as e:
        results["ledger"] = False
        results["ledger_error"] = str(e)
    return results
