"""Structured logging package."""

from household_ledger.observability.logger import (
    LedgerLogger,
    configure_logging,
    create_correlation_id,
)

__all__ = ["LedgerLogger", "configure_logging", "create_correlation_id"]
