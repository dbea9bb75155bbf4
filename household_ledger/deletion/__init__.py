"""Person deletion package."""

from household_ledger.deletion.cascade import CascadeDeleter

__all__ = ["CascadeDeleter"]
