"""
Storage Services Package

Provides the abstract storage interface and concrete implementations.
In-memory storage is the default; Google Sheets is available for
persistence. Both are swappable behind LedgerStorageInterface.
"""

from household_ledger.services.storage.interface import (
    ConnectionError,
    LedgerStorageInterface,
    StorageError,
)
from household_ledger.services.storage.memory import InMemoryLedgerStorage
from household_ledger.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsLedgerStorage,
)

__all__ = [
    # Interface
    "LedgerStorageInterface",
    # Exceptions
    "ConnectionError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsLedgerStorage",
    "InMemoryLedgerStorage",
]
