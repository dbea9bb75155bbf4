"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap Google Sheets for a real database later
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally simple - we're not building a full ORM.
Just the operations the ledger needs.

WRITE BOUNDARY: Every backend owns one asyncio.Lock (`write_lock`).
Callers that read-then-write (admitting a transaction, deleting a person
and sweeping categories) hold it for the whole sequence so that writes
to the same person/category are serialized.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from household_ledger.models.ledger import Category, Person, Transaction


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger storage operations.

    Any storage implementation (Google Sheets, SQLite, etc.)
    must implement these methods.
    """

    def __init__(self):
        self._write_lock = asyncio.Lock()

    @property
    def write_lock(self) -> asyncio.Lock:
        """Lock that serializes read-then-write sequences against this store."""
        return self._write_lock

    # -------------------------------------------------------------------------
    # People
    # -------------------------------------------------------------------------

    @abstractmethod
    async def save_person(self, person: Person) -> bool:
        """
        Save a new person.

        Returns:
            True if saved successfully

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def get_person(self, person_id: UUID) -> Optional[Person]:
        """
        Retrieve a person by ID.

        Returns:
            The person if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_people(self) -> list[Person]:
        """List every person, in insertion order."""
        pass

    @abstractmethod
    async def delete_person(self, person_id: UUID) -> int:
        """
        Delete a person AND every transaction they own.

        Implementations remove the transactions first and the person
        last, so no transaction is ever left referencing a missing person.

        Args:
            person_id: The person's unique identifier

        Returns:
            Number of transactions removed with the person

        Raises:
            StorageError: If the delete fails
        """
        pass

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    @abstractmethod
    async def save_category(self, category: Category) -> bool:
        """Save a new category."""
        pass

    @abstractmethod
    async def get_category(self, category_id: UUID) -> Optional[Category]:
        """Retrieve a category by ID, or None."""
        pass

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        """List every category, in insertion order."""
        pass

    @abstractmethod
    async def delete_category(self, category_id: UUID) -> bool:
        """
        Delete a category by ID.

        Returns:
            True if a category was removed, False if it did not exist
        """
        pass

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    @abstractmethod
    async def save_transaction(self, transaction: Transaction) -> bool:
        """Save an admitted transaction."""
        pass

    @abstractmethod
    async def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        """Retrieve a transaction by ID, or None."""
        pass

    @abstractmethod
    async def list_transactions(self) -> list[Transaction]:
        """List every transaction, in insertion order."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
