"""
In-Memory Storage Implementation

Dict-backed storage used by default and in tests.
Python dicts keep insertion order, so listings come back in the
order entities were created.

Nothing here survives a restart. Use the Google Sheets backend
for anything you want to keep.
"""

from typing import Optional
from uuid import UUID

from household_ledger.models.ledger import Category, Person, Transaction
from household_ledger.services.storage.interface import (
    LedgerStorageInterface,
    StorageError,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """In-memory implementation of ledger storage."""

    def __init__(self):
        super().__init__()
        self._people: dict[UUID, Person] = {}
        self._categories: dict[UUID, Category] = {}
        self._transactions: dict[UUID, Transaction] = {}

    async def save_person(self, person: Person) -> bool:
        if person.id in self._people:
            raise StorageError(f"Person already exists: {person.id}")
        self._people[person.id] = person
        return True

    async def get_person(self, person_id: UUID) -> Optional[Person]:
        return self._people.get(person_id)

    async def list_people(self) -> list[Person]:
        return list(self._people.values())

    async def delete_person(self, person_id: UUID) -> int:
        owned = [
            tx_id
            for tx_id, tx in self._transactions.items()
            if tx.person_id == person_id
        ]
        for tx_id in owned:
            del self._transactions[tx_id]
        self._people.pop(person_id, None)
        return len(owned)

    async def save_category(self, category: Category) -> bool:
        if category.id in self._categories:
            raise StorageError(f"Category already exists: {category.id}")
        self._categories[category.id] = category
        return True

    async def get_category(self, category_id: UUID) -> Optional[Category]:
        return self._categories.get(category_id)

    async def list_categories(self) -> list[Category]:
        return list(self._categories.values())

    async def delete_category(self, category_id: UUID) -> bool:
        return self._categories.pop(category_id, None) is not None

    async def save_transaction(self, transaction: Transaction) -> bool:
        if transaction.id in self._transactions:
            raise StorageError(f"Transaction already exists: {transaction.id}")
        self._transactions[transaction.id] = transaction
        return True

    async def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)

    async def list_transactions(self) -> list[Transaction]:
        return list(self._transactions.values())
