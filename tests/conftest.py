"""Shared fixtures for the Household Ledger tests."""

import asyncio
from decimal import Decimal

import pytest

from household_ledger.models.ledger import (
    Category,
    CategoryPurpose,
    Person,
    Transaction,
    TransactionKind,
)
from household_ledger.orchestrator import LedgerComponents
from household_ledger.services.storage import InMemoryLedgerStorage


def run(coro):
    """Drive a coroutine from a synchronous test."""
    return asyncio.run(coro)


@pytest.fixture
def storage() -> InMemoryLedgerStorage:
    return InMemoryLedgerStorage()


@pytest.fixture
def components(storage) -> LedgerComponents:
    return LedgerComponents(storage)


@pytest.fixture
def adult() -> Person:
    return Person(name="Ana", age=34)


@pytest.fixture
def minor() -> Person:
    return Person(name="Pedro", age=15)


@pytest.fixture
def both_category() -> Category:
    return Category(description="Miscellaneous", purpose=CategoryPurpose.BOTH)


def make_transaction(
    person: Person,
    category: Category,
    amount: str,
    kind: TransactionKind = TransactionKind.EXPENSE,
    description: str = "Test transaction",
) -> Transaction:
    return Transaction(
        description=description,
        amount=Decimal(amount),
        kind=kind,
        person_id=person.id,
        category_id=category.id,
    )


def seed(storage, people=(), categories=(), transactions=()):
    """Put entities straight into storage, bypassing the flows."""
    async def _seed():
        for person in people:
            await storage.save_person(person)
        for category in categories:
            await storage.save_category(category)
        for tx in transactions:
            await storage.save_transaction(tx)
    run(_seed())
