"""
Cascade Deleter

Removing a person is a two-phase protocol, run under the store's
write lock so nothing can be admitted against the person mid-way:

PHASE 1 - PERSON:
- Look the person up (NotFoundError if absent, and nothing else happens)
- Delete the person together with every transaction they own

PHASE 2 - ORPHAN SWEEP:
- Re-scan EVERY category, not only the ones the person used
- Delete each category that no transaction references any more

The sweep is a pure function of the current state, so it is safe to
run again on its own (e.g. after a crash between the two phases).

NOTE: Categories only ever disappear through this path. There is no
"delete when orphaned" hook anywhere else.
"""

from typing import Optional
from uuid import UUID

from household_ledger.errors import NotFoundError
from household_ledger.models.ledger import PersonDeletionResult
from household_ledger.observability import LedgerLogger
from household_ledger.services.storage import LedgerStorageInterface


class CascadeDeleter:
    """Deletes people and sweeps the categories they leave behind."""

    def __init__(
        self,
        storage: LedgerStorageInterface,
        logger: Optional[LedgerLogger] = None,
    ):
        self._storage = storage
        self._logger = logger

    async def _sweep(self, correlation_id: Optional[UUID] = None) -> list[UUID]:
        """Delete every category without transactions. Caller holds the write lock."""
        categories = await self._storage.list_categories()
        transactions = await self._storage.list_transactions()
        referenced = {tx.category_id for tx in transactions}

        removed = []
        for category in categories:
            if category.id in referenced:
                continue
            if await self._storage.delete_category(category.id):
                removed.append(category.id)

        if self._logger:
            self._logger.log_orphan_categories_swept(removed, correlation_id)
        return removed

    async def sweep_orphan_categories(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> list[UUID]:
        """
        Run phase 2 on its own.

        Returns:
            IDs of the categories that were removed
        """
        async with self._storage.write_lock:
            return await self._sweep(correlation_id)

    async def delete_person(
        self,
        person_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> PersonDeletionResult:
        """
        Delete a person, their transactions, and every orphaned category.

        Raises:
            NotFoundError: If the person does not exist (no sweep runs)
            StorageError: If the store fails; passed through untouched
        """
        async with self._storage.write_lock:
            person = await self._storage.get_person(person_id)
            if person is None:
                raise NotFoundError("person", person_id)

            deleted_transactions = await self._storage.delete_person(person_id)
            if self._logger:
                self._logger.log_person_deleted(
                    person_id=person_id,
                    deleted_transaction_count=deleted_transactions,
                    correlation_id=correlation_id,
                )

            removed = await self._sweep(correlation_id)

        return PersonDeletionResult(
            person_id=person_id,
            deleted_transaction_count=deleted_transactions,
            deleted_category_ids=removed,
        )
