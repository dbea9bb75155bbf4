"""
Main Orchestrator for Household Ledger

This module ties together all the components and defines the
end-to-end flows for:
1. People (create, look up, delete with cascade)
2. Categories (create, look up)
3. Transactions (admit, look up)
4. Reports (totals by person, totals by category)

DESIGN DECISION: The orchestrator enforces the boundaries:
- No transaction persists without passing the admission checker
- No person disappears without the orphan-category sweep
- Caller input that fails schema validation becomes InvalidInputError

This is the "glue" the presentation layer talks to.
"""

from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from pydantic import ValidationError

from household_ledger.config import get_settings
from household_ledger.deletion import CascadeDeleter
from household_ledger.errors import InvalidInputError, LedgerError, NotFoundError
from household_ledger.models.ledger import (
    Category,
    CategoryPurpose,
    Person,
    PersonDeletionResult,
    TotalsByCategoryReport,
    TotalsByPersonReport,
    Transaction,
    TransactionDraft,
    TransactionKind,
)
from household_ledger.observability import LedgerLogger, create_correlation_id
from household_ledger.queries import TotalsReporter
from household_ledger.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsLedgerStorage,
    InMemoryLedgerStorage,
    LedgerStorageInterface,
)
from household_ledger.validation import AdmissionChecker


def _invalid_input(error: ValidationError) -> InvalidInputError:
    """Turn the first pydantic error into a caller-facing InvalidInputError."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or None
    message = first.get("msg", "Invalid input")
    if field:
        message = f"{field}: {message}"
    return InvalidInputError(message, field=field)


class PersonFlow:
    """
    Orchestrates people.

    Deletion always goes through the CascadeDeleter so the orphan
    sweep cannot be skipped.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        deleter: Optional[CascadeDeleter] = None,
        logger: Optional[LedgerLogger] = None,
    ):
        self._storage = storage
        self._logger = logger
        self._deleter = deleter or CascadeDeleter(storage, logger)

    async def create_person(
        self,
        name: str,
        age: int,
        correlation_id: Optional[UUID] = None,
    ) -> Person:
        """
        Register a person.

        Raises:
            InvalidInputError: empty/too long name, or age outside 0-150
        """
        correlation_id = correlation_id or create_correlation_id()
        try:
            person = Person(name=name, age=age)
        except ValidationError as e:
            raise _invalid_input(e) from e

        await self._storage.save_person(person)
        if self._logger:
            self._logger.log_person_created(person.id, person.age, correlation_id)
        return person

    async def get_person(self, person_id: UUID) -> Person:
        person = await self._storage.get_person(person_id)
        if person is None:
            raise NotFoundError("person", person_id)
        return person

    async def list_people(self) -> list[Person]:
        return await self._storage.list_people()

    async def delete_person(
        self,
        person_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> PersonDeletionResult:
        """
        Delete a person, their transactions and any orphaned categories.

        Raises:
            NotFoundError: If the person does not exist
        """
        correlation_id = correlation_id or create_correlation_id()
        return await self._deleter.delete_person(person_id, correlation_id)


class CategoryFlow:
    """Orchestrates categories. Categories are never deleted from here."""

    def __init__(
        self,
        storage: LedgerStorageInterface,
        logger: Optional[LedgerLogger] = None,
    ):
        self._storage = storage
        self._logger = logger

    async def create_category(
        self,
        description: str,
        purpose: Union[CategoryPurpose, str],
        correlation_id: Optional[UUID] = None,
    ) -> Category:
        """
        Create a category.

        Raises:
            InvalidInputError: empty/too long description, or unknown purpose
        """
        correlation_id = correlation_id or create_correlation_id()
        try:
            category = Category(description=description, purpose=purpose)
        except ValidationError as e:
            raise _invalid_input(e) from e

        await self._storage.save_category(category)
        if self._logger:
            self._logger.log_category_created(
                category.id, category.purpose.value, correlation_id
            )
        return category

    async def get_category(self, category_id: UUID) -> Category:
        category = await self._storage.get_category(category_id)
        if category is None:
            raise NotFoundError("category", category_id)
        return category

    async def list_categories(self) -> list[Category]:
        return await self._storage.list_categories()


class TransactionFlow:
    """
    Orchestrates transaction creation.

    Flow (all under the store's write lock):
    1. Build the draft (schema errors -> InvalidInputError)
    2. Resolve the referenced person and category
    3. Run the admission checker
    4. Persist exactly what was admitted
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        checker: Optional[AdmissionChecker] = None,
        logger: Optional[LedgerLogger] = None,
    ):
        self._storage = storage
        self._checker = checker or AdmissionChecker()
        self._logger = logger

    @property
    def checker(self) -> AdmissionChecker:
        return self._checker

    async def create_transaction(
        self,
        description: Optional[str],
        amount: Union[Decimal, str, None],
        kind: Union[TransactionKind, str, None],
        person_id: UUID,
        category_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Admit and record a transaction.

        Raises:
            InvalidInputError: malformed fields
            NotFoundError: person or category missing
            ForbiddenError: minor income or category mismatch
        """
        correlation_id = correlation_id or create_correlation_id()
        try:
            draft = TransactionDraft(
                description=description,
                amount=amount,
                kind=kind,
                person_id=person_id,
                category_id=category_id,
            )
        except ValidationError as e:
            error = _invalid_input(e)
            self._log_rejection(error, None, None, correlation_id)
            raise error from e

        async with self._storage.write_lock:
            person = await self._storage.get_person(draft.person_id)
            category = await self._storage.get_category(draft.category_id)

            try:
                self._checker.enforce(draft, person, category)
            except LedgerError as e:
                self._log_rejection(e, draft.person_id, draft.category_id, correlation_id)
                raise

            transaction = Transaction.from_draft(draft)
            await self._storage.save_transaction(transaction)

        if self._logger:
            self._logger.log_transaction_admitted(
                transaction_id=transaction.id,
                kind=transaction.kind.value,
                amount=str(transaction.amount),
                person_id=transaction.person_id,
                category_id=transaction.category_id,
                correlation_id=correlation_id,
            )
        return transaction

    def _log_rejection(
        self,
        error: LedgerError,
        person_id: Optional[UUID],
        category_id: Optional[UUID],
        correlation_id: UUID,
    ) -> None:
        if self._logger:
            self._logger.log_transaction_rejected(
                reason=error.reason.value,
                message=error.message,
                person_id=person_id,
                category_id=category_id,
                correlation_id=correlation_id,
            )

    async def get_transaction(self, transaction_id: UUID) -> Transaction:
        transaction = await self._storage.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError("transaction", transaction_id)
        return transaction

    async def list_transactions(self) -> list[Transaction]:
        return await self._storage.list_transactions()


class ReportFlow:
    """Orchestrates the totals reports."""

    def __init__(
        self,
        storage: LedgerStorageInterface,
        reporter: Optional[TotalsReporter] = None,
        logger: Optional[LedgerLogger] = None,
    ):
        self._reporter = reporter or TotalsReporter(storage, logger=logger)

    async def get_totals_by_person(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> TotalsByPersonReport:
        return await self._reporter.totals_by_person(
            correlation_id or create_correlation_id()
        )

    async def get_totals_by_category(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> TotalsByCategoryReport:
        return await self._reporter.totals_by_category(
            correlation_id or create_correlation_id()
        )


class LedgerComponents:
    """All flows wired against one storage backend."""

    def __init__(
        self,
        storage: LedgerStorageInterface,
        logger: Optional[LedgerLogger] = None,
        minor_age_threshold: Optional[int] = None,
    ):
        checker = (
            AdmissionChecker(minor_age_threshold)
            if minor_age_threshold is not None
            else AdmissionChecker()
        )
        self.storage = storage
        self.people = PersonFlow(storage, logger=logger)
        self.categories = CategoryFlow(storage, logger=logger)
        self.transactions = TransactionFlow(storage, checker=checker, logger=logger)
        self.reports = ReportFlow(storage, logger=logger)


def create_app_components(
    use_storage: bool = True,
) -> LedgerComponents:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to honour the configured storage backend.
                    Set to False to force in-memory storage.

    Returns:
        LedgerComponents wired to the selected backend
    """
    app_settings = get_settings().app
    logger = LedgerLogger()

    storage: LedgerStorageInterface = InMemoryLedgerStorage()
    if use_storage and app_settings.uses_google_sheets:
        try:
            storage = GoogleSheetsLedgerStorage(GoogleSheetsClient())
        except Exception as e:
            # Storage not configured - continue in memory
            logger.log_error(
                error_type="storage_not_configured",
                error_message=str(e),
                details={"backend": app_settings.storage_backend},
            )
            storage = InMemoryLedgerStorage()

    return LedgerComponents(
        storage,
        logger=logger,
        minor_age_threshold=app_settings.minor_age_threshold,
    )
