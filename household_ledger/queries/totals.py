"""
Totals Aggregation Engine

DESIGN DECISION: Totals are computed by a DETERMINISTIC fold over the
stored transactions. Grouping by person and grouping by category use
the same fold; only the key differs.

For every group (including groups with no transactions, which show
up as all zeros):
- total_income  = sum of income amounts
- total_expense = sum of expense amounts
- balance       = total_income - total_expense

GUARANTEES:
- All arithmetic is Decimal; totals reconcile to the cent
- The grand total equals the totals of the raw transaction set,
  otherwise TotalsReconciliationError is raised
- Each group appears exactly once
"""

from typing import Callable, Iterable, Optional
from uuid import UUID

from household_ledger.errors import TotalsReconciliationError
from household_ledger.models.ledger import (
    ZERO,
    Category,
    CategoryTotals,
    Person,
    PersonTotals,
    Totals,
    TotalsByCategoryReport,
    TotalsByPersonReport,
    Transaction,
    TransactionKind,
)
from household_ledger.observability import LedgerLogger
from household_ledger.services.storage import LedgerStorageInterface


class TotalsAggregator:
    """Pure fold from transactions to grouped totals."""

    @staticmethod
    def sum_by_kind(transactions: Iterable[Transaction]) -> Totals:
        """Totals over an ungrouped set of transactions."""
        income = ZERO
        expense = ZERO
        for tx in transactions:
            if tx.kind == TransactionKind.INCOME:
                income += tx.amount
            else:
                expense += tx.amount
        return Totals.from_sums(income, expense)

    def fold(
        self,
        group_ids: list[UUID],
        transactions: list[Transaction],
        key: Callable[[Transaction], UUID],
    ) -> tuple[dict[UUID, Totals], Totals]:
        """
        Fold transactions into per-group totals plus a grand total.

        Args:
            group_ids: Every group that must appear in the result
            transactions: The full transaction set
            key: Extracts a transaction's group ID

        Raises:
            TotalsReconciliationError: If the grand total differs from the
                totals of the raw transaction set
        """
        sums: dict[UUID, list] = {group_id: [ZERO, ZERO] for group_id in group_ids}

        for tx in transactions:
            bucket = sums.get(key(tx))
            if bucket is None:
                # Caught by the reconciliation check below
                continue
            if tx.kind == TransactionKind.INCOME:
                bucket[0] += tx.amount
            else:
                bucket[1] += tx.amount

        per_group = {
            group_id: Totals.from_sums(income, expense)
            for group_id, (income, expense) in sums.items()
        }

        grand_income = sum((t.total_income for t in per_group.values()), ZERO)
        grand_expense = sum((t.total_expense for t in per_group.values()), ZERO)
        grand_total = Totals.from_sums(grand_income, grand_expense)

        direct = self.sum_by_kind(transactions)
        if grand_total.figures() != direct.figures():
            raise TotalsReconciliationError(
                f"Grouped totals {grand_total.figures()} do not match "
                f"transaction totals {direct.figures()}"
            )

        return per_group, grand_total

    def by_person(
        self,
        people: list[Person],
        transactions: list[Transaction],
    ) -> TotalsByPersonReport:
        per_group, grand_total = self.fold(
            [p.id for p in people],
            transactions,
            key=lambda tx: tx.person_id,
        )
        rows = [
            PersonTotals(
                person_id=person.id,
                name=person.name,
                age=person.age,
                **per_group[person.id].model_dump(),
            )
            for person in people
        ]
        return TotalsByPersonReport(people=rows, grand_total=grand_total)

    def by_category(
        self,
        categories: list[Category],
        transactions: list[Transaction],
    ) -> TotalsByCategoryReport:
        per_group, grand_total = self.fold(
            [c.id for c in categories],
            transactions,
            key=lambda tx: tx.category_id,
        )
        rows = [
            CategoryTotals(
                category_id=category.id,
                description=category.description,
                purpose=category.purpose,
                **per_group[category.id].model_dump(),
            )
            for category in categories
        ]
        return TotalsByCategoryReport(categories=rows, grand_total=grand_total)


class TotalsReporter:
    """
    Runs the aggregator against whatever the store currently holds.

    Reads happen under the write lock so the entity list and the
    transaction list come from the same snapshot.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        aggregator: Optional[TotalsAggregator] = None,
        logger: Optional[LedgerLogger] = None,
    ):
        self._storage = storage
        self._aggregator = aggregator or TotalsAggregator()
        self._logger = logger

    async def totals_by_person(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> TotalsByPersonReport:
        async with self._storage.write_lock:
            people = await self._storage.list_people()
            transactions = await self._storage.list_transactions()

        report = self._aggregator.by_person(people, transactions)
        if self._logger:
            self._logger.log_report_generated("person", len(report.people), correlation_id)
        return report

    async def totals_by_category(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> TotalsByCategoryReport:
        async with self._storage.write_lock:
            categories = await self._storage.list_categories()
            transactions = await self._storage.list_transactions()

        report = self._aggregator.by_category(categories, transactions)
        if self._logger:
            self._logger.log_report_generated(
                "category", len(report.categories), correlation_id
            )
        return report
