"""End-to-end tests for the orchestrator flows against in-memory storage."""

import pytest
from decimal import Decimal
from uuid import uuid4

from conftest import run
from household_ledger.config import get_settings
from household_ledger.errors import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    RejectionReason,
)
from household_ledger.models.ledger import CategoryPurpose, TransactionKind
from household_ledger.orchestrator import LedgerComponents, create_app_components
from household_ledger.services.storage import InMemoryLedgerStorage


class TestPersonFlow:
    """Tests for creating, reading and deleting people."""

    def test_create_and_get(self, components):
        person = run(components.people.create_person(name="Ana", age=34))
        assert run(components.people.get_person(person.id)) == person
        assert run(components.people.list_people()) == [person]

    @pytest.mark.parametrize("name, age", [("", 30), ("x" * 201, 30), ("Ana", -1), ("Ana", 151)])
    def test_invalid_person(self, components, name, age):
        with pytest.raises(InvalidInputError):
            run(components.people.create_person(name=name, age=age))
        assert run(components.people.list_people()) == []

    def test_get_unknown_person(self, components):
        with pytest.raises(NotFoundError) as exc:
            run(components.people.get_person(uuid4()))
        assert exc.value.reason == RejectionReason.PERSON_NOT_FOUND

    def test_delete_runs_orphan_sweep(self, components):
        person = run(components.people.create_person(name="P", age=40))
        category = run(components.categories.create_category("Hobby", CategoryPurpose.EXPENSE))
        run(components.transactions.create_transaction(
            "Paint", Decimal("15.00"), "expense", person.id, category.id
        ))

        result = run(components.people.delete_person(person.id))

        assert result.deleted_transaction_count == 1
        assert result.deleted_category_ids == [category.id]
        assert run(components.categories.list_categories()) == []


class TestCategoryFlow:
    """Tests for creating and reading categories."""

    def test_create_from_string_purpose(self, components):
        category = run(components.categories.create_category("Salary", "income"))
        assert category.purpose == CategoryPurpose.INCOME
        assert run(components.categories.get_category(category.id)) == category

    @pytest.mark.parametrize("description, purpose", [("", "both"), ("x" * 101, "both"), ("Ok", "savings")])
    def test_invalid_category(self, components, description, purpose):
        with pytest.raises(InvalidInputError):
            run(components.categories.create_category(description, purpose))

    def test_get_unknown_category(self, components):
        with pytest.raises(NotFoundError):
            run(components.categories.get_category(uuid4()))


class TestTransactionFlow:
    """Tests for admitting transactions through the full flow."""

    @pytest.fixture
    def household(self, components):
        adult = run(components.people.create_person(name="Ana", age=34))
        minor = run(components.people.create_person(name="Pedro", age=15))
        misc = run(components.categories.create_category("Misc", CategoryPurpose.BOTH))
        salary = run(components.categories.create_category("Salary", CategoryPurpose.INCOME))
        return adult, minor, misc, salary

    def test_admitted_transaction_is_stored_as_given(self, components, household):
        adult, _, misc, _ = household
        tx = run(components.transactions.create_transaction(
            description="Groceries",
            amount=Decimal("87.45"),
            kind=TransactionKind.EXPENSE,
            person_id=adult.id,
            category_id=misc.id,
        ))

        stored = run(components.transactions.get_transaction(tx.id))
        assert stored.description == "Groceries"
        assert stored.amount == Decimal("87.45")
        assert stored.kind == TransactionKind.EXPENSE
        assert stored.person_id == adult.id
        assert stored.category_id == misc.id

    def test_amount_as_string(self, components, household):
        adult, _, misc, _ = household
        tx = run(components.transactions.create_transaction(
            "Bonus", "250.00", "income", adult.id, misc.id
        ))
        assert tx.amount == Decimal("250.00")

    def test_unparseable_amount(self, components, household):
        adult, _, misc, _ = household
        with pytest.raises(InvalidInputError):
            run(components.transactions.create_transaction(
                "Bonus", "a lot", "income", adult.id, misc.id
            ))

    def test_huge_amount_is_invalid_input(self, components, household):
        adult, _, misc, _ = household
        with pytest.raises(InvalidInputError) as exc:
            run(components.transactions.create_transaction(
                "Lottery", "1e30", "expense", adult.id, misc.id
            ))
        assert exc.value.reason == RejectionReason.INVALID_INPUT
        assert run(components.transactions.list_transactions()) == []

    def test_minor_income_rejected(self, components, household):
        _, minor, misc, _ = household
        with pytest.raises(ForbiddenError) as exc:
            run(components.transactions.create_transaction(
                "Allowance", Decimal("20.00"), "income", minor.id, misc.id
            ))
        assert exc.value.reason == RejectionReason.MINOR_INCOME
        assert run(components.transactions.list_transactions()) == []

    def test_category_mismatch_rejected(self, components, household):
        adult, _, _, salary = household
        with pytest.raises(ForbiddenError) as exc:
            run(components.transactions.create_transaction(
                "Lunch", Decimal("30.00"), "expense", adult.id, salary.id
            ))
        assert exc.value.reason == RejectionReason.CATEGORY_MISMATCH

    def test_unknown_references(self, components, household):
        adult, _, misc, _ = household
        with pytest.raises(NotFoundError) as exc:
            run(components.transactions.create_transaction(
                "Lunch", Decimal("30.00"), "expense", uuid4(), misc.id
            ))
        assert exc.value.reason == RejectionReason.PERSON_NOT_FOUND

        with pytest.raises(NotFoundError) as exc:
            run(components.transactions.create_transaction(
                "Lunch", Decimal("30.00"), "expense", adult.id, uuid4()
            ))
        assert exc.value.reason == RejectionReason.CATEGORY_NOT_FOUND

    def test_get_unknown_transaction(self, components):
        with pytest.raises(NotFoundError) as exc:
            run(components.transactions.get_transaction(uuid4()))
        assert exc.value.reason == RejectionReason.TRANSACTION_NOT_FOUND

    def test_rejections_leave_no_trace(self, components, household):
        adult, minor, misc, salary = household
        attempts = [
            ("", Decimal("1.00"), "expense", adult.id, misc.id),
            ("x", Decimal("0"), "expense", adult.id, misc.id),
            ("x", Decimal("1.00"), "gift", adult.id, misc.id),
            ("x", Decimal("1.00"), "income", minor.id, misc.id),
            ("x", Decimal("1.00"), "expense", adult.id, salary.id),
        ]
        for attempt in attempts:
            with pytest.raises((InvalidInputError, ForbiddenError)):
                run(components.transactions.create_transaction(*attempt))
        assert run(components.transactions.list_transactions()) == []


class TestReportFlow:
    """Tests for the report flow."""

    def test_reports_after_activity(self, components):
        x = run(components.people.create_person(name="X", age=30))
        run(components.people.create_person(name="Y", age=10))
        misc = run(components.categories.create_category("Misc", "both"))
        run(components.transactions.create_transaction("Pay", Decimal("100.00"), "income", x.id, misc.id))
        run(components.transactions.create_transaction("Food", Decimal("40.00"), "expense", x.id, misc.id))

        by_person = run(components.reports.get_totals_by_person())
        by_category = run(components.reports.get_totals_by_category())

        assert [row.balance for row in by_person.people] == [Decimal("60.00"), Decimal("0.00")]
        assert by_category.categories[0].total_income == Decimal("100.00")
        assert by_person.grand_total == by_category.grand_total


class TestComponentFactory:
    """Tests for create_app_components."""

    def test_memory_backend_by_default(self, monkeypatch):
        monkeypatch.delenv("STORAGE_BACKEND", raising=False)
        get_settings.cache_clear()
        components = create_app_components()
        assert isinstance(components.storage, InMemoryLedgerStorage)

    def test_threshold_from_settings(self, monkeypatch):
        monkeypatch.setenv("MINOR_AGE_THRESHOLD", "21")
        get_settings.cache_clear()
        components = create_app_components()
        person = run(components.people.create_person(name="Young", age=20))
        misc = run(components.categories.create_category("Misc", "both"))
        with pytest.raises(ForbiddenError):
            run(components.transactions.create_transaction(
                "Pay", Decimal("10.00"), "income", person.id, misc.id
            ))

    def test_explicit_threshold(self):
        components = LedgerComponents(InMemoryLedgerStorage(), minor_age_threshold=16)
        person = run(components.people.create_person(name="Teen", age=16))
        misc = run(components.categories.create_category("Misc", "both"))
        tx = run(components.transactions.create_transaction(
            "Job", Decimal("10.00"), "income", person.id, misc.id
        ))
        assert tx.kind == TransactionKind.INCOME
