"""
Tests for Household Ledger models

Test strategy:
1. Unit tests for individual components (models, checker, aggregator)
2. Flow tests against in-memory storage
3. No real API calls in tests (Google Sheets is faked)
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from household_ledger.errors import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    RejectionReason,
)
from household_ledger.models.ledger import (
    AdmissionDecision,
    Category,
    CategoryPurpose,
    Person,
    PersonDeletionResult,
    PersonTotals,
    Totals,
    Transaction,
    TransactionDraft,
    TransactionKind,
)


class TestPersonModel:
    """Tests for the Person model."""

    def test_person_creation(self):
        person = Person(name="Ana", age=34)
        assert person.name == "Ana"
        assert person.age == 34
        assert person.id is not None

    def test_person_strips_whitespace(self):
        """Test that whitespace is stripped from the name."""
        person = Person(name="  Ana  ", age=34)
        assert person.name == "Ana"

    def test_person_rejects_blank_name(self):
        with pytest.raises(ValidationError):
            Person(name="   ", age=20)

    def test_person_rejects_long_name(self):
        with pytest.raises(ValidationError):
            Person(name="x" * 201, age=20)

    @pytest.mark.parametrize("age", [-1, 151])
    def test_person_age_bounds(self, age):
        with pytest.raises(ValidationError):
            Person(name="Ana", age=age)

    def test_minor_threshold_is_exclusive_of_18(self):
        """Test that a person aged exactly 18 is not a minor."""
        assert Person(name="A", age=17).is_minor() is True
        assert Person(name="B", age=18).is_minor() is False
        assert Person(name="C", age=0).is_minor() is True


class TestCategoryModel:
    """Tests for the Category model."""

    def test_category_description_limit(self):
        with pytest.raises(ValidationError):
            Category(description="x" * 101, purpose=CategoryPurpose.BOTH)

    def test_category_purpose_from_string(self):
        category = Category(description="Salary", purpose="income")
        assert category.purpose == CategoryPurpose.INCOME

    def test_category_rejects_unknown_purpose(self):
        with pytest.raises(ValidationError):
            Category(description="Salary", purpose="savings")

    def test_accepts(self):
        expense = Category(description="Food", purpose=CategoryPurpose.EXPENSE)
        income = Category(description="Salary", purpose=CategoryPurpose.INCOME)
        both = Category(description="Misc", purpose=CategoryPurpose.BOTH)

        assert expense.accepts(TransactionKind.EXPENSE)
        assert not expense.accepts(TransactionKind.INCOME)
        assert income.accepts(TransactionKind.INCOME)
        assert not income.accepts(TransactionKind.EXPENSE)
        assert both.accepts(TransactionKind.INCOME)
        assert both.accepts(TransactionKind.EXPENSE)


class TestTransactionModel:
    """Tests for the Transaction and TransactionDraft models."""

    def test_transaction_is_immutable(self):
        tx = Transaction(
            description="Rent",
            amount=Decimal("1200.00"),
            kind=TransactionKind.EXPENSE,
            person_id=uuid4(),
            category_id=uuid4(),
        )
        with pytest.raises(ValidationError):
            tx.amount = Decimal("1.00")

    def test_transaction_rejects_non_positive_amount(self):
        with pytest.raises(ValidationError):
            Transaction(
                description="Rent",
                amount=Decimal("0"),
                kind=TransactionKind.EXPENSE,
                person_id=uuid4(),
                category_id=uuid4(),
            )

    def test_draft_accepts_loose_values(self):
        """Drafts hold whatever was proposed; the checker judges them."""
        draft = TransactionDraft(
            description="",
            amount=Decimal("-5"),
            kind="transfer",
            person_id=uuid4(),
            category_id=uuid4(),
        )
        assert draft.kind == "transfer"
        assert draft.amount == Decimal("-5")

    def test_from_draft_copies_fields(self):
        person_id, category_id = uuid4(), uuid4()
        draft = TransactionDraft(
            description="Groceries",
            amount=Decimal("50.00"),
            kind="expense",
            person_id=person_id,
            category_id=category_id,
        )
        tx = Transaction.from_draft(draft)
        assert tx.description == "Groceries"
        assert tx.amount == Decimal("50.00")
        assert tx.kind == TransactionKind.EXPENSE
        assert tx.person_id == person_id
        assert tx.category_id == category_id


class TestTotalsModels:
    """Tests for the reporting models."""

    def test_from_sums_computes_balance(self):
        totals = Totals.from_sums(Decimal("100"), Decimal("140.5"))
        assert totals.total_income == Decimal("100.00")
        assert totals.total_expense == Decimal("140.50")
        assert totals.balance == Decimal("-40.50")

    def test_inconsistent_balance_rejected(self):
        with pytest.raises(ValueError, match="Balance must equal"):
            Totals(
                total_income=Decimal("10.00"),
                total_expense=Decimal("5.00"),
                balance=Decimal("4.00"),
            )

    def test_person_totals_defaults_to_zero(self):
        row = PersonTotals(person_id=uuid4(), name="Ana", age=34)
        assert row.figures() == (Decimal("0.00"), Decimal("0.00"), Decimal("0.00"))


class TestAdmissionDecision:
    """Tests for AdmissionDecision."""

    def test_accept(self):
        decision = AdmissionDecision.accept()
        assert decision.accepted is True
        assert decision.reason is None

    def test_reject_carries_error_details(self):
        cases = [
            InvalidInputError("Amount is required", field="amount"),
            NotFoundError("person"),
            NotFoundError("category"),
            ForbiddenError(RejectionReason.MINOR_INCOME, "no"),
            ForbiddenError(RejectionReason.CATEGORY_MISMATCH, "no"),
        ]
        for error in cases:
            decision = AdmissionDecision.reject(error)
            assert decision.accepted is False
            assert decision.reason == error.reason
            assert decision.message == error.message
            assert decision.field == error.field

    def test_rejection_requires_reason(self):
        with pytest.raises(ValueError, match="must carry a reason"):
            AdmissionDecision(accepted=False, message="nope")


class TestPersonDeletionResult:
    """Tests for PersonDeletionResult."""

    def test_orphan_count_and_message(self):
        result = PersonDeletionResult(
            person_id=uuid4(),
            deleted_transaction_count=3,
            deleted_category_ids=[uuid4()],
        )
        assert result.deleted_orphan_category_count == 1
        assert "1 orphaned category(ies)" in result.message


class TestErrors:
    """Tests for the error taxonomy."""

    def test_not_found_reasons(self):
        assert NotFoundError("person").reason == RejectionReason.PERSON_NOT_FOUND
        assert NotFoundError("category").reason == RejectionReason.CATEGORY_NOT_FOUND
        assert NotFoundError("transaction").reason == RejectionReason.TRANSACTION_NOT_FOUND

    def test_not_found_unknown_entity(self):
        with pytest.raises(ValueError):
            NotFoundError("invoice")

    def test_forbidden_requires_rule_reason(self):
        with pytest.raises(ValueError):
            ForbiddenError(RejectionReason.INVALID_INPUT, "not a rule")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
