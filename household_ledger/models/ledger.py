"""
Core Data Models for Household Ledger

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and reporting

DESIGN DECISION: Entity cross references (transaction -> person,
transaction -> category) are plain UUIDs resolved through storage.
No model holds a back-pointer to another model.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional, Union
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)

from household_ledger.errors import LedgerError, RejectionReason


CENT = Decimal("0.01")
ZERO = Decimal("0.00")

MINOR_AGE_THRESHOLD = 18


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionKind(str, Enum):
    """Whether a transaction brings money in or takes it out."""
    EXPENSE = "expense"
    INCOME = "income"


class CategoryPurpose(str, Enum):
    """
    Which transaction kinds a category may be used for.

    BOTH is compatible with every kind.
    """
    EXPENSE = "expense"
    INCOME = "income"
    BOTH = "both"


# =============================================================================
# ENTITIES
# =============================================================================

class Person(BaseModel):
    """
    A member of the household who owns transactions.

    Deleting a person deletes every transaction they own.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique person ID"
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the person was registered"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name"
    )
    age: int = Field(
        ...,
        ge=0,
        le=150,
        description="Age in years"
    )

    def is_minor(self, threshold: int = MINOR_AGE_THRESHOLD) -> bool:
        """A person is a minor when strictly younger than the threshold."""
        return self.age < threshold


class Category(BaseModel):
    """
    A classification label for transactions.

    Categories are never deleted directly. They disappear only when a
    person deletion leaves them without any transaction.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique category ID"
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the category was created"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category name (e.g. Groceries, Salary)"
    )
    purpose: CategoryPurpose = Field(
        ...,
        description="Which transaction kinds may use this category"
    )

    def accepts(self, kind: TransactionKind) -> bool:
        """Check whether a transaction of the given kind may use this category."""
        if self.purpose == CategoryPurpose.BOTH:
            return True
        if kind == TransactionKind.EXPENSE:
            return self.purpose != CategoryPurpose.INCOME
        return self.purpose != CategoryPurpose.EXPENSE


class TransactionDraft(BaseModel):
    """
    A transaction somebody wants to record.

    CRITICAL: This is PROPOSED data, NOT verified.
    Fields are deliberately loose so that the admission checker,
    not the schema, decides what is acceptable and reports why.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    description: Optional[str] = None
    amount: Optional[Decimal] = None
    kind: Optional[Union[TransactionKind, str]] = None
    person_id: UUID
    category_id: UUID


class Transaction(BaseModel):
    """
    An admitted financial record.

    CRITICAL: Only Transaction objects are persisted to storage, and they
    are only built from drafts that passed the admission checker.
    Transactions are immutable once created.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the transaction was recorded"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="What the money was for"
    )
    amount: Annotated[
        Decimal,
        Field(gt=0, decimal_places=2, description="Positive amount, two decimal places")
    ]
    kind: TransactionKind = Field(
        ...,
        description="Income or expense"
    )
    person_id: UUID = Field(
        ...,
        description="Owning person"
    )
    category_id: UUID = Field(
        ...,
        description="Category of the transaction"
    )

    @classmethod
    def from_draft(cls, draft: TransactionDraft) -> "Transaction":
        """Build the persisted record from an admitted draft, field for field."""
        return cls(
            description=draft.description,
            amount=draft.amount,
            kind=TransactionKind(draft.kind),
            person_id=draft.person_id,
            category_id=draft.category_id,
        )


# =============================================================================
# ADMISSION MODELS
# =============================================================================

class AdmissionDecision(BaseModel):
    """
    Result of running the admission rules on a draft.

    Either accepted, or rejected with the FIRST rule that failed.
    """

    decided_at: datetime = Field(
        default_factory=datetime.utcnow
    )
    accepted: bool = Field(
        ...,
        description="Did the draft pass every rule?"
    )
    reason: Optional[RejectionReason] = Field(
        default=None,
        description="Why the draft was rejected"
    )
    message: str = Field(
        default="",
        description="Human-readable description of the outcome"
    )
    field: Optional[str] = Field(
        default=None,
        description="Field the rejection is about"
    )

    @model_validator(mode='after')
    def validate_reason(self) -> 'AdmissionDecision':
        if self.accepted and self.reason is not None:
            raise ValueError("An accepted decision cannot carry a rejection reason")
        if not self.accepted and self.reason is None:
            raise ValueError("A rejected decision must carry a reason")
        return self

    @classmethod
    def accept(cls) -> "AdmissionDecision":
        return cls(accepted=True, message="Transaction admitted")

    @classmethod
    def reject(cls, error: LedgerError) -> "AdmissionDecision":
        return cls(
            accepted=False,
            reason=error.reason,
            message=error.message,
            field=error.field,
        )


# =============================================================================
# REPORTING MODELS
# =============================================================================

class Totals(BaseModel):
    """
    Income, expense and balance for one group (or for everything).

    balance is stored rather than computed so the figure travels with
    the report, but it is checked against income - expense.
    """

    total_income: Decimal = Field(
        default=ZERO,
        ge=0,
        description="Sum of income amounts"
    )
    total_expense: Decimal = Field(
        default=ZERO,
        ge=0,
        description="Sum of expense amounts"
    )
    balance: Decimal = Field(
        default=ZERO,
        description="Income minus expense, may be negative"
    )

    @model_validator(mode='after')
    def validate_balance(self) -> 'Totals':
        if self.balance != self.total_income - self.total_expense:
            raise ValueError("Balance must equal total income minus total expense")
        return self

    @classmethod
    def from_sums(cls, income: Decimal, expense: Decimal) -> "Totals":
        income = income.quantize(CENT)
        expense = expense.quantize(CENT)
        return cls(
            total_income=income,
            total_expense=expense,
            balance=income - expense,
        )

    def figures(self) -> tuple[Decimal, Decimal, Decimal]:
        return self.total_income, self.total_expense, self.balance


class PersonTotals(Totals):
    """Totals for one person."""

    person_id: UUID
    name: str
    age: int


class CategoryTotals(Totals):
    """Totals for one category."""

    category_id: UUID
    description: str
    purpose: CategoryPurpose


class TotalsByPersonReport(BaseModel):
    """Per-person totals plus the grand total."""

    generated_at: datetime = Field(
        default_factory=datetime.utcnow
    )
    people: list[PersonTotals] = Field(default_factory=list)
    grand_total: Totals = Field(default_factory=Totals)


class TotalsByCategoryReport(BaseModel):
    """Per-category totals plus the grand total."""

    generated_at: datetime = Field(
        default_factory=datetime.utcnow
    )
    categories: list[CategoryTotals] = Field(default_factory=list)
    grand_total: Totals = Field(default_factory=Totals)


# =============================================================================
# DELETION MODELS
# =============================================================================

class PersonDeletionResult(BaseModel):
    """What a person deletion removed."""

    person_id: UUID
    deleted_transaction_count: int = Field(
        default=0,
        ge=0,
        description="Transactions removed together with the person"
    )
    deleted_category_ids: list[UUID] = Field(
        default_factory=list,
        description="Categories removed by the orphan sweep"
    )

    @property
    def deleted_orphan_category_count(self) -> int:
        return len(self.deleted_category_ids)

    @property
    def message(self) -> str:
        return (
            "Person deleted. All of their transactions and "
            f"{self.deleted_orphan_category_count} orphaned category(ies) were removed."
        )
