"""
Data Models Package

This package contains all Pydantic models used in the Household Ledger.
All data flowing through the system must conform to these schemas.
"""

from household_ledger.models.ledger import (
    CENT,
    MINOR_AGE_THRESHOLD,
    ZERO,
    AdmissionDecision,
    Category,
    CategoryPurpose,
    CategoryTotals,
    Person,
    PersonDeletionResult,
    PersonTotals,
    Totals,
    TotalsByCategoryReport,
    TotalsByPersonReport,
    Transaction,
    TransactionDraft,
    TransactionKind,
)

__all__ = [
    "CENT",
    "MINOR_AGE_THRESHOLD",
    "ZERO",
    # Entities
    "Category",
    "CategoryPurpose",
    "Person",
    "Transaction",
    "TransactionDraft",
    "TransactionKind",
    # Admission
    "AdmissionDecision",
    # Reporting
    "CategoryTotals",
    "PersonTotals",
    "Totals",
    "TotalsByCategoryReport",
    "TotalsByPersonReport",
    # Deletion
    "PersonDeletionResult",
]
