"""
Domain Errors for Household Ledger

Every caller-facing failure is one of three kinds:

- InvalidInputError: the request itself is malformed
- NotFoundError: a referenced person, category or transaction does not exist
- ForbiddenError: a business rule rejected the request

Each error carries a machine readable `reason` so callers can tell the
individual admission failures apart, plus a human-readable message.

DESIGN DECISION: None of these are retried. They describe a bad request,
not a transient condition. Storage failures are NOT part of this taxonomy
and pass through as StorageError.
"""

from enum import Enum
from typing import Optional


class RejectionReason(str, Enum):
    """Machine readable reason attached to every ledger error."""
    INVALID_INPUT = "invalid_input"
    PERSON_NOT_FOUND = "person_not_found"
    CATEGORY_NOT_FOUND = "category_not_found"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    MINOR_INCOME = "minor_income"
    CATEGORY_MISMATCH = "category_mismatch"


class LedgerError(Exception):
    """Base exception for all caller-facing ledger errors."""

    def __init__(
        self,
        reason: RejectionReason,
        message: str,
        field: Optional[str] = None,
    ):
        self.reason = reason
        self.message = message
        self.field = field
        super().__init__(message)


class InvalidInputError(LedgerError):
    """A required field is missing or malformed."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(RejectionReason.INVALID_INPUT, message, field=field)


class NotFoundError(LedgerError):
    """A referenced entity does not exist."""

    _REASONS = {
        "person": RejectionReason.PERSON_NOT_FOUND,
        "category": RejectionReason.CATEGORY_NOT_FOUND,
        "transaction": RejectionReason.TRANSACTION_NOT_FOUND,
    }

    def __init__(self, entity: str, entity_id: object = None):
        if entity not in self._REASONS:
            raise ValueError(f"Unknown entity type: {entity}")
        self.entity = entity
        self.entity_id = entity_id
        message = f"{entity.capitalize()} not found"
        if entity_id is not None:
            message = f"{message}: {entity_id}"
        super().__init__(self._REASONS[entity], message, field=f"{entity}_id")


class ForbiddenError(LedgerError):
    """A business rule was violated."""

    def __init__(self, reason: RejectionReason, message: str):
        if reason not in (
            RejectionReason.MINOR_INCOME,
            RejectionReason.CATEGORY_MISMATCH,
        ):
            raise ValueError(f"Not a business rule reason: {reason}")
        super().__init__(reason, message, field="kind")


class TotalsReconciliationError(Exception):
    """
    Grouped totals do not add up to the totals of the raw transaction set.

    This only happens when the store is inconsistent (e.g. a transaction
    references a person or category that no longer exists).
    """
