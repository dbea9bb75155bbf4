"""
Transaction Admission Checker

Decides whether a proposed transaction may be recorded, given the
person and category it references. The rules run in a fixed order
and the FIRST failure wins:

1. INPUT      - description, amount and kind are well formed
2. PERSON     - the referenced person exists
3. MINOR RULE - people under the age threshold may only record expenses
4. CATEGORY   - the referenced category exists
5. PURPOSE    - the category's purpose allows the transaction's kind

The checker is a pure function of (draft, person, category).
Looking the person and category up is the caller's job; the checker
only sees what was found (or None).

IMPORTANT: The checker NEVER fixes a draft. An admitted draft is
recorded exactly as given.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

from household_ledger.errors import (
    ForbiddenError,
    InvalidInputError,
    LedgerError,
    NotFoundError,
    RejectionReason,
)
from household_ledger.models.ledger import (
    CENT,
    MINOR_AGE_THRESHOLD,
    AdmissionDecision,
    Category,
    Person,
    TransactionDraft,
    TransactionKind,
)


MAX_DESCRIPTION_LENGTH = 200


class AdmissionChecker:
    """
    Runs the admission rules on transaction drafts.

    Use `check` to get a decision, or `enforce` to raise on rejection.
    """

    def __init__(self, minor_age_threshold: int = MINOR_AGE_THRESHOLD):
        self._minor_age_threshold = minor_age_threshold

    def _validate_input(self, draft: TransactionDraft) -> TransactionKind:
        """Stage 1. Returns the parsed kind so later rules can use it."""
        description = draft.description
        if description is None or not description.strip():
            raise InvalidInputError("Description is required", field="description")
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise InvalidInputError(
                f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters",
                field="description",
            )

        amount = draft.amount
        if amount is None:
            raise InvalidInputError("Amount is required", field="amount")
        if not isinstance(amount, Decimal) or not amount.is_finite():
            raise InvalidInputError("Amount must be a finite decimal number", field="amount")
        if amount <= 0:
            raise InvalidInputError("Amount must be a positive number", field="amount")
        try:
            exceeds_cents = amount != amount.quantize(CENT)
        except InvalidOperation:
            raise InvalidInputError("Amount is too large", field="amount")
        if exceeds_cents:
            raise InvalidInputError(
                "Amount can have at most two decimal places",
                field="amount",
            )

        try:
            return TransactionKind(draft.kind)
        except ValueError:
            valid = ", ".join(f"'{k.value}'" for k in TransactionKind)
            raise InvalidInputError(
                f"Invalid kind {draft.kind!r}. Accepted values: {valid}",
                field="kind",
            )

    def _check_minor_rule(self, person: Person, kind: TransactionKind) -> None:
        if person.is_minor(self._minor_age_threshold) and kind == TransactionKind.INCOME:
            raise ForbiddenError(
                RejectionReason.MINOR_INCOME,
                f"People under {self._minor_age_threshold} can only record expenses",
            )

    def _check_category_purpose(self, category: Category, kind: TransactionKind) -> None:
        if category.accepts(kind):
            return
        if kind == TransactionKind.EXPENSE:
            message = "This category is for income only and cannot be used for expenses"
        else:
            message = "This category is for expenses only and cannot be used for income"
        raise ForbiddenError(RejectionReason.CATEGORY_MISMATCH, message)

    def enforce(
        self,
        draft: TransactionDraft,
        person: Optional[Person],
        category: Optional[Category],
    ) -> None:
        """
        Run every rule in order, raising on the first failure.

        Raises:
            InvalidInputError: malformed description, amount or kind
            NotFoundError: person or category missing
            ForbiddenError: minor income or category mismatch
        """
        kind = self._validate_input(draft)

        if person is None:
            raise NotFoundError("person", draft.person_id)
        self._check_minor_rule(person, kind)

        if category is None:
            raise NotFoundError("category", draft.category_id)
        self._check_category_purpose(category, kind)

    def check(
        self,
        draft: TransactionDraft,
        person: Optional[Person],
        category: Optional[Category],
    ) -> AdmissionDecision:
        """Run every rule in order and report the outcome without raising."""
        try:
            self.enforce(draft, person, category)
        except LedgerError as e:
            return AdmissionDecision.reject(e)
        return AdmissionDecision.accept()

    def get_user_friendly_summary(self, decision: AdmissionDecision) -> str:
        """
        Generate a user-friendly summary of an admission decision.

        This is what we show in the UI.
        """
        if decision.accepted:
            return "✅ Transaction recorded."

        headlines = {
            RejectionReason.INVALID_INPUT: "❌ Some details are missing or invalid:",
            RejectionReason.PERSON_NOT_FOUND: "❌ The selected person no longer exists:",
            RejectionReason.CATEGORY_NOT_FOUND: "❌ The selected category no longer exists:",
            RejectionReason.MINOR_INCOME: "⛔ This person cannot record income:",
            RejectionReason.CATEGORY_MISMATCH: "⛔ This category does not fit the transaction:",
        }
        headline = headlines.get(decision.reason, "❌ Transaction rejected:")
        return f"{headline}\n   • {decision.message}"
