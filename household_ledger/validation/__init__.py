"""Transaction admission package."""

from household_ledger.validation.admission import AdmissionChecker

__all__ = ["AdmissionChecker"]
