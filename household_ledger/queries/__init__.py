"""Totals reporting package."""

from household_ledger.queries.totals import TotalsAggregator, TotalsReporter

__all__ = ["TotalsAggregator", "TotalsReporter"]
