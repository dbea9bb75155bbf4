"""
Household Ledger - Source Package

A small household expense ledger: people record income and expense
transactions tagged with a category, and the ledger reports totals
per person and per category.

DESIGN PRINCIPLES:
1. Every transaction write passes the admission rules
2. Fail early, fail visibly
3. No silent corrections
4. Totals must reconcile to the cent
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Household Ledger Team"
