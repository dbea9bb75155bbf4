"""
Ledger Event Logger

Every significant ledger action produces one structured log event:
people and categories created, transactions admitted or rejected,
people deleted, orphaned categories swept, reports generated.

The logger:
- Is local only (structlog); nothing is persisted as an audit trail
- Never replaces raising: callers still raise, the log only records
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib logging (which structlog writes through) at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))


class LedgerLogger:
    """
    Central event logger for the ledger.

    One method per event keeps event names and fields consistent
    across the flows that emit them.
    """

    def __init__(self, name: str = "household_ledger"):
        self._logger = structlog.get_logger(name)

    def _emit(
        self,
        level: str,
        event: str,
        correlation_id: Optional[UUID] = None,
        **fields,
    ) -> None:
        if correlation_id is not None:
            fields["correlation_id"] = str(correlation_id)
        getattr(self._logger, level)(event, **fields)

    def log_person_created(
        self,
        person_id: UUID,
        age: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(
            "info",
            "person_created",
            correlation_id,
            person_id=str(person_id),
            age=age,
        )

    def log_category_created(
        self,
        category_id: UUID,
        purpose: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(
            "info",
            "category_created",
            correlation_id,
            category_id=str(category_id),
            purpose=purpose,
        )

    def log_transaction_admitted(
        self,
        transaction_id: UUID,
        kind: str,
        amount: str,
        person_id: UUID,
        category_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(
            "info",
            "transaction_admitted",
            correlation_id,
            transaction_id=str(transaction_id),
            kind=kind,
            amount=amount,
            person_id=str(person_id),
            category_id=str(category_id),
        )

    def log_transaction_rejected(
        self,
        reason: str,
        message: str,
        person_id: Optional[UUID] = None,
        category_id: Optional[UUID] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected admission. Rejections are expected, hence warning."""
        self._emit(
            "warning",
            "transaction_rejected",
            correlation_id,
            reason=reason,
            message=message,
            person_id=str(person_id) if person_id else None,
            category_id=str(category_id) if category_id else None,
        )

    def log_person_deleted(
        self,
        person_id: UUID,
        deleted_transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(
            "info",
            "person_deleted",
            correlation_id,
            person_id=str(person_id),
            deleted_transaction_count=deleted_transaction_count,
        )

    def log_orphan_categories_swept(
        self,
        category_ids: list[UUID],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(
            "info",
            "orphan_categories_swept",
            correlation_id,
            deleted_orphan_category_count=len(category_ids),
            category_ids=[str(c) for c in category_ids],
        )

    def log_report_generated(
        self,
        grouping: str,
        group_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(
            "info",
            "report_generated",
            correlation_id,
            grouping=grouping,
            group_count=group_count,
        )

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(
            "error",
            "system_error",
            correlation_id,
            error_type=error_type,
            error_message=error_message,
            details=details or {},
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g. deleting a person).
    Pass it through all subsequent operations.
    """
    return uuid4()
