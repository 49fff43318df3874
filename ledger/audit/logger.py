"""
Audit Logger

DESIGN DECISION: Every change to the store is logged.
This provides:
1. Complete traceability
2. Debugging capability
3. User can see history of their edits

The audit logger:
- Gracefully handles failures (a failing sink never breaks an add or remove)
- Supports correlation IDs to trace related events
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from ledger.config import get_settings
from ledger.models.audit import AuditEvent, AuditEventBuilder
from ledger.models.transaction import Transaction
from ledger.services.storage.interface import AuditStorageInterface


def configure_logging(
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
) -> None:
    """
    Configure structlog on top of the standard library.

    Arguments left as None are taken from AppSettings.
    """
    app_settings = get_settings().app
    level = level or app_settings.effective_log_level
    json_output = app_settings.log_json if json_output is None else json_output

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

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
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage sink, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("ledger.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_transaction_added(
        self,
        transaction: Transaction,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a store add."""
        event = AuditEventBuilder.transaction_added(
            transaction_id=transaction.id,
            description=transaction.description,
            amount=str(transaction.amount),
            transaction_type=transaction.type.value,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_transaction_removed(
        self,
        transaction_id: UUID,
        removed: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a store remove, or a remove that matched nothing."""
        if removed:
            event = AuditEventBuilder.transaction_removed(
                transaction_id=transaction_id,
                correlation_id=correlation_id,
            )
        else:
            event = AuditEventBuilder.transaction_remove_missed(
                transaction_id=transaction_id,
                correlation_id=correlation_id,
            )
        self.log(event)

    def log_validation(
        self,
        issues: list[dict],
        accepted: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log the outcome of form validation."""
        if accepted:
            event = AuditEventBuilder.validation_passed(
                warning_count=len(issues),
                correlation_id=correlation_id,
            )
        else:
            event = AuditEventBuilder.validation_failed(
                issues=issues,
                correlation_id=correlation_id,
            )
        self.log(event)

    def log_query_executed(
        self,
        match_count: int,
        total_count: int,
        options: dict,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log query execution."""
        event = AuditEventBuilder.query_executed(
            match_count=match_count,
            total_count=total_count,
            options=options,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., submitting the form).
    Pass it through all subsequent operations.
    """
    return uuid4()
