"""
Main Orchestrator for the Ledger

This module ties together the store, the form validator, the analytics
engine and the audit logger, and defines the two flows the dashboard has:
1. Edit (form data -> validate -> store, or remove by id)
2. View (snapshot -> summary, categories, trend, filtered list)

DESIGN DECISION: Every view in one render is computed from a single
snapshot. The views never depend on each other's output, and none of them
are cached here; memoising is up to the presentation layer.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from ledger.analytics import (
    build_category_distribution,
    build_monthly_trend,
    build_summary,
)
from ledger.audit import AuditLogger, configure_logging, create_correlation_id
from ledger.config import Settings, get_settings
from ledger.models.transaction import (
    CategorySlice,
    MonthPoint,
    QueryOptions,
    QueryResult,
    Summary,
    Transaction,
    ValidationResult,
)
from ledger.queries import QueryExecutor
from ledger.services.storage import (
    InMemoryAuditStorage,
    InMemoryTransactionStore,
    TransactionStoreInterface,
    sample_transactions,
)
from ledger.validation import TransactionValidator


class TransactionRejectedError(ValueError):
    """Form data failed validation and was not stored."""

    def __init__(self, result: ValidationResult):
        messages = [i.message for i in result.issues if i.severity == "error"]
        super().__init__("; ".join(messages) or "Transaction rejected")
        self.result = result


class DashboardView(BaseModel):
    """Every derived view for one snapshot."""
    model_config = ConfigDict(frozen=True)

    summary: Summary
    categories: tuple[CategorySlice, ...]
    trend: tuple[MonthPoint, ...]
    transactions: QueryResult
    available_categories: tuple[str, ...]


class LedgerDashboard:
    """
    Orchestrates edits to the store and the views built from it.

    Edit flow:
    1. Validate form data (two stages)
    2. Store the accepted transaction (id assigned by the store)

    Nothing reaches the store without passing validation.
    """

    def __init__(
        self,
        store: Optional[TransactionStoreInterface] = None,
        validator: Optional[TransactionValidator] = None,
        executor: Optional[QueryExecutor] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._audit_logger = audit_logger
        self._store = store or InMemoryTransactionStore(audit_logger=audit_logger)
        self._validator = validator or TransactionValidator()
        self._executor = executor or QueryExecutor()

    @property
    def store(self) -> TransactionStoreInterface:
        return self._store

    # -------------------------------------------------------------------------
    # Edit flow
    # -------------------------------------------------------------------------

    def add_transaction(
        self,
        form_data: Mapping[str, Any],
        now: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Validate form data and store it.

        Raises:
            TransactionRejectedError: validation found errors
        """
        correlation_id = correlation_id or create_correlation_id()
        result = self._validator.validate(form_data, now=now)

        if self._audit_logger:
            self._audit_logger.log_validation(
                issues=[issue.model_dump() for issue in result.issues],
                accepted=result.is_valid,
                correlation_id=correlation_id,
            )

        if not result.is_valid or result.transaction is None:
            raise TransactionRejectedError(result)

        return self._store.add(result.transaction, correlation_id=correlation_id)

    def remove_transaction(
        self,
        transaction_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Remove a transaction; False when no record had that id."""
        return self._store.remove(
            transaction_id,
            correlation_id=correlation_id or create_correlation_id(),
        )

    # -------------------------------------------------------------------------
    # View flow
    # -------------------------------------------------------------------------

    def summary(self) -> Summary:
        return build_summary(self._store.list())

    def category_breakdown(self) -> list[CategorySlice]:
        return build_category_distribution(self._store.list())

    def monthly_trend(self, now: Optional[datetime] = None) -> list[MonthPoint]:
        return build_monthly_trend(
            self._store.list(),
            now or datetime.now(),
            label_format=self._settings.display.month_label_format,
        )

    def query(
        self,
        options: Union[QueryOptions, Mapping[str, Any], None] = None,
    ) -> QueryResult:
        result = self._executor.execute(self._store.list(), options)
        if self._audit_logger:
            self._audit_logger.log_query_executed(
                match_count=result.match_count,
                total_count=result.total_count,
                options=self._options_dict(options),
            )
        return result

    def categories(self) -> list[str]:
        return self._executor.list_categories(self._store.list())

    def build_view(
        self,
        options: Union[QueryOptions, Mapping[str, Any], None] = None,
        now: Optional[datetime] = None,
    ) -> DashboardView:
        """Compute every view against one snapshot."""
        snapshot = self._store.list()
        return DashboardView(
            summary=build_summary(snapshot),
            categories=tuple(build_category_distribution(snapshot)),
            trend=tuple(build_monthly_trend(
                snapshot,
                now or datetime.now(),
                label_format=self._settings.display.month_label_format,
            )),
            transactions=self._executor.execute(snapshot, options),
            available_categories=tuple(self._executor.list_categories(snapshot)),
        )

    @staticmethod
    def _options_dict(options: Union[QueryOptions, Mapping[str, Any], None]) -> dict:
        if isinstance(options, QueryOptions):
            return options.model_dump(mode="json")
        return dict(options or {})


def create_app_components(
    seed: bool = True,
) -> tuple[LedgerDashboard, InMemoryTransactionStore, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        seed: Start the store with the demo transactions.

    Returns:
        (dashboard, store, audit_logger)
    """
    configure_logging()

    audit_logger = AuditLogger(InMemoryAuditStorage())
    store = InMemoryTransactionStore(
        transactions=sample_transactions() if seed else None,
        audit_logger=audit_logger,
    )
    dashboard = LedgerDashboard(store=store, audit_logger=audit_logger)

    return dashboard, store, audit_logger
