"""
Query Execution Engine

DESIGN DECISION: Query execution is DETERMINISTIC.
The list view hands over a QueryOptions; this engine applies it to one
snapshot and returns exactly the matching records, in the requested order.

Filtering: search, type and category filters are AND'ed.
Sorting: a single key (date or amount), stable in both directions, with no
automatic secondary key. Records that compare equal keep snapshot order.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta
from typing import Any, Optional, Union

import structlog
from pydantic import ValidationError

from ledger.analytics.snapshot import freeze_snapshot
from ledger.models.transaction import (
    ALL_CATEGORIES,
    QueryOptions,
    QueryResult,
    SortField,
    SortOrder,
    Transaction,
    TypeFilter,
)


logger = structlog.get_logger(__name__)


class InvalidQueryError(ValueError):
    """Query options could not be validated."""
    pass


class QueryExecutor:
    """
    Executes list queries against a transaction snapshot.

    GUARANTEES:
    - Only returns records from the snapshot it was given
    - Never mutates or copies records; results reference the same objects
    - Re-running a query on its own result returns the same result
    """

    def execute(
        self,
        records: Iterable[Any],
        options: Union[QueryOptions, Mapping[str, Any], None] = None,
    ) -> QueryResult:
        """
        Filter and sort a snapshot.

        Raises:
            InvalidQueryError: options is a mapping with unknown keys or values
            InvalidSnapshotError: a record in the snapshot is malformed
        """
        options = self._coerce_options(options)
        snapshot = freeze_snapshot(records)

        matches = [t for t in snapshot if self._matches(t, options)]
        ordered = self._sort(matches, options.sort_by, options.sort_order)

        logger.debug(
            "query_executed",
            match_count=len(ordered),
            total_count=len(snapshot),
            sort_by=options.sort_by.value,
            sort_order=options.sort_order.value,
        )
        return QueryResult(transactions=tuple(ordered), total_count=len(snapshot))

    def list_categories(self, records: Iterable[Any]) -> list[str]:
        """
        Distinct categories present in the snapshot, in lexicographic order.

        Used to populate the category filter, so it only ever offers
        categories that at least one record actually has.
        """
        snapshot = freeze_snapshot(records)
        return sorted({t.category for t in snapshot})

    def _coerce_options(
        self,
        options: Union[QueryOptions, Mapping[str, Any], None],
    ) -> QueryOptions:
        if options is None:
            return QueryOptions()
        if isinstance(options, QueryOptions):
            return options
        try:
            return QueryOptions.model_validate(dict(options))
        except (TypeError, ValueError) as e:
            # pydantic's ValidationError is a ValueError
            raise InvalidQueryError(f"Invalid query options: {e}") from e

    def _matches(self, transaction: Transaction, options: QueryOptions) -> bool:
        return (
            self._matches_search(transaction, options.search_term)
            and self._matches_type(transaction, options.type_filter)
            and self._matches_category(transaction, options.category_filter)
        )

    def _matches_search(self, transaction: Transaction, search_term: str) -> bool:
        if not search_term:
            return True
        needle = search_term.lower()
        return (
            needle in transaction.description.lower()
            or needle in transaction.category.lower()
        )

    def _matches_type(self, transaction: Transaction, type_filter: TypeFilter) -> bool:
        if type_filter is TypeFilter.ALL:
            return True
        return transaction.type.value == type_filter.value

    def _matches_category(self, transaction: Transaction, category_filter: str) -> bool:
        if category_filter == ALL_CATEGORIES:
            return True
        return transaction.category == category_filter

    def _sort(
        self,
        transactions: list[Transaction],
        sort_by: SortField,
        sort_order: SortOrder,
    ) -> list[Transaction]:
        if sort_by is SortField.DATE:
            key = self._date_key
        else:
            key = self._amount_key
        # reverse=True keeps equal records in their original order
        return sorted(transactions, key=key, reverse=sort_order is SortOrder.DESC)

    @staticmethod
    def _date_key(transaction: Transaction) -> timedelta:
        # Aware dates compare in UTC, naive dates by wall clock. Measured
        # from datetime.min so the full datetime range sorts without overflow.
        date = transaction.date
        offset = date.utcoffset() or timedelta(0)
        return date.replace(tzinfo=None) - datetime.min - offset

    @staticmethod
    def _amount_key(transaction: Transaction):
        return transaction.amount


def execute_query(
    records: Iterable[Any],
    options: Optional[QueryOptions] = None,
) -> QueryResult:
    """Shortcut for QueryExecutor().execute()."""
    return QueryExecutor().execute(records, options)
