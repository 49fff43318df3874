"""Query execution package."""

from ledger.queries.executor import InvalidQueryError, QueryExecutor, execute_query

__all__ = ["InvalidQueryError", "QueryExecutor", "execute_query"]
