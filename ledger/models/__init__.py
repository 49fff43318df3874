"""
Data Models Package

This package contains all Pydantic models used by the ledger.
Every record and derived view flowing through the engine conforms to these schemas.
"""

from ledger.models.transaction import (
    ALL_CATEGORIES,
    CategorySlice,
    MonthPoint,
    NewTransaction,
    QueryOptions,
    QueryResult,
    SortField,
    SortOrder,
    Summary,
    Transaction,
    TransactionType,
    TypeFilter,
    ValidationIssue,
    ValidationResult,
)
from ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "ALL_CATEGORIES",
    "CategorySlice",
    "MonthPoint",
    "NewTransaction",
    "QueryOptions",
    "QueryResult",
    "SortField",
    "SortOrder",
    "Summary",
    "Transaction",
    "TransactionType",
    "TypeFilter",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
