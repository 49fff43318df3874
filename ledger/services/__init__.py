"""Services package."""

from ledger.services.storage import (
    AuditStorageInterface,
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryTransactionStore,
    StorageError,
    TransactionStoreInterface,
    sample_transactions,
)

__all__ = [
    "AuditStorageInterface",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemoryTransactionStore",
    "StorageError",
    "TransactionStoreInterface",
    "sample_transactions",
]
