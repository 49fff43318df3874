"""
Storage Services Package

Provides abstract interfaces and the in-memory implementation for
transaction and audit storage.
"""

from ledger.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    StorageError,
    TransactionStoreInterface,
)
from ledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryTransactionStore,
    sample_transactions,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "TransactionStoreInterface",
    # Exceptions
    "DuplicateError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryTransactionStore",
    "sample_transactions",
]
