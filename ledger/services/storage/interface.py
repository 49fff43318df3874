"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Use in-memory storage for the dashboard and for testing
2. Swap in a file or database backend later
3. Keep the analytics engine decoupled from storage entirely

The engine never talks to storage. It receives the snapshot that list()
returns and nothing else.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from ledger.models.audit import AuditEvent
from ledger.models.transaction import NewTransaction, Transaction


class TransactionStoreInterface(ABC):
    """
    Abstract interface for transaction storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def list(self) -> tuple[Transaction, ...]:
        """
        Return an immutable snapshot of every stored transaction.

        Returns:
            Transactions, most recently added first
        """
        pass

    @abstractmethod
    def add(
        self,
        transaction: NewTransaction,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Store a new transaction.

        The store assigns the id and prepends the record.

        Returns:
            The stored transaction with its id
        """
        pass

    @abstractmethod
    def remove(
        self,
        transaction_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Remove a transaction by id.

        Returns:
            True if a record was removed, False if none matched
        """
        pass

    @abstractmethod
    def get(self, transaction_id: UUID) -> Optional[Transaction]:
        """
        Retrieve a transaction by id.

        Returns:
            The transaction if found, None otherwise
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one form submission).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity.

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
