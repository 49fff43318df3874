"""
In-Memory Storage

The default backend for the dashboard. Transactions live in a list that
is only ever replaced under a lock, and list() hands out a tuple copy, so a
snapshot can never change underneath a computation that is using it.
"""

import threading
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Optional
from uuid import UUID, uuid4

import structlog

from ledger.models.audit import AuditEvent, AuditEventBuilder
from ledger.models.transaction import NewTransaction, Transaction, TransactionType
from ledger.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    TransactionStoreInterface,
)

if TYPE_CHECKING:
    from ledger.audit.logger import AuditLogger


logger = structlog.get_logger(__name__)


class InMemoryTransactionStore(TransactionStoreInterface):
    """
    Thread-safe, in-process transaction store.

    Ids come from id_factory (uuid4 by default); they are never reused.
    """

    def __init__(
        self,
        transactions: Optional[Iterable[Transaction]] = None,
        audit_logger: Optional["AuditLogger"] = None,
        id_factory: Callable[[], UUID] = uuid4,
    ):
        self._lock = threading.Lock()
        self._transactions: list[Transaction] = []
        self._audit_logger = audit_logger
        self._id_factory = id_factory

        seen: set[UUID] = set()
        for transaction in transactions or ():
            if transaction.id in seen:
                raise DuplicateError(f"Duplicate transaction id: {transaction.id}")
            seen.add(transaction.id)
            self._transactions.append(transaction)

    def __len__(self) -> int:
        return len(self._transactions)

    def list(self) -> tuple[Transaction, ...]:
        with self._lock:
            return tuple(self._transactions)

    def get(self, transaction_id: UUID) -> Optional[Transaction]:
        with self._lock:
            for transaction in self._transactions:
                if transaction.id == transaction_id:
                    return transaction
        return None

    def add(
        self,
        transaction: NewTransaction,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        with self._lock:
            transaction_id = self._id_factory()
            if any(t.id == transaction_id for t in self._transactions):
                raise DuplicateError(f"Id factory produced a used id: {transaction_id}")
            stored = Transaction.from_new(transaction, transaction_id)
            self._transactions = [stored, *self._transactions]

        logger.debug("transaction_stored", transaction_id=str(stored.id), size=len(self))
        if self._audit_logger:
            self._audit_logger.log_transaction_added(stored, correlation_id)
        return stored

    def remove(
        self,
        transaction_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        with self._lock:
            remaining = [t for t in self._transactions if t.id != transaction_id]
            removed = len(remaining) != len(self._transactions)
            self._transactions = remaining

        if self._audit_logger:
            self._audit_logger.log_transaction_removed(
                transaction_id, removed, correlation_id
            )
        return removed

    def clear(self) -> None:
        with self._lock:
            self._transactions = []


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit sink kept in a list, oldest first."""

    def __init__(self):
        self._lock = threading.Lock()
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        with self._lock:
            self._events.append(event)
        return True

    def get_events_by_correlation_id(self, correlation_id: UUID) -> list[AuditEvent]:
        with self._lock:
            return [e for e in self._events if e.correlation_id == correlation_id]

    def get_events_by_entity(self, entity_type: str, entity_id: UUID) -> list[AuditEvent]:
        with self._lock:
            return [
                e for e in self._events
                if e.entity_type == entity_type and e.entity_id == entity_id
            ]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        with self._lock:
            return list(reversed(self._events))[:limit]


def sample_transactions() -> list[Transaction]:
    """The demo records the dashboard starts with."""
    rows = [
        ("3500", "Monthly Salary", "Salary", TransactionType.INCOME, 1),
        ("1200", "Rent Payment", "Housing", TransactionType.EXPENSE, 2),
        ("350", "Grocery Shopping", "Food", TransactionType.EXPENSE, 3),
        ("150", "Freelance Project", "Freelance", TransactionType.INCOME, 4),
        ("80", "Gas Station", "Transportation", TransactionType.EXPENSE, 5),
    ]
    return [
        Transaction(
            id=uuid4(),
            amount=Decimal(amount),
            description=description,
            category=category,
            type=transaction_type,
            date=datetime(2024, 1, day),
        )
        for amount, description, category, transaction_type, day in rows
    ]
