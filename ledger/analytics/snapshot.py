"""
Snapshot handling shared by every view.

A snapshot is accepted as any iterable of Transaction objects or of
mappings that validate as one. It is materialised into a tuple once, before
any computation starts, so generators and live lists are both safe to pass.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from ledger.models.transaction import Transaction


class InvalidSnapshotError(ValueError):
    """A snapshot contained something that is not a valid transaction."""

    def __init__(self, message: str, index: int):
        super().__init__(message)
        self.index = index


def freeze_snapshot(records: Iterable[Any]) -> tuple[Transaction, ...]:
    """
    Validate and materialise a snapshot.

    Raises:
        InvalidSnapshotError: a record is malformed or an id repeats
    """
    if isinstance(records, (str, bytes, Mapping)):
        raise InvalidSnapshotError("Snapshot must be a sequence of transactions", -1)

    snapshot = []
    seen_ids = set()
    for index, record in enumerate(records):
        if isinstance(record, Transaction):
            transaction = record
        elif isinstance(record, Mapping):
            try:
                transaction = Transaction.model_validate(record)
            except ValidationError as e:
                raise InvalidSnapshotError(
                    f"Record {index} is not a valid transaction: {e.error_count()} errors",
                    index,
                ) from e
        else:
            raise InvalidSnapshotError(
                f"Record {index} has unsupported type {type(record).__name__}",
                index,
            )

        if transaction.id in seen_ids:
            raise InvalidSnapshotError(
                f"Record {index} repeats transaction id {transaction.id}",
                index,
            )
        seen_ids.add(transaction.id)
        snapshot.append(transaction)

    return tuple(snapshot)
