"""Shared fixtures for ledger tests."""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from ledger.models.transaction import Transaction, TransactionType


def make_transaction(
    amount,
    type="expense",
    category="Food",
    description=None,
    date=None,
    id=None,
) -> Transaction:
    return Transaction(
        id=id or uuid4(),
        amount=Decimal(str(amount)),
        description=description or f"{category} {type}",
        category=category,
        type=TransactionType(type),
        date=date or datetime(2024, 1, 15),
    )


@pytest.fixture
def txn():
    """Factory for transactions with sensible defaults."""
    return make_transaction


@pytest.fixture
def scenario_snapshot():
    """Salary, rent and groceries in early January 2024."""
    return [
        make_transaction(3500, "income", "Salary", "Monthly Salary", datetime(2024, 1, 1)),
        make_transaction(1200, "expense", "Housing", "Rent Payment", datetime(2024, 1, 2)),
        make_transaction(350, "expense", "Food", "Grocery Shopping", datetime(2024, 1, 3)),
    ]
