"""Income, expense and balance totals."""

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from ledger.analytics.snapshot import freeze_snapshot
from ledger.models.transaction import Summary


def build_summary(records: Iterable[Any]) -> Summary:
    """Totals over a snapshot. An empty snapshot gives all zeros."""
    snapshot = freeze_snapshot(records)

    total_income = sum((t.amount for t in snapshot if t.is_income), Decimal("0"))
    total_expense = sum((t.amount for t in snapshot if t.is_expense), Decimal("0"))

    return Summary(total_income=total_income, total_expense=total_expense)
