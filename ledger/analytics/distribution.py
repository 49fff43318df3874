"""
Category Distribution

Answers "where did the money go": expense records grouped by category,
each with its share of total spending. Income is not part of this view.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

import structlog

from ledger.analytics.snapshot import freeze_snapshot
from ledger.models.transaction import CategorySlice


logger = structlog.get_logger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def build_category_distribution(records: Iterable[Any]) -> list[CategorySlice]:
    """
    Build expense slices, largest first.

    Categories with equal totals keep the order in which they first appear
    in the snapshot. A snapshot without expenses gives an empty list.
    """
    snapshot = freeze_snapshot(records)

    totals: dict[str, Decimal] = {}
    for transaction in snapshot:
        if transaction.is_expense:
            totals[transaction.category] = totals.get(transaction.category, ZERO) + transaction.amount

    total_expense = sum(totals.values(), ZERO)

    slices = [
        CategorySlice(
            category=category,
            amount=amount,
            percentage=amount / total_expense * HUNDRED if total_expense > 0 else ZERO,
        )
        for category, amount in totals.items()
    ]
    # sorted() is stable, including with reverse=True
    slices = sorted(slices, key=lambda s: s.amount, reverse=True)

    logger.debug(
        "category_distribution_built",
        slice_count=len(slices),
        total_expense=str(total_expense),
    )
    return slices
