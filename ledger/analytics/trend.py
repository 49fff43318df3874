"""
Monthly Trend

Buckets a snapshot into the calendar month containing "now" and the five
months before it, oldest first. "now" is always passed in; nothing here
reads the system clock, so the same inputs always give the same series.

A record belongs to a month when month_start <= record.date <= month_end,
both bounds inclusive. Records outside the window are dropped.
"""

import calendar
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from typing import Any, NamedTuple

import structlog

from ledger.analytics.snapshot import freeze_snapshot
from ledger.models.transaction import MonthPoint


logger = structlog.get_logger(__name__)

TREND_WINDOW_MONTHS = 6
DEFAULT_LABEL_FORMAT = "%b %Y"


class MonthWindow(NamedTuple):
    """First and last instant of one calendar month."""
    year: int
    month: int
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= _align(instant, self.start) <= self.end


def _align(instant: datetime, reference: datetime) -> datetime:
    """
    Make instant comparable with reference.

    Aware instants are converted into the reference's zone. When only one
    side carries a zone, the wall-clock time is compared as is.
    """
    if reference.tzinfo is not None:
        if instant.tzinfo is None:
            return instant.replace(tzinfo=reference.tzinfo)
        return instant.astimezone(reference.tzinfo)
    if instant.tzinfo is not None:
        return instant.replace(tzinfo=None)
    return instant


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Move (year, month) by offset months, crossing year boundaries."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def month_window(year: int, month: int, tzinfo=None) -> MonthWindow:
    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1, tzinfo=tzinfo)
    end = datetime(year, month, last_day, 23, 59, 59, 999999, tzinfo=tzinfo)
    return MonthWindow(year, month, start, end)


def trailing_windows(now: datetime, months: int = TREND_WINDOW_MONTHS) -> list[MonthWindow]:
    """The month containing now and the months - 1 before it, oldest first."""
    if not isinstance(now, datetime):
        raise TypeError(f"now must be a datetime, got {type(now).__name__}")

    windows = []
    for offset in range(months - 1, -1, -1):
        year, month = shift_month(now.year, now.month, -offset)
        windows.append(month_window(year, month, now.tzinfo))
    return windows


def build_monthly_trend(
    records: Iterable[Any],
    now: datetime,
    label_format: str = DEFAULT_LABEL_FORMAT,
) -> list[MonthPoint]:
    """
    Income, expense and net for each month of the trailing window.

    Always returns exactly six points; months without records are zero.
    """
    windows = trailing_windows(now)
    snapshot = freeze_snapshot(records)

    points = []
    dropped = len(snapshot)
    for window in windows:
        income = Decimal("0")
        expense = Decimal("0")
        for transaction in snapshot:
            if not window.contains(transaction.date):
                continue
            dropped -= 1
            if transaction.is_income:
                income += transaction.amount
            else:
                expense += transaction.amount

        points.append(MonthPoint(
            year=window.year,
            month=window.month,
            label=window.start.strftime(label_format),
            income=income,
            expense=expense,
        ))

    logger.debug(
        "monthly_trend_built",
        first_month=points[0].key,
        last_month=points[-1].key,
        outside_window=dropped,
    )
    return points
