"""
Analytics package.

Pure functions from a transaction snapshot to derived views. None of them
keep state between calls, so they can run on every store change.
"""

from ledger.analytics.distribution import build_category_distribution
from ledger.analytics.snapshot import InvalidSnapshotError, freeze_snapshot
from ledger.analytics.summary import build_summary
from ledger.analytics.trend import (
    TREND_WINDOW_MONTHS,
    build_monthly_trend,
    trailing_windows,
)

__all__ = [
    "InvalidSnapshotError",
    "TREND_WINDOW_MONTHS",
    "build_category_distribution",
    "build_monthly_trend",
    "build_summary",
    "freeze_snapshot",
    "trailing_windows",
]
