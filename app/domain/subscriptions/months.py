"""
Domain service: calendar month arithmetic and billed-month calculation.

Pure business logic. No framework imports. No IO. No side effects.
"""

from datetime import date
from typing import Optional

from app.domain.subscriptions.entities import Subscription

MONTHS_PER_YEAR = 12


def month_start(value: date) -> date:
    """Normalize a date to the first day of its calendar month."""
    return value.replace(day=1)


def months_inclusive(start: date, end: date) -> int:
    """Count calendar months from ``start`` to ``end``, both inclusive.

    Returns 1 when both dates fall in the same month and never less than 0.
    """
    months = (end.year - start.year) * MONTHS_PER_YEAR + (end.month - start.month) + 1
    return max(months, 0)


def billed_months(
    subscription: Subscription, period_start: date, period_end: date
) -> int:
    """Return how many months of ``subscription`` fall inside the window.

    An open-ended subscription is treated as running through ``period_end``.

    Args:
        subscription: Candidate subscription.
        period_start: First month of the window (inclusive).
        period_end: Last month of the window (inclusive).

    Returns:
        Number of overlapping months, 0 if the intervals are disjoint.
    """
    overlap_start = max(month_start(subscription.start_month), month_start(period_start))
    effective_end = _clamped_end(subscription.end_month, month_start(period_end))

    if overlap_start > effective_end:
        return 0

    return months_inclusive(overlap_start, effective_end)


def _clamped_end(end_month: Optional[date], period_end: date) -> date:
    if end_month is not None and month_start(end_month) < period_end:
        return month_start(end_month)
    return period_end
