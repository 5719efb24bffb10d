"""
Date helpers shared by the prioritizer and aggregator.

All functions take ``now`` explicitly and never read the system clock.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Optional

SECONDS_PER_DAY = 24 * 60 * 60


def align(value: datetime, now: datetime) -> datetime:
    """
    Express ``value`` in the same timezone as ``now``.

    Naive values are taken to be in ``now``'s zone. A naive ``now`` is
    taken to be UTC.
    """
    if now.tzinfo is None:
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    if value.tzinfo is None:
        return value.replace(tzinfo=now.tzinfo)
    return value.astimezone(now.tzinfo)


def to_utc(value: datetime, now: datetime) -> datetime:
    """
    Express ``value`` as a UTC instant, reading naive values as ``align`` does.

    Elapsed time and ordering must be computed on UTC instants: aware values
    sharing one zone are subtracted and compared by wall clock, which is off
    by the DST shift across a transition.
    """
    value = align(value, now)
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


def day_difference(later: datetime, earlier: datetime) -> int:
    """
    Whole-day difference ``later - earlier``, rounded up.

    Any partial day counts as a full one, so something due in three hours is
    one day out and something three hours overdue is zero days out.
    """
    elapsed = to_utc(later, earlier) - to_utc(earlier, earlier)
    return math.ceil(elapsed.total_seconds() / SECONDS_PER_DAY)


def is_same_day(value: datetime, now: datetime) -> bool:
    """Calendar-day equality in ``now``'s timezone."""
    return align(value, now).date() == now.date()


def is_next_day(value: datetime, now: datetime) -> bool:
    return align(value, now).date() == (now + timedelta(days=1)).date()


def format_short_date(value: datetime) -> str:
    """US short date, e.g. 3/7/2025."""
    return f"{value.month}/{value.day}/{value.year}"


def format_relative(
    value: Optional[datetime],
    now: datetime,
    date_format: Optional[str] = None
) -> str:
    """
    Format a due date relative to ``now``.

    Rules (first match wins):
        - Same calendar day: "Today"
        - Next calendar day: "Tomorrow"
        - Ceil day difference < 0: "N days overdue"
        - Ceil day difference 0-7: "N days"
        - Later: absolute date (US short date, or ``date_format`` if given)

    Args:
        value: Due date (None gives "No due date")
        now: Reference instant
        date_format: Optional strftime pattern for far-off dates

    Returns:
        Short label for display
    """
    if value is None:
        return "No due date"

    if is_same_day(value, now):
        return "Today"
    if is_next_day(value, now):
        return "Tomorrow"

    diff = day_difference(value, now)
    if diff < 0:
        return f"{abs(diff)} days overdue"
    if diff <= 7:
        return f"{diff} days"

    local = align(value, now)
    if date_format:
        return local.strftime(date_format)
    return format_short_date(local)


def round_half_up(value: float, digits: int = 1) -> float:
    """Round to ``digits`` decimals with halves going up (-2.25 -> -2.2)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
