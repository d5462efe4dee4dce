"""Date and period arithmetic for commuter pass refunds.

All functions work on calendar days (datetime.date). Callers normalize any
datetime to its date once, at the input boundary, with normalize_date().
"""

import calendar
import datetime as dt
from typing import TYPE_CHECKING

from pass_refund.config import DECADE_DAYS, GRACE_PERIOD_DAYS

if TYPE_CHECKING:
    from pass_refund.models.enums import PassTier


def _is_aware(value: dt.datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


def common_timezone(*values: object) -> dt.tzinfo | None:
    """Time zone in which a set of datetimes is read as calendar days.

    The first timezone-aware datetime sets the zone for all of them.
    Plain dates and other values are ignored.

    Raises:
        ValueError: If aware and naive datetimes are mixed
    """
    stamps = [value for value in values if isinstance(value, dt.datetime)]
    aware = [value for value in stamps if _is_aware(value)]
    if aware and len(aware) != len(stamps):
        raise ValueError("datetimes must be all timezone-aware or all naive")
    return aware[0].tzinfo if aware else None


def normalize_date(value: dt.date | dt.datetime, tz: dt.tzinfo | None = None) -> dt.date:
    """Drop the time of day, keeping the calendar date.

    An aware datetime is first converted to tz, so that two moments are
    compared on the same calendar.
    """
    if isinstance(value, dt.datetime):
        if tz is not None and _is_aware(value):
            value = value.astimezone(tz)
        return value.date()
    return value


def add_months(start: dt.date, months: int) -> dt.date:
    """Add calendar months, clamping to the last day of the target month.

    Args:
        start: Base date
        months: Number of months to add (may be zero)

    Returns:
        The shifted date, e.g. 2025-01-31 + 1 month = 2025-02-28

    Raises:
        OverflowError: If the result is outside the supported date range
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    if not dt.MINYEAR <= year <= dt.MAXYEAR:
        raise OverflowError(f"date out of range: {start.isoformat()} + {months} months")
    day = min(start.day, calendar.monthrange(year, month)[1])
    return dt.date(year, month, day)


def elapsed_days(start: dt.date, end: dt.date) -> int:
    """Count days from start to end inclusive; the start day counts as one."""
    return (end - start).days + 1


def end_date(start: dt.date, tier: "PassTier") -> dt.date:
    """Last valid day of a pass: one day before start + tier months."""
    return add_months(start, tier.months) - dt.timedelta(days=1)


def months_between(start: dt.date, end: dt.date) -> int:
    """Whole calendar months from start to end.

    A month is complete once the start's day of month is reached again,
    so 2025-08-04 to 2025-09-04 is one month and 2025-08-05 to 2025-09-04
    is zero. Returns 0 when end precedes start.
    """
    if end < start:
        return 0
    months = (end.year - start.year) * 12 + end.month - start.month
    if end.day < start.day:
        months -= 1
    return months


def used_months(start: dt.date, refund: dt.date) -> int:
    """Index of the pass month the refund date falls in.

    Returns 0 inside the grace period. Otherwise month 1 runs from start
    up to (not including) start + 1 month, month 2 up to start + 2 months,
    and so on. Each boundary is measured from start so day clamping in
    short months never accumulates.
    """
    if elapsed_days(start, refund) <= GRACE_PERIOD_DAYS:
        return 0

    month = 1
    while refund >= add_months(start, month):
        month += 1
    return month


def used_decades(days: int) -> int:
    """Ten-day blocks needed to cover days; a partial block counts as one."""
    full, remainder = divmod(days, DECADE_DAYS)
    return full + (1 if remainder > 0 else 0)


def daily_fare(amount: int, base_days: int) -> int:
    """Per-day fare rounded up to a whole yen."""
    return -(-amount // base_days)
