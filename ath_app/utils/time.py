"""
Time utilities for peak dates and chart lookback windows.
"""

import calendar
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..data.models import ChartRange


def now_utc() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(ts: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    Args:
        ts: Naive (assumed UTC) or aware datetime

    Returns:
        Aware UTC datetime
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def format_iso(ts: datetime) -> str:
    """Format a timestamp as ISO-8601 for payloads and logs."""
    return ensure_utc(ts).isoformat()


def subtract_months(ts: datetime, months: int) -> datetime:
    """
    Move a timestamp back by calendar months, clamping the day of month.

    Example: 2024-03-31 minus 1 month is 2024-02-29.
    """
    month_index = ts.year * 12 + (ts.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(ts.day, calendar.monthrange(year, month)[1])
    return ts.replace(year=year, month=month, day=day)


def range_start(chart_range: ChartRange, now: Optional[datetime] = None) -> datetime:
    """
    Get the start of a chart lookback window.

    Args:
        chart_range: Lookback window
        now: End of the window, defaults to current UTC time

    Returns:
        Start timestamp of the window
    """
    if now is None:
        now = now_utc()

    if chart_range is ChartRange.ONE_DAY:
        return now - timedelta(days=1)
    if chart_range is ChartRange.ONE_WEEK:
        return now - timedelta(days=7)
    if chart_range is ChartRange.ONE_MONTH:
        return subtract_months(now, 1)
    if chart_range is ChartRange.ONE_YEAR:
        return subtract_months(now, 12)
    return subtract_months(now, 60)


def is_expired(stored_at: datetime, ttl: timedelta, now: Optional[datetime] = None) -> bool:
    """True if an entry stored at stored_at is older than ttl."""
    if now is None:
        now = now_utc()
    return ensure_utc(now) - ensure_utc(stored_at) >= ttl
