"""
Centralized time utilities for graduation date handling.

Every datetime the graduator compares is timezone-aware UTC. Dates parsed
from source code are usually naive (``"2023-01-01"``); those are interpreted
as UTC midnight so that comparisons against the threshold never mix naive
and aware values.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Union

DEFAULT_THRESHOLD_DAYS = 180


def utc_now() -> datetime:
    """
    Get current UTC time as timezone-aware datetime.

    Returns:
        datetime: Current time in UTC with timezone info
    """
    return datetime.now(timezone.utc)


def as_utc(value: Union[date, datetime]) -> datetime:
    """
    Normalize a date or datetime to an aware UTC datetime.

    Naive datetimes and plain dates are assumed to already be UTC.
    """
    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def default_threshold_date(days: int = DEFAULT_THRESHOLD_DAYS) -> datetime:
    """Cutoff before which a kill switch counts as graduated (now - days)."""
    return utc_now() - timedelta(days=days)


def is_before(candidate: Union[date, datetime], threshold: Union[date, datetime]) -> bool:
    """Strict ``candidate < threshold`` after UTC normalization."""
    return as_utc(candidate) < as_utc(threshold)
