"""
Timestamp utilities pinned to the fixed UTC+09:00 business timezone.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

# +09:00, no daylight saving
JST = timezone(timedelta(hours=9))

DATE_FORMAT = '%Y-%m-%d'
MONTH_FORMAT = '%Y-%m'


def to_local_datetime(timestamp: int) -> datetime:
    """Convert an epoch-second timestamp to an aware UTC+09:00 datetime."""
    return datetime.fromtimestamp(int(timestamp), tz=JST)


def to_date_month(timestamp: int) -> Tuple[str, str]:
    """Derive the local date and month strings for a timestamp.

    Args:
        timestamp: Unix timestamp in seconds

    Returns:
        Tuple of (date, month), e.g. ('2024-10-13', '2024-10')
    """
    local = to_local_datetime(timestamp)
    return local.strftime(DATE_FORMAT), local.strftime(MONTH_FORMAT)


def previous_business_day(now: Optional[datetime] = None) -> str:
    """Return the date string of the previous business day.

    Monday maps to the preceding Friday, every other day to the day before.

    Args:
        now: Reference instant (naive values are taken as UTC, uses current time if None)

    Returns:
        Date string in YYYY-MM-DD format
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    local = now.astimezone(JST)
    days = 3 if local.weekday() == 0 else 1
    return (local - timedelta(days=days)).strftime(DATE_FORMAT)
