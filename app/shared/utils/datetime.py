"""
UTC datetime utilities for consistent timezone handling.

Documents store timestamps as ISO-8601 UTC strings and calendar dates as
YYYY-MM-DD strings, so a record read from the store and the same record
read back from the JSON cache compare equal. Use these helpers instead of
datetime.now() or ad-hoc formatting.
"""

from datetime import UTC, date, datetime, timedelta


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Use this instead of:
        - datetime.now() - naive, uses local timezone
        - datetime.utcnow() - naive, deprecated in Python 3.12

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def utc_now_iso() -> str:
    """Return the current UTC instant as an ISO-8601 string (document timestamps)."""
    return utc_now().isoformat()


def today_iso() -> str:
    """Return today's UTC calendar date as YYYY-MM-DD."""
    return utc_now().date().isoformat()


def parse_date(value: str | date | datetime) -> date:
    """
    Parse a calendar date from YYYY-MM-DD, a full ISO timestamp, or a date.

    Raises:
        ValueError: If the string is not an ISO date or timestamp
    """
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    if isinstance(value, date):
        return value
    if len(value) == 10:
        return date.fromisoformat(value)
    return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00"))).date()


def add_days(start: str | date, days: int) -> str:
    """Return start + days as YYYY-MM-DD (e.g. 2024-01-01 + 30 -> 2024-01-31)."""
    return (parse_date(start) + timedelta(days=days)).isoformat()
