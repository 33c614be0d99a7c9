"""Date and timestamp helpers shared by the sync services."""

import calendar
from datetime import date, datetime, timezone
from typing import Any


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime.

    Stored timestamps are naive UTC, so comparisons against database values
    must use the same representation.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_date(value: Any) -> date | None:
    """Parse a date from an ISO string (date or datetime) or return None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def parse_datetime(value: Any) -> datetime | None:
    """
    Parse an ESPN timestamp into a naive UTC datetime.

    ESPN mixes "2024-09-06T00:20Z", "2024-08-01T07:00Z" and full ISO
    offsets; plain dates are accepted as midnight.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def add_months(value: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping the day to month length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def format_espn_date(value: date) -> str:
    """Format a date the way the scoreboard `dates` parameter expects (YYYYMMDD)."""
    return value.strftime("%Y%m%d")
