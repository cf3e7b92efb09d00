"""Calendar helpers for YYYY-MM-DD day strings."""

import re
from datetime import UTC, date, datetime, time, timedelta

from fitness_tracker.domain.stats import DateRange

_DATE_PATTERN = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)
_DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)
MAX_MONTH = 12
MAX_DAY_OF_MONTH = 31


def format_date_string(value: date) -> str:
    """Format a date or datetime as YYYY-MM-DD using its own calendar fields."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def get_today_string(now: datetime | None = None) -> str:
    """Return today's date as YYYY-MM-DD."""
    return format_date_string(now or datetime.now())


def get_start_of_day(date_string: str) -> str:
    """Return the UTC ISO timestamp for midnight of the day."""
    return f"{date_string}T00:00:00.000Z"


def get_end_of_day(date_string: str) -> str:
    """Return the UTC ISO timestamp for the last millisecond of the day."""
    return f"{date_string}T23:59:59.999Z"


def get_date_range(days: int, now: datetime | None = None) -> DateRange:
    """Return the range from `days` days ago through today."""
    end = now or datetime.now()
    start = end - timedelta(days=days)
    return DateRange(
        start_date=format_date_string(start),
        end_date=format_date_string(end),
    )


def get_start_of_week(value: date) -> datetime:
    """Return midnight of the Sunday starting the week containing `value`."""
    if not isinstance(value, datetime):
        value = datetime.combine(value, time())
    start = value - timedelta(days=day_of_week(value))
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def parse_date_or_today(value: str | None, now: datetime | None = None) -> str:
    """Return `value` when it looks like YYYY-MM-DD, otherwise today."""
    if value and _DATE_PATTERN.fullmatch(value):
        return value
    return get_today_string(now)


def is_valid_date_string(value: str | None) -> bool:
    """Check the YYYY-MM-DD format and that month and day are in range.

    Day-of-month overflow such as 2024-02-30 is accepted.
    """
    if not isinstance(value, str):
        return False
    match = _DATE_PATTERN.fullmatch(value)
    if match is None:
        return False
    month = int(match.group(2))
    day = int(match.group(3))
    return 1 <= month <= MAX_MONTH and 1 <= day <= MAX_DAY_OF_MONTH


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO timestamp as an aware UTC datetime.

    Naive timestamps are taken to be UTC. Anything unparseable gives None.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def get_day_name(value: date) -> str:
    """Return the English weekday name."""
    return _DAY_NAMES[day_of_week(value)]


def day_of_week(value: date) -> int:
    """Return the weekday index with Sunday as 0."""
    return (value.weekday() + 1) % 7
