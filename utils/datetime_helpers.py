"""Timezone-aware date helpers and the day normalization used across the console."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from flask import current_app


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'UTC')
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def start_of_day(value: date) -> date:
    """
    Strip the time-of-day from a date or datetime.

    Args:
        value: date or datetime

    Returns:
        datetime.date for the same calendar day
    """
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_day(value) -> date | None:
    """
    Convert a stored or submitted day value into a datetime.date.

    Accepts date, datetime, ISO strings ('YYYY-MM-DD' or full ISO datetime)
    and POSIX timestamps. This is the only place that branches on the
    representation of a date.

    Args:
        value: Raw value from a row, a request body or a store

    Returns:
        datetime.date, or None for empty values

    Raises:
        ValueError: If the value cannot be read as a day
    """
    if value is None or value == '':
        return None
    if isinstance(value, (date, datetime)):
        return start_of_day(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value).date()
        except (OverflowError, OSError) as exc:
            raise ValueError(f'Timestamp out of range: {value!r}') from exc
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            return datetime.fromisoformat(text).date()
    raise ValueError(f'Unsupported date value: {value!r}')
