"""Date and time utilities."""

import re
from datetime import datetime, timedelta
from typing import Optional

_CLOCK_PATTERN = re.compile(r'^\s*(\d{1,2}):(\d{2})\s*$')


def sunday_based_weekday(date: datetime) -> int:
    """Day of week with Sunday as 0 and Saturday as 6."""
    return (date.weekday() + 1) % 7


def end_of_day(date: datetime) -> datetime:
    """Last representable instant of the given calendar day."""
    return date.replace(hour=23, minute=59, second=59, microsecond=999999)


def days_between(start: datetime, end: datetime) -> float:
    """Fractional days from start to end (negative when end is earlier)."""
    return (end - start).total_seconds() / (24 * 3600)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, rounded."""
    return round((end - start).total_seconds() / 60)


def format_clock_time(moment: datetime, now: datetime) -> str:
    """Format a time like '9:30 PM', or 'tomorrow at 2 PM' when not today."""
    hour = moment.hour % 12 or 12
    suffix = 'PM' if moment.hour >= 12 else 'AM'
    minutes = f":{moment.minute:02d}" if moment.minute else ''
    label = f"{hour}{minutes} {suffix}"
    
    if moment.date() == now.date():
        return label
    return f"tomorrow at {label}"


def parse_clock_input(text: str, now: datetime) -> datetime:
    """Parse an 'HH:MM' entry as the next occurrence of that time.
    
    A time earlier than now is taken to mean tomorrow.
    """
    match = _CLOCK_PATTERN.match(text or '')
    if not match:
        raise ValueError(f"Expected a time as HH:MM, got {text!r}")
    
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Not a valid time of day: {text!r}")
    
    candidate = now.replace(hour=hours, minute=minutes, second=0, microsecond=0)
    if candidate < now:
        candidate += timedelta(days=1)
    return candidate


def safe_date(year: int, month: int, day: int) -> Optional[datetime]:
    """Build a datetime, returning None for impossible calendar dates."""
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def to_local_naive(moment: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)
