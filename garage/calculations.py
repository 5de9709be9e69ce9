"""Helper functions for vehicle physics and timestamp handling."""

import math
from datetime import date, datetime, time, timezone
from typing import Any, Optional, Union

from dateutil import parser as date_parser


def truck_load_factor(current_load: float, capacity: float) -> float:
    """
    Acceleration multiplier for a loaded truck.

    Drops linearly as the load grows, never below 0.2.
    """
    return max(0.2, 1 - current_load / (capacity * 1.5))


def truck_brake_factor(current_load: float, capacity: float) -> float:
    """Braking multiplier for a loaded truck, never below 0.3."""
    return max(0.3, 1 - current_load / (capacity * 2.0))


def truck_speed_gain(current_load: float, capacity: float) -> float:
    """Speed added by one truck acceleration step (at least 1)."""
    return max(1, 5 * truck_load_factor(current_load, capacity))


def truck_speed_loss(current_load: float, capacity: float) -> float:
    """Speed removed by one truck braking step (at least 2)."""
    return max(2, 8 * truck_brake_factor(current_load, capacity))


def coerce_number(value: Any, default: float = 0.0) -> float:
    """
    Convert a stored value to float.

    Missing, non-numeric and non-finite values become ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


# Differ in year, month and day so a missing date part shows up.
_FIRST_DEFAULT = datetime(2000, 1, 1)
_SECOND_DEFAULT = datetime(2001, 2, 2)


def parse_full_date(text: str) -> Optional[datetime]:
    """
    Parse text that names a complete calendar date.

    dateutil fills missing year, month or day from today, so "3" or "May"
    would otherwise parse as a date that depends on when it was read.
    Returns None for those and for anything dateutil rejects.
    """
    try:
        first = date_parser.parse(text, default=_FIRST_DEFAULT)
        second = date_parser.parse(text, default=_SECOND_DEFAULT)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first


def to_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are read as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Union[str, date, datetime, None]) -> Optional[datetime]:
    """
    Parse a timestamp into an aware UTC datetime.

    Accepts datetimes, dates (read as midnight) and strings understood by
    dateutil. Returns None when the value can't be interpreted.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, date):
        return to_utc(datetime.combine(value, time.min))
    if not isinstance(value, str) or not value.strip():
        return None
    parsed = parse_full_date(value)
    return to_utc(parsed) if parsed is not None else None


def parse_local_timestamp(day: str, clock: Optional[str] = None) -> Optional[datetime]:
    """
    Combine a date and an optional time of day entered by a user.

    Values without an explicit offset are read as local time. Returns an
    aware UTC datetime, or None when the input doesn't parse.
    """
    if not day or not day.strip():
        return None
    parsed = parse_full_date(f"{day.strip()} {clock or '00:00'}")
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed.astimezone(timezone.utc)


def local_now() -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


def as_reference(now: Optional[datetime]) -> datetime:
    """Normalize the reference instant used by the scheduling queries."""
    if now is None:
        return local_now()
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now
