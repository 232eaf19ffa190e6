from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta

_TIME_OF_DAY_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2})(?:\.\d+)?)?$")
_SLOT_LABEL_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp][Mm])?$")


def parse_time_of_day(value: str | None) -> time | None:
    """
    Parse a stored wall-clock time ("09:00" or "09:00:00").
    Returns None for anything malformed so callers can treat the day as closed.
    """
    if not value or not isinstance(value, str):
        return None
    match = _TIME_OF_DAY_RE.match(value.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3) or 0)
    if hour > 23 or minute > 59 or second > 59:
        return None
    return time(hour, minute, second)


def format_slot_label(value: time | datetime) -> str:
    """12-hour label with a two-digit hour, e.g. "09:30 AM"."""
    return value.strftime("%I:%M %p")


def parse_slot_label(label: str | None) -> time | None:
    """Parse "09:30 AM", "9:30 pm" or a 24h "14:30" back into a time."""
    if not label or not isinstance(label, str):
        return None
    match = _SLOT_LABEL_RE.match(label.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    meridiem = match.group(3)
    if minute > 59:
        return None
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        meridiem = meridiem.upper()
        if meridiem == "PM" and hour < 12:
            hour += 12
        if meridiem == "AM" and hour == 12:
            hour = 0
    elif hour > 23:
        return None
    return time(hour, minute)


def weekday_index(day: date) -> int:
    """Day of week with Sunday = 0, as stored in business_hours."""
    return (day.weekday() + 1) % 7


def booking_window(today: date, days: int = 14) -> list[date]:
    """Rolling window of bookable dates starting today."""
    return [today + timedelta(days=offset) for offset in range(days)]


def format_long_date(day: date) -> str:
    """e.g. "Monday, Oct 19"."""
    return f"{day.strftime('%A, %b')} {day.day}"
