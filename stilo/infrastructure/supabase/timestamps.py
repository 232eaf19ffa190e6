from __future__ import annotations

from datetime import date, datetime, time
from zoneinfo import ZoneInfo


def to_wire(value: datetime, tz: ZoneInfo) -> str:
    """Naive local wall-clock time -> ISO-8601 with offset."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz)
    return value.isoformat()


def from_wire(value: str, tz: ZoneInfo) -> datetime:
    """ISO-8601 timestamp from the backend -> naive local wall-clock time."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed
    return parsed.astimezone(tz).replace(tzinfo=None)


def day_bounds(day: date, tz: ZoneInfo) -> tuple[str, str]:
    """Start and end of a local day, on the wire."""
    return (
        to_wire(datetime.combine(day, time.min), tz),
        to_wire(datetime.combine(day, time.max), tz),
    )
