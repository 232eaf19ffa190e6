from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OperatingHours:
    day_of_week: int  # 0 = Sunday ... 6 = Saturday
    is_closed: bool = False
    open_time: str | None = None  # "HH:MM" or "HH:MM:SS", local wall clock
    close_time: str | None = None
