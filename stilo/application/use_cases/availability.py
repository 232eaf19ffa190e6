from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Sequence

from stilo.application.utils.time_parsing import format_slot_label, parse_time_of_day, weekday_index
from stilo.domain.entities.operating_hours import OperatingHours
from stilo.domain.entities.reservation import Reservation
from stilo.domain.entities.service import Service
from stilo.domain.entities.staff import AnyStaff, StaffScope

SLOT_INTERVAL_MINUTES = 30


def find_hours_for_day(day: date, operating_hours: Iterable[OperatingHours]) -> OperatingHours | None:
    dow = weekday_index(day)
    for entry in operating_hours:
        if entry.day_of_week == dow:
            return entry
    return None


def opening_window(day: date, operating_hours: Iterable[OperatingHours]) -> tuple[datetime, datetime] | None:
    """
    Open and close instants for `day`, or None when the business is closed.
    Missing, closed, malformed or inverted hours all count as closed.
    """
    entry = find_hours_for_day(day, operating_hours)
    if entry is None or entry.is_closed:
        return None
    open_time = parse_time_of_day(entry.open_time)
    close_time = parse_time_of_day(entry.close_time)
    if open_time is None or close_time is None:
        return None
    opens_at = datetime.combine(day, open_time)
    closes_at = datetime.combine(day, close_time)
    if closes_at <= opens_at:
        return None
    return opens_at, closes_at


def overlaps(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    """Half-open interval overlap; touching endpoints do not overlap."""
    return other_start < end and other_end > start


def is_slot_busy(
    slot_start: datetime,
    slot_end: datetime,
    staff_scope: StaffScope,
    staff_roster_size: int,
    reservations: Sequence[Reservation],
) -> bool:
    if isinstance(staff_scope, AnyStaff):
        # Nobody on the roster means nobody can take the booking.
        if staff_roster_size <= 0:
            return True
        concurrent = sum(
            1 for r in reservations if r.is_active and overlaps(slot_start, slot_end, r.start, r.end)
        )
        return concurrent >= staff_roster_size

    return any(
        r.is_active and r.staff_id == staff_scope.id and overlaps(slot_start, slot_end, r.start, r.end)
        for r in reservations
    )


def compute_available_slots(
    day: date,
    service: Service,
    staff_scope: StaffScope,
    operating_hours: Sequence[OperatingHours],
    staff_roster_size: int,
    reservations: Sequence[Reservation],
    now: datetime,
) -> list[str]:
    """
    Bookable start times for `service` on `day`, as "09:30 AM" style labels.

    Candidates start at opening time and advance in fixed 30 minute steps,
    independent of the service length, while the whole service still fits
    before closing. A candidate is dropped when it is busy for the staff
    scope or starts before `now`.

    With a specific staff member, any overlapping reservation of theirs makes
    the slot busy. With ANY_STAFF, the slot is busy once the number of
    overlapping reservations (any staff, assigned or not) reaches the roster
    size.
    """
    window = opening_window(day, operating_hours)
    if window is None:
        return []
    opens_at, closes_at = window

    duration = timedelta(minutes=service.duration_minutes)
    step = timedelta(minutes=SLOT_INTERVAL_MINUTES)
    active = [r for r in reservations if r.is_active]

    slots: list[str] = []
    slot_start = opens_at
    while slot_start + duration <= closes_at:
        slot_end = slot_start + duration
        if slot_start >= now and not is_slot_busy(slot_start, slot_end, staff_scope, staff_roster_size, active):
            slots.append(format_slot_label(slot_start))
        slot_start += step

    return slots
