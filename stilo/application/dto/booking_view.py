from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from stilo.domain.entities.booking_draft import BookingStep
from stilo.domain.entities.reservation import Reservation
from stilo.domain.entities.service import Service
from stilo.domain.entities.staff import StaffMember


@dataclass(frozen=True)
class ReviewSummary:
    service_name: str
    price: Decimal
    duration_minutes: int
    staff_label: str
    date_label: str
    time_label: str


@dataclass(frozen=True)
class BookingView:
    """Read-only snapshot of a booking session, for rendering."""

    business_id: str
    business_name: str | None
    step: BookingStep
    progress: float
    can_go_forward: bool
    can_go_back: bool
    loading: bool
    slots_loading: bool
    submitting: bool
    services: list[Service] = field(default_factory=list)
    staff: list[StaffMember] = field(default_factory=list)
    dates: list[date] = field(default_factory=list)
    slots: list[str] = field(default_factory=list)
    service_id: str | None = None
    staff_id: str | None = None
    date: date | None = None
    time: str | None = None
    summary: ReviewSummary | None = None
    notice: str | None = None
    error: str | None = None
    auth_redirect: str | None = None
    reservation: Reservation | None = None
