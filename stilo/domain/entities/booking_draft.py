from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from stilo.domain.entities.service import Service
from stilo.domain.entities.staff import StaffScope


class BookingStep(str, Enum):
    service = "service"
    staff = "staff"
    date_time = "date_time"
    review = "review"
    auth_interrupt = "auth_interrupt"
    confirmation = "confirmation"


# Visible wizard steps, in order. AUTH_INTERRUPT is an excursion from review.
WIZARD_STEPS: tuple[BookingStep, ...] = (
    BookingStep.service,
    BookingStep.staff,
    BookingStep.date_time,
    BookingStep.review,
)


@dataclass(frozen=True)
class BookingDraft:
    service: Service | None = None
    staff: StaffScope | None = None
    date: date | None = None
    time: str | None = None  # slot label, e.g. "09:30 AM"
    step: BookingStep = BookingStep.service

    @property
    def is_complete(self) -> bool:
        return (
            self.service is not None
            and self.staff is not None
            and self.date is not None
            and self.time is not None
        )


@dataclass(frozen=True)
class PartialBookingDraft:
    """Scalar draft fields recovered from redirect parameters; any may be missing."""

    service_id: str | None = None
    staff_id: str | None = None  # a staff id or "any"
    date: date | None = None
    time: str | None = None

    @property
    def is_complete(self) -> bool:
        return None not in (self.service_id, self.staff_id, self.date, self.time)
