from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ReservationStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


@dataclass(frozen=True)
class Reservation:
    start: datetime
    end: datetime
    staff_id: str | None = None  # None: booked as "any", no staff assigned
    status: ReservationStatus = ReservationStatus.confirmed
    id: str | None = None
    business_id: str | None = None
    service_id: str | None = None
    customer_id: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status != ReservationStatus.cancelled


@dataclass(frozen=True)
class ReservationRequest:
    business_id: str
    customer_id: str
    service_id: str
    staff_id: str | None
    start: datetime
    end: datetime
    status: ReservationStatus = ReservationStatus.confirmed
