from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from stilo.application.dto.booking_view import BookingView
from stilo.domain.entities.booking_draft import BookingStep


class ServiceSchema(BaseModel):
    id: str
    name: str
    duration_minutes: int
    price: Decimal
    description: str | None = None


class StaffSchema(BaseModel):
    id: str
    name: str
    avatar_url: str | None = None


class ReviewSummarySchema(BaseModel):
    service_name: str
    price: Decimal
    duration_minutes: int
    staff_label: str
    date_label: str
    time_label: str


class ReservationSchema(BaseModel):
    id: str | None
    start: dt.datetime
    end: dt.datetime
    staff_id: str | None
    service_id: str | None
    status: str


class BookingSessionSchema(BaseModel):
    session_id: str
    business_id: str
    business_name: str | None
    step: BookingStep
    progress: float
    can_go_forward: bool
    can_go_back: bool
    loading: bool
    slots_loading: bool
    submitting: bool
    services: list[ServiceSchema] = Field(default_factory=list)
    staff: list[StaffSchema] = Field(default_factory=list)
    dates: list[dt.date] = Field(default_factory=list)
    slots: list[str] = Field(default_factory=list)
    service_id: str | None = None
    staff_id: str | None = None
    date: dt.date | None = None
    time: str | None = None
    summary: ReviewSummarySchema | None = None
    notice: str | None = None
    error: str | None = None
    auth_redirect: str | None = None
    reservation: ReservationSchema | None = None

    @classmethod
    def from_view(cls, session_id: str, view: BookingView) -> "BookingSessionSchema":
        reservation = view.reservation
        summary = view.summary
        return cls(
            session_id=session_id,
            business_id=view.business_id,
            business_name=view.business_name,
            step=view.step,
            progress=view.progress,
            can_go_forward=view.can_go_forward,
            can_go_back=view.can_go_back,
            loading=view.loading,
            slots_loading=view.slots_loading,
            submitting=view.submitting,
            services=[
                ServiceSchema(
                    id=s.id,
                    name=s.name,
                    duration_minutes=s.duration_minutes,
                    price=s.price,
                    description=s.description,
                )
                for s in view.services
            ],
            staff=[StaffSchema(id=m.id, name=m.name, avatar_url=m.avatar_url) for m in view.staff],
            dates=view.dates,
            slots=view.slots,
            service_id=view.service_id,
            staff_id=view.staff_id,
            date=view.date,
            time=view.time,
            summary=(
                ReviewSummarySchema(
                    service_name=summary.service_name,
                    price=summary.price,
                    duration_minutes=summary.duration_minutes,
                    staff_label=summary.staff_label,
                    date_label=summary.date_label,
                    time_label=summary.time_label,
                )
                if summary else None
            ),
            notice=view.notice,
            error=view.error,
            auth_redirect=view.auth_redirect,
            reservation=(
                ReservationSchema(
                    id=reservation.id,
                    start=reservation.start,
                    end=reservation.end,
                    staff_id=reservation.staff_id,
                    service_id=reservation.service_id,
                    status=reservation.status.value,
                )
                if reservation else None
            ),
        )


class CreateSessionRequestSchema(BaseModel):
    business_id: str
    restore: dict[str, str] = Field(default_factory=dict)


class SelectServiceSchema(BaseModel):
    service_id: str


class SelectStaffSchema(BaseModel):
    staff_id: str


class SelectDateSchema(BaseModel):
    date: dt.date


class SelectTimeSchema(BaseModel):
    time: str


class AvailabilityResponseSchema(BaseModel):
    business_id: str
    date: dt.date
    service_id: str
    staff_id: str
    slots: list[str]
