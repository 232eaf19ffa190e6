from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Any, Mapping

from stilo.application.dto.booking_context import BookingContext
from stilo.application.dto.booking_view import BookingView, ReviewSummary
from stilo.application.exceptions import (
    BackendContractError,
    BackendUnavailableError,
    IncompleteDraftError,
    ReservationRejectedError,
)
from stilo.application.use_cases.availability import compute_available_slots, opening_window
from stilo.application.utils.draft_codec import build_return_path, decode_draft_params, encode_draft
from stilo.application.utils.time_parsing import booking_window, format_long_date, parse_slot_label
from stilo.domain.entities.booking_draft import WIZARD_STEPS, BookingDraft, BookingStep, PartialBookingDraft
from stilo.domain.entities.identity import CustomerIdentity
from stilo.domain.entities.operating_hours import OperatingHours
from stilo.domain.entities.reservation import Reservation, ReservationRequest, ReservationStatus
from stilo.domain.entities.service import Service
from stilo.domain.entities.staff import ANY_STAFF, ANY_STAFF_KEY, AnyStaff, StaffMember, StaffScope, staff_key

LOAD_FAILED_NOTICE = "Failed to load booking data"
AVAILABILITY_FAILED_NOTICE = "Could not load availability for this date. Please try again."
MISSING_INFO_ERROR = "Please complete all steps."
UNKNOWN_BOOKING_ERROR = "An unknown error occurred."
ANY_STAFF_LABEL = "Any Professional"

_BACKEND_ERRORS = (BackendUnavailableError, BackendContractError)


def build_reservation_request(
    business_id: str,
    draft: BookingDraft,
    customer: CustomerIdentity,
) -> ReservationRequest:
    """Turn a complete draft into the reservation to insert: start = date + slot, end = start + duration."""
    if not draft.is_complete:
        raise IncompleteDraftError("Draft needs service, staff, date and time to be booked")
    slot_time = parse_slot_label(draft.time)
    if slot_time is None:
        raise IncompleteDraftError(f"Unreadable time slot: {draft.time!r}")

    start = datetime.combine(draft.date, slot_time)
    return ReservationRequest(
        business_id=business_id,
        customer_id=customer.id,
        service_id=draft.service.id,
        staff_id=None if isinstance(draft.staff, AnyStaff) else draft.staff.id,
        start=start,
        end=start + timedelta(minutes=draft.service.duration_minutes),
        status=ReservationStatus.confirmed,
    )


class BookingFlowController:
    """
    Multi-step booking wizard: service -> staff -> date & time -> review -> confirmation.

    Owns the in-progress BookingDraft for one session. Backend failures never
    escape: they end up in `notice` (loading) or `error` (submission) and the
    draft stays where it was.
    """

    def __init__(self, context: BookingContext) -> None:
        self._ctx = context
        self._logger = logging.getLogger(__name__)

        self.draft = BookingDraft()
        self.business_name: str | None = None
        self.services: list[Service] = []
        self.staff: list[StaffMember] = []
        self.hours: list[OperatingHours] = []
        self.slots: list[str] = []

        self.loading = False
        self.slots_loading = False
        self.submitting = False
        self.closed = False

        self.notice: str | None = None
        self.error: str | None = None
        self.auth_redirect: str | None = None
        self.reservation: Reservation | None = None

        # Every availability request gets a sequence number; only the latest may apply.
        self._availability_seq = 0
        self._slots_inputs: tuple[str, str, date] | None = None

    @property
    def business_id(self) -> str:
        return self._ctx.business_id

    @property
    def step(self) -> BookingStep:
        return self.draft.step

    @property
    def dates(self) -> list[date]:
        return booking_window(self._ctx.clock().date(), self._ctx.window_days)

    @property
    def progress(self) -> float:
        if self.draft.step in WIZARD_STEPS:
            return (WIZARD_STEPS.index(self.draft.step) + 1) / len(WIZARD_STEPS)
        return 1.0

    @property
    def can_go_forward(self) -> bool:
        if self.closed or self.submitting:
            return False
        draft = self.draft
        if draft.step == BookingStep.service:
            return draft.service is not None
        if draft.step == BookingStep.staff:
            return draft.staff is not None
        if draft.step == BookingStep.date_time:
            return draft.date is not None and draft.time is not None and not self.slots_loading
        if draft.step == BookingStep.review:
            return draft.is_complete
        return False

    @property
    def can_go_back(self) -> bool:
        if self.closed or self.submitting:
            return False
        return self.draft.step not in (BookingStep.service, BookingStep.confirmation)

    async def load(self) -> bool:
        """Fetch name, services, staff and hours. Previously loaded data survives a failure."""
        business_id = self._ctx.business_id
        catalog = self._ctx.catalog
        self.loading = True
        self.notice = None
        try:
            name, services, staff, hours = await asyncio.gather(
                catalog.get_business_name(business_id),
                catalog.get_active_services(business_id),
                catalog.get_active_staff(business_id),
                catalog.get_operating_hours(business_id),
            )
        except _BACKEND_ERRORS as e:
            self._logger.warning(
                "Failed to load booking data",
                extra={"business_id": business_id, "error": str(e)},
            )
            self.notice = LOAD_FAILED_NOTICE
            return False
        finally:
            self.loading = False

        self.business_name = name
        self.services = list(services)
        self.staff = list(staff)
        self.hours = list(hours)
        self._logger.info(
            "Booking data loaded",
            extra={
                "business_id": business_id,
                "service_count": len(self.services),
                "staff_count": len(self.staff),
            },
        )
        return True

    def select_service(self, service_id: str) -> bool:
        if self.closed or self.draft.step != BookingStep.service:
            return False
        service = self._find_service(service_id)
        if service is None:
            return False
        if self.draft.service != service:
            self.draft = replace(self.draft, service=service, time=None)
            self._invalidate_slots()
        return True

    def select_staff(self, staff_id: str) -> bool:
        if self.closed or self.draft.step != BookingStep.staff:
            return False
        scope = self._resolve_staff(staff_id)
        if scope is None:
            return False
        if self.draft.staff != scope:
            self.draft = replace(self.draft, staff=scope, time=None)
            self._invalidate_slots()
        return True

    async def select_date(self, day: date) -> bool:
        if self.closed or self.draft.step != BookingStep.date_time:
            return False
        if day not in self.dates:
            return False
        self.draft = replace(self.draft, date=day, time=None)
        await self.refresh_availability()
        return True

    def select_time(self, slot: str) -> bool:
        if self.closed or self.draft.step != BookingStep.date_time or self.slots_loading:
            return False
        if self._slots_inputs != self._current_inputs() or slot not in self.slots:
            return False
        self.draft = replace(self.draft, time=slot)
        return True

    async def refresh_availability(self) -> bool:
        """
        Recompute slots for the current service, staff scope and date.

        Returns False when the result was not applied: inputs incomplete, the
        fetch failed, or a newer request superseded this one while it was in
        flight.
        """
        inputs = self._current_inputs()
        self._invalidate_slots()
        self.draft = replace(self.draft, time=None)
        if inputs is None or self.closed:
            return False

        seq = self._availability_seq
        service, scope, day = self.draft.service, self.draft.staff, self.draft.date
        self.slots_loading = True
        self.notice = None
        try:
            if opening_window(day, self.hours) is None:
                reservations: list[Reservation] = []
            else:
                reservations = await self._ctx.reservations.get_reservations_for_date(
                    self._ctx.business_id,
                    day,
                    None if isinstance(scope, AnyStaff) else scope.id,
                )
        except _BACKEND_ERRORS as e:
            if self._is_latest(seq, inputs):
                self._logger.warning(
                    "Availability fetch failed",
                    extra={"business_id": self._ctx.business_id, "date": day.isoformat(), "error": str(e)},
                )
                self.notice = AVAILABILITY_FAILED_NOTICE
            return False
        finally:
            # The newest request always clears the flag, even on unexpected errors.
            if seq == self._availability_seq:
                self.slots_loading = False

        if not self._is_latest(seq, inputs):
            self._logger.info(
                "Discarded stale availability result",
                extra={"business_id": self._ctx.business_id, "date": day.isoformat()},
            )
            return False

        self.slots = compute_available_slots(
            day=day,
            service=service,
            staff_scope=scope,
            operating_hours=self.hours,
            staff_roster_size=len(self.staff),
            reservations=reservations,
            now=self._ctx.clock(),
        )
        self._slots_inputs = inputs
        self._logger.info(
            "Availability computed",
            extra={
                "business_id": self._ctx.business_id,
                "service_id": service.id,
                "staff_id": staff_key(scope),
                "date": day.isoformat(),
                "slot_count": len(self.slots),
            },
        )
        return True

    async def go_forward(self) -> bool:
        if not self.can_go_forward:
            return False
        step = self.draft.step
        if step == BookingStep.service:
            self._set_step(BookingStep.staff)
        elif step == BookingStep.staff:
            self._set_step(BookingStep.date_time)
            if self.draft.date is not None:
                await self.refresh_availability()
        elif step == BookingStep.date_time:
            self._set_step(BookingStep.review)
        elif step == BookingStep.review:
            return await self._confirm()
        return True

    async def go_back(self) -> bool:
        if not self.can_go_back:
            return False
        step = self.draft.step
        if step == BookingStep.staff:
            self._set_step(BookingStep.service)
        elif step == BookingStep.date_time:
            # Availability depends on the staff scope, so date and time go with it.
            self.draft = replace(self.draft, date=None, time=None)
            self._invalidate_slots()
            self._set_step(BookingStep.staff)
        elif step == BookingStep.review:
            self._set_step(BookingStep.date_time)
            await self.refresh_availability()
        elif step == BookingStep.auth_interrupt:
            self.auth_redirect = None
            self._set_step(BookingStep.review)
        return True

    async def submit(self, customer: CustomerIdentity) -> bool:
        """Create the reservation. On failure the draft and step are left untouched."""
        if self.closed or self.submitting:
            return False
        self.submitting = True
        try:
            return await self._submit(customer)
        finally:
            self.submitting = False

    async def _submit(self, customer: CustomerIdentity) -> bool:
        self.error = None
        try:
            request = build_reservation_request(self._ctx.business_id, self.draft, customer)
        except IncompleteDraftError:
            self.error = MISSING_INFO_ERROR
            return False

        try:
            reservation = await self._ctx.reservations.create_reservation(request)
        except (ReservationRejectedError, *_BACKEND_ERRORS) as e:
            self._logger.error(
                "Booking submission failed",
                extra={"business_id": self._ctx.business_id, "error": str(e)},
            )
            self.error = str(e) or UNKNOWN_BOOKING_ERROR
            return False

        self.reservation = reservation
        self._set_step(BookingStep.confirmation)
        self._logger.info(
            "Booking confirmed",
            extra={
                "business_id": self._ctx.business_id,
                "reservation_id": reservation.id,
                "service_id": request.service_id,
                "staff_id": request.staff_id,
            },
        )
        return True

    async def restore(self, params: Mapping[str, Any]) -> bool:
        """Rebuild the draft from redirect parameters. See restore_draft()."""
        return await self.restore_draft(decode_draft_params(params))

    async def restore_draft(self, partial: PartialBookingDraft) -> bool:
        """
        Refill a fresh wizard from recovered fields, resolved against the loaded
        services and staff. Fields are taken in wizard order and stop at the first
        one that is missing or no longer valid; the wizard lands on that step.
        The time must be one of the slots computed for the restored date.
        Returns True only when everything resolved and the wizard is on review.
        """
        if self.closed or self.draft != BookingDraft():
            return False

        service = self._find_service(partial.service_id) if partial.service_id else None
        if service is None:
            return False
        draft = BookingDraft(service=service, step=BookingStep.staff)

        scope = self._resolve_staff(partial.staff_id) if partial.staff_id else None
        if scope is None:
            self.draft = draft
            return False
        draft = replace(draft, staff=scope, step=BookingStep.date_time)

        if partial.date is None or partial.date not in self.dates:
            self.draft = draft
            return False
        self.draft = replace(draft, date=partial.date)

        # The time is only trusted once it is one of the freshly computed slots.
        if not await self.refresh_availability() or partial.time not in self.slots:
            if partial.time is not None:
                self._logger.info(
                    "Restored time is not bookable",
                    extra={"business_id": self._ctx.business_id, "date": partial.date.isoformat(), "reason": partial.time},
                )
            return False

        self.draft = replace(self.draft, time=partial.time, step=BookingStep.review)
        self._logger.info(
            "Booking draft restored",
            extra={"business_id": self._ctx.business_id, "step": self.draft.step.value},
        )
        return True

    def review_summary(self) -> ReviewSummary | None:
        draft = self.draft
        if not draft.is_complete:
            return None
        return ReviewSummary(
            service_name=draft.service.name,
            price=draft.service.price,
            duration_minutes=draft.service.duration_minutes,
            staff_label=ANY_STAFF_LABEL if isinstance(draft.staff, AnyStaff) else draft.staff.name,
            date_label=format_long_date(draft.date),
            time_label=draft.time,
        )

    def view(self) -> BookingView:
        draft = self.draft
        return BookingView(
            business_id=self._ctx.business_id,
            business_name=self.business_name,
            step=draft.step,
            progress=self.progress,
            can_go_forward=self.can_go_forward,
            can_go_back=self.can_go_back,
            loading=self.loading,
            slots_loading=self.slots_loading,
            submitting=self.submitting,
            services=list(self.services),
            staff=list(self.staff),
            dates=self.dates,
            slots=list(self.slots),
            service_id=draft.service.id if draft.service else None,
            staff_id=staff_key(draft.staff),
            date=draft.date,
            time=draft.time,
            summary=self.review_summary(),
            notice=self.notice,
            error=self.error,
            auth_redirect=self.auth_redirect,
            reservation=self.reservation,
        )

    def exit(self) -> None:
        """End the flow and discard the draft."""
        self._invalidate_slots()
        self.draft = BookingDraft()
        self.closed = True
        self._logger.info("Booking flow closed", extra={"business_id": self._ctx.business_id})

    async def _confirm(self) -> bool:
        # Held across the identity lookup and the insert so a second confirm is refused.
        self.submitting = True
        self.error = None
        try:
            try:
                customer = await self._ctx.identity.get_current_identity()
            except _BACKEND_ERRORS as e:
                self._logger.warning("Identity lookup failed", extra={"error": str(e)})
                self.error = UNKNOWN_BOOKING_ERROR
                return False

            if customer is None:
                return self._interrupt_for_authentication()
            return await self._submit(customer)
        finally:
            self.submitting = False

    def _interrupt_for_authentication(self) -> bool:
        params = encode_draft(self.draft)
        return_path = build_return_path(self._ctx.business_id, params)
        self.auth_redirect = self._ctx.identity.redirect_to_authentication(return_path, params)
        self._set_step(BookingStep.auth_interrupt)
        self._logger.info(
            "Sign-in required to book",
            extra={"business_id": self._ctx.business_id, "reason": "no_identity"},
        )
        return True

    def _set_step(self, step: BookingStep) -> None:
        self.draft = replace(self.draft, step=step)
        self._logger.debug("Booking step changed", extra={"business_id": self._ctx.business_id, "step": step.value})

    def _invalidate_slots(self) -> None:
        self._availability_seq += 1
        self.slots = []
        self._slots_inputs = None
        self.slots_loading = False

    def _current_inputs(self) -> tuple[str, str, date] | None:
        draft = self.draft
        if draft.service is None or draft.staff is None or draft.date is None:
            return None
        return (draft.service.id, staff_key(draft.staff), draft.date)

    def _is_latest(self, seq: int, inputs: tuple[str, str, date]) -> bool:
        return not self.closed and seq == self._availability_seq and inputs == self._current_inputs()

    def _find_service(self, service_id: str | None) -> Service | None:
        for service in self.services:
            if service.id == service_id:
                return service
        return None

    def _resolve_staff(self, staff_id: str | None) -> StaffScope | None:
        if staff_id is None:
            return None
        if staff_id.lower() == ANY_STAFF_KEY:
            return ANY_STAFF
        for member in self.staff:
            if member.id == staff_id:
                return member
        return None
