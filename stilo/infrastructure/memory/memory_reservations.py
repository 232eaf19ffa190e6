from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date

from stilo.application.exceptions import ReservationRejectedError
from stilo.application.ports.reservation_store import ReservationStorePort
from stilo.domain.entities.reservation import Reservation, ReservationRequest


class MemoryReservationStore(ReservationStorePort):
    def __init__(self, reservations: list[Reservation] | None = None) -> None:
        self._reservations: dict[str, Reservation] = {}
        self._logger = logging.getLogger(__name__)
        for reservation in reservations or []:
            self.add(reservation)

    def add(self, reservation: Reservation) -> Reservation:
        if reservation.id is None:
            reservation = replace(reservation, id=uuid.uuid4().hex)
        self._reservations[reservation.id] = reservation
        return reservation

    def all(self) -> list[Reservation]:
        return sorted(self._reservations.values(), key=lambda r: r.start)

    async def get_reservations_for_date(
        self,
        business_id: str,
        day: date,
        staff_id: str | None = None,
    ) -> list[Reservation]:
        return [
            r
            for r in self.all()
            if r.business_id in (None, business_id)
            and r.start.date() == day
            and r.is_active
            and (staff_id is None or r.staff_id == staff_id)
        ]

    async def create_reservation(self, request: ReservationRequest) -> Reservation:
        if request.end <= request.start:
            raise ReservationRejectedError("Reservation must end after it starts")
        reservation = self.add(
            Reservation(
                start=request.start,
                end=request.end,
                staff_id=request.staff_id,
                status=request.status,
                business_id=request.business_id,
                service_id=request.service_id,
                customer_id=request.customer_id,
            )
        )
        self._logger.info(
            "Mock reservation created",
            extra={
                "reservation_id": reservation.id,
                "business_id": request.business_id,
                "start": request.start.isoformat(),
                "end": request.end.isoformat(),
            },
        )
        return reservation
