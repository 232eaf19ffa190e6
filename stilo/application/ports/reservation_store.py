from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from stilo.domain.entities.reservation import Reservation, ReservationRequest


class ReservationStorePort(ABC):
    @abstractmethod
    async def get_reservations_for_date(
        self,
        business_id: str,
        day: date,
        staff_id: str | None = None,
    ) -> list[Reservation]:
        """
        Non-cancelled reservations starting on `day` (local wall clock).
        When `staff_id` is given only that staff member's reservations are returned.
        """
        raise NotImplementedError

    @abstractmethod
    async def create_reservation(self, request: ReservationRequest) -> Reservation:
        """Persist a reservation. Raises ReservationRejectedError if the insert is refused."""
        raise NotImplementedError
