from __future__ import annotations

import logging
from datetime import date
from typing import Any
from zoneinfo import ZoneInfo

from stilo.application.exceptions import BackendContractError, ReservationRejectedError
from stilo.application.ports.reservation_store import ReservationStorePort
from stilo.domain.entities.reservation import Reservation, ReservationRequest, ReservationStatus
from stilo.infrastructure.supabase.rest_client import SupabaseRestClient
from stilo.infrastructure.supabase.timestamps import day_bounds, from_wire, to_wire


class SupabaseReservationStore(ReservationStorePort):
    def __init__(self, client: SupabaseRestClient, timezone: ZoneInfo, access_token: str | None = None) -> None:
        self._client = client
        self._timezone = timezone
        self._access_token = access_token
        self._logger = logging.getLogger(__name__)

    async def get_reservations_for_date(
        self,
        business_id: str,
        day: date,
        staff_id: str | None = None,
    ) -> list[Reservation]:
        start_of_day, end_of_day = day_bounds(day, self._timezone)
        params = [
            ("select", "id,start_time,end_time,stylist_id,status"),
            ("business_id", f"eq.{business_id}"),
            ("start_time", f"gte.{start_of_day}"),
            ("start_time", f"lte.{end_of_day}"),
            ("status", "neq.cancelled"),
        ]
        if staff_id is not None:
            params.append(("stylist_id", f"eq.{staff_id}"))

        rows = await self._client.select("bookings", params, access_token=self._access_token)
        return [self._from_row(row, business_id) for row in rows]

    async def create_reservation(self, request: ReservationRequest) -> Reservation:
        payload = {
            "business_id": request.business_id,
            "customer_id": request.customer_id,
            "service_id": request.service_id,
            "stylist_id": request.staff_id,
            "start_time": to_wire(request.start, self._timezone),
            "end_time": to_wire(request.end, self._timezone),
            "status": request.status.value,
        }
        try:
            row = await self._client.insert("bookings", payload, access_token=self._access_token)
        except BackendContractError as e:
            raise ReservationRejectedError(str(e)) from e

        self._logger.info(
            "Reservation created",
            extra={"reservation_id": row.get("id"), "business_id": request.business_id},
        )
        return self._from_row({**payload, **row}, request.business_id)

    def _from_row(self, row: dict[str, Any], business_id: str) -> Reservation:
        try:
            return Reservation(
                id=str(row["id"]) if row.get("id") is not None else None,
                start=from_wire(row["start_time"], self._timezone),
                end=from_wire(row["end_time"], self._timezone),
                staff_id=str(row["stylist_id"]) if row.get("stylist_id") is not None else None,
                status=ReservationStatus(row.get("status") or ReservationStatus.confirmed.value),
                business_id=row.get("business_id") or business_id,
                service_id=row.get("service_id"),
                customer_id=row.get("customer_id"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise BackendContractError(f"Malformed booking row: {e}") from e
