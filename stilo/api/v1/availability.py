from __future__ import annotations

import datetime as dt
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from stilo.api.v1.schemas import AvailabilityResponseSchema
from stilo.application.exceptions import BackendContractError, BackendUnavailableError
from stilo.application.ports.business_catalog import BusinessCatalogPort
from stilo.application.ports.reservation_store import ReservationStorePort
from stilo.application.use_cases.availability import compute_available_slots, opening_window
from stilo.domain.entities.staff import ANY_STAFF, ANY_STAFF_KEY, AnyStaff
from stilo.wiring.dependencies import get_business_catalog, get_reservation_store, local_now

router = APIRouter()
logger = logging.getLogger(__name__)


def reservation_store() -> ReservationStorePort:
    return get_reservation_store()


@router.get("/businesses/{business_id}/availability", response_model=AvailabilityResponseSchema)
async def get_availability(
    business_id: str,
    date: dt.date = Query(...),
    service_id: str = Query(...),
    staff_id: str = Query(ANY_STAFF_KEY),
    catalog: BusinessCatalogPort = Depends(get_business_catalog),
    reservations: ReservationStorePort = Depends(reservation_store),
):
    try:
        services = await catalog.get_active_services(business_id)
        service = next((s for s in services if s.id == service_id), None)
        if service is None:
            raise HTTPException(status_code=404, detail="Service not found")

        staff = await catalog.get_active_staff(business_id)
        if staff_id.lower() == ANY_STAFF_KEY:
            scope = ANY_STAFF
        else:
            scope = next((m for m in staff if m.id == staff_id), None)
            if scope is None:
                raise HTTPException(status_code=404, detail="Staff member not found")

        hours = await catalog.get_operating_hours(business_id)
        existing = []
        if opening_window(date, hours) is not None:
            existing = await reservations.get_reservations_for_date(
                business_id,
                date,
                None if isinstance(scope, AnyStaff) else scope.id,
            )
    except (BackendUnavailableError, BackendContractError) as e:
        logger.warning("Availability lookup failed", extra={"business_id": business_id, "error": str(e)})
        raise HTTPException(status_code=502, detail=str(e))

    slots = compute_available_slots(
        day=date,
        service=service,
        staff_scope=scope,
        operating_hours=hours,
        staff_roster_size=len(staff),
        reservations=existing,
        now=local_now(),
    )
    return AvailabilityResponseSchema(
        business_id=business_id,
        date=date,
        service_id=service.id,
        staff_id=staff_id.lower() if isinstance(scope, AnyStaff) else scope.id,
        slots=slots,
    )
