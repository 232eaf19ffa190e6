"""
Canonical parameter format for carrying a booking draft across an
authentication redirect.

    service_id=<id>&staff_id=<id|any>&date=YYYY-MM-DD&time=09:30 AM

encode_draft() writes it, decode_draft_params() reads it back into a
PartialBookingDraft. Decoding never raises: anything unusable becomes None.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping
from urllib.parse import urlencode

from stilo.application.exceptions import IncompleteDraftError
from stilo.application.utils.time_parsing import format_slot_label, parse_slot_label
from stilo.domain.entities.booking_draft import BookingDraft, PartialBookingDraft
from stilo.domain.entities.staff import staff_key

SERVICE_PARAM = "service_id"
STAFF_PARAM = "staff_id"
DATE_PARAM = "date"
TIME_PARAM = "time"

DRAFT_PARAMS = (SERVICE_PARAM, STAFF_PARAM, DATE_PARAM, TIME_PARAM)


def encode_draft(draft: BookingDraft) -> dict[str, str]:
    if not draft.is_complete:
        raise IncompleteDraftError("Draft needs service, staff, date and time to be serialized")
    return {
        SERVICE_PARAM: draft.service.id,
        STAFF_PARAM: staff_key(draft.staff),
        DATE_PARAM: draft.date.isoformat(),
        TIME_PARAM: draft.time,
    }


def decode_draft_params(params: Mapping[str, Any]) -> PartialBookingDraft:
    service_id = _first(params.get(SERVICE_PARAM))
    staff_id = _first(params.get(STAFF_PARAM))

    parsed_date = None
    raw_date = _first(params.get(DATE_PARAM))
    if raw_date:
        try:
            parsed_date = date.fromisoformat(raw_date)
        except ValueError:
            parsed_date = None

    slot_label = None
    parsed_time = parse_slot_label(_first(params.get(TIME_PARAM)))
    if parsed_time is not None:
        slot_label = format_slot_label(parsed_time)

    return PartialBookingDraft(
        service_id=service_id,
        staff_id=staff_id.lower() if staff_id and staff_id.lower() == "any" else staff_id,
        date=parsed_date,
        time=slot_label,
    )


def build_return_path(business_id: str, params: Mapping[str, str]) -> str:
    query = urlencode([(key, params[key]) for key in DRAFT_PARAMS if params.get(key)])
    path = f"/booking/{business_id}"
    return f"{path}?{query}" if query else path


def _first(value: Any) -> str | None:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    text = str(value).strip()
    return text or None
