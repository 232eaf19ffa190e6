from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException

from stilo.api.v1.schemas import (
    BookingSessionSchema,
    CreateSessionRequestSchema,
    SelectDateSchema,
    SelectServiceSchema,
    SelectStaffSchema,
    SelectTimeSchema,
)
from stilo.application.ports.session_store import BookingSessionStorePort
from stilo.application.use_cases.booking_flow import BookingFlowController
from stilo.wiring.dependencies import build_booking_controller, get_session_store

router = APIRouter(prefix="/booking/sessions")
logger = logging.getLogger(__name__)


def bearer_token(authorization: str | None = Header(None)) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _controller(session_id: str, store: BookingSessionStorePort) -> BookingFlowController:
    controller = store.get(session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="Booking session not found")
    return controller


def _rejected(session_id: str, controller: BookingFlowController, detail: str) -> HTTPException:
    return HTTPException(
        status_code=409,
        detail={
            "message": detail,
            "session": BookingSessionSchema.from_view(session_id, controller.view()).model_dump(mode="json"),
        },
    )


@router.post("", response_model=BookingSessionSchema, status_code=201)
async def create_session(
    req: CreateSessionRequestSchema,
    token: str | None = Depends(bearer_token),
    store: BookingSessionStorePort = Depends(get_session_store),
):
    controller = build_booking_controller(req.business_id, access_token=token)
    loaded = await controller.load()
    if loaded and controller.business_name is None:
        raise HTTPException(status_code=404, detail="Business not found")
    if loaded and req.restore:
        await controller.restore(req.restore)

    session_id = store.create(controller)
    logger.info(
        "Booking session opened",
        extra={"business_id": req.business_id, "step": controller.step.value},
    )
    return BookingSessionSchema.from_view(session_id, controller.view())


@router.get("/{session_id}", response_model=BookingSessionSchema)
async def get_session(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    controller = _controller(session_id, store)
    return BookingSessionSchema.from_view(session_id, controller.view())


@router.post("/{session_id}/service", response_model=BookingSessionSchema)
async def select_service(
    session_id: str,
    req: SelectServiceSchema,
    store: BookingSessionStorePort = Depends(get_session_store),
):
    controller = _controller(session_id, store)
    if not controller.select_service(req.service_id):
        raise _rejected(session_id, controller, "Service cannot be selected now")
    return BookingSessionSchema.from_view(session_id, controller.view())


@router.post("/{session_id}/staff", response_model=BookingSessionSchema)
async def select_staff(
    session_id: str,
    req: SelectStaffSchema,
    store: BookingSessionStorePort = Depends(get_session_store),
):
    controller = _controller(session_id, store)
    if not controller.select_staff(req.staff_id):
        raise _rejected(session_id, controller, "Professional cannot be selected now")
    return BookingSessionSchema.from_view(session_id, controller.view())


@router.post("/{session_id}/date", response_model=BookingSessionSchema)
async def select_date(
    session_id: str,
    req: SelectDateSchema,
    store: BookingSessionStorePort = Depends(get_session_store),
):
    controller = _controller(session_id, store)
    if not await controller.select_date(req.date):
        raise _rejected(session_id, controller, "Date cannot be selected now")
    return BookingSessionSchema.from_view(session_id, controller.view())


@router.post("/{session_id}/time", response_model=BookingSessionSchema)
async def select_time(
    session_id: str,
    req: SelectTimeSchema,
    store: BookingSessionStorePort = Depends(get_session_store),
):
    controller = _controller(session_id, store)
    if not controller.select_time(req.time):
        raise _rejected(session_id, controller, "Time slot is not available")
    return BookingSessionSchema.from_view(session_id, controller.view())


@router.post("/{session_id}/forward", response_model=BookingSessionSchema)
async def go_forward(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    controller = _controller(session_id, store)
    if not controller.can_go_forward:
        raise _rejected(session_id, controller, "Complete this step first")
    # A failed submission is reported through the session's error field.
    await controller.go_forward()
    return BookingSessionSchema.from_view(session_id, controller.view())


@router.post("/{session_id}/back", response_model=BookingSessionSchema)
async def go_back(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    controller = _controller(session_id, store)
    if not await controller.go_back():
        raise _rejected(session_id, controller, "Cannot go back from this step")
    return BookingSessionSchema.from_view(session_id, controller.view())


@router.delete("/{session_id}", status_code=204)
async def close_session(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    controller = store.discard(session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="Booking session not found")
    controller.exit()
