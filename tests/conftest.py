"""Shared test fixtures."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from stilo.application.dto.booking_context import BookingContext
from stilo.application.use_cases.booking_flow import BookingFlowController
from stilo.domain.entities.business import Business
from stilo.domain.entities.identity import CustomerIdentity
from stilo.domain.entities.operating_hours import OperatingHours
from stilo.domain.entities.service import Service
from stilo.domain.entities.staff import StaffMember
from stilo.infrastructure.memory.memory_catalog import MemoryBusinessCatalog
from stilo.infrastructure.memory.memory_reservations import MemoryReservationStore
from stilo.infrastructure.memory.static_identity import StaticIdentityProvider

BUSINESS_ID = "biz-1"
TODAY = date(2026, 10, 19)  # a Monday
NOW = datetime(2026, 10, 19, 8, 0)
SUNDAY = date(2026, 10, 25)

CUT = Service(id="svc-cut", name="Haircut", duration_minutes=60, price=Decimal("30.00"))
TRIM = Service(id="svc-trim", name="Beard Trim", duration_minutes=30, price=Decimal("20.00"))
STAFF_A = StaffMember(id="stf-a", name="Staff A")
STAFF_B = StaffMember(id="stf-b", name="Staff B")


def open_every_day(open_time: str = "09:00", close_time: str = "12:00") -> tuple[OperatingHours, ...]:
    """09:00-12:00 Monday to Saturday, closed on Sunday."""
    return tuple(
        OperatingHours(day_of_week=0, is_closed=True)
        if dow == 0
        else OperatingHours(day_of_week=dow, open_time=open_time, close_time=close_time)
        for dow in range(7)
    )


@pytest.fixture
def business() -> Business:
    return Business(
        id=BUSINESS_ID,
        name="Test Salon",
        services=(CUT, TRIM),
        staff=(STAFF_A, STAFF_B),
        hours=open_every_day(),
    )


@pytest.fixture
def catalog(business) -> MemoryBusinessCatalog:
    return MemoryBusinessCatalog({business.id: business})


@pytest.fixture
def reservations() -> MemoryReservationStore:
    return MemoryReservationStore()


@pytest.fixture
def customer() -> CustomerIdentity:
    return CustomerIdentity(id="cust-1", email="cust@example.com")


@pytest.fixture
def make_controller(catalog, reservations):
    """Build a controller over the memory adapters; identity, store and catalog can be swapped."""

    def _make(
        identity: CustomerIdentity | None = None,
        store=None,
        catalog_port=None,
        identity_port=None,
        now: datetime = NOW,
    ) -> BookingFlowController:
        context = BookingContext(
            business_id=BUSINESS_ID,
            catalog=catalog_port or catalog,
            reservations=store or reservations,
            identity=identity_port or StaticIdentityProvider(identity),
            clock=lambda: now,
        )
        return BookingFlowController(context)

    return _make
