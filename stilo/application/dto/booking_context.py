from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from stilo.application.ports.business_catalog import BusinessCatalogPort
from stilo.application.ports.identity import IdentityPort
from stilo.application.ports.reservation_store import ReservationStorePort


@dataclass(frozen=True)
class BookingContext:
    """
    Everything one booking session needs from the outside world.
    Built once when the wizard opens and dropped when it exits.
    """

    business_id: str
    catalog: BusinessCatalogPort
    reservations: ReservationStorePort
    identity: IdentityPort
    clock: Callable[[], datetime] = field(default=datetime.now)  # local wall clock, naive
    window_days: int = 14
