from __future__ import annotations

from dataclasses import dataclass, field

from stilo.domain.entities.operating_hours import OperatingHours
from stilo.domain.entities.service import Service
from stilo.domain.entities.staff import StaffMember


@dataclass(frozen=True)
class Business:
    id: str
    name: str
    services: tuple[Service, ...] = field(default_factory=tuple)
    staff: tuple[StaffMember, ...] = field(default_factory=tuple)
    hours: tuple[OperatingHours, ...] = field(default_factory=tuple)
