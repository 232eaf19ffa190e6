from __future__ import annotations

from abc import ABC, abstractmethod

from stilo.domain.entities.operating_hours import OperatingHours
from stilo.domain.entities.service import Service
from stilo.domain.entities.staff import StaffMember


class BusinessCatalogPort(ABC):
    @abstractmethod
    async def get_business_name(self, business_id: str) -> str | None:
        """Display name of the business, or None if it does not exist."""
        raise NotImplementedError

    @abstractmethod
    async def get_operating_hours(self, business_id: str) -> list[OperatingHours]:
        """One entry per weekday that has hours configured (0 = Sunday)."""
        raise NotImplementedError

    @abstractmethod
    async def get_active_services(self, business_id: str) -> list[Service]:
        """Active services, cheapest first."""
        raise NotImplementedError

    @abstractmethod
    async def get_active_staff(self, business_id: str) -> list[StaffMember]:
        """Active staff members. Its length is the capacity used for "any" bookings."""
        raise NotImplementedError
