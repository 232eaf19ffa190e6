from __future__ import annotations

from stilo.application.ports.business_catalog import BusinessCatalogPort
from stilo.domain.entities.business import Business
from stilo.domain.entities.operating_hours import OperatingHours
from stilo.domain.entities.service import Service
from stilo.domain.entities.staff import StaffMember
from stilo.infrastructure.memory.seed_data import SEED_BUSINESSES


class MemoryBusinessCatalog(BusinessCatalogPort):
    def __init__(self, businesses: dict[str, Business] | None = None) -> None:
        self._businesses = dict(SEED_BUSINESSES if businesses is None else businesses)

    def add_business(self, business: Business) -> None:
        self._businesses[business.id] = business

    async def get_business_name(self, business_id: str) -> str | None:
        business = self._businesses.get(business_id)
        return business.name if business else None

    async def get_operating_hours(self, business_id: str) -> list[OperatingHours]:
        business = self._businesses.get(business_id)
        return sorted(business.hours, key=lambda h: h.day_of_week) if business else []

    async def get_active_services(self, business_id: str) -> list[Service]:
        business = self._businesses.get(business_id)
        return sorted(business.services, key=lambda s: s.price) if business else []

    async def get_active_staff(self, business_id: str) -> list[StaffMember]:
        business = self._businesses.get(business_id)
        return list(business.staff) if business else []
