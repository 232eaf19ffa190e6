from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from stilo.application.exceptions import BackendContractError
from stilo.application.ports.business_catalog import BusinessCatalogPort
from stilo.domain.entities.operating_hours import OperatingHours
from stilo.domain.entities.service import Service
from stilo.domain.entities.staff import StaffMember
from stilo.infrastructure.supabase.rest_client import SupabaseRestClient


class SupabaseBusinessCatalog(BusinessCatalogPort):
    def __init__(self, client: SupabaseRestClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    async def get_business_name(self, business_id: str) -> str | None:
        rows = await self._client.select(
            "businesses",
            [("select", "name"), ("id", f"eq.{business_id}"), ("limit", "1")],
        )
        return rows[0].get("name") if rows else None

    async def get_operating_hours(self, business_id: str) -> list[OperatingHours]:
        rows = await self._client.select(
            "business_hours",
            [("select", "*"), ("business_id", f"eq.{business_id}"), ("order", "day_of_week")],
        )
        hours: list[OperatingHours] = []
        for row in rows:
            try:
                hours.append(
                    OperatingHours(
                        day_of_week=int(row["day_of_week"]),
                        is_closed=bool(row.get("is_closed", False)),
                        open_time=row.get("open_time"),
                        close_time=row.get("close_time"),
                    )
                )
            except (KeyError, TypeError, ValueError):
                # A broken row leaves its weekday without hours, i.e. closed.
                self._logger.warning("Skipping malformed business_hours row", extra={"business_id": business_id})
        return hours

    async def get_active_services(self, business_id: str) -> list[Service]:
        rows = await self._client.select(
            "services",
            [
                ("select", "*"),
                ("business_id", f"eq.{business_id}"),
                ("is_active", "eq.true"),
                ("order", "price"),
            ],
        )
        return [_service_from_row(row) for row in rows]

    async def get_active_staff(self, business_id: str) -> list[StaffMember]:
        rows = await self._client.select(
            "stylists",
            [("select", "*"), ("business_id", f"eq.{business_id}"), ("is_active", "eq.true")],
        )
        try:
            return [
                StaffMember(id=str(row["id"]), name=str(row.get("name") or ""), avatar_url=row.get("avatar_url"))
                for row in rows
            ]
        except KeyError as e:
            raise BackendContractError(f"Stylist row missing {e}") from e


def _service_from_row(row: dict[str, Any]) -> Service:
    try:
        return Service(
            id=str(row["id"]),
            name=str(row["name"]),
            duration_minutes=int(row["duration_minutes"]),
            price=Decimal(str(row.get("price") or 0)),
            description=row.get("description"),
        )
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise BackendContractError(f"Malformed service row: {e}") from e
