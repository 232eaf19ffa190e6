from __future__ import annotations

from dataclasses import dataclass
from typing import Union

ANY_STAFF_KEY = "any"


@dataclass(frozen=True)
class StaffMember:
    id: str
    name: str
    avatar_url: str | None = None


@dataclass(frozen=True)
class AnyStaff:
    """No preference: any active staff member may serve the booking."""

    def __repr__(self) -> str:
        return "ANY_STAFF"


ANY_STAFF = AnyStaff()

StaffScope = Union[StaffMember, AnyStaff]


def staff_key(scope: StaffScope | None) -> str | None:
    """Stable scalar for a staff scope: the member id, or "any"."""
    if scope is None:
        return None
    if isinstance(scope, AnyStaff):
        return ANY_STAFF_KEY
    return scope.id
