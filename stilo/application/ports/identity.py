from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping

from stilo.domain.entities.identity import CustomerIdentity


class IdentityPort(ABC):
    @abstractmethod
    async def get_current_identity(self) -> CustomerIdentity | None:
        """Authenticated customer for this session, or None when signed out."""
        raise NotImplementedError

    @abstractmethod
    def redirect_to_authentication(self, return_path: str, params: Mapping[str, str]) -> str:
        """
        Hand control to sign-in and come back to `return_path` afterwards.
        Returns the location the client should be sent to.
        """
        raise NotImplementedError
