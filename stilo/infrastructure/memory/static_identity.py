from __future__ import annotations

import logging
from typing import Mapping
from urllib.parse import urlencode

from stilo.application.ports.identity import IdentityPort
from stilo.domain.entities.identity import CustomerIdentity


class StaticIdentityProvider(IdentityPort):
    """Identity fixed at construction; None behaves as a signed-out visitor."""

    def __init__(self, identity: CustomerIdentity | None = None, sign_in_path: str = "/sign-in") -> None:
        self._identity = identity
        self._sign_in_path = sign_in_path
        self.redirects: list[tuple[str, dict[str, str]]] = []
        self._logger = logging.getLogger(__name__)

    def sign_in(self, identity: CustomerIdentity) -> None:
        self._identity = identity

    async def get_current_identity(self) -> CustomerIdentity | None:
        return self._identity

    def redirect_to_authentication(self, return_path: str, params: Mapping[str, str]) -> str:
        self.redirects.append((return_path, dict(params)))
        self._logger.info("Redirecting to sign-in", extra={"return_path": return_path})
        return f"{self._sign_in_path}?{urlencode({'redirect': return_path})}"
