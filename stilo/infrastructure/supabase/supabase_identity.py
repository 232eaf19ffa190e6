from __future__ import annotations

import logging
from typing import Mapping
from urllib.parse import urlencode

from stilo.application.ports.identity import IdentityPort
from stilo.domain.entities.identity import CustomerIdentity
from stilo.infrastructure.supabase.rest_client import SupabaseRestClient


class SupabaseIdentityProvider(IdentityPort):
    """Resolves the caller's access token against Supabase auth."""

    def __init__(
        self,
        client: SupabaseRestClient,
        access_token: str | None,
        sign_in_path: str = "/sign-in",
    ) -> None:
        self._client = client
        self._access_token = access_token
        self._sign_in_path = sign_in_path
        self._logger = logging.getLogger(__name__)

    async def get_current_identity(self) -> CustomerIdentity | None:
        if not self._access_token:
            return None
        user = await self._client.get_user(self._access_token)
        if not user or not user.get("id"):
            self._logger.info("Access token did not resolve to a user")
            return None
        return CustomerIdentity(id=str(user["id"]), email=user.get("email"))

    def redirect_to_authentication(self, return_path: str, params: Mapping[str, str]) -> str:
        self._logger.info("Redirecting to sign-in", extra={"return_path": return_path})
        return f"{self._sign_in_path}?{urlencode({'redirect': return_path})}"
