from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from stilo.application.exceptions import BackendContractError, BackendUnavailableError
from stilo.core.config import settings

Params = Sequence[tuple[str, str]]


class SupabaseRestClient:
    """
    Thin async client for a Supabase project: PostgREST tables under /rest/v1
    and the auth user endpoint under /auth/v1.
    """

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = (url or settings.SUPABASE_URL or "").rstrip("/")
        self._api_key = api_key or settings.SUPABASE_ANON_KEY
        if not self._url:
            raise ValueError("SUPABASE_URL is required for the Supabase backend")
        if not self._api_key:
            raise ValueError("SUPABASE_ANON_KEY is required for the Supabase backend")
        self._client = httpx.AsyncClient(
            base_url=self._url,
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )
        self._logger = logging.getLogger(__name__)

    async def select(self, table: str, params: Params, access_token: str | None = None) -> list[dict[str, Any]]:
        response = await self._send("GET", f"/rest/v1/{table}", params=params, access_token=access_token)
        data = self._json(response, table)
        if not isinstance(data, list):
            raise BackendContractError(f"Expected a list of rows from {table}")
        return data

    async def insert(self, table: str, row: dict[str, Any], access_token: str | None = None) -> dict[str, Any]:
        response = await self._send(
            "POST",
            f"/rest/v1/{table}",
            json=row,
            headers={"Prefer": "return=representation"},
            access_token=access_token,
        )
        data = self._json(response, table)
        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict):
            raise BackendContractError(f"Insert into {table} returned no row")
        return data

    async def get_user(self, access_token: str) -> dict[str, Any] | None:
        try:
            response = await self._client.get("/auth/v1/user", headers=self._headers(access_token))
        except httpx.HTTPError as e:
            self._logger.error("Supabase auth request failed", extra={"error": str(e)})
            raise BackendUnavailableError(f"Auth request failed: {e}") from e
        if response.status_code in (401, 403):
            return None
        if response.status_code >= 400:
            raise BackendUnavailableError(f"Auth request failed with status {response.status_code}")
        data = self._json(response, "auth user")
        return data if isinstance(data, dict) else None

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        access_token: str | None = None,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        all_headers = self._headers(access_token)
        all_headers.update(headers or {})
        try:
            response = await self._client.request(method, path, headers=all_headers, **kwargs)
        except httpx.HTTPError as e:
            self._logger.error("Supabase request failed", extra={"path": path, "error": str(e)})
            raise BackendUnavailableError(f"Request to {path} failed: {e}") from e

        if response.status_code >= 400:
            error_message = _error_message(response)
            self._logger.error(
                "Supabase request rejected",
                extra={"path": path, "status": response.status_code, "error": error_message},
            )
            if response.status_code >= 500:
                raise BackendUnavailableError(error_message)
            raise BackendContractError(error_message)
        return response

    def _headers(self, access_token: str | None) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {access_token or self._api_key}",
        }

    def _json(self, response: httpx.Response, what: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise BackendContractError(f"Invalid JSON from {what}") from e


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error_description") or body.get("error") or body)
    return str(body)
