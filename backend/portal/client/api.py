"""
PortalClient — the browser login flow, for scripts and the CLI.

    login(identifier, password)          → /api/login envelope
    guest_token(username, level)         → {token, dashboardId}
    sign_in(identifier, password, store) → both, persisted into an AuthStore
"""

from __future__ import annotations

from typing import Any

import httpx

from portal.core.constants import IdentifierKind, ResponseStatus
from portal.core.errors import PortalError
from portal.core.logging import get_logger
from portal.services.credentials import identifier_kind
from portal.client.store import AuthState, AuthStore

logger = get_logger(__name__)

CONNECTION_ERROR_MESSAGE = "Terjadi kesalahan saat menghubungi server."


class PortalClientError(PortalError):
    """A login or token request was refused; the message is user-facing."""

    def __init__(self, message: str, *, status_code: int | None = None, **kwargs) -> None:
        self.status_code = status_code
        super().__init__(message, **kwargs)


class PortalClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    @staticmethod
    def build_login_body(identifier: str, password: str) -> dict[str, str]:
        """Numeric identifiers go out as `nip`, everything else as `email`."""
        identifier = identifier.strip()
        if identifier_kind(identifier) is IdentifierKind.NIP:
            return {"nip": identifier, "password": password}
        return {"email": identifier, "password": password}

    async def _post(self, path: str, body: dict[str, Any]) -> httpx.Response:
        try:
            async with self._client() as http:
                return await http.post(path, json=body)
        except httpx.HTTPError as exc:
            logger.error("Portal request failed", path=path, error=str(exc))
            raise PortalClientError(CONNECTION_ERROR_MESSAGE) from exc

    async def login(self, identifier: str, password: str) -> dict[str, Any]:
        """Validate inputs locally, then call /api/login."""
        if not identifier.strip():
            raise PortalClientError("Masukkan NPK atau Email Anda")
        if not password.strip():
            raise PortalClientError("Password wajib diisi")

        response = await self._post("/api/login", self.build_login_body(identifier, password))
        try:
            data = response.json()
        except ValueError as exc:
            raise PortalClientError(CONNECTION_ERROR_MESSAGE, status_code=response.status_code) from exc

        if data.get("status") != ResponseStatus.OK.value:
            raise PortalClientError(
                data.get("message") or CONNECTION_ERROR_MESSAGE,
                status_code=response.status_code,
            )
        return data

    async def guest_token(self, username: str, level: int | str) -> dict[str, str]:
        response = await self._post("/api/superset", {"username": username, "level": str(level)})
        try:
            data = response.json()
        except ValueError as exc:
            raise PortalClientError(CONNECTION_ERROR_MESSAGE, status_code=response.status_code) from exc

        if response.status_code != 200 or not data.get("token"):
            raise PortalClientError(
                data.get("error") or "Failed to generate guest token",
                status_code=response.status_code,
            )
        return data

    async def sign_in(self, identifier: str, password: str, store: AuthStore) -> AuthState:
        """Full flow: login, exchange the hierarchy for a guest token, persist."""
        data = await self.login(identifier, password)

        access_level = data.get("AccessLevel")
        if not data.get("hierarchical_data"):
            username = str(data.get("ID"))
        else:
            username = data["hierarchical_data"]
        level = access_level if access_level is not None else 0

        guest = await self.guest_token(username, level)
        return store.set_credentials(
            guest["token"],
            guest["dashboardId"],
            data.get("Fullname"),
            user_id=data.get("ID"),
            role=data.get("Role"),
            access_level=access_level,
            hierarchy=data.get("hierarchical_data"),
        )

    @staticmethod
    def sign_out(store: AuthStore) -> None:
        store.clear()
