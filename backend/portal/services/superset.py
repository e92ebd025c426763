"""
Superset security API client — admin login, CSRF and guest tokens.

Guest-token sequence (all calls send `Referer: {SUPERSET_URL}/`):

    1. POST /api/v1/security/login        → access token (+ refresh token, cookies)
    2. GET  /api/v1/security/csrf_token/  → CSRF token (+ cookies)
    3. POST /api/v1/security/guest_token/ → guest token for one dashboard

Each exchange runs on its own httpx.AsyncClient, so the session cookies
set by steps 1 and 2 ride along to step 3 and never leak between users.
The admin refresh token from step 1 is kept on the client instance;
the next exchange tries it first and keeps the fresh login's token
when the refresh is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from portal.core.config import Settings
from portal.core.errors import SupersetAuthError, SupersetError
from portal.core.logging import get_logger

logger = get_logger(__name__)

SECURITY_API_PATH = "/api/v1/security"
DEFAULT_LEVEL = "0"


@dataclass
class SupersetSession:
    """Admin tokens for one guest-token exchange."""

    access_token: str
    refresh_token: str = ""


@dataclass(frozen=True)
class GuestToken:
    token: str
    dashboard_id: str

    def to_dict(self) -> dict[str, str]:
        return {"token": self.token, "dashboardId": self.dashboard_id}


def dashboard_for_level(level: Any, dashboards: dict[str, str]) -> str:
    """Dashboard id for an access level; unknown or unset levels get the level-0 dashboard."""
    return dashboards.get(str(level).strip()) or dashboards.get(DEFAULT_LEVEL, "")


class SupersetClient:
    """
    Async client for the Superset security endpoints.

    Usage::

        client = SupersetClient.from_settings(settings)
        guest = await client.guest_token("T01 - voice - C01 - 0 - 0 - 0", dashboard_id)
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._username = username
        self._password = password
        self._timeout = timeout
        self._transport = transport
        self._refresh_token: str | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "SupersetClient":
        return cls(
            settings.SUPERSET_URL,
            settings.SUPERSET_USERNAME,
            settings.SUPERSET_PASSWORD,
            timeout=settings.SUPERSET_TIMEOUT_SECONDS,
            transport=transport,
        )

    @property
    def stored_refresh_token(self) -> str | None:
        return self._refresh_token

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self.base_url}{SECURITY_API_PATH}",
            timeout=self._timeout,
            transport=self._transport,
            headers={"Referer": f"{self.base_url}/"},
        )

    # ─── Helpers ──────────────────────────────────
    @staticmethod
    def _json(response: httpx.Response, step: str) -> dict[str, Any]:
        if response.status_code >= 400:
            raise SupersetError(
                f"Superset {step} returned {response.status_code}",
                status_code=response.status_code,
                response_body=response.text,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise SupersetError(
                f"Superset {step} returned a non-JSON body",
                status_code=response.status_code,
                response_body=response.text,
            ) from exc
        if not isinstance(data, dict):
            raise SupersetError(
                f"Superset {step} returned an unexpected payload",
                status_code=response.status_code,
                response_body=response.text,
            )
        return data

    # ─── Security API ─────────────────────────────
    async def _login(self, http: httpx.AsyncClient) -> SupersetSession:
        response = await http.post(
            "/login",
            json={
                "username": self._username,
                "password": self._password,
                "provider": "db",
                "refresh": True,
            },
        )
        if response.status_code >= 400:
            raise SupersetAuthError(
                f"Superset login failed: {response.status_code}",
                status_code=response.status_code,
                response_body=response.text,
            )
        data = self._json(response, "login")

        access_token = data.get("access_token")
        if not access_token:
            raise SupersetAuthError("No access token received from Superset")

        return SupersetSession(
            access_token=access_token,
            refresh_token=data.get("refresh_token") or "",
        )

    async def _refresh(self, http: httpx.AsyncClient, refresh_token: str) -> str:
        response = await http.post(
            "/refresh",
            headers={"Authorization": f"Bearer {refresh_token}"},
            json={"refresh_token": refresh_token},
        )
        if response.status_code >= 400:
            raise SupersetAuthError(
                f"Token refresh failed: {response.status_code}",
                status_code=response.status_code,
                response_body=response.text,
            )
        access_token = self._json(response, "refresh").get("access_token")
        if not access_token:
            raise SupersetAuthError("No access token received from Superset refresh")
        return access_token

    async def _admin_session(self, http: httpx.AsyncClient) -> SupersetSession:
        # the guest token call needs the login's session cookies, so a
        # refresh cannot stand in for the login here
        session = await self._login(http)
        if session.refresh_token:
            self._refresh_token = session.refresh_token
        return session

    async def _csrf_token(self, http: httpx.AsyncClient, session: SupersetSession) -> str:
        response = await http.get(
            "/csrf_token/",
            headers={"Authorization": f"Bearer {session.access_token}"},
        )
        token = self._json(response, "csrf_token").get("result")
        if not token:
            raise SupersetError("Failed to get CSRF token", status_code=response.status_code)
        return token

    async def login(self) -> SupersetSession:
        """Log in as the configured admin user."""
        async with self._client() as http:
            session = await self._login(http)
        if session.refresh_token:
            self._refresh_token = session.refresh_token
        return session

    async def refresh(self, refresh_token: str | None = None) -> str:
        """Exchange a refresh token (default: the last admin one) for a new access token."""
        refresh_token = refresh_token or self._refresh_token
        if not refresh_token:
            raise SupersetAuthError("No refresh token available")
        async with self._client() as http:
            return await self._refresh(http, refresh_token)

    async def guest_token(self, username: str, dashboard_id: str) -> GuestToken:
        """Issue a guest token scoped to one dashboard for a synthetic username."""
        async with self._client() as http:
            session = await self._admin_session(http)
            csrf = await self._csrf_token(http, session)

            response = await http.post(
                "/guest_token/",
                headers={
                    "Authorization": f"Bearer {session.access_token}",
                    "X-CSRFToken": csrf,
                },
                json={
                    "resources": [{"type": "dashboard", "id": dashboard_id}],
                    "rls": [],
                    "user": {
                        "username": username,
                        "first_name": username,
                        "last_name": username,
                    },
                },
            )

        token = self._json(response, "guest_token").get("token")
        if not token:
            raise SupersetError("Superset returned no guest token", status_code=response.status_code)

        logger.info("Guest token issued", dashboard_id=dashboard_id, username=username)
        return GuestToken(token=token, dashboard_id=dashboard_id)
