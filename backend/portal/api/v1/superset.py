"""Superset guest-token endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from portal.api.deps import get_settings, get_superset_client
from portal.api.schemas.superset import (
    ErrorResponse,
    GuestTokenRequest,
    GuestTokenResponse,
    RefreshRequest,
)
from portal.core.config import Settings
from portal.core.errors import SupersetAuthError
from portal.core.logging import get_logger
from portal.services.superset import SupersetClient, dashboard_for_level

router = APIRouter(prefix="/superset", tags=["Superset"])
logger = get_logger(__name__)

REFRESH_DISABLED_CODE = "REFRESH_DISABLED"


def _error(status_code: int, message: str, code: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=message, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post("", response_model=GuestTokenResponse)
async def guest_token(
    payload: GuestTokenRequest,
    settings: Settings = Depends(get_settings),
    client: SupersetClient = Depends(get_superset_client),
) -> JSONResponse:
    """Exchange a synthetic username for a guest token on the level's dashboard."""
    if not payload.username or payload.level is None:
        return _error(400, "username and level are required")

    dashboard_id = dashboard_for_level(payload.level, settings.SUPERSET_DASHBOARDS)
    try:
        guest = await client.guest_token(payload.username, dashboard_id)
    except Exception:
        logger.exception("Superset guest token failed", level=payload.level)
        return _error(500, "Failed to generate guest token")

    return JSONResponse(status_code=200, content=guest.to_dict())


@router.post("/refresh")
async def refresh_token(
    payload: RefreshRequest | None = None,
    settings: Settings = Depends(get_settings),
    client: SupersetClient = Depends(get_superset_client),
) -> JSONResponse:
    """Proxy to the Superset refresh API; answers 410 unless enabled."""
    if not settings.SUPERSET_REFRESH_ENABLED:
        return _error(
            410,
            "Refresh token functionality has been disabled. Please use fresh login instead.",
            code=REFRESH_DISABLED_CODE,
        )

    if payload is None or not payload.refresh_token:
        return _error(400, "refresh_token is required")

    try:
        access_token = await client.refresh(payload.refresh_token)
    except SupersetAuthError as exc:
        logger.info("Superset refresh rejected", status_code=exc.status_code)
        return _error(401, "Token refresh failed")
    except Exception:
        logger.exception("Superset refresh failed")
        return _error(500, "Token refresh failed")

    return JSONResponse(status_code=200, content={"access_token": access_token})
