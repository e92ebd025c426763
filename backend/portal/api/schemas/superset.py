"""Superset guest-token request/response schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GuestTokenRequest(BaseModel):
    """Synthetic username (hierarchy string or agent id) and access level."""

    username: str | None = None
    level: str | None = None

    @field_validator("username", "level", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class GuestTokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    dashboard_id: str = Field(..., alias="dashboardId")


class RefreshRequest(BaseModel):
    refresh_token: str | None = None


class ErrorResponse(BaseModel):
    error: str
    code: str | None = None
