"""Authentication request/response schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portal.core.constants import IdentifierKind, ResponseStatus
from portal.services.credentials import identifier_kind


class LoginRequest(BaseModel):
    """
    Login payload.

    Clients send either `nip` or `email`; a bare `identifier` is
    classified server-side (numeric → NIP, otherwise email).  Every
    field is optional so that missing values produce the portal's own
    400 envelope instead of a schema error.
    """

    nip: str | None = None
    email: str | None = None
    identifier: str | None = None
    password: str | None = None

    @field_validator("nip", "email", "identifier", mode="before")
    @classmethod
    def _normalize_identifier(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("password", mode="before")
    @classmethod
    def _normalize_password(cls, value: Any) -> Any:
        # compared verbatim, only an empty string counts as missing
        if value == "":
            return None
        return value

    def lookup(self) -> tuple[str | None, str | None]:
        """(nip, email) to search by; at most one is set."""
        if self.nip:
            return self.nip, None
        if self.email:
            return None, self.email
        if self.identifier:
            if identifier_kind(self.identifier) is IdentifierKind.NIP:
                return self.identifier, None
            return None, self.identifier
        return None, None


class AuthResponse(BaseModel):
    """`{status, message, ...}` envelope returned by the auth endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    status: ResponseStatus
    message: str
    user_id: str | None = Field(default=None, alias="ID")
    full_name: str | None = Field(default=None, alias="Fullname")
    role: str | None = Field(default=None, alias="Role")
    access_level: int | None = Field(default=None, alias="AccessLevel")
    hierarchical_data: str | None = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
