"""API schema package."""

from portal.api.schemas.auth import AuthResponse, LoginRequest
from portal.api.schemas.superset import (
    ErrorResponse,
    GuestTokenRequest,
    GuestTokenResponse,
    RefreshRequest,
)

__all__ = [
    "LoginRequest",
    "AuthResponse",
    "GuestTokenRequest",
    "GuestTokenResponse",
    "RefreshRequest",
    "ErrorResponse",
]
