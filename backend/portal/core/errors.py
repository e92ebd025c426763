"""
Domain-specific exception hierarchy for the portal.

All portal exceptions inherit from PortalError so callers can catch
broadly or narrowly as needed.  Credential errors carry the HTTP status
and the client-facing message so the route layer can map them directly.
"""

from __future__ import annotations


class PortalError(Exception):
    """Base exception for all portal errors."""

    def __init__(
        self,
        message: str,
        *,
        user_id: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.user_id = user_id
        self.details = details or {}
        super().__init__(message)


# ─── Credentials ──────────────────────────────

class CredentialError(PortalError):
    """Login rejected. Subclasses fix the status code and client message."""

    status_code: int = 400
    client_message: str = "Login gagal"

    def __init__(self, message: str | None = None, **kwargs) -> None:
        super().__init__(message or self.client_message, **kwargs)


class MissingCredentialsError(CredentialError):
    """Identifier or password missing from the request."""

    status_code = 400
    client_message = "NIP atau Email wajib diisi"


class UserNotFoundError(CredentialError):
    """No user matches the identifier."""

    status_code = 404
    client_message = "User tidak ditemukan"


class PasswordNotSetError(CredentialError):
    """The user exists but has no stored password hash."""

    status_code = 400
    client_message = "User tidak memiliki password terdaftar"


class PasswordMismatchError(CredentialError):
    """The password does not match the stored hash."""

    status_code = 417
    client_message = "Password salah!"


# ─── Hierarchy ────────────────────────────────

class HierarchyUserNotFoundError(PortalError):
    """The user to place in the hierarchy no longer exists."""
    pass


# ─── Infrastructure ───────────────────────────

class DatabaseNotConfiguredError(PortalError):
    """A logical database is unknown or has no connection URL."""

    def __init__(self, message: str, *, database: str | None = None, **kwargs) -> None:
        self.database = database
        super().__init__(message, **kwargs)


class SupersetError(PortalError):
    """A call to the Superset security API failed."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_body: str | None = None,
        **kwargs,
    ) -> None:
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message, **kwargs)


class SupersetAuthError(SupersetError):
    """Admin login or token refresh against Superset failed."""
    pass
