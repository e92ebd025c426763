"""
Credential validation against telephony_account.mst_users.

A login identifier is either a numeric staff number (NIP) or an email
address.  Validation performs one read and raises a CredentialError
subclass describing why a login was rejected.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.constants import IdentifierKind
from portal.core.errors import (
    MissingCredentialsError,
    PasswordMismatchError,
    PasswordNotSetError,
    UserNotFoundError,
)
from portal.core.logging import get_logger
from portal.core.security import verify_password
from portal.repositories import users as user_repository

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity returned by a successful credential check."""

    user_id: str
    full_name: str | None
    role_id: str | None


def identifier_kind(identifier: str) -> IdentifierKind:
    """Numeric identifiers are staff numbers, anything else is an email."""
    return IdentifierKind.NIP if identifier.strip().isdigit() else IdentifierKind.EMAIL


def require_credentials(
    *,
    nip: str | None,
    email: str | None,
    password: str | None,
) -> None:
    """Reject incomplete requests before touching the database."""
    if not nip and not email:
        raise MissingCredentialsError("NIP atau Email wajib diisi")
    if not password:
        raise MissingCredentialsError("Password wajib diisi")


async def validate_credentials(
    db: AsyncSession,
    *,
    nip: str | None = None,
    email: str | None = None,
    password: str | None,
) -> AuthenticatedUser:
    """
    Look up a user by NIP (preferred) or email and verify the password.

    Raises:
        MissingCredentialsError: identifier or password absent.
        UserNotFoundError: no matching user.
        PasswordNotSetError: the user has no stored hash.
        PasswordMismatchError: the password does not match.
    """
    require_credentials(nip=nip, email=email, password=password)

    if nip:
        user = await user_repository.get_user_by_nip(db, nip)
        kind, identifier = IdentifierKind.NIP, nip
    else:
        user = await user_repository.get_user_by_email(db, email)
        kind, identifier = IdentifierKind.EMAIL, email

    if user is None:
        logger.info("Login rejected: unknown user", kind=kind.value, identifier=identifier)
        raise UserNotFoundError()

    if not user.password:
        logger.warning("Login rejected: no password on record", user_id=user.id_user)
        raise PasswordNotSetError(user_id=user.id_user)

    if not verify_password(password, user.password):
        logger.info("Login rejected: password mismatch", user_id=user.id_user)
        raise PasswordMismatchError(user_id=user.id_user)

    return AuthenticatedUser(
        user_id=user.id_user,
        full_name=user.full_name,
        role_id=user.id_role,
    )
