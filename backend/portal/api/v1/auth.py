"""Authentication endpoints: credential check and login with hierarchy."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from portal.api.deps import get_registry, get_role_directory, get_settings
from portal.api.schemas.auth import AuthResponse, LoginRequest
from portal.core.config import Settings
from portal.core.constants import AccessLevel, DatabaseName, ResponseStatus
from portal.core.errors import CredentialError
from portal.core.logging import get_logger
from portal.db.session import DatabaseRegistry
from portal.services.credentials import require_credentials, validate_credentials
from portal.services.hierarchy import format_hierarchy, resolve_hierarchy
from portal.services.roles import RoleDirectory

router = APIRouter(tags=["Auth"])
logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _respond(status_code: int, body: AuthResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.to_body())


def _failure(status_code: int, message: str) -> JSONResponse:
    return _respond(status_code, AuthResponse(status=ResponseStatus.FAILED, message=message))


@router.post("/password-validation", response_model=AuthResponse, response_model_exclude_none=True)
async def password_validation(
    payload: LoginRequest,
    registry: DatabaseRegistry = Depends(get_registry),
) -> JSONResponse:
    """Check an identifier/password pair without resolving the hierarchy."""
    nip, email = payload.lookup()
    try:
        require_credentials(nip=nip, email=email, password=payload.password)
        async with registry.session(DatabaseName.TELEPHONY_ACCOUNT) as account_db:
            await validate_credentials(account_db, nip=nip, email=email, password=payload.password)
    except CredentialError as exc:
        return _failure(exc.status_code, str(exc))
    except Exception:
        logger.exception("Password validation failed")
        return _failure(500, INTERNAL_ERROR_MESSAGE)

    return _respond(200, AuthResponse(status=ResponseStatus.OK, message="Berhasil"))


@router.post("/login", response_model=AuthResponse, response_model_exclude_none=True)
async def login(
    payload: LoginRequest,
    registry: DatabaseRegistry = Depends(get_registry),
    roles: RoleDirectory = Depends(get_role_directory),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """
    Authenticate a user and return identity plus hierarchy.

    Agents (access level 4) get no `hierarchical_data` on the fast path;
    their dashboard username is the bare `ID`.  With the fast path off the
    walked chain is returned for them too.
    """
    nip, email = payload.lookup()
    try:
        require_credentials(nip=nip, email=email, password=payload.password)
        async with (
            registry.session(DatabaseName.TELEPHONY_ACCOUNT) as account_db,
            registry.session(DatabaseName.TELEPHONY_MASTER) as master_db,
        ):
            user = await validate_credentials(
                account_db, nip=nip, email=email, password=payload.password
            )
            hierarchy = await resolve_hierarchy(
                account_db,
                master_db,
                roles,
                user.user_id,
                agent_fast_path=settings.HIERARCHY_AGENT_FAST_PATH,
                max_hops=settings.HIERARCHY_MAX_SUPERVISOR_HOPS,
            )
    except CredentialError as exc:
        return _failure(exc.status_code, str(exc))
    except Exception:
        logger.exception("Login failed")
        return _failure(500, INTERNAL_ERROR_MESSAGE)

    body = AuthResponse(
        status=ResponseStatus.OK,
        message="Success",
        user_id=user.user_id,
        full_name=user.full_name,
        role=user.role_id,
        access_level=hierarchy.access_level,
    )
    if hierarchy.access_level != AccessLevel.AGENT or not settings.HIERARCHY_AGENT_FAST_PATH:
        body.hierarchical_data = format_hierarchy(
            hierarchy, include_full_name=settings.HIERARCHY_INCLUDE_FULL_NAME
        )

    logger.info(
        "User logged in",
        user_id=user.user_id,
        access_level=hierarchy.access_level,
    )
    return _respond(200, body)
