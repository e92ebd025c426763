"""
Hierarchy resolution — where a user sits in the supervisory tree.

The tree has four tiers:

    tenant → coordinator (level 2) → team lead (level 3) → agent (level 4)

Each user row points at its direct supervisor through `spv_id`.  The
resolver reads the user's role, category mapping and (for team leads,
and agents when the fast path is off) up to two supervisor hops, then
produces a `HierarchyResult`.  Missing links never fail resolution:
the affected field keeps the "0" sentinel.  Only a missing user does.

The formatted result is the synthetic username Superset receives:

    "{tenant} - {service} - {category} - {coordinator} - {team_lead} - {agent}"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.constants import (
    ALL,
    EXTERNAL_USER_PREFIX,
    SENTINEL,
    AccessLevel,
    RoleCategory,
)
from portal.core.errors import HierarchyUserNotFoundError
from portal.core.logging import get_logger
from portal.db.models.user import User
from portal.repositories import categories as category_repository
from portal.repositories import mappings as mapping_repository
from portal.repositories import users as user_repository
from portal.services.roles import RoleDirectory, RoleInfo

logger = get_logger(__name__)

DEFAULT_MAX_HOPS = 2
FIELD_SEPARATOR = " - "


@dataclass
class HierarchyResult:
    """A resolved position. Every hierarchy field defaults to the sentinel."""

    full_name: str = ""
    tenant_id: str = SENTINEL
    service: str = SENTINEL
    category_id: str = SENTINEL
    coordinator_id: str = SENTINEL
    team_lead_id: str = SENTINEL
    agent_id: str = SENTINEL
    access_level: int = 0
    role: RoleInfo | None = field(default=None, compare=False, repr=False)

    def fields(self) -> list[str]:
        """The six hierarchy fields in display order."""
        return [
            self.tenant_id,
            self.service,
            self.category_id,
            self.coordinator_id,
            self.team_lead_id,
            self.agent_id,
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "fullName": self.full_name,
            "tenantId": self.tenant_id,
            "service": self.service,
            "categoryId": self.category_id,
            "coordinatorId": self.coordinator_id,
            "teamLeadId": self.team_lead_id,
            "agentId": self.agent_id,
            "accessLevel": self.access_level,
        }


def _token(value: str | None) -> str:
    # a value must never add fields to the string
    value = (value or "").replace(FIELD_SEPARATOR, FIELD_SEPARATOR.strip()).strip()
    return value or SENTINEL


def format_hierarchy(result: HierarchyResult, *, include_full_name: bool = False) -> str:
    """Render the dash-delimited hierarchy string (six fields, seven with the name)."""
    tokens = [_token(value) for value in result.fields()]
    if include_full_name:
        tokens.insert(0, _token(result.full_name))
    return FIELD_SEPARATOR.join(tokens)


async def walk_supervisors(
    db: AsyncSession,
    user: User,
    *,
    max_hops: int = DEFAULT_MAX_HOPS,
) -> list[User]:
    """
    Follow `spv_id` upwards at most `max_hops` times.

    Returns the supervisors found, nearest first.  Stops early on a
    missing supervisor id, a dangling reference, or an id already seen.
    """
    chain: list[User] = []
    seen = {user.id_user}
    current = user

    for _ in range(max_hops):
        supervisor_id = current.spv_id
        if not supervisor_id:
            break
        if supervisor_id in seen:
            logger.warning(
                "Supervisor cycle detected",
                user_id=user.id_user,
                repeated_id=supervisor_id,
            )
            break
        supervisor = await user_repository.get_user_by_id(db, supervisor_id)
        if supervisor is None:
            logger.debug("Supervisor not found", user_id=current.id_user, spv_id=supervisor_id)
            break
        chain.append(supervisor)
        seen.add(supervisor.id_user)
        current = supervisor

    return chain


async def _apply_mapping(
    account_db: AsyncSession,
    master_db: AsyncSession,
    user: User,
    role: RoleInfo | None,
    result: HierarchyResult,
) -> None:
    """Fill tenant, service and category from the mapping or the role fallback."""
    mapping = await mapping_repository.get_active_mapping(account_db, user.id_user)

    if mapping is not None:
        category = None
        if mapping.id_category:
            category = await category_repository.get_active_category(master_db, mapping.id_category)
        if category is not None:
            result.service = category.service or SENTINEL
            result.category_id = category.id_category or SENTINEL
        result.tenant_id = (
            mapping.id_tenant
            or (category.id_tenant if category is not None else None)
            or user.id_tenant
            or SENTINEL
        )
        return

    category_kind = role.category if role is not None else RoleCategory.STAFF
    if category_kind is RoleCategory.TENANT:
        if user.id_tenant:
            result.tenant_id = user.id_tenant
        elif user.id_user.startswith(EXTERNAL_USER_PREFIX):
            result.tenant_id = user.id_user
        result.service = ALL
    elif category_kind is RoleCategory.SUPER_ADMIN:
        result.tenant_id = ALL
        result.service = ALL
    elif user.id_tenant:
        result.tenant_id = user.id_tenant

    logger.debug(
        "No active mapping, role fallback applied",
        user_id=user.id_user,
        role_category=category_kind.value,
    )


async def resolve_hierarchy(
    account_db: AsyncSession,
    master_db: AsyncSession,
    roles: RoleDirectory,
    user_id: str,
    *,
    agent_fast_path: bool = True,
    max_hops: int = DEFAULT_MAX_HOPS,
) -> HierarchyResult:
    """
    Resolve a user's position in the hierarchy.

    Args:
        account_db: Session on telephony_account (users, roles, mappings).
        master_db: Session on telephony_master (categories).
        roles: Role directory used to classify the user's role.
        user_id: id_user of an already authenticated user.
        agent_fast_path: Return agents with only `agent_id` set, skipping
            the mapping, category and supervisor lookups.
        max_hops: Supervisor hops walked for agents without the fast path.

    Raises:
        HierarchyUserNotFoundError: the user row does not exist.
    """
    user = await user_repository.get_user_by_id(account_db, user_id)
    if user is None:
        raise HierarchyUserNotFoundError("User not found", user_id=user_id)

    role = await roles.get(account_db, user.id_role)
    access_level = role.access_level if role is not None else 0

    result = HierarchyResult(
        full_name=user.full_name or "",
        access_level=access_level,
        role=role,
    )

    if access_level == AccessLevel.AGENT and agent_fast_path:
        result.agent_id = user.id_user
        return result

    await _apply_mapping(account_db, master_db, user, role, result)

    if access_level == AccessLevel.AGENT:
        result.agent_id = user.id_user
        chain = await walk_supervisors(account_db, user, max_hops=max_hops)
        if len(chain) >= 1:
            result.team_lead_id = chain[0].id_user
        if len(chain) >= 2:
            result.coordinator_id = chain[1].id_user
    elif access_level == AccessLevel.TEAM_LEAD:
        result.team_lead_id = user.id_user
        chain = await walk_supervisors(account_db, user, max_hops=1)
        if chain:
            result.coordinator_id = chain[0].id_user
    elif access_level == AccessLevel.COORDINATOR:
        result.coordinator_id = user.id_user
    elif access_level <= AccessLevel.COORDINATOR:
        result.coordinator_id = user.id_user
    else:
        result.agent_id = user.id_user

    logger.debug("Hierarchy resolved", user_id=user.id_user, **result.to_dict())
    return result
