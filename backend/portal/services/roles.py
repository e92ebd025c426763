"""
Role directory — roles classified once, looked up per request.

The telephony schema has no structured "role kind" column.  Tenant and
super-admin roles are recognised by name or by well-known ids when the
directory loads, so request handling only compares enum values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.constants import RoleCategory
from portal.core.logging import get_logger
from portal.db.models.role import Role
from portal.repositories import roles as role_repository

logger = get_logger(__name__)


@dataclass(frozen=True)
class RoleInfo:
    """A role with its category resolved."""

    role_id: str
    role_name: str
    access_level: int
    category: RoleCategory


def classify_role(
    role_id: str | None,
    role_name: str | None,
    *,
    tenant_role_ids: Iterable[str] = (),
    super_admin_role_ids: Iterable[str] = (),
) -> RoleCategory:
    """Map a role to its category. Tenant wins over super admin."""
    name = (role_name or "").lower()
    if "tenant" in name or role_id in set(tenant_role_ids):
        return RoleCategory.TENANT
    if "super admin" in name or role_id in set(super_admin_role_ids):
        return RoleCategory.SUPER_ADMIN
    return RoleCategory.STAFF


class RoleDirectory:
    """
    In-memory catalogue of `RoleInfo` keyed by role id.

    Loaded in full on first use and kept until `reload()`.  A role id
    missing from the catalogue (created after the load) is fetched and
    classified individually.
    """

    def __init__(
        self,
        *,
        tenant_role_ids: Iterable[str] = (),
        super_admin_role_ids: Iterable[str] = (),
    ) -> None:
        self._tenant_role_ids = frozenset(tenant_role_ids)
        self._super_admin_role_ids = frozenset(super_admin_role_ids)
        self._roles: dict[str, RoleInfo] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def _to_info(self, role: Role) -> RoleInfo:
        return RoleInfo(
            role_id=role.id_role,
            role_name=role.role_name or "",
            access_level=role.access_level or 0,
            category=classify_role(
                role.id_role,
                role.role_name,
                tenant_role_ids=self._tenant_role_ids,
                super_admin_role_ids=self._super_admin_role_ids,
            ),
        )

    async def load(self, db: AsyncSession) -> None:
        """Read and classify every role."""
        roles = await role_repository.list_roles(db)
        self._roles = {role.id_role: self._to_info(role) for role in roles}
        self._loaded = True
        logger.info("Role directory loaded", roles=len(self._roles))

    async def reload(self, db: AsyncSession) -> None:
        self._loaded = False
        await self.load(db)

    async def get(self, db: AsyncSession, role_id: str | None) -> RoleInfo | None:
        """Return the classified role, or None when the id is empty or unknown."""
        if not role_id:
            return None
        if not self._loaded:
            await self.load(db)

        info = self._roles.get(role_id)
        if info is None:
            role = await role_repository.get_role(db, role_id)
            if role is None:
                return None
            info = self._to_info(role)
            self._roles[role_id] = info
        return info
