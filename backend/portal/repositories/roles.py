"""Role repository — read access to telephony_account.mst_role."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.db.models.role import Role


async def get_role(db: AsyncSession, role_id: str) -> Role | None:
    """Fetch a role by id."""
    stmt = select(Role).where(Role.id_role == role_id).limit(1)
    result = await db.execute(stmt)
    return result.scalars().first()


async def list_roles(db: AsyncSession) -> list[Role]:
    """Every role, ordered by access level then id."""
    stmt = select(Role).order_by(Role.access_level, Role.id_role)
    result = await db.execute(stmt)
    return list(result.scalars().all())
