"""User-mapping repository — read access to telephony_account.mst_user_mapping."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.db.models.user_mapping import UserMapping


async def get_active_mapping(db: AsyncSession, user_id: str) -> UserMapping | None:
    """First active mapping of a user. Uniqueness is not enforced upstream."""
    stmt = (
        select(UserMapping)
        .where(UserMapping.id_user == user_id, UserMapping.is_active.is_(True))
        .order_by(UserMapping.id_mapping)
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalars().first()
