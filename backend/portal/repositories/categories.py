"""Category repository — read access to telephony_master.mst_category_telephony."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.db.models.category_telephony import CategoryTelephony


async def get_active_category(db: AsyncSession, category_id: str) -> CategoryTelephony | None:
    """Fetch an active category by id."""
    stmt = (
        select(CategoryTelephony)
        .where(
            CategoryTelephony.id_category == category_id,
            CategoryTelephony.is_active.is_(True),
        )
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalars().first()
