"""
User repository — read access to telephony_account.mst_users.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- The telephony schema is owned elsewhere: nothing here writes
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.db.models.user import User


async def get_user_by_id(db: AsyncSession, user_id: str) -> User | None:
    """Fetch a user by id_user."""
    stmt = select(User).where(User.id_user == user_id).limit(1)
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_user_by_nip(db: AsyncSession, nip: str) -> User | None:
    """Fetch the first user with the given staff number."""
    stmt = select(User).where(User.nip == nip).limit(1)
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Fetch the first user with the given email address."""
    stmt = select(User).where(User.email == email).limit(1)
    result = await db.execute(stmt)
    return result.scalars().first()


async def find_user(db: AsyncSession, identifier: str) -> User | None:
    """Look a user up by id_user, then nip, then email."""
    for lookup in (get_user_by_id, get_user_by_nip, get_user_by_email):
        user = await lookup(db, identifier)
        if user is not None:
            return user
    return None
