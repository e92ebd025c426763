"""
Seed local telephony databases for development.

Creates the mirrored tables (the real schemas belong to the telephony
platform) and inserts one user per tier plus a tenant and a super admin.
Point both DATABASE_URL_TELEPHONY_* variables at scratch databases, e.g.

    DATABASE_URL_TELEPHONY_ACCOUNT=sqlite+aiosqlite:///./account.db
    DATABASE_URL_TELEPHONY_MASTER=sqlite+aiosqlite:///./master.db

Run: python -m scripts.seed_telephony  (from backend/)
"""

import asyncio

from portal.core.config import settings
from portal.core.constants import DatabaseName
from portal.core.security import hash_password
from portal.db.models import (
    AccountBase,
    CategoryTelephony,
    MasterBase,
    Role,
    User,
    UserMapping,
)
from portal.db.session import DatabaseRegistry

SEED_ROLES = [
    {"id_role": "ROLE001", "role_name": "Super Admin", "access_level": 0},
    {"id_role": "ROLE002", "role_name": "Koordinator", "access_level": 2},
    {"id_role": "ROLE003", "role_name": "Team Leader", "access_level": 3},
    {"id_role": "ROLE004", "role_name": "Agent", "access_level": 4},
    {"id_role": "ROLE0007", "role_name": "Tenant", "access_level": 5},
]

SEED_USERS = [
    {"id_user": "INT000001", "nip": "1001", "email": "admin@example.com",
     "full_name": "Super Admin", "id_role": "ROLE001", "spv_id": None, "id_tenant": None},
    {"id_user": "INT000002", "nip": "1002", "email": "koor@example.com",
     "full_name": "Koordinator Voice", "id_role": "ROLE002", "spv_id": None, "id_tenant": "TEN01"},
    {"id_user": "INT000003", "nip": "1003", "email": "tl@example.com",
     "full_name": "Team Leader Voice", "id_role": "ROLE003", "spv_id": "INT000002", "id_tenant": "TEN01"},
    {"id_user": "INT000004", "nip": "1004", "email": "agent@example.com",
     "full_name": "Agent Voice", "id_role": "ROLE004", "spv_id": "INT000003", "id_tenant": "TEN01"},
    {"id_user": "EXT000005", "nip": None, "email": "tenant@example.com",
     "full_name": "Tenant Owner", "id_role": "ROLE0007", "spv_id": None, "id_tenant": None},
]

SEED_PASSWORD = "password123"  # Change in production!

SEED_MAPPINGS = [
    {"id_user": "INT000002", "id_category": "CAT01", "id_tenant": "TEN01"},
    {"id_user": "INT000003", "id_category": "CAT01", "id_tenant": "TEN01"},
    {"id_user": "INT000004", "id_category": "CAT01", "id_tenant": "TEN01"},
]

SEED_CATEGORIES = [
    {"id_category": "CAT01", "id_tenant": "TEN01", "service": "Inbound Voice"},
]


async def seed():
    """Create tables and insert seed rows."""
    registry = DatabaseRegistry(settings)
    try:
        account = registry.engine(DatabaseName.TELEPHONY_ACCOUNT)
        master = registry.engine(DatabaseName.TELEPHONY_MASTER)
        async with account.begin() as conn:
            await conn.run_sync(AccountBase.metadata.create_all)
        async with master.begin() as conn:
            await conn.run_sync(MasterBase.metadata.create_all)

        async with registry.sessionmaker(DatabaseName.TELEPHONY_ACCOUNT)() as session:
            session.add_all(Role(**data) for data in SEED_ROLES)
            for data in SEED_USERS:
                session.add(User(password=hash_password(SEED_PASSWORD), **data))
                print(f"  Created user: {data['id_user']} ({data['id_role']})")
            session.add_all(UserMapping(is_active=True, **data) for data in SEED_MAPPINGS)
            await session.commit()

        async with registry.sessionmaker(DatabaseName.TELEPHONY_MASTER)() as session:
            session.add_all(CategoryTelephony(is_active=True, **data) for data in SEED_CATEGORIES)
            await session.commit()
    finally:
        await registry.dispose()
    print(f"Seeded {len(SEED_USERS)} users.")


if __name__ == "__main__":
    asyncio.run(seed())
