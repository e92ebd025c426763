"""
Shared fixtures: two SQLite databases standing in for telephony_account
and telephony_master, seeded with a small supervisory tree.

    KOOR1 (coordinator)
      └── TL1 (team lead)
            └── AG1 (agent, NIP 1234)
"""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from portal.core.config import Settings
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
from portal.services.roles import RoleDirectory

PASSWORD = "rahasia123"
PASSWORD_HASH = hash_password(PASSWORD, rounds=4)

DASHBOARDS = {
    "SUPERSET_DASHBOARD_ID_ADMIN": "dash-admin",
    "SUPERSET_DASHBOARD_ID_KOOR": "dash-koor",
    "SUPERSET_DASHBOARD_ID_TL": "dash-tl",
    "SUPERSET_DASHBOARD_ID_AGENT": "dash-agent",
    "SUPERSET_DASHBOARD_ID_TENANT": "dash-tenant",
}

ROLES = [
    {"id_role": "ROLE001", "role_name": "Super Admin", "access_level": 1},
    {"id_role": "ROLE002", "role_name": "Koordinator", "access_level": 2},
    {"id_role": "ROLE003", "role_name": "Team Leader", "access_level": 3},
    {"id_role": "ROLE004", "role_name": "Agent", "access_level": 4},
    {"id_role": "ROLE0007", "role_name": "Tenant Owner", "access_level": 5},
    {"id_role": "ROLE009", "role_name": "Quality Analyst", "access_level": 6},
]


def _user(id_user, role, *, spv=None, tenant=None, nip=None, email=None, password=PASSWORD_HASH):
    return {
        "id_user": id_user,
        "nip": nip,
        "email": email,
        "full_name": f"{id_user} Name",
        "password": password,
        "id_role": role,
        "spv_id": spv,
        "id_tenant": tenant,
    }


USERS = [
    _user("KOOR1", "ROLE002", tenant="T1", nip="2001", email="koor@example.com"),
    _user("TL1", "ROLE003", spv="KOOR1", tenant="T1", nip="3001"),
    _user("AG1", "ROLE004", spv="TL1", tenant="T1", nip="1234", email="agent@example.com"),
    _user("TL2", "ROLE003", spv="GHOST", tenant="T2"),
    _user("TL3", "ROLE003", tenant="T3"),
    _user("KOOR2", "ROLE002", tenant="T4"),
    _user("ADMIN1", "ROLE001", nip="9001", email="admin@example.com"),
    _user("EXT001", "ROLE0007"),
    _user("TEN2", "ROLE0007", tenant="T7"),
    _user("QA1", "ROLE009", tenant="T1"),
    _user("NOROLE1", None, tenant="T1"),
    _user("NOPASS1", "ROLE004", nip="5555", password=None),
    _user("CYC1", "ROLE004", spv="CYC2"),
    _user("CYC2", "ROLE003", spv="CYC1"),
    _user("ORPHAN1", "ROLE004", spv="GHOST"),
]

MAPPINGS = [
    {"id_user": "KOOR1", "id_category": "CAT1", "id_tenant": "T1", "is_active": True},
    {"id_user": "TL1", "id_category": "CAT1", "id_tenant": None, "is_active": True},
    {"id_user": "AG1", "id_category": "CAT1", "id_tenant": "T1", "is_active": True},
    {"id_user": "TL3", "id_category": "CAT2", "id_tenant": "T3M", "is_active": True},
    {"id_user": "KOOR2", "id_category": "CAT1", "id_tenant": "T1", "is_active": False},
]

CATEGORIES = [
    {"id_category": "CAT1", "id_tenant": "T9", "service": "Inbound Voice", "is_active": True},
    {"id_category": "CAT2", "id_tenant": "T8", "service": "Outbound", "is_active": False},
]


def _seed(url: str, base, rows: list) -> None:
    engine = create_engine(url)
    base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add_all(rows)
        session.commit()
    engine.dispose()


@pytest.fixture
def database_urls(tmp_path: Path) -> dict[str, str]:
    """Seeded SQLite files; returns async URLs keyed by logical database."""
    account = tmp_path / "telephony_account.db"
    master = tmp_path / "telephony_master.db"

    _seed(
        f"sqlite:///{account}",
        AccountBase,
        [Role(**r) for r in ROLES] + [User(**u) for u in USERS] + [UserMapping(**m) for m in MAPPINGS],
    )
    _seed(f"sqlite:///{master}", MasterBase, [CategoryTelephony(**c) for c in CATEGORIES])

    return {
        DatabaseName.TELEPHONY_ACCOUNT: f"sqlite+aiosqlite:///{account}",
        DatabaseName.TELEPHONY_MASTER: f"sqlite+aiosqlite:///{master}",
    }


@pytest.fixture
def settings(database_urls) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL_TELEPHONY_ACCOUNT=database_urls[DatabaseName.TELEPHONY_ACCOUNT],
        DATABASE_URL_TELEPHONY_MASTER=database_urls[DatabaseName.TELEPHONY_MASTER],
        SUPERSET_URL="http://superset.test",
        SUPERSET_USERNAME="admin",
        SUPERSET_PASSWORD="admin-pass",
        APP_ENV="test",
        **DASHBOARDS,
    )


@pytest.fixture
async def registry(settings):
    registry = DatabaseRegistry(settings)
    yield registry
    await registry.dispose()


@pytest.fixture
async def account_db(registry):
    async with registry.session(DatabaseName.TELEPHONY_ACCOUNT) as session:
        yield session


@pytest.fixture
async def master_db(registry):
    async with registry.session(DatabaseName.TELEPHONY_MASTER) as session:
        yield session


@pytest.fixture
def roles(settings) -> RoleDirectory:
    return RoleDirectory(
        tenant_role_ids=settings.TENANT_ROLE_IDS,
        super_admin_role_ids=settings.SUPER_ADMIN_ROLE_IDS,
    )
