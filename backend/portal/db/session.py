"""
Async SQLAlchemy engines for the telephony databases.

One engine and session factory per logical database, created lazily on
first use and reused until `dispose()`.  The registry is constructed
explicitly (in the app lifespan, a CLI command or a test fixture) and
passed to whoever needs it; there is no module-level engine.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from portal.core.config import Settings
from portal.core.constants import DatabaseName
from portal.core.errors import DatabaseNotConfiguredError
from portal.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DatabaseConfig:
    """Static metadata for one logical database."""

    name: DatabaseName
    env_var: str
    description: str


DATABASES: dict[DatabaseName, DatabaseConfig] = {
    DatabaseName.TELEPHONY_ACCOUNT: DatabaseConfig(
        name=DatabaseName.TELEPHONY_ACCOUNT,
        env_var="DATABASE_URL_TELEPHONY_ACCOUNT",
        description="User accounts, roles and user-to-category mappings",
    ),
    DatabaseName.TELEPHONY_MASTER: DatabaseConfig(
        name=DatabaseName.TELEPHONY_MASTER,
        env_var="DATABASE_URL_TELEPHONY_MASTER",
        description="Telephony master data: service categories per tenant",
    ),
}


class DatabaseRegistry:
    """
    Lazily created, cached engines keyed by logical database name.

    Usage::

        registry = DatabaseRegistry(settings)
        async with registry.session(DatabaseName.TELEPHONY_ACCOUNT) as db:
            ...
        await registry.dispose()
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._engines: dict[DatabaseName, AsyncEngine] = {}
        self._sessionmakers: dict[DatabaseName, async_sessionmaker[AsyncSession]] = {}

    # ─── Lookup ───────────────────────────────────
    def _config(self, name: str) -> DatabaseConfig:
        try:
            return DATABASES[DatabaseName(name)]
        except ValueError:
            raise DatabaseNotConfiguredError(
                f"Unsupported database: {name}", database=name
            ) from None

    def connection_url(self, name: str) -> str:
        """Return the configured URL for `name` or raise when it is missing."""
        config = self._config(name)
        url = getattr(self._settings, config.env_var, "")
        if not url:
            raise DatabaseNotConfiguredError(
                f"Connection URL not found for database: {config.name} ({config.env_var})",
                database=config.name,
            )
        return url

    def is_configured(self, name: str) -> bool:
        try:
            self.connection_url(name)
        except DatabaseNotConfiguredError:
            return False
        return True

    def describe(self) -> list[dict[str, Any]]:
        """Metadata for every known database, for diagnostics."""
        return [
            {
                "name": config.name.value,
                "env_var": config.env_var,
                "description": config.description,
                "configured": self.is_configured(config.name),
                "connected": config.name in self._engines,
            }
            for config in DATABASES.values()
        ]

    # ─── Engines ──────────────────────────────────
    def _engine_options(self, url: str) -> dict[str, Any]:
        options: dict[str, Any] = {
            "echo": self._settings.DATABASE_ECHO,
            "pool_pre_ping": True,
        }
        # SQLite (tests, local tooling) does not take queue pool sizing
        if make_url(url).get_backend_name() != "sqlite":
            options["pool_size"] = self._settings.DATABASE_POOL_SIZE
            options["max_overflow"] = self._settings.DATABASE_MAX_OVERFLOW
        return options

    def engine(self, name: str) -> AsyncEngine:
        """Return the cached engine for `name`, creating it on first use."""
        config = self._config(name)
        engine = self._engines.get(config.name)
        if engine is None:
            url = self.connection_url(config.name)
            engine = create_async_engine(url, **self._engine_options(url))
            self._engines[config.name] = engine
            self._sessionmakers[config.name] = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.info("Database engine created", database=config.name.value)
        return engine

    def sessionmaker(self, name: str) -> async_sessionmaker[AsyncSession]:
        config = self._config(name)
        self.engine(config.name)
        return self._sessionmakers[config.name]

    @asynccontextmanager
    async def session(self, name: str) -> AsyncIterator[AsyncSession]:
        """Yield a session for read-only work; it is always rolled back."""
        async with self.sessionmaker(name)() as session:
            try:
                yield session
            finally:
                await session.rollback()

    # ─── Shutdown ─────────────────────────────────
    async def dispose(self) -> None:
        """Dispose every engine and forget them; later calls reconnect lazily."""
        for name, engine in list(self._engines.items()):
            await engine.dispose()
            logger.info("Database engine disposed", database=name.value)
        self._engines.clear()
        self._sessionmakers.clear()
