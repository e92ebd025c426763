"""
Pydantic Settings — centralized configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Databases (one connection URL per logical database) ──
    DATABASE_URL_TELEPHONY_ACCOUNT: str = ""
    DATABASE_URL_TELEPHONY_MASTER: str = ""
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 5
    DATABASE_ECHO: bool = False

    # ── Superset ──────────────────────────────
    SUPERSET_URL: str = "http://localhost:8088"
    SUPERSET_USERNAME: str = "admin"
    SUPERSET_PASSWORD: str = ""
    SUPERSET_TIMEOUT_SECONDS: float = 30.0
    SUPERSET_REFRESH_ENABLED: bool = False

    SUPERSET_DASHBOARD_ID_ADMIN: str = ""
    SUPERSET_DASHBOARD_ID_KOOR: str = ""
    SUPERSET_DASHBOARD_ID_TL: str = ""
    SUPERSET_DASHBOARD_ID_AGENT: str = ""
    SUPERSET_DASHBOARD_ID_TENANT: str = ""

    # ── Hierarchy ─────────────────────────────
    HIERARCHY_AGENT_FAST_PATH: bool = True
    HIERARCHY_INCLUDE_FULL_NAME: bool = False
    HIERARCHY_MAX_SUPERVISOR_HOPS: int = 2
    TENANT_ROLE_IDS: list[str] = ["ROLE0007"]
    SUPER_ADMIN_ROLE_IDS: list[str] = ["ROLE001"]

    # ── Application ───────────────────────────
    APP_ENV: str = "development"
    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}

    @property
    def SUPERSET_DASHBOARDS(self) -> dict[str, str]:
        """Access level → dashboard id."""
        return {
            "0": self.SUPERSET_DASHBOARD_ID_ADMIN,
            "1": self.SUPERSET_DASHBOARD_ID_ADMIN,
            "2": self.SUPERSET_DASHBOARD_ID_KOOR,
            "3": self.SUPERSET_DASHBOARD_ID_TL,
            "4": self.SUPERSET_DASHBOARD_ID_AGENT,
            "5": self.SUPERSET_DASHBOARD_ID_TENANT,
        }


settings = Settings()
