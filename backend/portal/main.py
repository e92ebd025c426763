"""FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portal.api.v1 import auth, superset
from portal.core.config import Settings, settings as default_settings
from portal.core.constants import ResponseStatus
from portal.core.logging import get_logger, setup_logging
from portal.db.session import DatabaseRegistry
from portal.services.roles import RoleDirectory
from portal.services.superset import SupersetClient

API_PREFIX = "/api"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application; `settings` defaults to the environment."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown lifecycle hooks."""
        setup_logging(
            "DEBUG" if settings.APP_ENV == "development" else "INFO",
            json_logs=settings.APP_ENV == "production",
        )
        logger = get_logger("startup")

        registry = DatabaseRegistry(settings)
        app.state.db_registry = registry
        app.state.role_directory = RoleDirectory(
            tenant_role_ids=settings.TENANT_ROLE_IDS,
            super_admin_role_ids=settings.SUPER_ADMIN_ROLE_IDS,
        )
        app.state.superset_client = SupersetClient.from_settings(settings)

        logger.info("Application starting", env=settings.APP_ENV)
        for info in registry.describe():
            if not info["configured"]:
                logger.warning(
                    "Database URL not set - connections will fail",
                    database=info["name"],
                    env_var=info["env_var"],
                )
        for level, dashboard_id in settings.SUPERSET_DASHBOARDS.items():
            if not dashboard_id:
                logger.warning("Dashboard id not set - level uses the admin dashboard", level=level)
        yield
        logger.info("Application shutting down")
        await registry.dispose()

    app = FastAPI(
        title="Telephony Dashboard Portal API",
        description="Login, role hierarchy and Superset guest tokens for the telephony dashboards",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed bodies get the endpoint family's own 400 shape."""
        if request.url.path.startswith(f"{API_PREFIX}/superset"):
            return JSONResponse(status_code=400, content={"error": "Invalid request body"})
        return JSONResponse(
            status_code=400,
            content={"status": ResponseStatus.FAILED.value, "message": "Permintaan tidak valid"},
        )

    app.include_router(auth.router, prefix=API_PREFIX)
    app.include_router(superset.router, prefix=API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Public health-check endpoint."""
        return {"status": "ok", "env": settings.APP_ENV}

    return app


app = create_app()
