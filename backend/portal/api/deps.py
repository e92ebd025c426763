"""Shared dependencies for API routes."""

from __future__ import annotations

from fastapi import Request

from portal.core.config import Settings
from portal.db.session import DatabaseRegistry
from portal.services.roles import RoleDirectory
from portal.services.superset import SupersetClient


def get_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_registry(request: Request) -> DatabaseRegistry:
    """Database registry created in the lifespan."""
    return request.app.state.db_registry


def get_role_directory(request: Request) -> RoleDirectory:
    return request.app.state.role_directory


def get_superset_client(request: Request) -> SupersetClient:
    return request.app.state.superset_client
