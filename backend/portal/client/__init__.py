"""Python client for the portal: login flow plus a persisted auth store."""

from portal.client.api import PortalClient, PortalClientError
from portal.client.store import AuthState, AuthStore

__all__ = ["PortalClient", "PortalClientError", "AuthState", "AuthStore"]
