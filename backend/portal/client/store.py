"""
AuthStore — the portal session as a client keeps it between runs.

State lives in a JSON file (`auth-storage.json` by default) and is
rehydrated when the store is created.  Logging out clears it.  On disk the
keys are camelCase, the shape the browser store writes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from portal.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_STORAGE_NAME = "auth-storage.json"

# attribute -> persisted key
_STORAGE_KEYS = {
    "guest_token": "guestToken",
    "dashboard_id": "dashboardId",
    "full_name": "fullName",
    "user_id": "userId",
    "role": "role",
    "access_level": "accessLevel",
    "hierarchy": "hierarchy",
}


@dataclass
class AuthState:
    guest_token: str | None = None
    dashboard_id: str | None = None
    full_name: str | None = None
    user_id: str | None = None
    role: str | None = None
    access_level: int | None = None
    hierarchy: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthState":
        return cls(**{attr: data[key] for attr, key in _STORAGE_KEYS.items() if key in data})

    def to_dict(self) -> dict[str, Any]:
        return {key: getattr(self, attr) for attr, key in _STORAGE_KEYS.items()}

    @property
    def authenticated(self) -> bool:
        return bool(self.guest_token and self.dashboard_id)


class AuthStore:
    """File-backed `AuthState` with rehydrate/persist/clear."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.state = AuthState()
        self.rehydrate()

    def rehydrate(self) -> AuthState:
        """Load persisted state; a missing or corrupt file yields an empty state."""
        self.state = AuthState()
        if not self.path.exists():
            return self.state
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Discarding unreadable auth storage", path=str(self.path), error=str(exc))
            return self.state
        state = data.get("state") if isinstance(data, dict) else None
        if not isinstance(state, dict):
            logger.warning("Discarding unreadable auth storage", path=str(self.path), error="no state object")
            return self.state
        self.state = AuthState.from_dict(state)
        return self.state

    def persist(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"state": self.state.to_dict(), "version": 0}
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def set_credentials(
        self,
        token: str,
        dashboard_id: str,
        full_name: str | None,
        *,
        user_id: str | None = None,
        role: str | None = None,
        access_level: int | None = None,
        hierarchy: str | None = None,
    ) -> AuthState:
        """Store a guest token and the identity it was issued for."""
        self.state = AuthState(
            guest_token=token,
            dashboard_id=dashboard_id,
            full_name=full_name,
            user_id=user_id,
            role=role,
            access_level=access_level,
            hierarchy=hierarchy,
        )
        self.persist()
        return self.state

    def clear(self) -> None:
        """Logout: forget everything, on disk too."""
        self.state = AuthState()
        self.persist()
