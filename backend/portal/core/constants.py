"""Shared constants and enums used across the application."""

from enum import IntEnum, StrEnum

# Placeholder for a hierarchy field that does not apply or could not be resolved
SENTINEL = "0"

# Tenant/service value granting access to every tenant
ALL = "ALL"

# Prefix of external (tenant-owned) user ids
EXTERNAL_USER_PREFIX = "EXT"


class AccessLevel(IntEnum):
    """Role rank in the supervisory hierarchy (lower is more senior)."""

    SUPER_ADMIN = 0
    ADMIN = 1
    COORDINATOR = 2
    TEAM_LEAD = 3
    AGENT = 4
    TENANT = 5


class RoleCategory(StrEnum):
    """Coarse role classification used when a user has no category mapping."""

    SUPER_ADMIN = "SUPER_ADMIN"
    TENANT = "TENANT"
    STAFF = "STAFF"


class DatabaseName(StrEnum):
    """Logical databases the portal reads from."""

    TELEPHONY_ACCOUNT = "telephony_account"
    TELEPHONY_MASTER = "telephony_master"


class IdentifierKind(StrEnum):
    """How a login identifier is looked up."""

    NIP = "nip"
    EMAIL = "email"


class ResponseStatus(StrEnum):
    """Envelope status flag returned by the auth endpoints."""

    OK = "T"
    FAILED = "F"
