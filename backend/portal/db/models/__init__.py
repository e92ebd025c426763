"""
Models package — re-exports both declarative bases and all models.

When adding a new model:
    1. Create `portal/db/models/<table_name>.py`
    2. Subclass the base of the database that owns the table
    3. Import it here
"""

from portal.db.models.base import AccountBase, MasterBase
from portal.db.models.category_telephony import CategoryTelephony
from portal.db.models.role import Role
from portal.db.models.user import User
from portal.db.models.user_mapping import UserMapping

__all__ = [
    "AccountBase",
    "MasterBase",
    "User",
    "Role",
    "UserMapping",
    "CategoryTelephony",
]
