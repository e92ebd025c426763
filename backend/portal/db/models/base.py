"""
SQLAlchemy declarative bases for the two telephony databases.

Convention:
    - Each table lives in its own file under `portal/db/models/`
    - Account-database tables subclass `AccountBase`, master-database
      tables subclass `MasterBase`; the metadata objects never mix
    - The schemas are owned by the telephony platform; these models
      are read-only mirrors of the columns the portal needs
"""

from sqlalchemy.orm import DeclarativeBase


class AccountBase(DeclarativeBase):
    """Base class for tables in the telephony_account database."""
    pass


class MasterBase(DeclarativeBase):
    """Base class for tables in the telephony_master database."""
    pass
