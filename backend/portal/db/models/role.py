"""
Role model — telephony_account.mst_role.

access_level drives hierarchy placement:
    0/1 — admin
    2   — coordinator
    3   — team lead
    4   — agent
    5   — tenant
"""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from portal.db.models.base import AccountBase


class Role(AccountBase):
    __tablename__ = "mst_role"

    id_role: Mapped[str] = mapped_column(String(64), primary_key=True)
    role_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    access_level: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<Role id={self.id_role} {self.role_name!r} level={self.access_level}>"
