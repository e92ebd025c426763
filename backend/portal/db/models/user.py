"""
User model — accounts of the telephony platform (telephony_account.mst_users).

A user points at its direct supervisor through `spv_id`:
    agent → team lead → coordinator
"""

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from portal.db.models.base import AccountBase


class User(AccountBase):
    __tablename__ = "mst_users"

    id_user: Mapped[str] = mapped_column(String(64), primary_key=True)
    nip: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True, index=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    password: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    id_role: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    spv_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)  # supervisor's id_user
    id_tenant: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"<User id={self.id_user} role={self.id_role} spv={self.spv_id}>"
