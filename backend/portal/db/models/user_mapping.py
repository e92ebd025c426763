"""UserMapping model — assigns a user to a category and tenant (telephony_account.mst_user_mapping)."""

from typing import Optional

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from portal.db.models.base import AccountBase


class UserMapping(AccountBase):
    __tablename__ = "mst_user_mapping"

    id_mapping: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_user: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    id_category: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    id_tenant: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<UserMapping user={self.id_user} category={self.id_category} "
            f"tenant={self.id_tenant} active={self.is_active}>"
        )
