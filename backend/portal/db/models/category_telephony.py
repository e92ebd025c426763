"""CategoryTelephony model — service categories per tenant (telephony_master.mst_category_telephony)."""

from typing import Optional

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from portal.db.models.base import MasterBase


class CategoryTelephony(MasterBase):
    __tablename__ = "mst_category_telephony"

    id_category: Mapped[str] = mapped_column(String(64), primary_key=True)
    id_tenant: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    service: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<CategoryTelephony id={self.id_category} tenant={self.id_tenant} service={self.service!r}>"
