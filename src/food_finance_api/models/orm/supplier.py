"""Supplier ORM model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from food_finance_api.models.orm.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class SupplierORM(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """Supplier database model."""

    __tablename__ = "suppliers"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)

    purchases: Mapped[list["PurchaseORM"]] = relationship(
        "PurchaseORM",
        back_populates="supplier",
        lazy="select",
    )


from food_finance_api.models.orm.purchase import PurchaseORM  # noqa: E402, F401
