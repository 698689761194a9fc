"""Store ORM model."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from food_finance_api.models.orm.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class StoreORM(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """Store profile database model (one per tenant)."""

    __tablename__ = "stores"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    cnpj: Mapped[str | None] = mapped_column(String(32), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)

    __table_args__ = (UniqueConstraint("user_id", name="uq_stores_user_id"),)
