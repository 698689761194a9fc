"""Sale ORM model."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from food_finance_api.models.orm.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class SaleORM(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """Sale database model."""

    __tablename__ = "sales"

    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    total_value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    __table_args__ = (Index("idx_sales_user_date", "user_id", "date"),)
