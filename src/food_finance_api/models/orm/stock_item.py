"""Stock item ORM model."""

from decimal import Decimal

from sqlalchemy import Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from food_finance_api.models.orm.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class StockItemORM(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """Stock item database model.

    ``total_value`` is derived from quantity and unit cost when the item is
    written and is stored as-is afterwards.
    """

    __tablename__ = "stock_items"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False, default=Decimal("0"))
    unit_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_stock_items_user_name"),)
