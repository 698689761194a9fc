"""Purchase and purchase item ORM models."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from food_finance_api.models.orm.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class PurchaseORM(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """Purchase database model.

    ``total`` is the sum of the item totals at creation time.
    """

    __tablename__ = "purchases"

    supplier_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("suppliers.id", ondelete="RESTRICT"),
        nullable=False,
    )
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    supplier: Mapped["SupplierORM"] = relationship("SupplierORM", back_populates="purchases")
    # Items only exist through their purchase
    items: Mapped[list["PurchaseItemORM"]] = relationship(
        "PurchaseItemORM",
        back_populates="purchase",
        lazy="select",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_purchases_supplier_id", "supplier_id"),
        Index("idx_purchases_user_date", "user_id", "date"),
    )


class PurchaseItemORM(Base, UUIDMixin, TimestampMixin):
    """Purchase line item database model."""

    __tablename__ = "purchase_items"

    purchase_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("purchases.id", ondelete="CASCADE"),
        nullable=False,
    )
    stock_item_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("stock_items.id", ondelete="RESTRICT"),
        nullable=False,
    )
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    purchase: Mapped[PurchaseORM] = relationship("PurchaseORM", back_populates="items")
    stock_item: Mapped["StockItemORM"] = relationship("StockItemORM", lazy="select")

    __table_args__ = (
        Index("idx_purchase_items_purchase_id", "purchase_id"),
        Index("idx_purchase_items_stock_item_id", "stock_item_id"),
    )


from food_finance_api.models.orm.stock_item import StockItemORM  # noqa: E402, F401
from food_finance_api.models.orm.supplier import SupplierORM  # noqa: E402, F401
