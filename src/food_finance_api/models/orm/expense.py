"""Expense ORM model."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from food_finance_api.models.orm.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class ExpenseORM(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """Expense database model."""

    __tablename__ = "expenses"

    category_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("expense_categories.id", ondelete="RESTRICT"),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)

    category: Mapped["ExpenseCategoryORM"] = relationship(
        "ExpenseCategoryORM", back_populates="expenses"
    )

    __table_args__ = (
        Index("idx_expenses_category_id", "category_id"),
        Index("idx_expenses_user_date", "user_id", "date"),
    )


from food_finance_api.models.orm.expense_category import ExpenseCategoryORM  # noqa: E402, F401
