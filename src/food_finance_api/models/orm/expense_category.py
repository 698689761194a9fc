"""Expense category ORM model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from food_finance_api.models.orm.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class ExpenseCategoryORM(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """Expense category database model."""

    __tablename__ = "expense_categories"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    expenses: Mapped[list["ExpenseORM"]] = relationship(
        "ExpenseORM",
        back_populates="category",
        lazy="select",
    )


from food_finance_api.models.orm.expense import ExpenseORM  # noqa: E402, F401
