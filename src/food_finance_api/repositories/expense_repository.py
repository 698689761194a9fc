"""Expense and expense category repositories."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from food_finance_api.models.orm.expense import ExpenseORM
from food_finance_api.models.orm.expense_category import ExpenseCategoryORM
from food_finance_api.repositories.base import BaseRepository


class ExpenseCategoryRepository(BaseRepository[ExpenseCategoryORM]):
    """Repository for expense category operations."""

    model = ExpenseCategoryORM

    async def get_all(self, tenant_id: str) -> list[ExpenseCategoryORM]:
        """Get all categories ordered by name."""
        result = await self.session.execute(
            select(ExpenseCategoryORM)
            .where(ExpenseCategoryORM.user_id == tenant_id)
            .order_by(ExpenseCategoryORM.name)
        )
        return list(result.scalars().all())


class ExpenseRepository(BaseRepository[ExpenseORM]):
    """Repository for expense operations."""

    model = ExpenseORM

    async def get_all_with_category(self, tenant_id: str) -> list[ExpenseORM]:
        """Get all expenses, newest first, with their category loaded."""
        result = await self.session.execute(
            select(ExpenseORM)
            .where(ExpenseORM.user_id == tenant_id)
            .options(selectinload(ExpenseORM.category))
            .order_by(ExpenseORM.date.desc())
        )
        return list(result.scalars().all())

    async def get_with_category(self, tenant_id: str, expense_id: UUID) -> ExpenseORM | None:
        """Get one expense with its category loaded."""
        result = await self.session.execute(
            select(ExpenseORM)
            .where(ExpenseORM.id == expense_id, ExpenseORM.user_id == tenant_id)
            .options(selectinload(ExpenseORM.category))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def count_for_category(self, tenant_id: str, category_id: UUID) -> int:
        """Count expenses filed under a category."""
        result = await self.session.execute(
            select(func.count())
            .select_from(ExpenseORM)
            .where(ExpenseORM.user_id == tenant_id, ExpenseORM.category_id == category_id)
        )
        return result.scalar_one()

    async def sum_between(self, tenant_id: str, start: datetime, end: datetime) -> Decimal:
        """Sum expense values dated within [start, end)."""
        result = await self.session.execute(
            select(func.coalesce(func.sum(ExpenseORM.value), 0)).where(
                ExpenseORM.user_id == tenant_id,
                ExpenseORM.date >= start,
                ExpenseORM.date < end,
            )
        )
        return Decimal(str(result.scalar_one()))

    async def get_between(self, tenant_id: str, start: datetime, end: datetime) -> list[ExpenseORM]:
        """Get expenses dated within [start, end)."""
        result = await self.session.execute(
            select(ExpenseORM).where(
                ExpenseORM.user_id == tenant_id,
                ExpenseORM.date >= start,
                ExpenseORM.date < end,
            )
        )
        return list(result.scalars().all())
