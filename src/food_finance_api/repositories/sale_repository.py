"""Sale repository."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select

from food_finance_api.models.orm.sale import SaleORM
from food_finance_api.repositories.base import BaseRepository


class SaleRepository(BaseRepository[SaleORM]):
    """Repository for sale operations."""

    model = SaleORM

    async def get_all(self, tenant_id: str) -> list[SaleORM]:
        """Get all sales, newest first."""
        result = await self.session.execute(
            select(SaleORM)
            .where(SaleORM.user_id == tenant_id)
            .order_by(SaleORM.date.desc())
        )
        return list(result.scalars().all())

    async def sum_between(self, tenant_id: str, start: datetime, end: datetime) -> Decimal:
        """Sum sale totals dated within [start, end)."""
        result = await self.session.execute(
            select(func.coalesce(func.sum(SaleORM.total_value), 0)).where(
                SaleORM.user_id == tenant_id,
                SaleORM.date >= start,
                SaleORM.date < end,
            )
        )
        return Decimal(str(result.scalar_one()))

    async def get_between(self, tenant_id: str, start: datetime, end: datetime) -> list[SaleORM]:
        """Get sales dated within [start, end)."""
        result = await self.session.execute(
            select(SaleORM).where(
                SaleORM.user_id == tenant_id,
                SaleORM.date >= start,
                SaleORM.date < end,
            )
        )
        return list(result.scalars().all())
