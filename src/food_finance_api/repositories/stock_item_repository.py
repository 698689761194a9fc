"""Stock item repository."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from food_finance_api.models.orm.stock_item import StockItemORM
from food_finance_api.repositories.base import BaseRepository


class StockItemRepository(BaseRepository[StockItemORM]):
    """Repository for stock item operations."""

    model = StockItemORM

    async def get_all(self, tenant_id: str) -> list[StockItemORM]:
        """Get all stock items ordered by name."""
        result = await self.session.execute(
            select(StockItemORM)
            .where(StockItemORM.user_id == tenant_id)
            .order_by(StockItemORM.name)
        )
        return list(result.scalars().all())

    async def get_by_name(self, tenant_id: str, name: str) -> StockItemORM | None:
        """Get a stock item by its (per tenant unique) name."""
        result = await self.session.execute(
            select(StockItemORM).where(
                StockItemORM.user_id == tenant_id,
                StockItemORM.name == name,
            )
        )
        return result.scalar_one_or_none()

    async def get_many(self, tenant_id: str, ids: set[UUID]) -> dict[UUID, StockItemORM]:
        """Get stock items by ID, keyed by ID. Foreign tenants' items are omitted."""
        if not ids:
            return {}
        result = await self.session.execute(
            select(StockItemORM).where(
                StockItemORM.user_id == tenant_id,
                StockItemORM.id.in_(ids),
            )
        )
        return {item.id: item for item in result.scalars().all()}

    async def get_low_stock(
        self,
        tenant_id: str,
        threshold: Decimal = Decimal("1"),
        limit: int = 10,
    ) -> list[StockItemORM]:
        """Get items whose quantity is at or below the threshold, lowest first."""
        result = await self.session.execute(
            select(StockItemORM)
            .where(StockItemORM.user_id == tenant_id, StockItemORM.quantity <= threshold)
            .order_by(StockItemORM.quantity.asc())
            .limit(limit)
        )
        return list(result.scalars().all())
