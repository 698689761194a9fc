"""Purchase repository."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.orm import selectinload

from food_finance_api.models.orm.purchase import PurchaseItemORM, PurchaseORM
from food_finance_api.repositories.base import BaseRepository


class PurchaseRepository(BaseRepository[PurchaseORM]):
    """Repository for purchase operations.

    Purchase items are not addressable on their own; they are loaded, created
    and deleted through their purchase.
    """

    model = PurchaseORM

    def _with_relations(self):
        return (
            selectinload(PurchaseORM.supplier),
            selectinload(PurchaseORM.items).selectinload(PurchaseItemORM.stock_item),
        )

    async def get_all_with_items(self, tenant_id: str) -> list[PurchaseORM]:
        """Get all purchases, newest first, with supplier and items loaded."""
        result = await self.session.execute(
            select(PurchaseORM)
            .where(PurchaseORM.user_id == tenant_id)
            .options(*self._with_relations())
            .order_by(PurchaseORM.date.desc())
        )
        return list(result.scalars().all())

    async def get_with_items(self, tenant_id: str, purchase_id: UUID) -> PurchaseORM | None:
        """Get one purchase with supplier and items loaded."""
        result = await self.session.execute(
            select(PurchaseORM)
            .where(PurchaseORM.id == purchase_id, PurchaseORM.user_id == tenant_id)
            .options(*self._with_relations())
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create_with_items(
        self,
        tenant_id: str,
        items: list[dict],
        **kwargs,
    ) -> PurchaseORM:
        """Create a purchase together with its items in one flush."""
        purchase = PurchaseORM(
            user_id=tenant_id,
            items=[PurchaseItemORM(**item) for item in items],
            **kwargs,
        )
        self.session.add(purchase)
        await self.session.flush()
        return purchase

    async def delete_all_items(self, tenant_id: str) -> int:
        """Delete every purchase item belonging to the tenant's purchases."""
        owned = select(PurchaseORM.id).where(PurchaseORM.user_id == tenant_id)
        result = await self.session.execute(
            delete(PurchaseItemORM)
            .where(PurchaseItemORM.purchase_id.in_(owned))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def count_for_supplier(self, tenant_id: str, supplier_id: UUID) -> int:
        """Count purchases made from a supplier."""
        result = await self.session.execute(
            select(func.count())
            .select_from(PurchaseORM)
            .where(PurchaseORM.user_id == tenant_id, PurchaseORM.supplier_id == supplier_id)
        )
        return result.scalar_one()

    async def count_items_for_stock_item(self, stock_item_id: UUID) -> int:
        """Count purchase lines referencing a stock item."""
        result = await self.session.execute(
            select(func.count())
            .select_from(PurchaseItemORM)
            .where(PurchaseItemORM.stock_item_id == stock_item_id)
        )
        return result.scalar_one()

    async def sum_between(self, tenant_id: str, start: datetime, end: datetime) -> Decimal:
        """Sum purchase totals dated within [start, end)."""
        result = await self.session.execute(
            select(func.coalesce(func.sum(PurchaseORM.total), 0)).where(
                PurchaseORM.user_id == tenant_id,
                PurchaseORM.date >= start,
                PurchaseORM.date < end,
            )
        )
        return Decimal(str(result.scalar_one()))
