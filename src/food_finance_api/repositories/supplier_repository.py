"""Supplier repository."""

from sqlalchemy import select

from food_finance_api.models.orm.supplier import SupplierORM
from food_finance_api.repositories.base import BaseRepository


class SupplierRepository(BaseRepository[SupplierORM]):
    """Repository for supplier operations."""

    model = SupplierORM

    async def get_all(self, tenant_id: str) -> list[SupplierORM]:
        """Get all suppliers ordered by name."""
        result = await self.session.execute(
            select(SupplierORM)
            .where(SupplierORM.user_id == tenant_id)
            .order_by(SupplierORM.name)
        )
        return list(result.scalars().all())
