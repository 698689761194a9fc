"""Store profile repository."""

from sqlalchemy import select

from food_finance_api.models.orm.store import StoreORM
from food_finance_api.repositories.base import BaseRepository


class StoreRepository(BaseRepository[StoreORM]):
    """Repository for the per-tenant store profile."""

    model = StoreORM

    async def get_for_tenant(self, tenant_id: str) -> StoreORM | None:
        """Get the tenant's store profile, if any."""
        result = await self.session.execute(
            select(StoreORM).where(StoreORM.user_id == tenant_id)
        )
        return result.scalar_one_or_none()
