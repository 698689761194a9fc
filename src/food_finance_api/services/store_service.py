"""Store profile service."""

from food_finance_api.models.dto.store import StoreResponse, StoreUpdate
from food_finance_api.repositories.store_repository import StoreRepository
from food_finance_api.services.base import TenantService
from food_finance_api.services.cache_service import CacheConfig


class StoreService(TenantService):
    """Service for the tenant's single store profile."""

    tags = (CacheConfig.TAG_STORE,)

    def __init__(self, session, cache) -> None:
        super().__init__(session, cache)
        self.repo = StoreRepository(session)

    async def get_store(self, tenant_id: str) -> StoreResponse | None:
        """Get the store profile, or None if it was never filled in."""
        store = await self.repo.get_for_tenant(tenant_id)
        if store is None:
            return None
        return StoreResponse.model_validate(store)

    async def upsert_store(self, tenant_id: str, data: StoreUpdate) -> StoreResponse:
        """Create the store profile or update the existing one.

        Args:
            tenant_id: Owning tenant
            data: Store data

        Returns:
            Stored profile
        """
        store = await self.repo.get_for_tenant(tenant_id)
        if store is None:
            store = await self.repo.create(tenant_id, **data.model_dump())
        else:
            store = await self.repo.update(tenant_id, store.id, **data.model_dump())
        await self._commit(tenant_id)
        return StoreResponse.model_validate(store)
