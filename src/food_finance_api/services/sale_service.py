"""Sale service."""

from uuid import UUID

from food_finance_api.exceptions import SaleNotFoundError
from food_finance_api.models.dto.sale import (
    SaleCreate,
    SaleListResponse,
    SaleResponse,
    SaleUpdate,
)
from food_finance_api.repositories.sale_repository import SaleRepository
from food_finance_api.services.base import TenantService
from food_finance_api.services.cache_service import CacheConfig


class SaleService(TenantService):
    """Service for managing sales."""

    tags = (
        CacheConfig.TAG_SALES,
        CacheConfig.TAG_BACKUP_SUMMARY,
        CacheConfig.TAG_DASHBOARD,
    )

    def __init__(self, session, cache) -> None:
        super().__init__(session, cache)
        self.repo = SaleRepository(session)

    async def list_sales(self, tenant_id: str) -> SaleListResponse:
        """List the tenant's sales, newest first."""

        async def load() -> SaleListResponse:
            sales = await self.repo.get_all(tenant_id)
            items = [SaleResponse.model_validate(s) for s in sales]
            return SaleListResponse(items=items, total=len(items))

        return await self._cached(CacheConfig.TAG_SALES, tenant_id, SaleListResponse, load, "list")

    async def create_sale(self, tenant_id: str, data: SaleCreate) -> SaleResponse:
        """Record a sale."""
        sale = await self.repo.create(tenant_id, **data.model_dump())
        await self._commit(tenant_id)
        return SaleResponse.model_validate(sale)

    async def update_sale(self, tenant_id: str, sale_id: UUID, data: SaleUpdate) -> SaleResponse:
        """Update a sale.

        Raises:
            SaleNotFoundError: If the sale does not belong to the tenant
        """
        sale = await self.repo.update(tenant_id, sale_id, **data.model_dump())
        if sale is None:
            raise SaleNotFoundError(str(sale_id))
        await self._commit(tenant_id)
        return SaleResponse.model_validate(sale)

    async def delete_sale(self, tenant_id: str, sale_id: UUID) -> None:
        """Delete a sale.

        Raises:
            SaleNotFoundError: If the sale does not belong to the tenant
        """
        if not await self.repo.delete(tenant_id, sale_id):
            raise SaleNotFoundError(str(sale_id))
        await self._commit(tenant_id)
