"""Supplier service."""

from uuid import UUID

from food_finance_api.exceptions import ReferentialConflictError, SupplierNotFoundError
from food_finance_api.models.dto.supplier import (
    SupplierCreate,
    SupplierListResponse,
    SupplierResponse,
    SupplierUpdate,
)
from food_finance_api.repositories.purchase_repository import PurchaseRepository
from food_finance_api.repositories.supplier_repository import SupplierRepository
from food_finance_api.services.base import TenantService
from food_finance_api.services.cache_service import CacheConfig


class SupplierService(TenantService):
    """Service for managing suppliers."""

    tags = (CacheConfig.TAG_SUPPLIERS, CacheConfig.TAG_BACKUP_SUMMARY)

    def __init__(self, session, cache) -> None:
        super().__init__(session, cache)
        self.repo = SupplierRepository(session)
        self.purchase_repo = PurchaseRepository(session)

    async def list_suppliers(self, tenant_id: str) -> SupplierListResponse:
        """List the tenant's suppliers ordered by name."""

        async def load() -> SupplierListResponse:
            suppliers = await self.repo.get_all(tenant_id)
            items = [SupplierResponse.model_validate(s) for s in suppliers]
            return SupplierListResponse(items=items, total=len(items))

        return await self._cached(
            CacheConfig.TAG_SUPPLIERS, tenant_id, SupplierListResponse, load, "list"
        )

    async def get_supplier(self, tenant_id: str, supplier_id: UUID) -> SupplierResponse:
        """Get a supplier.

        Raises:
            SupplierNotFoundError: If the supplier does not belong to the tenant
        """
        supplier = await self.repo.get(tenant_id, supplier_id)
        if supplier is None:
            raise SupplierNotFoundError(str(supplier_id))
        return SupplierResponse.model_validate(supplier)

    async def create_supplier(self, tenant_id: str, data: SupplierCreate) -> SupplierResponse:
        """Create a supplier.

        Args:
            tenant_id: Owning tenant
            data: Supplier data

        Returns:
            Created supplier
        """
        supplier = await self.repo.create(tenant_id, **data.model_dump())
        await self._commit(tenant_id)
        return SupplierResponse.model_validate(supplier)

    async def update_supplier(
        self,
        tenant_id: str,
        supplier_id: UUID,
        data: SupplierUpdate,
    ) -> SupplierResponse:
        """Update a supplier.

        Raises:
            SupplierNotFoundError: If the supplier does not belong to the tenant
        """
        supplier = await self.repo.update(tenant_id, supplier_id, **data.model_dump())
        if supplier is None:
            raise SupplierNotFoundError(str(supplier_id))
        await self._commit(tenant_id)
        return SupplierResponse.model_validate(supplier)

    async def delete_supplier(self, tenant_id: str, supplier_id: UUID) -> None:
        """Delete a supplier that no purchase references.

        Raises:
            SupplierNotFoundError: If the supplier does not belong to the tenant
            ReferentialConflictError: If purchases still reference it
        """
        supplier = await self.repo.get(tenant_id, supplier_id)
        if supplier is None:
            raise SupplierNotFoundError(str(supplier_id))

        purchase_count = await self.purchase_repo.count_for_supplier(tenant_id, supplier_id)
        if purchase_count > 0:
            raise ReferentialConflictError("Supplier", "purchases", purchase_count)

        await self.repo.delete(tenant_id, supplier_id)
        await self._commit(tenant_id)
