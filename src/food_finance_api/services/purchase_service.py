"""Purchase service."""

import logging
from decimal import Decimal
from uuid import UUID

from food_finance_api.exceptions import (
    PurchaseNotFoundError,
    StockItemNotFoundError,
    SupplierNotFoundError,
)
from food_finance_api.models.dto.purchase import (
    PurchaseCreate,
    PurchaseItemResponse,
    PurchaseListResponse,
    PurchaseResponse,
)
from food_finance_api.models.orm.purchase import PurchaseORM
from food_finance_api.repositories.purchase_repository import PurchaseRepository
from food_finance_api.repositories.stock_item_repository import StockItemRepository
from food_finance_api.repositories.supplier_repository import SupplierRepository
from food_finance_api.services.base import TenantService
from food_finance_api.services.cache_service import CacheConfig
from food_finance_api.utils.money import to_money

logger = logging.getLogger(__name__)


class PurchaseService(TenantService):
    """Service for recording purchases from suppliers.

    Line totals and the purchase total are computed once, on create, and
    stored. Purchases cannot be edited; delete and re-enter instead.
    """

    tags = (
        CacheConfig.TAG_PURCHASES,
        CacheConfig.TAG_BACKUP_SUMMARY,
        CacheConfig.TAG_DASHBOARD,
    )

    def __init__(self, session, cache) -> None:
        super().__init__(session, cache)
        self.repo = PurchaseRepository(session)
        self.supplier_repo = SupplierRepository(session)
        self.stock_repo = StockItemRepository(session)

    @staticmethod
    def _build_response(purchase: PurchaseORM) -> PurchaseResponse:
        """Build response from ORM model with supplier and items loaded."""
        return PurchaseResponse(
            id=purchase.id,
            supplier_id=purchase.supplier_id,
            supplier_name=purchase.supplier.name if purchase.supplier else None,
            date=purchase.date,
            payment_method=purchase.payment_method,
            notes=purchase.notes,
            total=purchase.total,
            items=[
                PurchaseItemResponse(
                    id=item.id,
                    stock_item_id=item.stock_item_id,
                    stock_item_name=item.stock_item.name if item.stock_item else None,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total=item.total,
                )
                for item in purchase.items
            ],
            created_at=purchase.created_at,
        )

    async def list_purchases(self, tenant_id: str) -> PurchaseListResponse:
        """List the tenant's purchases, newest first, with supplier and items."""

        async def load() -> PurchaseListResponse:
            purchases = await self.repo.get_all_with_items(tenant_id)
            items = [self._build_response(p) for p in purchases]
            return PurchaseListResponse(items=items, total=len(items))

        return await self._cached(
            CacheConfig.TAG_PURCHASES, tenant_id, PurchaseListResponse, load, "list"
        )

    async def get_purchase(self, tenant_id: str, purchase_id: UUID) -> PurchaseResponse:
        """Get a purchase.

        Raises:
            PurchaseNotFoundError: If the purchase does not belong to the tenant
        """
        purchase = await self.repo.get_with_items(tenant_id, purchase_id)
        if purchase is None:
            raise PurchaseNotFoundError(str(purchase_id))
        return self._build_response(purchase)

    async def create_purchase(self, tenant_id: str, data: PurchaseCreate) -> PurchaseResponse:
        """Create a purchase with its items.

        Args:
            tenant_id: Owning tenant
            data: Purchase data with at least one item

        Returns:
            Created purchase

        Raises:
            SupplierNotFoundError: If the supplier does not belong to the tenant
            StockItemNotFoundError: If any item's stock item does not belong to the tenant
        """
        if await self.supplier_repo.get(tenant_id, data.supplier_id) is None:
            raise SupplierNotFoundError(str(data.supplier_id))

        stock_ids = {item.stock_item_id for item in data.items}
        owned = await self.stock_repo.get_many(tenant_id, stock_ids)
        missing = stock_ids - owned.keys()
        if missing:
            raise StockItemNotFoundError(str(sorted(missing, key=str)[0]))

        items = [
            {
                "stock_item_id": item.stock_item_id,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "total": to_money(item.unit_price * item.quantity),
            }
            for item in data.items
        ]
        total = sum((item["total"] for item in items), Decimal("0"))

        purchase = await self.repo.create_with_items(
            tenant_id,
            items,
            supplier_id=data.supplier_id,
            date=data.date,
            payment_method=data.payment_method,
            notes=data.notes or None,
            total=total,
        )
        await self._commit(tenant_id)
        logger.info("Created purchase %s with %d items", purchase.id, len(items))
        return await self.get_purchase(tenant_id, purchase.id)

    async def delete_purchase(self, tenant_id: str, purchase_id: UUID) -> None:
        """Delete a purchase together with its items.

        Raises:
            PurchaseNotFoundError: If the purchase does not belong to the tenant
        """
        purchase = await self.repo.get_with_items(tenant_id, purchase_id)
        if purchase is None:
            raise PurchaseNotFoundError(str(purchase_id))
        await self.session.delete(purchase)
        await self._commit(tenant_id)
