"""Stock item service."""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from food_finance_api.exceptions import (
    DuplicateNameError,
    ReferentialConflictError,
    StockItemNotFoundError,
)
from food_finance_api.models.dto.stock_item import (
    StockItemCreate,
    StockItemListResponse,
    StockItemResponse,
    StockItemUpdate,
)
from food_finance_api.repositories.purchase_repository import PurchaseRepository
from food_finance_api.repositories.stock_item_repository import StockItemRepository
from food_finance_api.services.base import TenantService
from food_finance_api.services.cache_service import CacheConfig
from food_finance_api.utils.money import to_money

logger = logging.getLogger(__name__)

ENTITY_NAME = "Stock item"


def compute_total_value(quantity: Decimal, unit_cost: Decimal) -> Decimal:
    """Stock value stored alongside the item: unit cost times quantity, in cents."""
    return to_money(unit_cost * quantity)


class StockService(TenantService):
    """Service for managing stock items.

    ``total_value`` is derived here on every write and stored; reads and
    backup restores never recompute it.
    """

    tags = (
        CacheConfig.TAG_STOCK_ITEMS,
        CacheConfig.TAG_BACKUP_SUMMARY,
        CacheConfig.TAG_DASHBOARD,
    )

    def __init__(self, session, cache) -> None:
        super().__init__(session, cache)
        self.repo = StockItemRepository(session)
        self.purchase_repo = PurchaseRepository(session)

    async def list_stock_items(self, tenant_id: str) -> StockItemListResponse:
        """List the tenant's stock items ordered by name."""

        async def load() -> StockItemListResponse:
            stock_items = await self.repo.get_all(tenant_id)
            items = [StockItemResponse.model_validate(i) for i in stock_items]
            return StockItemListResponse(items=items, total=len(items))

        return await self._cached(
            CacheConfig.TAG_STOCK_ITEMS, tenant_id, StockItemListResponse, load, "list"
        )

    async def get_stock_item(self, tenant_id: str, item_id: UUID) -> StockItemResponse:
        """Get a stock item.

        Raises:
            StockItemNotFoundError: If the item does not belong to the tenant
        """
        item = await self.repo.get(tenant_id, item_id)
        if item is None:
            raise StockItemNotFoundError(str(item_id))
        return StockItemResponse.model_validate(item)

    async def create_stock_item(self, tenant_id: str, data: StockItemCreate) -> StockItemResponse:
        """Create a stock item.

        Args:
            tenant_id: Owning tenant
            data: Stock item data

        Returns:
            Created stock item

        Raises:
            DuplicateNameError: If the tenant already has an item with this name
        """
        if await self.repo.get_by_name(tenant_id, data.name) is not None:
            raise DuplicateNameError(ENTITY_NAME, data.name)

        try:
            item = await self.repo.create(
                tenant_id,
                **data.model_dump(),
                total_value=compute_total_value(data.quantity, data.unit_cost),
            )
        except IntegrityError as e:
            # Lost a race with a concurrent create of the same name
            await self.session.rollback()
            raise DuplicateNameError(ENTITY_NAME, data.name) from e

        await self._commit(tenant_id)
        return StockItemResponse.model_validate(item)

    async def update_stock_item(
        self,
        tenant_id: str,
        item_id: UUID,
        data: StockItemUpdate,
    ) -> StockItemResponse:
        """Update a stock item, recomputing its total value.

        Raises:
            StockItemNotFoundError: If the item does not belong to the tenant
            DuplicateNameError: If another item of the tenant has this name
        """
        existing = await self.repo.get_by_name(tenant_id, data.name)
        if existing is not None and existing.id != item_id:
            raise DuplicateNameError(ENTITY_NAME, data.name)

        try:
            item = await self.repo.update(
                tenant_id,
                item_id,
                **data.model_dump(),
                total_value=compute_total_value(data.quantity, data.unit_cost),
            )
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateNameError(ENTITY_NAME, data.name) from e

        if item is None:
            raise StockItemNotFoundError(str(item_id))

        await self._commit(tenant_id)
        return StockItemResponse.model_validate(item)

    async def delete_stock_item(self, tenant_id: str, item_id: UUID) -> None:
        """Delete a stock item that no purchase line references.

        Raises:
            StockItemNotFoundError: If the item does not belong to the tenant
            ReferentialConflictError: If purchases still reference it
        """
        item = await self.repo.get(tenant_id, item_id)
        if item is None:
            raise StockItemNotFoundError(str(item_id))

        line_count = await self.purchase_repo.count_items_for_stock_item(item_id)
        if line_count > 0:
            logger.info("Refusing to delete stock item %s referenced by %d purchase lines", item_id, line_count)
            raise ReferentialConflictError(ENTITY_NAME, "purchase items", line_count)

        await self.repo.delete(tenant_id, item_id)
        await self._commit(tenant_id)
