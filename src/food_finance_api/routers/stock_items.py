"""Stock items router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from food_finance_api.dependencies import AuthenticatedUser, get_stock_service
from food_finance_api.models.dto.stock_item import (
    StockItemCreate,
    StockItemListResponse,
    StockItemResponse,
    StockItemUpdate,
)
from food_finance_api.services.stock_service import StockService

router = APIRouter()

Service = Annotated[StockService, Depends(get_stock_service)]


@router.get("", response_model=StockItemListResponse)
async def list_stock_items(current_user: AuthenticatedUser, service: Service) -> StockItemListResponse:
    """List stock items."""
    return await service.list_stock_items(current_user.tenant_id)


@router.get("/{item_id}", response_model=StockItemResponse)
async def get_stock_item(
    item_id: UUID,
    current_user: AuthenticatedUser,
    service: Service,
) -> StockItemResponse:
    """Get a stock item."""
    return await service.get_stock_item(current_user.tenant_id, item_id)


@router.post("", response_model=StockItemResponse, status_code=status.HTTP_201_CREATED)
async def create_stock_item(
    body: StockItemCreate,
    current_user: AuthenticatedUser,
    service: Service,
) -> StockItemResponse:
    """Create a stock item. Names are unique per tenant."""
    return await service.create_stock_item(current_user.tenant_id, body)


@router.put("/{item_id}", response_model=StockItemResponse)
async def update_stock_item(
    item_id: UUID,
    body: StockItemUpdate,
    current_user: AuthenticatedUser,
    service: Service,
) -> StockItemResponse:
    """Update a stock item."""
    return await service.update_stock_item(current_user.tenant_id, item_id, body)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_stock_item(
    item_id: UUID,
    current_user: AuthenticatedUser,
    service: Service,
) -> None:
    """Delete a stock item. Fails with 409 while purchases reference it."""
    await service.delete_stock_item(current_user.tenant_id, item_id)
