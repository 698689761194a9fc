"""Purchases router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from food_finance_api.dependencies import AuthenticatedUser, get_purchase_service
from food_finance_api.models.dto.purchase import (
    PurchaseCreate,
    PurchaseListResponse,
    PurchaseResponse,
)
from food_finance_api.services.purchase_service import PurchaseService

router = APIRouter()

Service = Annotated[PurchaseService, Depends(get_purchase_service)]


@router.get("", response_model=PurchaseListResponse)
async def list_purchases(current_user: AuthenticatedUser, service: Service) -> PurchaseListResponse:
    """List purchases with their items, newest first."""
    return await service.list_purchases(current_user.tenant_id)


@router.get("/{purchase_id}", response_model=PurchaseResponse)
async def get_purchase(
    purchase_id: UUID,
    current_user: AuthenticatedUser,
    service: Service,
) -> PurchaseResponse:
    """Get a purchase."""
    return await service.get_purchase(current_user.tenant_id, purchase_id)


@router.post("", response_model=PurchaseResponse, status_code=status.HTTP_201_CREATED)
async def create_purchase(
    body: PurchaseCreate,
    current_user: AuthenticatedUser,
    service: Service,
) -> PurchaseResponse:
    """Create a purchase. Line totals and the purchase total are computed."""
    return await service.create_purchase(current_user.tenant_id, body)


@router.delete("/{purchase_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_purchase(
    purchase_id: UUID,
    current_user: AuthenticatedUser,
    service: Service,
) -> None:
    """Delete a purchase and its items."""
    await service.delete_purchase(current_user.tenant_id, purchase_id)
