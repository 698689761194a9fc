"""Sales router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from food_finance_api.dependencies import AuthenticatedUser, get_sale_service
from food_finance_api.models.dto.sale import SaleCreate, SaleListResponse, SaleResponse, SaleUpdate
from food_finance_api.services.sale_service import SaleService

router = APIRouter()

Service = Annotated[SaleService, Depends(get_sale_service)]


@router.get("", response_model=SaleListResponse)
async def list_sales(current_user: AuthenticatedUser, service: Service) -> SaleListResponse:
    """List sales, newest first."""
    return await service.list_sales(current_user.tenant_id)


@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
async def create_sale(body: SaleCreate, current_user: AuthenticatedUser, service: Service) -> SaleResponse:
    """Record a sale."""
    return await service.create_sale(current_user.tenant_id, body)


@router.put("/{sale_id}", response_model=SaleResponse)
async def update_sale(
    sale_id: UUID,
    body: SaleUpdate,
    current_user: AuthenticatedUser,
    service: Service,
) -> SaleResponse:
    """Update a sale."""
    return await service.update_sale(current_user.tenant_id, sale_id, body)


@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sale(sale_id: UUID, current_user: AuthenticatedUser, service: Service) -> None:
    """Delete a sale."""
    await service.delete_sale(current_user.tenant_id, sale_id)
