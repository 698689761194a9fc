"""Suppliers router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from food_finance_api.dependencies import AuthenticatedUser, get_supplier_service
from food_finance_api.models.dto.supplier import (
    SupplierCreate,
    SupplierListResponse,
    SupplierResponse,
    SupplierUpdate,
)
from food_finance_api.services.supplier_service import SupplierService

router = APIRouter()

Service = Annotated[SupplierService, Depends(get_supplier_service)]


@router.get("", response_model=SupplierListResponse)
async def list_suppliers(current_user: AuthenticatedUser, service: Service) -> SupplierListResponse:
    """List suppliers."""
    return await service.list_suppliers(current_user.tenant_id)


@router.get("/{supplier_id}", response_model=SupplierResponse)
async def get_supplier(
    supplier_id: UUID,
    current_user: AuthenticatedUser,
    service: Service,
) -> SupplierResponse:
    """Get a supplier."""
    return await service.get_supplier(current_user.tenant_id, supplier_id)


@router.post("", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
async def create_supplier(
    body: SupplierCreate,
    current_user: AuthenticatedUser,
    service: Service,
) -> SupplierResponse:
    """Create a supplier."""
    return await service.create_supplier(current_user.tenant_id, body)


@router.put("/{supplier_id}", response_model=SupplierResponse)
async def update_supplier(
    supplier_id: UUID,
    body: SupplierUpdate,
    current_user: AuthenticatedUser,
    service: Service,
) -> SupplierResponse:
    """Update a supplier."""
    return await service.update_supplier(current_user.tenant_id, supplier_id, body)


@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_supplier(
    supplier_id: UUID,
    current_user: AuthenticatedUser,
    service: Service,
) -> None:
    """Delete a supplier. Fails with 409 while purchases reference it."""
    await service.delete_supplier(current_user.tenant_id, supplier_id)
