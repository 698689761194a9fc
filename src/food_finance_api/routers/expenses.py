"""Expenses router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from food_finance_api.dependencies import AuthenticatedUser, get_expense_service
from food_finance_api.models.dto.expense import (
    ExpenseCreate,
    ExpenseListResponse,
    ExpenseResponse,
    ExpenseUpdate,
)
from food_finance_api.services.expense_service import ExpenseService

router = APIRouter()

Service = Annotated[ExpenseService, Depends(get_expense_service)]


@router.get("", response_model=ExpenseListResponse)
async def list_expenses(current_user: AuthenticatedUser, service: Service) -> ExpenseListResponse:
    """List expenses, newest first."""
    return await service.list_expenses(current_user.tenant_id)


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    body: ExpenseCreate,
    current_user: AuthenticatedUser,
    service: Service,
) -> ExpenseResponse:
    """Create an expense."""
    return await service.create_expense(current_user.tenant_id, body)


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: UUID,
    body: ExpenseUpdate,
    current_user: AuthenticatedUser,
    service: Service,
) -> ExpenseResponse:
    """Update an expense."""
    return await service.update_expense(current_user.tenant_id, expense_id, body)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    expense_id: UUID,
    current_user: AuthenticatedUser,
    service: Service,
) -> None:
    """Delete an expense."""
    await service.delete_expense(current_user.tenant_id, expense_id)
