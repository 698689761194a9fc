"""Expense categories router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from food_finance_api.dependencies import AuthenticatedUser, get_expense_category_service
from food_finance_api.models.dto.expense import (
    ExpenseCategoryCreate,
    ExpenseCategoryListResponse,
    ExpenseCategoryResponse,
)
from food_finance_api.services.expense_service import ExpenseCategoryService

router = APIRouter()

Service = Annotated[ExpenseCategoryService, Depends(get_expense_category_service)]


@router.get("", response_model=ExpenseCategoryListResponse)
async def list_expense_categories(
    current_user: AuthenticatedUser,
    service: Service,
) -> ExpenseCategoryListResponse:
    """List expense categories."""
    return await service.list_categories(current_user.tenant_id)


@router.post("", response_model=ExpenseCategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_expense_category(
    body: ExpenseCategoryCreate,
    current_user: AuthenticatedUser,
    service: Service,
) -> ExpenseCategoryResponse:
    """Create an expense category."""
    return await service.create_category(current_user.tenant_id, body)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense_category(
    category_id: UUID,
    current_user: AuthenticatedUser,
    service: Service,
) -> None:
    """Delete a category. Fails with 409, naming the count, while expenses use it."""
    await service.delete_category(current_user.tenant_id, category_id)
