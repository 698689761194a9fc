"""Expense and expense category DTOs."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from food_finance_api.models.dto.common import PaymentMethodName, PositiveMoney, RequiredName


class ExpenseCategoryCreate(BaseModel):
    """Create expense category request."""

    name: RequiredName


class ExpenseCategoryResponse(BaseModel):
    """Expense category response."""

    id: UUID
    name: str
    created_at: datetime

    class Config:
        from_attributes = True


class ExpenseCategoryListResponse(BaseModel):
    """Expense category list response."""

    items: list[ExpenseCategoryResponse]
    total: int


class ExpenseCreate(BaseModel):
    """Create or update expense request."""

    category_id: UUID
    description: str | None = Field(default=None, max_length=500)
    value: PositiveMoney
    date: datetime
    payment_method: PaymentMethodName


ExpenseUpdate = ExpenseCreate


class ExpenseCategoryRef(BaseModel):
    """Category embedded in an expense response."""

    id: UUID
    name: str

    class Config:
        from_attributes = True


class ExpenseResponse(BaseModel):
    """Expense response."""

    id: UUID
    description: str | None
    value: Decimal
    date: datetime
    payment_method: str
    category: ExpenseCategoryRef
    created_at: datetime

    class Config:
        from_attributes = True


class ExpenseListResponse(BaseModel):
    """Expense list response."""

    items: list[ExpenseResponse]
    total: int
