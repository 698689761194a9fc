"""Purchase DTOs."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from food_finance_api.models.dto.common import Money, PaymentMethodName, PositiveQuantity


class PurchaseItemCreate(BaseModel):
    """Purchase line in a create request."""

    stock_item_id: UUID
    quantity: PositiveQuantity
    unit_price: Money


class PurchaseCreate(BaseModel):
    """Create purchase request."""

    supplier_id: UUID
    date: datetime
    payment_method: PaymentMethodName
    notes: str | None = Field(default=None, max_length=1000)
    items: list[PurchaseItemCreate] = Field(min_length=1, max_length=500)


class PurchaseItemResponse(BaseModel):
    """Purchase line response."""

    id: UUID
    stock_item_id: UUID
    stock_item_name: str | None = None
    quantity: Decimal
    unit_price: Decimal
    total: Decimal


class PurchaseResponse(BaseModel):
    """Purchase response."""

    id: UUID
    supplier_id: UUID
    supplier_name: str | None = None
    date: datetime
    payment_method: str
    notes: str | None
    total: Decimal
    items: list[PurchaseItemResponse]
    created_at: datetime


class PurchaseListResponse(BaseModel):
    """Purchase list response."""

    items: list[PurchaseResponse]
    total: int
