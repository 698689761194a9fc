"""Stock item DTOs."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from food_finance_api.models.dto.common import Money, Quantity, RequiredName


class StockItemCreate(BaseModel):
    """Create or update stock item request."""

    name: RequiredName
    description: str | None = Field(default=None, max_length=1000)
    unit: str = Field(min_length=1, max_length=20)
    quantity: Quantity
    unit_cost: Money


StockItemUpdate = StockItemCreate


class StockItemResponse(BaseModel):
    """Stock item response."""

    id: UUID
    name: str
    description: str | None
    unit: str
    quantity: Decimal
    unit_cost: Decimal
    total_value: Decimal
    created_at: datetime

    class Config:
        from_attributes = True


class StockItemListResponse(BaseModel):
    """Stock item list response."""

    items: list[StockItemResponse]
    total: int
