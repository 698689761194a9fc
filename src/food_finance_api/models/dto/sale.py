"""Sale DTOs."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from food_finance_api.models.dto.common import PaymentMethodName, PositiveMoney


class SaleCreate(BaseModel):
    """Create or update sale request."""

    date: datetime
    total_value: PositiveMoney
    payment_method: PaymentMethodName
    notes: str | None = Field(default=None, max_length=1000)


SaleUpdate = SaleCreate


class SaleResponse(BaseModel):
    """Sale response."""

    id: UUID
    date: datetime
    total_value: Decimal
    payment_method: str
    notes: str | None
    created_at: datetime

    class Config:
        from_attributes = True


class SaleListResponse(BaseModel):
    """Sale list response."""

    items: list[SaleResponse]
    total: int
