"""Store profile DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from food_finance_api.models.dto.common import RequiredName


class StoreUpdate(BaseModel):
    """Create or update the store profile."""

    name: RequiredName
    cnpj: str | None = Field(default=None, max_length=32)
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = Field(default=None, max_length=500)


class StoreResponse(BaseModel):
    """Store profile response."""

    id: UUID
    name: str
    cnpj: str | None
    phone: str | None
    address: str | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
