"""Supplier DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from food_finance_api.models.dto.common import RequiredName


class SupplierCreate(BaseModel):
    """Create or update supplier request."""

    name: RequiredName
    phone: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = None
    address: str | None = Field(default=None, max_length=500)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value: object) -> object:
        """Treat an empty e-mail field as absent."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


SupplierUpdate = SupplierCreate


class SupplierResponse(BaseModel):
    """Supplier response."""

    id: UUID
    name: str
    phone: str | None
    email: str | None
    address: str | None
    created_at: datetime

    class Config:
        from_attributes = True


class SupplierListResponse(BaseModel):
    """Supplier list response."""

    items: list[SupplierResponse]
    total: int
