"""Employee DTOs."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from food_finance_api.models.dto.common import Money, RequiredName


class EmployeeCreate(BaseModel):
    """Create or update employee request."""

    name: RequiredName
    cpf: str | None = Field(default=None, max_length=20)
    phone: str | None = Field(default=None, max_length=50)
    role: str = Field(min_length=1, max_length=100)
    base_salary: Money = Decimal("0")


EmployeeUpdate = EmployeeCreate


class EmployeeResponse(BaseModel):
    """Employee response."""

    id: UUID
    name: str
    cpf: str | None
    phone: str | None
    role: str
    base_salary: Decimal
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EmployeeListResponse(BaseModel):
    """Employee list response."""

    items: list[EmployeeResponse]
    total: int
