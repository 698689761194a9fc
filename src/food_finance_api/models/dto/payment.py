"""Payroll payment DTOs."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from food_finance_api.models.dto.common import Money


class PaymentCreate(BaseModel):
    """Record payment request."""

    employee_id: UUID
    date: datetime
    description: str | None = Field(default=None, max_length=500)
    gross_value: Money
    discounts: Money = Decimal("0")


class PaymentResponse(BaseModel):
    """Payment list entry."""

    id: UUID
    date: datetime
    description: str | None
    gross_value: Decimal
    discounts: Decimal
    net_value: Decimal
    employee_id: UUID
    employee_name: str


class PaymentDetailsResponse(PaymentResponse):
    """Payment with employee and store details, used for payslips."""

    employee_role: str
    employee_cpf: str | None
    store_name: str | None = None
    store_cnpj: str | None = None
    store_address: str | None = None


class PaymentListResponse(BaseModel):
    """Payment list response."""

    items: list[PaymentResponse]
    total: int
