"""Payroll payments router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from food_finance_api.dependencies import AuthenticatedUser, get_payment_service
from food_finance_api.models.dto.payment import (
    PaymentCreate,
    PaymentDetailsResponse,
    PaymentListResponse,
    PaymentResponse,
)
from food_finance_api.services.payment_service import PaymentService

router = APIRouter()

Service = Annotated[PaymentService, Depends(get_payment_service)]


@router.get("", response_model=PaymentListResponse)
async def list_payments(current_user: AuthenticatedUser, service: Service) -> PaymentListResponse:
    """List payments, newest first."""
    return await service.list_payments(current_user.tenant_id)


@router.get("/{payment_id}", response_model=PaymentDetailsResponse)
async def get_payment_details(
    payment_id: UUID,
    current_user: AuthenticatedUser,
    service: Service,
) -> PaymentDetailsResponse:
    """Get a payment with the data needed for a payslip."""
    return await service.get_payment_details(current_user.tenant_id, payment_id)


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(
    body: PaymentCreate,
    current_user: AuthenticatedUser,
    service: Service,
) -> PaymentResponse:
    """Record a payment. The net value is gross minus discounts."""
    return await service.create_payment(current_user.tenant_id, body)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(
    payment_id: UUID,
    current_user: AuthenticatedUser,
    service: Service,
) -> None:
    """Delete a payment."""
    await service.delete_payment(current_user.tenant_id, payment_id)
