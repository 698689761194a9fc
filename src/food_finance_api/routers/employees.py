"""Employees router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from food_finance_api.dependencies import AuthenticatedUser, get_employee_service
from food_finance_api.models.dto.employee import (
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeUpdate,
)
from food_finance_api.services.employee_service import EmployeeService

router = APIRouter()

Service = Annotated[EmployeeService, Depends(get_employee_service)]


@router.get("", response_model=EmployeeListResponse)
async def list_employees(current_user: AuthenticatedUser, service: Service) -> EmployeeListResponse:
    """List employees."""
    return await service.list_employees(current_user.tenant_id)


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: UUID,
    current_user: AuthenticatedUser,
    service: Service,
) -> EmployeeResponse:
    """Get an employee."""
    return await service.get_employee(current_user.tenant_id, employee_id)


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    body: EmployeeCreate,
    current_user: AuthenticatedUser,
    service: Service,
) -> EmployeeResponse:
    """Create an employee."""
    return await service.create_employee(current_user.tenant_id, body)


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: UUID,
    body: EmployeeUpdate,
    current_user: AuthenticatedUser,
    service: Service,
) -> EmployeeResponse:
    """Update an employee."""
    return await service.update_employee(current_user.tenant_id, employee_id, body)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: UUID,
    current_user: AuthenticatedUser,
    service: Service,
) -> None:
    """Delete an employee."""
    await service.delete_employee(current_user.tenant_id, employee_id)
