"""Employee service."""

from uuid import UUID

from food_finance_api.exceptions import EmployeeNotFoundError, ReferentialConflictError
from food_finance_api.models.dto.employee import (
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeUpdate,
)
from food_finance_api.repositories.employee_repository import EmployeeRepository
from food_finance_api.repositories.payment_repository import PaymentRepository
from food_finance_api.services.base import TenantService
from food_finance_api.services.cache_service import CacheConfig


class EmployeeService(TenantService):
    """Service for managing employees."""

    tags = (CacheConfig.TAG_EMPLOYEES, CacheConfig.TAG_BACKUP_SUMMARY)

    def __init__(self, session, cache) -> None:
        super().__init__(session, cache)
        self.repo = EmployeeRepository(session)
        self.payment_repo = PaymentRepository(session)

    async def list_employees(self, tenant_id: str) -> EmployeeListResponse:
        """List the tenant's employees ordered by name."""

        async def load() -> EmployeeListResponse:
            employees = await self.repo.get_all(tenant_id)
            items = [EmployeeResponse.model_validate(e) for e in employees]
            return EmployeeListResponse(items=items, total=len(items))

        return await self._cached(
            CacheConfig.TAG_EMPLOYEES, tenant_id, EmployeeListResponse, load, "list"
        )

    async def get_employee(self, tenant_id: str, employee_id: UUID) -> EmployeeResponse:
        """Get an employee.

        Raises:
            EmployeeNotFoundError: If the employee does not belong to the tenant
        """
        employee = await self.repo.get(tenant_id, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(str(employee_id))
        return EmployeeResponse.model_validate(employee)

    async def create_employee(self, tenant_id: str, data: EmployeeCreate) -> EmployeeResponse:
        """Create an employee."""
        employee = await self.repo.create(tenant_id, **data.model_dump())
        await self._commit(tenant_id)
        return EmployeeResponse.model_validate(employee)

    async def update_employee(
        self,
        tenant_id: str,
        employee_id: UUID,
        data: EmployeeUpdate,
    ) -> EmployeeResponse:
        """Update an employee.

        Raises:
            EmployeeNotFoundError: If the employee does not belong to the tenant
        """
        employee = await self.repo.update(tenant_id, employee_id, **data.model_dump())
        if employee is None:
            raise EmployeeNotFoundError(str(employee_id))
        await self._commit(tenant_id)
        return EmployeeResponse.model_validate(employee)

    async def delete_employee(self, tenant_id: str, employee_id: UUID) -> None:
        """Delete an employee without payroll history.

        Raises:
            EmployeeNotFoundError: If the employee does not belong to the tenant
            ReferentialConflictError: If payments still reference the employee
        """
        employee = await self.repo.get(tenant_id, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(str(employee_id))

        payment_count = await self.payment_repo.count_for_employee(tenant_id, employee_id)
        if payment_count > 0:
            raise ReferentialConflictError("Employee", "payments", payment_count)

        await self.repo.delete(tenant_id, employee_id)
        await self._commit(tenant_id)
