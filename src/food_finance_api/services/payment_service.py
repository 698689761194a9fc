"""Payroll payment service."""

from uuid import UUID

from food_finance_api.exceptions import EmployeeNotFoundError, PaymentNotFoundError
from food_finance_api.models.dto.payment import (
    PaymentCreate,
    PaymentDetailsResponse,
    PaymentListResponse,
    PaymentResponse,
)
from food_finance_api.models.orm.employee import EmployeeORM
from food_finance_api.models.orm.payment import PaymentORM
from food_finance_api.repositories.employee_repository import EmployeeRepository
from food_finance_api.repositories.payment_repository import PaymentRepository
from food_finance_api.repositories.store_repository import StoreRepository
from food_finance_api.services.base import TenantService
from food_finance_api.services.cache_service import CacheConfig
from food_finance_api.utils.money import to_money


class PaymentService(TenantService):
    """Service for recording employee payments.

    ``net_value`` is derived on create and stored.
    """

    tags = (CacheConfig.TAG_PAYMENTS, CacheConfig.TAG_BACKUP_SUMMARY)

    def __init__(self, session, cache) -> None:
        super().__init__(session, cache)
        self.repo = PaymentRepository(session)
        self.employee_repo = EmployeeRepository(session)
        self.store_repo = StoreRepository(session)

    @staticmethod
    def _build_response(payment: PaymentORM, employee: EmployeeORM | None = None) -> PaymentResponse:
        """Build response from ORM model; the employee defaults to the loaded relationship."""
        employee = employee or payment.employee
        return PaymentResponse(
            id=payment.id,
            date=payment.date,
            description=payment.description,
            gross_value=payment.gross_value,
            discounts=payment.discounts,
            net_value=payment.net_value,
            employee_id=payment.employee_id,
            employee_name=employee.name,
        )

    async def list_payments(self, tenant_id: str) -> PaymentListResponse:
        """List the tenant's payments, newest first."""

        async def load() -> PaymentListResponse:
            payments = await self.repo.get_all_with_employee(tenant_id)
            items = [self._build_response(p) for p in payments]
            return PaymentListResponse(items=items, total=len(items))

        return await self._cached(
            CacheConfig.TAG_PAYMENTS, tenant_id, PaymentListResponse, load, "list"
        )

    async def get_payment_details(self, tenant_id: str, payment_id: UUID) -> PaymentDetailsResponse:
        """Get a payment with employee and store details for a payslip.

        Args:
            tenant_id: Owning tenant
            payment_id: Payment UUID

        Returns:
            Payment details

        Raises:
            PaymentNotFoundError: If the payment does not belong to the tenant
        """
        payment = await self.repo.get_with_employee(tenant_id, payment_id)
        if payment is None:
            raise PaymentNotFoundError(str(payment_id))

        store = await self.store_repo.get_for_tenant(tenant_id)
        base = self._build_response(payment)
        return PaymentDetailsResponse(
            **base.model_dump(),
            employee_role=payment.employee.role,
            employee_cpf=payment.employee.cpf,
            store_name=store.name if store else None,
            store_cnpj=store.cnpj if store else None,
            store_address=store.address if store else None,
        )

    async def create_payment(self, tenant_id: str, data: PaymentCreate) -> PaymentResponse:
        """Record a payment, computing the net value.

        Args:
            tenant_id: Owning tenant
            data: Payment data

        Returns:
            Created payment

        Raises:
            EmployeeNotFoundError: If the employee does not belong to the tenant
        """
        employee = await self.employee_repo.get(tenant_id, data.employee_id)
        if employee is None:
            raise EmployeeNotFoundError(str(data.employee_id))

        payment = await self.repo.create(
            tenant_id,
            **data.model_dump(),
            net_value=to_money(data.gross_value - data.discounts),
        )
        await self._commit(tenant_id)
        return self._build_response(payment, employee)

    async def delete_payment(self, tenant_id: str, payment_id: UUID) -> None:
        """Delete a payment.

        Raises:
            PaymentNotFoundError: If the payment does not belong to the tenant
        """
        if not await self.repo.delete(tenant_id, payment_id):
            raise PaymentNotFoundError(str(payment_id))
        await self._commit(tenant_id)
