"""Payroll payment repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from food_finance_api.models.orm.payment import PaymentORM
from food_finance_api.repositories.base import BaseRepository


class PaymentRepository(BaseRepository[PaymentORM]):
    """Repository for payment operations."""

    model = PaymentORM

    async def get_all_with_employee(self, tenant_id: str) -> list[PaymentORM]:
        """Get all payments, newest first, with their employee loaded."""
        result = await self.session.execute(
            select(PaymentORM)
            .where(PaymentORM.user_id == tenant_id)
            .options(selectinload(PaymentORM.employee))
            .order_by(PaymentORM.date.desc())
        )
        return list(result.scalars().all())

    async def get_with_employee(self, tenant_id: str, payment_id: UUID) -> PaymentORM | None:
        """Get one payment with its employee loaded."""
        result = await self.session.execute(
            select(PaymentORM)
            .where(PaymentORM.id == payment_id, PaymentORM.user_id == tenant_id)
            .options(selectinload(PaymentORM.employee))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def count_for_employee(self, tenant_id: str, employee_id: UUID) -> int:
        """Count payments recorded for an employee."""
        result = await self.session.execute(
            select(func.count())
            .select_from(PaymentORM)
            .where(PaymentORM.user_id == tenant_id, PaymentORM.employee_id == employee_id)
        )
        return result.scalar_one()
