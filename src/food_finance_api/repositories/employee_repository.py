"""Employee repository."""

from sqlalchemy import select

from food_finance_api.models.orm.employee import EmployeeORM
from food_finance_api.repositories.base import BaseRepository


class EmployeeRepository(BaseRepository[EmployeeORM]):
    """Repository for employee operations."""

    model = EmployeeORM

    async def get_all(self, tenant_id: str) -> list[EmployeeORM]:
        """Get all employees ordered by name."""
        result = await self.session.execute(
            select(EmployeeORM)
            .where(EmployeeORM.user_id == tenant_id)
            .order_by(EmployeeORM.name)
        )
        return list(result.scalars().all())
