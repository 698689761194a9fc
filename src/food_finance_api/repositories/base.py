"""Base repository with common tenant-scoped database operations."""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from food_finance_api.models.orm.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common CRUD operations.

    Every method takes the tenant id and filters on it, so a record owned by
    another tenant behaves exactly like a missing one.
    """

    model: type[T]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def get(self, tenant_id: str, id: UUID) -> T | None:
        """Get a record by ID.

        Args:
            tenant_id: Owning tenant
            id: Record UUID

        Returns:
            Record or None if not found for this tenant
        """
        result = await self.session.execute(
            select(self.model).where(self.model.id == id, self.model.user_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def get_all(self, tenant_id: str) -> list[T]:
        """Get all records of a tenant.

        Args:
            tenant_id: Owning tenant

        Returns:
            List of records
        """
        result = await self.session.execute(
            select(self.model).where(self.model.user_id == tenant_id)
        )
        return list(result.scalars().all())

    async def count(self, tenant_id: str) -> int:
        """Count records of a tenant.

        Args:
            tenant_id: Owning tenant

        Returns:
            Total count
        """
        result = await self.session.execute(
            select(func.count()).select_from(self.model).where(self.model.user_id == tenant_id)
        )
        return result.scalar_one()

    async def create(self, tenant_id: str, **kwargs: Any) -> T:
        """Create a new record owned by the tenant.

        Args:
            tenant_id: Owning tenant
            **kwargs: Field values

        Returns:
            Created record
        """
        instance = self.model(user_id=tenant_id, **kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, tenant_id: str, id: UUID, **kwargs: Any) -> T | None:
        """Update a record by ID.

        Args:
            tenant_id: Owning tenant
            id: Record UUID
            **kwargs: Fields to update

        Returns:
            Updated record or None if not found
        """
        instance = await self.get(tenant_id, id)
        if instance is None:
            return None

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, tenant_id: str, id: UUID) -> bool:
        """Delete a record by ID.

        Args:
            tenant_id: Owning tenant
            id: Record UUID

        Returns:
            True if deleted, False if not found
        """
        instance = await self.get(tenant_id, id)
        if instance is None:
            return False

        await self.session.delete(instance)
        await self.session.flush()
        return True

    async def delete_all(self, tenant_id: str) -> int:
        """Delete every record of a tenant in one statement.

        Args:
            tenant_id: Owning tenant

        Returns:
            Number of rows deleted
        """
        result = await self.session.execute(
            delete(self.model)
            .where(self.model.user_id == tenant_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
