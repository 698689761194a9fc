"""Expense and expense category services."""

from uuid import UUID

from food_finance_api.exceptions import (
    ExpenseCategoryNotFoundError,
    ExpenseNotFoundError,
    ReferentialConflictError,
)
from food_finance_api.models.dto.expense import (
    ExpenseCategoryCreate,
    ExpenseCategoryListResponse,
    ExpenseCategoryResponse,
    ExpenseCreate,
    ExpenseListResponse,
    ExpenseResponse,
    ExpenseUpdate,
)
from food_finance_api.repositories.expense_repository import (
    ExpenseCategoryRepository,
    ExpenseRepository,
)
from food_finance_api.services.base import TenantService
from food_finance_api.services.cache_service import CacheConfig


class ExpenseCategoryService(TenantService):
    """Service for managing expense categories."""

    tags = (CacheConfig.TAG_EXPENSE_CATEGORIES,)

    def __init__(self, session, cache) -> None:
        super().__init__(session, cache)
        self.repo = ExpenseCategoryRepository(session)
        self.expense_repo = ExpenseRepository(session)

    async def list_categories(self, tenant_id: str) -> ExpenseCategoryListResponse:
        """List the tenant's expense categories ordered by name."""

        async def load() -> ExpenseCategoryListResponse:
            categories = await self.repo.get_all(tenant_id)
            items = [ExpenseCategoryResponse.model_validate(c) for c in categories]
            return ExpenseCategoryListResponse(items=items, total=len(items))

        return await self._cached(
            CacheConfig.TAG_EXPENSE_CATEGORIES,
            tenant_id,
            ExpenseCategoryListResponse,
            load,
            "list",
        )

    async def create_category(
        self,
        tenant_id: str,
        data: ExpenseCategoryCreate,
    ) -> ExpenseCategoryResponse:
        """Create an expense category."""
        category = await self.repo.create(tenant_id, name=data.name)
        await self._commit(tenant_id)
        return ExpenseCategoryResponse.model_validate(category)

    async def delete_category(self, tenant_id: str, category_id: UUID) -> None:
        """Delete a category that no expense is filed under.

        Args:
            tenant_id: Owning tenant
            category_id: Category UUID

        Raises:
            ExpenseCategoryNotFoundError: If the category does not belong to the tenant
            ReferentialConflictError: Carrying the number of expenses that use it
        """
        category = await self.repo.get(tenant_id, category_id)
        if category is None:
            raise ExpenseCategoryNotFoundError(str(category_id))

        expense_count = await self.expense_repo.count_for_category(tenant_id, category_id)
        if expense_count > 0:
            raise ReferentialConflictError("Expense category", "expenses", expense_count)

        await self.repo.delete(tenant_id, category_id)
        await self._commit(tenant_id)


class ExpenseService(TenantService):
    """Service for managing expenses."""

    tags = (
        CacheConfig.TAG_EXPENSES,
        CacheConfig.TAG_BACKUP_SUMMARY,
        CacheConfig.TAG_DASHBOARD,
    )

    def __init__(self, session, cache) -> None:
        super().__init__(session, cache)
        self.repo = ExpenseRepository(session)
        self.category_repo = ExpenseCategoryRepository(session)

    async def list_expenses(self, tenant_id: str) -> ExpenseListResponse:
        """List the tenant's expenses, newest first, with their category."""

        async def load() -> ExpenseListResponse:
            expenses = await self.repo.get_all_with_category(tenant_id)
            items = [ExpenseResponse.model_validate(e) for e in expenses]
            return ExpenseListResponse(items=items, total=len(items))

        return await self._cached(
            CacheConfig.TAG_EXPENSES, tenant_id, ExpenseListResponse, load, "list"
        )

    async def _require_category(self, tenant_id: str, category_id: UUID) -> None:
        if await self.category_repo.get(tenant_id, category_id) is None:
            raise ExpenseCategoryNotFoundError(str(category_id))

    async def _load(self, tenant_id: str, expense_id: UUID) -> ExpenseResponse:
        expense = await self.repo.get_with_category(tenant_id, expense_id)
        if expense is None:
            raise ExpenseNotFoundError(str(expense_id))
        return ExpenseResponse.model_validate(expense)

    async def create_expense(self, tenant_id: str, data: ExpenseCreate) -> ExpenseResponse:
        """Create an expense.

        Raises:
            ExpenseCategoryNotFoundError: If the category does not belong to the tenant
        """
        await self._require_category(tenant_id, data.category_id)
        expense = await self.repo.create(tenant_id, **data.model_dump())
        await self._commit(tenant_id)
        return await self._load(tenant_id, expense.id)

    async def update_expense(
        self,
        tenant_id: str,
        expense_id: UUID,
        data: ExpenseUpdate,
    ) -> ExpenseResponse:
        """Update an expense.

        Raises:
            ExpenseNotFoundError: If the expense does not belong to the tenant
            ExpenseCategoryNotFoundError: If the category does not belong to the tenant
        """
        await self._require_category(tenant_id, data.category_id)
        expense = await self.repo.update(tenant_id, expense_id, **data.model_dump())
        if expense is None:
            raise ExpenseNotFoundError(str(expense_id))
        await self._commit(tenant_id)
        return await self._load(tenant_id, expense_id)

    async def delete_expense(self, tenant_id: str, expense_id: UUID) -> None:
        """Delete an expense.

        Raises:
            ExpenseNotFoundError: If the expense does not belong to the tenant
        """
        if not await self.repo.delete(tenant_id, expense_id):
            raise ExpenseNotFoundError(str(expense_id))
        await self._commit(tenant_id)
