"""Centralized dependency injection factories for FastAPI.

Every service gets the request's database session and the shared cache.
Tests override ``get_db`` and ``get_cache`` to swap both.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from food_finance_api.database import get_db
from food_finance_api.models.domain.user import CurrentUser
from food_finance_api.security.auth import get_current_user
from food_finance_api.services.backup_service import BackupService
from food_finance_api.services.cache_service import CacheInvalidator, get_cache_service
from food_finance_api.services.employee_service import EmployeeService
from food_finance_api.services.expense_service import ExpenseCategoryService, ExpenseService
from food_finance_api.services.payment_service import PaymentService
from food_finance_api.services.purchase_service import PurchaseService
from food_finance_api.services.report_service import ReportService
from food_finance_api.services.sale_service import SaleService
from food_finance_api.services.stock_service import StockService
from food_finance_api.services.store_service import StoreService
from food_finance_api.services.supplier_service import SupplierService


async def get_cache() -> CacheInvalidator:
    """Get the shared cache service."""
    return await get_cache_service()


DbSession = Annotated[AsyncSession, Depends(get_db)]
Cache = Annotated[CacheInvalidator, Depends(get_cache)]
AuthenticatedUser = Annotated[CurrentUser, Depends(get_current_user)]


# =============================================================================
# Backup & Reports
# =============================================================================


def get_backup_service(db: DbSession, cache: Cache) -> BackupService:
    """Get BackupService instance."""
    return BackupService(db, cache)


def get_report_service(db: DbSession, cache: Cache) -> ReportService:
    """Get ReportService instance."""
    return ReportService(db, cache)


# =============================================================================
# Entity Service Factories
# =============================================================================


def get_supplier_service(db: DbSession, cache: Cache) -> SupplierService:
    """Get SupplierService instance."""
    return SupplierService(db, cache)


def get_stock_service(db: DbSession, cache: Cache) -> StockService:
    """Get StockService instance."""
    return StockService(db, cache)


def get_employee_service(db: DbSession, cache: Cache) -> EmployeeService:
    """Get EmployeeService instance."""
    return EmployeeService(db, cache)


def get_payment_service(db: DbSession, cache: Cache) -> PaymentService:
    """Get PaymentService instance."""
    return PaymentService(db, cache)


def get_expense_category_service(db: DbSession, cache: Cache) -> ExpenseCategoryService:
    """Get ExpenseCategoryService instance."""
    return ExpenseCategoryService(db, cache)


def get_expense_service(db: DbSession, cache: Cache) -> ExpenseService:
    """Get ExpenseService instance."""
    return ExpenseService(db, cache)


def get_sale_service(db: DbSession, cache: Cache) -> SaleService:
    """Get SaleService instance."""
    return SaleService(db, cache)


def get_purchase_service(db: DbSession, cache: Cache) -> PurchaseService:
    """Get PurchaseService instance."""
    return PurchaseService(db, cache)


def get_store_service(db: DbSession, cache: Cache) -> StoreService:
    """Get StoreService instance."""
    return StoreService(db, cache)
