"""Repositories package."""

from food_finance_api.repositories.base import BaseRepository
from food_finance_api.repositories.employee_repository import EmployeeRepository
from food_finance_api.repositories.expense_repository import (
    ExpenseCategoryRepository,
    ExpenseRepository,
)
from food_finance_api.repositories.payment_repository import PaymentRepository
from food_finance_api.repositories.purchase_repository import PurchaseRepository
from food_finance_api.repositories.sale_repository import SaleRepository
from food_finance_api.repositories.stock_item_repository import StockItemRepository
from food_finance_api.repositories.store_repository import StoreRepository
from food_finance_api.repositories.supplier_repository import SupplierRepository

__all__ = [
    "BaseRepository",
    "EmployeeRepository",
    "ExpenseCategoryRepository",
    "ExpenseRepository",
    "PaymentRepository",
    "PurchaseRepository",
    "SaleRepository",
    "StockItemRepository",
    "StoreRepository",
    "SupplierRepository",
]
