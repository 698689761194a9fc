"""SQLAlchemy ORM models package."""

from food_finance_api.models.orm.base import Base
from food_finance_api.models.orm.employee import EmployeeORM
from food_finance_api.models.orm.expense import ExpenseORM
from food_finance_api.models.orm.expense_category import ExpenseCategoryORM
from food_finance_api.models.orm.payment import PaymentORM
from food_finance_api.models.orm.purchase import PurchaseItemORM, PurchaseORM
from food_finance_api.models.orm.sale import SaleORM
from food_finance_api.models.orm.stock_item import StockItemORM
from food_finance_api.models.orm.store import StoreORM
from food_finance_api.models.orm.supplier import SupplierORM

__all__ = [
    "Base",
    "EmployeeORM",
    "ExpenseORM",
    "ExpenseCategoryORM",
    "PaymentORM",
    "PurchaseORM",
    "PurchaseItemORM",
    "SaleORM",
    "StockItemORM",
    "StoreORM",
    "SupplierORM",
]
