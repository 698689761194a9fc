"""Tests for the tenant-scoped CRUD services."""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from conftest import TENANT_A, TENANT_B, seed_tenant
from food_finance_api.exceptions import (
    DuplicateNameError,
    EmployeeNotFoundError,
    ExpenseCategoryNotFoundError,
    ReferentialConflictError,
    StockItemNotFoundError,
    SupplierNotFoundError,
)
from food_finance_api.models.dto.employee import EmployeeCreate
from food_finance_api.models.dto.expense import ExpenseCategoryCreate, ExpenseCreate
from food_finance_api.models.dto.payment import PaymentCreate
from food_finance_api.models.dto.purchase import PurchaseCreate, PurchaseItemCreate
from food_finance_api.models.dto.sale import SaleCreate
from food_finance_api.models.dto.stock_item import StockItemCreate
from food_finance_api.models.dto.store import StoreUpdate
from food_finance_api.models.dto.supplier import SupplierCreate
from food_finance_api.services.cache_service import CacheConfig
from food_finance_api.services.employee_service import EmployeeService
from food_finance_api.services.expense_service import ExpenseCategoryService, ExpenseService
from food_finance_api.services.payment_service import PaymentService
from food_finance_api.services.purchase_service import PurchaseService
from food_finance_api.services.sale_service import SaleService
from food_finance_api.services.stock_service import StockService, compute_total_value
from food_finance_api.services.store_service import StoreService
from food_finance_api.services.supplier_service import SupplierService

WHEN = datetime(2026, 3, 15, 9, 30, tzinfo=timezone.utc)


class TestStockService:
    """Test stock items and their stored total value."""

    def test_compute_total_value_rounds_half_up(self) -> None:
        """Quantity times unit cost, rounded to cents."""
        assert compute_total_value(Decimal("3"), Decimal("10.99")) == Decimal("32.97")
        assert compute_total_value(Decimal("0.125"), Decimal("1.00")) == Decimal("0.13")

    async def test_create_stores_total_value(self, session, cache) -> None:
        """The total value is derived on create."""
        service = StockService(session, cache)

        item = await service.create_stock_item(
            TENANT_A,
            StockItemCreate(name="Farinha", unit="kg", quantity=Decimal("3"), unit_cost=Decimal("10.99")),
        )

        assert item.total_value == Decimal("32.97")
        assert {CacheConfig.TAG_STOCK_ITEMS, CacheConfig.TAG_DASHBOARD} <= cache.invalidated_tags(TENANT_A)

    async def test_duplicate_name_rejected(self, session, cache) -> None:
        """Names are unique within a tenant."""
        service = StockService(session, cache)
        data = StockItemCreate(name="Farinha", unit="kg", quantity=Decimal("1"), unit_cost=Decimal("2.00"))
        await service.create_stock_item(TENANT_A, data)

        with pytest.raises(DuplicateNameError) as exc_info:
            await service.create_stock_item(TENANT_A, data)

        assert "name" in exc_info.value.details["field_errors"]

    async def test_same_name_allowed_for_other_tenant(self, session, cache) -> None:
        """Uniqueness does not cross tenants."""
        service = StockService(session, cache)
        data = StockItemCreate(name="Farinha", unit="kg", quantity=Decimal("1"), unit_cost=Decimal("2.00"))

        await service.create_stock_item(TENANT_A, data)
        item = await service.create_stock_item(TENANT_B, data)

        assert item.name == "Farinha"

    async def test_update_recomputes_total_value(self, session, cache) -> None:
        """Changing quantity or cost updates the stored total."""
        service = StockService(session, cache)
        item = await service.create_stock_item(
            TENANT_A,
            StockItemCreate(name="Óleo", unit="l", quantity=Decimal("2"), unit_cost=Decimal("8.00")),
        )

        updated = await service.update_stock_item(
            TENANT_A,
            item.id,
            StockItemCreate(name="Óleo", unit="l", quantity=Decimal("5"), unit_cost=Decimal("8.00")),
        )

        assert updated.total_value == Decimal("40.00")

    async def test_other_tenant_item_not_found(self, session, cache) -> None:
        """Another tenant's record behaves like a missing one."""
        seeded = await seed_tenant(session, TENANT_B)

        with pytest.raises(StockItemNotFoundError):
            await StockService(session, cache).get_stock_item(TENANT_A, seeded["stock_item"].id)

    async def test_delete_blocked_by_purchase_lines(self, session, cache) -> None:
        """Stock referenced by a purchase cannot be deleted."""
        seeded = await seed_tenant(session, TENANT_A)

        with pytest.raises(ReferentialConflictError) as exc_info:
            await StockService(session, cache).delete_stock_item(TENANT_A, seeded["stock_item"].id)

        assert exc_info.value.count == 1

    async def test_list_is_cached_until_write(self, session, cache) -> None:
        """Lists come from cache and a write drops the cached copy."""
        service = StockService(session, cache)
        assert (await service.list_stock_items(TENANT_A)).total == 0
        assert cache.make_key(CacheConfig.TAG_STOCK_ITEMS, TENANT_A, "list") in cache.store

        await service.create_stock_item(
            TENANT_A,
            StockItemCreate(name="Sal", unit="kg", quantity=Decimal("1"), unit_cost=Decimal("3.00")),
        )

        assert (await service.list_stock_items(TENANT_A)).total == 1


class TestSupplierService:
    """Test suppliers."""

    async def test_create_and_list_sorted(self, session, cache) -> None:
        """Suppliers are listed by name."""
        service = SupplierService(session, cache)
        await service.create_supplier(TENANT_A, SupplierCreate(name="Zeta"))
        await service.create_supplier(TENANT_A, SupplierCreate(name="Alfa", email=""))

        result = await service.list_suppliers(TENANT_A)

        assert [s.name for s in result.items] == ["Alfa", "Zeta"]
        assert result.items[0].email is None

    async def test_delete_blocked_by_purchases(self, session, cache) -> None:
        """A supplier with purchases cannot be deleted."""
        seeded = await seed_tenant(session, TENANT_A)

        with pytest.raises(ReferentialConflictError) as exc_info:
            await SupplierService(session, cache).delete_supplier(TENANT_A, seeded["supplier"].id)

        assert exc_info.value.count == 1
        assert "1 associated purchases" in exc_info.value.message

    async def test_delete_unknown(self, session, cache) -> None:
        """Deleting a missing supplier reports not found."""
        with pytest.raises(SupplierNotFoundError):
            await SupplierService(session, cache).delete_supplier(TENANT_A, uuid4())


class TestPaymentService:
    """Test payroll payments."""

    async def test_net_value_is_gross_minus_discounts(self, session, cache) -> None:
        """The net value is derived once, on create."""
        employee = await EmployeeService(session, cache).create_employee(
            TENANT_A, EmployeeCreate(name="Bruno", role="Waiter", base_salary=Decimal("1800.00"))
        )

        payment = await PaymentService(session, cache).create_payment(
            TENANT_A,
            PaymentCreate(
                employee_id=employee.id,
                date=WHEN,
                gross_value=Decimal("1800.00"),
                discounts=Decimal("144.90"),
            ),
        )

        assert payment.net_value == Decimal("1655.10")
        assert payment.employee_name == "Bruno"

    async def test_employee_of_other_tenant_rejected(self, session, cache) -> None:
        """A payment cannot point at another tenant's employee."""
        seeded = await seed_tenant(session, TENANT_B)

        with pytest.raises(EmployeeNotFoundError):
            await PaymentService(session, cache).create_payment(
                TENANT_A,
                PaymentCreate(employee_id=seeded["employee"].id, date=WHEN, gross_value=Decimal("10.00")),
            )

    async def test_details_include_store(self, session, cache) -> None:
        """Payslip details carry the employee and store profile."""
        seeded = await seed_tenant(session, TENANT_A)

        details = await PaymentService(session, cache).get_payment_details(TENANT_A, seeded["payment"].id)

        assert details.employee_role == "Cook"
        assert details.store_name == "Cantina da Ana"
        assert details.net_value == Decimal("1849.50")

    async def test_employee_with_payments_cannot_be_deleted(self, session, cache) -> None:
        """Employees keep their payroll history."""
        seeded = await seed_tenant(session, TENANT_A)

        with pytest.raises(ReferentialConflictError):
            await EmployeeService(session, cache).delete_employee(TENANT_A, seeded["employee"].id)


class TestPurchaseService:
    """Test purchases and their computed totals."""

    async def test_totals_computed_from_items(self, session, cache) -> None:
        """Line totals round half up and the purchase total is their sum."""
        seeded = await seed_tenant(session, TENANT_A)
        other = await StockService(session, cache).create_stock_item(
            TENANT_A,
            StockItemCreate(name="Açúcar", unit="kg", quantity=Decimal("4"), unit_cost=Decimal("5.00")),
        )

        purchase = await PurchaseService(session, cache).create_purchase(
            TENANT_A,
            PurchaseCreate(
                supplier_id=seeded["supplier"].id,
                date=WHEN,
                payment_method="pix",
                items=[
                    PurchaseItemCreate(
                        stock_item_id=seeded["stock_item"].id,
                        quantity=Decimal("1.5"),
                        unit_price=Decimal("2.99"),
                    ),
                    PurchaseItemCreate(stock_item_id=other.id, quantity=Decimal("2"), unit_price=Decimal("5.00")),
                ],
            ),
        )

        assert sorted(item.total for item in purchase.items) == [Decimal("4.49"), Decimal("10.00")]
        assert purchase.total == Decimal("14.49")
        assert purchase.supplier_name == "Atacadão"

    async def test_stock_item_of_other_tenant_rejected(self, session, cache) -> None:
        """Every line must use the tenant's own stock."""
        mine = await seed_tenant(session, TENANT_A)
        theirs = await seed_tenant(session, TENANT_B)

        with pytest.raises(StockItemNotFoundError):
            await PurchaseService(session, cache).create_purchase(
                TENANT_A,
                PurchaseCreate(
                    supplier_id=mine["supplier"].id,
                    date=WHEN,
                    payment_method="cash",
                    items=[
                        PurchaseItemCreate(
                            stock_item_id=theirs["stock_item"].id,
                            quantity=Decimal("1"),
                            unit_price=Decimal("1.00"),
                        )
                    ],
                ),
            )

    async def test_delete_removes_items(self, session, cache) -> None:
        """Deleting a purchase frees its stock items for deletion."""
        seeded = await seed_tenant(session, TENANT_A)

        await PurchaseService(session, cache).delete_purchase(TENANT_A, seeded["purchase"].id)
        await StockService(session, cache).delete_stock_item(TENANT_A, seeded["stock_item"].id)

        assert (await StockService(session, cache).list_stock_items(TENANT_A)).total == 0


class TestExpenseCategoryService:
    """Test expense categories."""

    async def test_delete_reports_number_of_expenses(self, session, cache) -> None:
        """The conflict names how many expenses still use the category."""
        categories = ExpenseCategoryService(session, cache)
        expenses = ExpenseService(session, cache)
        category = await categories.create_category(TENANT_A, ExpenseCategoryCreate(name="Energia"))
        for value in ("100.00", "120.00", "95.50"):
            await expenses.create_expense(
                TENANT_A,
                ExpenseCreate(
                    category_id=category.id,
                    value=Decimal(value),
                    date=WHEN,
                    payment_method="boleto",
                ),
            )

        with pytest.raises(ReferentialConflictError) as exc_info:
            await categories.delete_category(TENANT_A, category.id)

        assert exc_info.value.count == 3
        assert "3 associated expenses" in exc_info.value.message

    async def test_delete_unused_category(self, session, cache) -> None:
        """An unused category is deleted."""
        categories = ExpenseCategoryService(session, cache)
        category = await categories.create_category(TENANT_A, ExpenseCategoryCreate(name="Misc"))

        await categories.delete_category(TENANT_A, category.id)

        assert (await categories.list_categories(TENANT_A)).total == 0

    async def test_expense_needs_own_category(self, session, cache) -> None:
        """Expenses cannot be filed under another tenant's category."""
        seeded = await seed_tenant(session, TENANT_B)

        with pytest.raises(ExpenseCategoryNotFoundError):
            await ExpenseService(session, cache).create_expense(
                TENANT_A,
                ExpenseCreate(
                    category_id=seeded["category"].id,
                    value=Decimal("10.00"),
                    date=WHEN,
                    payment_method="cash",
                ),
            )


class TestSaleAndStore:
    """Test sales and the store profile."""

    async def test_sale_update(self, session, cache) -> None:
        """A sale can be corrected after it is recorded."""
        service = SaleService(session, cache)
        sale = await service.create_sale(
            TENANT_A, SaleCreate(date=WHEN, total_value=Decimal("99.90"), payment_method="card")
        )

        updated = await service.update_sale(
            TENANT_A, sale.id, SaleCreate(date=WHEN, total_value=Decimal("109.90"), payment_method="card")
        )

        assert updated.total_value == Decimal("109.90")

    async def test_store_upsert(self, session, cache) -> None:
        """The store profile is created once and then updated in place."""
        service = StoreService(session, cache)
        assert await service.get_store(TENANT_A) is None

        created = await service.upsert_store(TENANT_A, StoreUpdate(name="Cantina"))
        updated = await service.upsert_store(TENANT_A, StoreUpdate(name="Cantina Nova", phone="11 4000-0000"))

        assert updated.id == created.id
        assert (await service.get_store(TENANT_A)).name == "Cantina Nova"
