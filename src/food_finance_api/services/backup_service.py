"""Backup service for tenant export and restore.

Architecture Note:
    Export and restore operate on every tenant-scoped table at once. Restore
    is a delete-everything-then-recreate-everything operation for a single
    tenant and must run as one transaction, so this service drives the
    session directly (through the tenant-scoped repositories for deletes and
    counts) instead of going through the per-entity CRUD services.

Security Note: Uploads are parsed with ``json`` only and validated against
the pydantic schemas in ``models.dto.backup`` before any row is touched. The
owning tenant of restored rows always comes from the authenticated session,
never from the file.
"""

import asyncio
import json
import logging
import re
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from sqlalchemy import inspect, select, text
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from food_finance_api.exceptions import (
    BackupValidationError,
    BackupValidationKind,
    ExportError,
    RestoreError,
)
from food_finance_api.models.dto.backup import (
    BACKUP_VERSION,
    BackupBundle,
    BackupData,
    BackupRecord,
    BackupSummary,
    BackupValidationResponse,
    RestoreImportCounts,
    RestoreResponse,
)
from food_finance_api.models.orm.employee import EmployeeORM
from food_finance_api.models.orm.expense import ExpenseORM
from food_finance_api.models.orm.expense_category import ExpenseCategoryORM
from food_finance_api.models.orm.payment import PaymentORM
from food_finance_api.models.orm.purchase import PurchaseItemORM, PurchaseORM
from food_finance_api.models.orm.sale import SaleORM
from food_finance_api.models.orm.stock_item import StockItemORM
from food_finance_api.models.orm.store import StoreORM
from food_finance_api.models.orm.supplier import SupplierORM
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
from food_finance_api.services.cache_service import CacheConfig, CacheInvalidator, get_cache_ttl
from food_finance_api.utils.secure_logging import log_error

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_MAJOR = int(BACKUP_VERSION.split(".")[0])

_SEMVER_RE = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:[-+][0-9A-Za-z.\-+]*)?$")

# One restore at a time per tenant within this process; an entry lives only
# while a restore holds or waits on it
_restore_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()


def serialize_value(value: Any) -> Any:
    """Recursively convert a value into JSON primitives.

    Datetimes and dates become ISO-8601 strings, decimals become their exact
    string form and UUIDs become strings. Lists, tuples and dicts are walked.
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, float):
        return value
    if isinstance(value, dict):
        return {str(k): serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@asynccontextmanager
async def _tenant_restore_lock(tenant_id: str) -> AsyncIterator[None]:
    lock = _restore_locks.get(tenant_id)
    if lock is None:
        lock = asyncio.Lock()
        _restore_locks[tenant_id] = lock
    async with lock:
        yield


class BackupService:
    """Service for exporting, validating and restoring one tenant's data."""

    def __init__(self, session: AsyncSession, cache: CacheInvalidator) -> None:
        """Initialize backup service.

        Args:
            session: Database session (one per request)
            cache: Cache used for the summary and notified after restore
        """
        self.session = session
        self.cache = cache

    # =========================================================================
    # Export functionality
    # =========================================================================

    async def export_tenant(self, tenant_id: str) -> dict[str, Any]:
        """Export every record the tenant owns as a versioned bundle.

        Args:
            tenant_id: Tenant to export

        Returns:
            JSON-compatible bundle with ``version``, ``exportedAt``, ``userId``
            and ``data``

        Raises:
            ExportError: If any collection cannot be read
        """
        try:
            data = await self._collect_data(tenant_id)
        except Exception as e:
            log_error(logger, "Backup export failed", e, tenant_id=tenant_id)
            raise ExportError() from e

        return {
            "version": BACKUP_VERSION,
            "exportedAt": datetime.now(timezone.utc).isoformat(),
            "userId": tenant_id,
            "data": data,
        }

    async def _collect_data(self, tenant_id: str) -> dict[str, Any]:
        """Collect all exportable data of a tenant.

        Collections are read one after another: an AsyncSession does not
        allow concurrent statements.
        """
        suppliers = await self._fetch_all(SupplierORM, tenant_id)
        purchases = await self._fetch_all(
            PurchaseORM, tenant_id, selectinload(PurchaseORM.items)
        )
        stock_items = await self._fetch_all(StockItemORM, tenant_id)
        employees = await self._fetch_all(EmployeeORM, tenant_id)
        payments = await self._fetch_all(PaymentORM, tenant_id)
        expense_categories = await self._fetch_all(ExpenseCategoryORM, tenant_id)
        expenses = await self._fetch_all(ExpenseORM, tenant_id)
        sales = await self._fetch_all(SaleORM, tenant_id)
        store = await StoreRepository(self.session).get_for_tenant(tenant_id)

        return serialize_value(
            {
                "suppliers": [self._orm_to_dict(s) for s in suppliers],
                "purchases": [self._purchase_to_dict(p) for p in purchases],
                "stockItems": [self._orm_to_dict(i) for i in stock_items],
                "employees": [self._orm_to_dict(e) for e in employees],
                "payments": [self._orm_to_dict(p) for p in payments],
                "expenseCategories": [self._orm_to_dict(c) for c in expense_categories],
                "expenses": [self._orm_to_dict(e) for e in expenses],
                "sales": [self._orm_to_dict(s) for s in sales],
                "store": self._orm_to_dict(store) if store is not None else None,
            }
        )

    async def _fetch_all(self, model: type, tenant_id: str, *options: Any) -> list:
        """Fetch all records of a model owned by the tenant."""
        stmt = select(model).where(model.user_id == tenant_id).order_by(model.created_at)
        if options:
            stmt = stmt.options(*options)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    def _orm_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert an ORM object to a dict of its columns, keyed in camelCase."""
        mapper = inspect(obj.__class__)
        return {
            to_camel(attr.key): getattr(obj, attr.key)
            for attr in mapper.column_attrs
        }

    def _purchase_to_dict(self, purchase: PurchaseORM) -> dict[str, Any]:
        """Convert a purchase with its nested items."""
        result = self._orm_to_dict(purchase)
        result["items"] = [self._orm_to_dict(item) for item in purchase.items]
        return result

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self, raw: str | bytes) -> BackupBundle:
        """Parse and validate an untrusted backup payload.

        Args:
            raw: File contents

        Returns:
            Validated bundle

        Raises:
            BackupValidationError: With the kind of the first problem found
        """
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise BackupValidationError(
                BackupValidationKind.MALFORMED_JSON,
                "Invalid JSON file",
            ) from e

        if not isinstance(payload, dict):
            raise BackupValidationError(
                BackupValidationKind.MISSING_FIELDS,
                "Invalid backup format: the file must contain a JSON object",
            )

        version = payload.get("version")
        if not isinstance(version, str) or not version.strip():
            raise BackupValidationError(
                BackupValidationKind.MISSING_FIELDS,
                "Invalid backup format: missing version",
                {"version": ["Field required"]},
            )
        if not isinstance(payload.get("data"), dict):
            raise BackupValidationError(
                BackupValidationKind.MISSING_FIELDS,
                "Invalid backup format: missing data",
                {"data": ["Field required"]},
            )

        major = self._major_version(version)
        if major is not None and major > CURRENT_SCHEMA_MAJOR:
            raise BackupValidationError(
                BackupValidationKind.UNSUPPORTED_VERSION,
                f"Unsupported backup version {version}; "
                f"this server reads versions up to {CURRENT_SCHEMA_MAJOR}.x",
                {"version": [f"Unsupported version {version}"]},
            )

        try:
            return BackupBundle.model_validate(payload)
        except PydanticValidationError as e:
            field_errors = self._field_errors(e)
            first_path = next(iter(field_errors))
            raise BackupValidationError(
                BackupValidationKind.INVALID_ENTITY,
                f"Invalid backup entry at {first_path}: {field_errors[first_path][0]}",
                field_errors,
            ) from e

    @staticmethod
    def _major_version(version: str) -> int | None:
        """Major component of a semantic version, or None if it is not one."""
        match = _SEMVER_RE.match(version.strip())
        if match is None:
            return None
        return int(match.group(1))

    @staticmethod
    def _field_errors(error: PydanticValidationError) -> dict[str, list[str]]:
        """Group pydantic errors by dotted path, in the order reported."""
        field_errors: dict[str, list[str]] = {}
        for err in error.errors():
            path = ".".join(str(part) for part in err["loc"]) or "root"
            field_errors.setdefault(path, []).append(err["msg"])
        return field_errors

    def validate_backup(self, raw: str | bytes) -> BackupValidationResponse:
        """Check a backup file without importing it.

        Returns:
            Validation response with the bundle's record counts when valid
        """
        try:
            bundle = self.validate(raw)
        except BackupValidationError as e:
            return BackupValidationResponse(
                valid=False,
                error=e.message,
                error_kind=e.kind.value,
                field_errors=e.field_errors,
            )

        data = bundle.data
        return BackupValidationResponse(
            valid=True,
            version=bundle.version,
            exported_at=bundle.exported_at,
            counts=BackupSummary(
                suppliers=len(data.suppliers),
                purchases=len(data.purchases),
                stock_items=len(data.stock_items),
                employees=len(data.employees),
                payments=len(data.payments),
                expenses=len(data.expenses),
                sales=len(data.sales),
            ),
        )

    # =========================================================================
    # Restore functionality
    # =========================================================================

    async def import_backup(self, tenant_id: str, raw: str | bytes) -> RestoreResponse:
        """Validate an uploaded file and restore it over the tenant's data.

        WARNING: This deletes ALL existing data of the tenant!

        Args:
            tenant_id: Authenticated tenant
            raw: File contents

        Returns:
            Restore response with import counts, or the reason it failed
        """
        try:
            bundle = self.validate(raw)
        except BackupValidationError as e:
            return RestoreResponse(
                success=False,
                error=e.message,
                error_kind=e.kind.value,
                field_errors=e.field_errors,
            )

        try:
            counts = await self.restore_tenant(tenant_id, bundle)
        except RestoreError as e:
            return RestoreResponse(success=False, error=e.message, error_kind=e.kind.value)

        return RestoreResponse(success=True, imported=counts)

    async def restore_tenant(self, tenant_id: str, bundle: BackupBundle) -> RestoreImportCounts:
        """Replace all of a tenant's data with the bundle's contents.

        Runs as a single transaction: either every existing row is replaced or
        nothing changes. Caches are invalidated only after commit.

        Args:
            tenant_id: Tenant that will own every restored row
            bundle: Validated bundle

        Returns:
            Per-collection import counts

        Raises:
            RestoreError: If the transaction was rolled back
        """
        async with _tenant_restore_lock(tenant_id):
            try:
                self._check_references(bundle.data)
                await self._acquire_advisory_lock(tenant_id)
                await self._clear_tenant_data(tenant_id)
                counts = await self._import_data(tenant_id, bundle.data)
                await self.session.commit()
            except Exception as e:
                await self.session.rollback()
                log_error(logger, "Backup restore failed", e, tenant_id=tenant_id)
                raise RestoreError() from e

        await self.cache.invalidate_tenant(tenant_id, *CacheConfig.ALL_TAGS)
        logger.info("Restored backup for tenant %s: %s", tenant_id, counts.model_dump())
        return counts

    @staticmethod
    def _check_references(data: BackupData) -> None:
        """Require every foreign key in the bundle to point at a record of the bundle.

        Restored rows keep their ids, so an unresolved reference could otherwise
        land on a row of another tenant.

        Raises:
            ValueError: On the first dangling reference
        """
        supplier_ids = {s.id for s in data.suppliers}
        stock_ids = {i.id for i in data.stock_items}
        employee_ids = {e.id for e in data.employees}
        category_ids = {c.id for c in data.expense_categories}

        for purchase in data.purchases:
            if purchase.supplier_id not in supplier_ids:
                raise ValueError(f"Purchase {purchase.id} references unknown supplier")
            for item in purchase.items:
                if item.stock_item_id not in stock_ids:
                    raise ValueError(f"Purchase {purchase.id} references unknown stock item")
        for payment in data.payments:
            if payment.employee_id not in employee_ids:
                raise ValueError(f"Payment {payment.id} references unknown employee")
        for expense in data.expenses:
            if expense.category_id not in category_ids:
                raise ValueError(f"Expense {expense.id} references unknown category")

    async def _acquire_advisory_lock(self, tenant_id: str) -> None:
        """Serialize restores of one tenant across processes (PostgreSQL only)."""
        connection = await self.session.connection()
        if connection.dialect.name != "postgresql":
            return
        await self.session.execute(
            text("SELECT pg_advisory_xact_lock(hashtext(:tenant_id))"),
            {"tenant_id": tenant_id},
        )

    async def _clear_tenant_data(self, tenant_id: str) -> None:
        """Delete all tenant data in an order that respects foreign keys."""
        # Payroll first, then the employees it references
        await PaymentRepository(self.session).delete_all(tenant_id)
        await EmployeeRepository(self.session).delete_all(tenant_id)

        # Purchases own their items; items reference stock, purchases reference suppliers
        purchases = PurchaseRepository(self.session)
        await purchases.delete_all_items(tenant_id)
        await purchases.delete_all(tenant_id)
        await StockItemRepository(self.session).delete_all(tenant_id)
        await SupplierRepository(self.session).delete_all(tenant_id)

        await ExpenseRepository(self.session).delete_all(tenant_id)
        await ExpenseCategoryRepository(self.session).delete_all(tenant_id)
        await SaleRepository(self.session).delete_all(tenant_id)
        await StoreRepository(self.session).delete_all(tenant_id)

        await self.session.flush()
        # Rows about to be recreated may reuse the ids of deleted ones
        self.session.expunge_all()

    async def _import_data(self, tenant_id: str, data: BackupData) -> RestoreImportCounts:
        """Import data in dependency order (parents first)."""
        counts = RestoreImportCounts()

        # 1. Suppliers
        for supplier in data.suppliers:
            self.session.add(SupplierORM(user_id=tenant_id, **self._record_values(supplier)))
            counts.suppliers += 1
        await self.session.flush()

        # 2. Stock items (total_value is kept as exported)
        for item in data.stock_items:
            self.session.add(StockItemORM(user_id=tenant_id, **self._record_values(item)))
            counts.stock_items += 1
        await self.session.flush()

        # 3. Purchases with their items; the parent comes from the nesting
        for purchase in data.purchases:
            items = [PurchaseItemORM(**self._record_values(item)) for item in purchase.items]
            self.session.add(
                PurchaseORM(
                    user_id=tenant_id,
                    items=items,
                    **self._record_values(purchase, exclude={"items"}),
                )
            )
            counts.purchases += 1
            counts.purchase_items += len(items)
        await self.session.flush()

        # 4. Employees
        for employee in data.employees:
            self.session.add(EmployeeORM(user_id=tenant_id, **self._record_values(employee)))
            counts.employees += 1
        await self.session.flush()

        # 5. Payments (depend on employees)
        for payment in data.payments:
            self.session.add(PaymentORM(user_id=tenant_id, **self._record_values(payment)))
            counts.payments += 1
        await self.session.flush()

        # 6. Expense categories
        for category in data.expense_categories:
            self.session.add(
                ExpenseCategoryORM(user_id=tenant_id, **self._record_values(category))
            )
            counts.expense_categories += 1
        await self.session.flush()

        # 7. Expenses (depend on categories)
        for expense in data.expenses:
            self.session.add(ExpenseORM(user_id=tenant_id, **self._record_values(expense)))
            counts.expenses += 1
        await self.session.flush()

        # 8. Sales
        for sale in data.sales:
            self.session.add(SaleORM(user_id=tenant_id, **self._record_values(sale)))
            counts.sales += 1
        await self.session.flush()

        # 9. Store (always created, the old one was deleted above)
        if data.store is not None:
            self.session.add(StoreORM(user_id=tenant_id, **self._record_values(data.store)))
            counts.store = 1
            await self.session.flush()

        return counts

    @staticmethod
    def _record_values(record: BackupRecord, exclude: set[str] | None = None) -> dict[str, Any]:
        """Column values of a backup record; missing ids and timestamps fall back to defaults."""
        values = record.model_dump(exclude=exclude or set())
        for key in ("id", "created_at", "updated_at"):
            if values.get(key) is None:
                values.pop(key, None)
        return values

    # =========================================================================
    # Summary
    # =========================================================================

    async def get_summary(self, tenant_id: str) -> BackupSummary:
        """Count the tenant's records, served from cache when possible.

        Args:
            tenant_id: Owning tenant

        Returns:
            Per-entity counts
        """
        key = self.cache.make_key(CacheConfig.TAG_BACKUP_SUMMARY, tenant_id)
        cached = await self.cache.get_json(key)
        if cached is not None:
            return BackupSummary.model_validate(cached)

        summary = BackupSummary(
            suppliers=await SupplierRepository(self.session).count(tenant_id),
            purchases=await PurchaseRepository(self.session).count(tenant_id),
            stock_items=await StockItemRepository(self.session).count(tenant_id),
            employees=await EmployeeRepository(self.session).count(tenant_id),
            payments=await PaymentRepository(self.session).count(tenant_id),
            expenses=await ExpenseRepository(self.session).count(tenant_id),
            sales=await SaleRepository(self.session).count(tenant_id),
        )
        await self.cache.set_json(
            key, summary, get_cache_ttl(CacheConfig.TAG_BACKUP_SUMMARY)
        )
        return summary


def dump_bundle(bundle: dict[str, Any]) -> str:
    """Render a bundle as pretty-printed JSON for download."""
    return json.dumps(bundle, indent=2, ensure_ascii=False)
