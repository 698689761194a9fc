"""Tests for tenant backup export, validation and restore."""

import gc
import json
from decimal import Decimal

import pytest
from sqlalchemy import select

from conftest import TENANT_A, TENANT_B, seed_tenant
from food_finance_api.exceptions import (
    BackupValidationError,
    BackupValidationKind,
    ExportError,
    RestoreError,
    RestoreErrorKind,
)
from food_finance_api.models.dto.backup import BACKUP_VERSION
from food_finance_api.models.orm import (
    EmployeeORM,
    ExpenseCategoryORM,
    PaymentORM,
    PurchaseItemORM,
    PurchaseORM,
    SaleORM,
    StockItemORM,
    SupplierORM,
)
from food_finance_api.services import backup_service
from food_finance_api.services.backup_service import BackupService, dump_bundle, serialize_value
from food_finance_api.services.cache_service import CacheConfig


def _bundle(data: dict, version: str = BACKUP_VERSION) -> str:
    return json.dumps({"version": version, "exportedAt": "2026-03-01T00:00:00+00:00", "data": data})


def _supplier(supplier_id: str, name: str = "Supplier") -> dict:
    return {"id": supplier_id, "name": name}


def _stock_item(item_id: str, name: str, quantity: str = "3", unit_cost: str = "10.99", total: str = "33.00") -> dict:
    return {
        "id": item_id,
        "name": name,
        "unit": "kg",
        "quantity": quantity,
        "unitCost": unit_cost,
        "totalValue": total,
    }


SUPPLIER_ID = "0b8f8f1e-5c1a-4d1e-9a41-2f3a4b5c6d01"
STOCK_ID = "0b8f8f1e-5c1a-4d1e-9a41-2f3a4b5c6d02"
EMPLOYEE_ID = "0b8f8f1e-5c1a-4d1e-9a41-2f3a4b5c6d03"
CATEGORY_ID = "0b8f8f1e-5c1a-4d1e-9a41-2f3a4b5c6d04"
SUPPLIER_2_ID = "0b8f8f1e-5c1a-4d1e-9a41-2f3a4b5c6d05"
STOCK_2_ID = "0b8f8f1e-5c1a-4d1e-9a41-2f3a4b5c6d06"
PURCHASE_ID = "0b8f8f1e-5c1a-4d1e-9a41-2f3a4b5c6d07"
PURCHASE_2_ID = "0b8f8f1e-5c1a-4d1e-9a41-2f3a4b5c6d08"
PAYMENT_ID = "0b8f8f1e-5c1a-4d1e-9a41-2f3a4b5c6d09"


async def _count(session, model, tenant_id: str) -> int:
    result = await session.execute(select(model).where(model.user_id == tenant_id))
    return len(result.scalars().all())


class TestSerializeValue:
    """Test normalization of exported values."""

    def test_decimal_keeps_exact_digits(self) -> None:
        """Decimals are exported as their exact string form, not floats."""
        assert serialize_value(Decimal("10.10")) == "10.10"
        assert serialize_value({"a": [Decimal("0.30")]}) == {"a": ["0.30"]}

    def test_unsupported_type_rejected(self) -> None:
        """Values with no JSON form raise instead of being silently dropped."""
        with pytest.raises(TypeError):
            serialize_value(object())


class TestExport:
    """Test exporting a tenant."""

    async def test_export_contains_every_collection(self, session, cache) -> None:
        """Exported bundle is versioned, camelCase and JSON-primitive only."""
        await seed_tenant(session, TENANT_A)
        service = BackupService(session, cache)

        bundle = await service.export_tenant(TENANT_A)

        assert bundle["version"] == BACKUP_VERSION
        assert bundle["userId"] == TENANT_A
        assert "exportedAt" in bundle
        data = bundle["data"]
        assert set(data) == {
            "suppliers",
            "purchases",
            "stockItems",
            "employees",
            "payments",
            "expenseCategories",
            "expenses",
            "sales",
            "store",
        }
        assert len(data["purchases"]) == 1
        assert data["purchases"][0]["items"][0]["total"] == "32.97"
        assert data["payments"][0]["netValue"] == "1849.50"
        assert data["stockItems"][0]["unitCost"] == "10.99"
        assert data["store"]["name"] == "Cantina da Ana"
        # Round-trips through plain json without a custom encoder
        assert json.loads(dump_bundle(bundle)) == bundle

    async def test_export_excludes_other_tenants(self, session, cache) -> None:
        """Rows of another tenant never appear in an export."""
        await seed_tenant(session, TENANT_A)
        await seed_tenant(session, TENANT_B)
        service = BackupService(session, cache)

        bundle = await service.export_tenant(TENANT_A)

        for key, value in bundle["data"].items():
            rows = value if isinstance(value, list) else [value]
            for row in rows:
                assert row["userId"] == TENANT_A, key

    async def test_export_of_empty_tenant(self, session, cache) -> None:
        """A tenant without data exports empty collections and a null store."""
        bundle = await BackupService(session, cache).export_tenant(TENANT_A)

        assert bundle["data"]["suppliers"] == []
        assert bundle["data"]["store"] is None

    async def test_export_failure_is_generic(self, session, cache, monkeypatch) -> None:
        """A failing read aborts the whole export."""
        service = BackupService(session, cache)

        async def broken(*args, **kwargs):
            raise RuntimeError("connection reset")

        monkeypatch.setattr(service, "_fetch_all", broken)

        with pytest.raises(ExportError):
            await service.export_tenant(TENANT_A)


class TestValidate:
    """Test validation of uploaded backup files."""

    def _validate(self, raw):
        return BackupService(None, None).validate(raw)

    def test_malformed_json(self) -> None:
        """Unparseable input is reported as malformed."""
        with pytest.raises(BackupValidationError) as exc_info:
            self._validate("{not json")
        assert exc_info.value.kind == BackupValidationKind.MALFORMED_JSON

    def test_invalid_utf8(self) -> None:
        """Bytes that are not text are reported as malformed."""
        with pytest.raises(BackupValidationError) as exc_info:
            self._validate(b"\xff\xfe\xfa")
        assert exc_info.value.kind == BackupValidationKind.MALFORMED_JSON

    @pytest.mark.parametrize(
        "payload",
        [
            "[]",
            '{"data": {}}',
            '{"version": "", "data": {}}',
            '{"version": "1.0.0"}',
            '{"version": "1.0.0", "data": []}',
        ],
    )
    def test_missing_fields(self, payload: str) -> None:
        """Missing version or data is rejected before any entity check."""
        with pytest.raises(BackupValidationError) as exc_info:
            self._validate(payload)
        assert exc_info.value.kind == BackupValidationKind.MISSING_FIELDS

    @pytest.mark.parametrize("version", ["2.0.0", "v3", "10.1"])
    def test_newer_major_version_rejected(self, version: str) -> None:
        """Backups from a newer schema major cannot be read."""
        with pytest.raises(BackupValidationError) as exc_info:
            self._validate(_bundle({}, version=version))
        assert exc_info.value.kind == BackupValidationKind.UNSUPPORTED_VERSION

    @pytest.mark.parametrize("version", ["1.0.0", "1.4.2", "0.9", "legacy"])
    def test_compatible_or_legacy_version_accepted(self, version: str) -> None:
        """Same major, older majors and non-semantic versions are accepted."""
        bundle = self._validate(_bundle({}, version=version))
        assert bundle.version == version

    def test_invalid_entity_reports_path(self) -> None:
        """The first bad field is named by its path inside the file."""
        raw = _bundle(
            {
                "stockItems": [
                    _stock_item(STOCK_ID, "Farinha"),
                    {**_stock_item(SUPPLIER_ID, "Açúcar"), "unitCost": "abc"},
                ]
            }
        )

        with pytest.raises(BackupValidationError) as exc_info:
            self._validate(raw)

        error = exc_info.value
        assert error.kind == BackupValidationKind.INVALID_ENTITY
        assert "data.stockItems.1.unitCost" in error.field_errors
        assert "data.stockItems.1.unitCost" in error.message

    def test_absent_and_null_collections_are_empty(self) -> None:
        """Collections may be omitted or null; store may be null."""
        bundle = self._validate(_bundle({"suppliers": None, "store": None}))

        assert bundle.data.suppliers == []
        assert bundle.data.purchases == []
        assert bundle.data.store is None

    def test_validate_backup_reports_counts(self) -> None:
        """The dry run returns what would be imported."""
        raw = _bundle({"suppliers": [_supplier(SUPPLIER_ID)], "stockItems": [_stock_item(STOCK_ID, "Farinha")]})

        result = BackupService(None, None).validate_backup(raw)

        assert result.valid is True
        assert result.counts.suppliers == 1
        assert result.counts.stock_items == 1

    def test_validate_backup_reports_error(self) -> None:
        """The dry run reports the rejection instead of raising."""
        result = BackupService(None, None).validate_backup("nope")

        assert result.valid is False
        assert result.error_kind == BackupValidationKind.MALFORMED_JSON.value


class TestRestore:
    """Test restoring a tenant from a bundle."""

    async def test_round_trip(self, session, cache) -> None:
        """Restoring a tenant's own export leaves its data unchanged."""
        await seed_tenant(session, TENANT_A)
        service = BackupService(session, cache)
        before = await service.export_tenant(TENANT_A)

        result = await service.import_backup(TENANT_A, dump_bundle(before))

        assert result.success is True
        assert result.imported.suppliers == 1
        assert result.imported.purchases == 1
        assert result.imported.purchase_items == 1
        assert result.imported.store == 1

        after = await service.export_tenant(TENANT_A)
        assert after["data"] == before["data"]

    async def test_stored_totals_are_not_recomputed(self, session, cache) -> None:
        """Derived values keep the value found in the file."""
        raw = _bundle(
            {
                "suppliers": [_supplier(SUPPLIER_ID)],
                "stockItems": [_stock_item(STOCK_ID, "Farinha", quantity="3", unit_cost="10.99", total="33.00")],
            }
        )

        result = await BackupService(session, cache).import_backup(TENANT_A, raw)

        assert result.success is True
        item = (await session.execute(select(StockItemORM))).scalar_one()
        assert item.total_value == Decimal("33.00")

    async def test_restore_replaces_existing_data(self, session, cache) -> None:
        """Rows not in the file are gone after restore."""
        await seed_tenant(session, TENANT_A)

        result = await BackupService(session, cache).import_backup(
            TENANT_A, _bundle({"suppliers": [_supplier(SUPPLIER_ID, "Only one")]})
        )

        assert result.success is True
        suppliers = (await session.execute(select(SupplierORM))).scalars().all()
        assert [s.name for s in suppliers] == ["Only one"]
        assert await _count(session, PurchaseORM, TENANT_A) == 0
        assert (await session.execute(select(PurchaseItemORM))).scalars().all() == []

    async def test_restore_owner_comes_from_session(self, session, cache) -> None:
        """A userId inside the file never decides who owns restored rows."""
        raw = json.dumps(
            {
                "version": BACKUP_VERSION,
                "userId": TENANT_B,
                "data": {"suppliers": [{**_supplier(SUPPLIER_ID), "userId": TENANT_B}]},
            }
        )

        result = await BackupService(session, cache).import_backup(TENANT_A, raw)

        assert result.success is True
        assert await _count(session, SupplierORM, TENANT_A) == 1
        assert await _count(session, SupplierORM, TENANT_B) == 0

    async def test_restore_leaves_other_tenants_alone(self, session, cache) -> None:
        """Clearing one tenant does not touch another's rows."""
        await seed_tenant(session, TENANT_B)

        result = await BackupService(session, cache).import_backup(TENANT_A, _bundle({}))

        assert result.success is True
        assert await _count(session, SupplierORM, TENANT_B) == 1
        assert await _count(session, PaymentORM, TENANT_B) == 1

    async def test_missing_reference_rolls_back(self, session, cache) -> None:
        """A payment for an employee not in the file aborts the whole restore."""
        await seed_tenant(session, TENANT_A)
        cache.invalidations.clear()
        raw = _bundle(
            {
                "suppliers": [_supplier(SUPPLIER_ID)],
                "payments": [
                    {
                        "employeeId": EMPLOYEE_ID,
                        "date": "2026-03-05T10:00:00+00:00",
                        "grossValue": "100.00",
                        "discounts": "0",
                        "netValue": "100.00",
                    }
                ],
            }
        )

        result = await BackupService(session, cache).import_backup(TENANT_A, raw)

        assert result.success is False
        assert result.error_kind == RestoreErrorKind.TRANSACTION_FAILED.value
        assert await _count(session, SupplierORM, TENANT_A) == 1
        assert await _count(session, PaymentORM, TENANT_A) == 1
        assert cache.invalidations == []

    async def test_constraint_violation_rolls_back(self, session, cache) -> None:
        """A database error midway leaves the previous data in place."""
        seeded = await seed_tenant(session, TENANT_A)
        supplier_name = seeded["supplier"].name
        cache.invalidations.clear()
        raw = _bundle(
            {
                "stockItems": [
                    _stock_item(STOCK_ID, "Farinha"),
                    _stock_item(CATEGORY_ID, "Farinha"),
                ]
            }
        )

        with pytest.raises(RestoreError):
            bundle = BackupService(session, cache).validate(raw)
            await BackupService(session, cache).restore_tenant(TENANT_A, bundle)

        suppliers = (await session.execute(select(SupplierORM))).scalars().all()
        assert [s.name for s in suppliers] == [supplier_name]
        assert await _count(session, StockItemORM, TENANT_A) == 1
        assert cache.invalidations == []

    async def test_restore_invalidates_every_tag_after_commit(self, session, cache) -> None:
        """All cached views of the tenant are dropped after a restore."""
        result = await BackupService(session, cache).import_backup(TENANT_A, _bundle({}))

        assert result.success is True
        assert cache.invalidated_tags(TENANT_A) == set(CacheConfig.ALL_TAGS)
        assert cache.invalidated_tags(TENANT_B) == set()

    async def test_validation_failure_touches_nothing(self, session, cache) -> None:
        """A rejected file neither deletes data nor invalidates caches."""
        await seed_tenant(session, TENANT_A)
        cache.invalidations.clear()

        result = await BackupService(session, cache).import_backup(TENANT_A, _bundle({}, version="9.0.0"))

        assert result.success is False
        assert result.error_kind == BackupValidationKind.UNSUPPORTED_VERSION.value
        assert await _count(session, SupplierORM, TENANT_A) == 1
        assert cache.invalidations == []

    async def test_records_without_ids_get_new_ones(self, session, cache) -> None:
        """Ids and timestamps are optional in the file."""
        raw = _bundle({"expenseCategories": [{"name": "Gas"}, {"name": "Water"}]})

        result = await BackupService(session, cache).import_backup(TENANT_A, raw)

        assert result.success is True
        assert result.imported.expense_categories == 2
        categories = (await session.execute(select(ExpenseCategoryORM))).scalars().all()
        assert len({c.id for c in categories}) == 2

    async def test_scrambled_bundle_order(self, session, cache) -> None:
        """Purchases listed before their suppliers and stock items still restore."""
        raw = _bundle(
            {
                "purchases": [
                    {
                        "id": PURCHASE_ID,
                        "supplierId": SUPPLIER_ID,
                        "date": "2026-03-02T09:00:00+00:00",
                        "paymentMethod": "pix",
                        "total": "21.98",
                        "items": [
                            {"stockItemId": STOCK_ID, "quantity": "2", "unitPrice": "10.99", "total": "21.98"}
                        ],
                    },
                    {
                        "id": PURCHASE_2_ID,
                        "supplierId": SUPPLIER_2_ID,
                        "date": "2026-03-03T09:00:00+00:00",
                        "paymentMethod": "cash",
                        "total": "5.00",
                        "items": [
                            {"stockItemId": STOCK_2_ID, "quantity": "1", "unitPrice": "5.00", "total": "5.00"}
                        ],
                    },
                ],
                "stockItems": [
                    _stock_item(STOCK_2_ID, "Açúcar", quantity="1", unit_cost="5.00", total="5.00"),
                    _stock_item(STOCK_ID, "Farinha"),
                ],
                "suppliers": [_supplier(SUPPLIER_2_ID, "Feira"), _supplier(SUPPLIER_ID, "Atacadão")],
            }
        )

        result = await BackupService(session, cache).import_backup(TENANT_A, raw)

        assert result.success is True
        assert result.imported.suppliers == 2
        assert result.imported.stock_items == 2
        assert result.imported.purchases == 2
        assert result.imported.purchase_items == 2
        items = (await session.execute(select(PurchaseItemORM))).scalars().all()
        assert {str(i.purchase_id): str(i.stock_item_id) for i in items} == {
            PURCHASE_ID: STOCK_ID,
            PURCHASE_2_ID: STOCK_2_ID,
        }

    async def test_late_step_failure_rolls_back(self, session, cache) -> None:
        """A failure after several collections were inserted keeps the previous data."""
        await seed_tenant(session, TENANT_A)
        cache.invalidations.clear()
        payment = {
            "id": PAYMENT_ID,
            "employeeId": EMPLOYEE_ID,
            "date": "2026-03-05T10:00:00+00:00",
            "grossValue": "100.00",
            "discounts": "0",
            "netValue": "100.00",
        }
        raw = _bundle(
            {
                "suppliers": [_supplier(SUPPLIER_ID, "Feira")],
                "employees": [{"id": EMPLOYEE_ID, "name": "Bia", "role": "Waiter"}],
                "sales": [
                    {"date": "2026-03-05T12:00:00+00:00", "totalValue": "80.00", "paymentMethod": "cash"}
                ],
                # Same id twice fails on insert, after suppliers and employees were written
                "payments": [payment, payment],
            }
        )

        result = await BackupService(session, cache).import_backup(TENANT_A, raw)

        assert result.success is False
        assert result.error_kind == RestoreErrorKind.TRANSACTION_FAILED.value
        suppliers = (await session.execute(select(SupplierORM))).scalars().all()
        assert [s.name for s in suppliers] == ["Atacadão"]
        employees = (await session.execute(select(EmployeeORM))).scalars().all()
        assert [e.name for e in employees] == ["Ana"]
        assert await _count(session, PaymentORM, TENANT_A) == 1
        assert await _count(session, SaleORM, TENANT_A) == 1
        assert cache.invalidations == []

    async def test_restore_lock_released_afterwards(self, session, cache) -> None:
        """Tenants that finished restoring do not keep a lock around."""
        service = BackupService(session, cache)
        for tenant_id in (TENANT_A, TENANT_B):
            assert (await service.import_backup(tenant_id, _bundle({}))).success is True

        gc.collect()

        assert TENANT_A not in backup_service._restore_locks
        assert TENANT_B not in backup_service._restore_locks


class TestSummary:
    """Test backup summary counts."""

    async def test_summary_counts_and_caches(self, session, cache) -> None:
        """Counts are per tenant and served from cache on the second read."""
        await seed_tenant(session, TENANT_A)
        await seed_tenant(session, TENANT_B)
        service = BackupService(session, cache)

        summary = await service.get_summary(TENANT_A)

        assert summary.suppliers == 1
        assert summary.purchases == 1
        assert summary.payments == 1
        assert cache.make_key(CacheConfig.TAG_BACKUP_SUMMARY, TENANT_A) in cache.store

        cache.store[cache.make_key(CacheConfig.TAG_BACKUP_SUMMARY, TENANT_A)] = json.dumps(
            {**summary.model_dump(), "suppliers": 42}
        )
        assert (await service.get_summary(TENANT_A)).suppliers == 42
