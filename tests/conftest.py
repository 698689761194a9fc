"""Shared fixtures: in-memory SQLite database, fake cache and API client."""

import json
import os

# Settings are read once at import time; configure them before the package loads
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-0123456789-abcdefghijklmnopqrstuvwxyz")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from collections.abc import AsyncIterator  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from pydantic import BaseModel  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from food_finance_api.database import get_db  # noqa: E402
from food_finance_api.dependencies import get_cache  # noqa: E402
from food_finance_api.main import create_app  # noqa: E402
from food_finance_api.models.orm import Base  # noqa: E402
from food_finance_api.security.auth import create_access_token  # noqa: E402
from food_finance_api.services.cache_service import CacheConfig  # noqa: E402

TENANT_A = "user-tenant-a"
TENANT_B = "user-tenant-b"


class FakeCache:
    """In-memory stand-in for the Redis cache that records invalidations."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.invalidations: list[tuple[str, str]] = []

    def make_key(self, tag: str, tenant_id: str, *parts: str) -> str:
        return ":".join([tag, tenant_id] + [str(p) for p in parts if p])

    async def get_json(self, key: str) -> dict | list | None:
        value = self.store.get(key)
        return json.loads(value) if value is not None else None

    async def set_json(self, key: str, value: Any, ttl: int | None = None) -> bool:
        if isinstance(value, BaseModel):
            self.store[key] = value.model_dump_json()
        else:
            self.store[key] = json.dumps(value)
        return True

    async def invalidate(self, tag: str, tenant_id: str) -> int:
        self.invalidations.append((tag, tenant_id))
        base = self.make_key(tag, tenant_id)
        stale = [k for k in self.store if k == base or k.startswith(f"{base}:")]
        for key in stale:
            del self.store[key]
        return len(stale)

    async def invalidate_tenant(self, tenant_id: str, *tags: str) -> int:
        count = 0
        for tag in tags or CacheConfig.ALL_TAGS:
            count += await self.invalidate(tag, tenant_id)
        return count

    def invalidated_tags(self, tenant_id: str) -> set[str]:
        return {tag for tag, tenant in self.invalidations if tenant == tenant_id}


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Fresh in-memory database per test, with foreign keys enforced."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(test_engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as db_session:
        yield db_session


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    cache: FakeCache,
) -> AsyncIterator[AsyncClient]:
    """API client backed by the test database and fake cache."""
    app = create_app()

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as db_session:
            yield db_session
            await db_session.commit()

    async def override_get_cache() -> FakeCache:
        return cache

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = override_get_cache

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


def auth_headers(tenant_id: str = TENANT_A) -> dict[str, str]:
    """Bearer header for a session of the given tenant."""
    return {"Authorization": f"Bearer {create_access_token(tenant_id, email=f'{tenant_id}@example.com')}"}


@pytest.fixture
def headers_a() -> dict[str, str]:
    return auth_headers(TENANT_A)


@pytest.fixture
def headers_b() -> dict[str, str]:
    return auth_headers(TENANT_B)


async def seed_tenant(db_session: AsyncSession, tenant_id: str) -> dict[str, Any]:
    """Create one record of every kind for a tenant and commit.

    The stock item has quantity 1, which puts it on the low stock list.
    """
    from datetime import datetime, timezone
    from decimal import Decimal

    from food_finance_api.models.orm import (
        EmployeeORM,
        ExpenseCategoryORM,
        ExpenseORM,
        PaymentORM,
        PurchaseItemORM,
        PurchaseORM,
        SaleORM,
        StockItemORM,
        StoreORM,
        SupplierORM,
    )

    when = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)

    supplier = SupplierORM(user_id=tenant_id, name="Atacadão", phone="11 5555-0000")
    stock_item = StockItemORM(
        user_id=tenant_id,
        name="Farinha",
        unit="kg",
        quantity=Decimal("1"),
        unit_cost=Decimal("10.99"),
        total_value=Decimal("10.99"),
    )
    employee = EmployeeORM(user_id=tenant_id, name="Ana", role="Cook", base_salary=Decimal("2000.00"))
    category = ExpenseCategoryORM(user_id=tenant_id, name="Rent")
    db_session.add_all([supplier, stock_item, employee, category])
    await db_session.flush()

    purchase = PurchaseORM(
        user_id=tenant_id,
        supplier_id=supplier.id,
        date=when,
        payment_method="pix",
        total=Decimal("32.97"),
        items=[
            PurchaseItemORM(
                stock_item_id=stock_item.id,
                quantity=Decimal("3"),
                unit_price=Decimal("10.99"),
                total=Decimal("32.97"),
            )
        ],
    )
    payment = PaymentORM(
        user_id=tenant_id,
        employee_id=employee.id,
        date=when,
        gross_value=Decimal("2000.00"),
        discounts=Decimal("150.50"),
        net_value=Decimal("1849.50"),
    )
    expense = ExpenseORM(
        user_id=tenant_id,
        category_id=category.id,
        value=Decimal("1200.00"),
        date=when,
        payment_method="transfer",
    )
    sale = SaleORM(user_id=tenant_id, date=when, total_value=Decimal("450.25"), payment_method="card")
    store = StoreORM(user_id=tenant_id, name="Cantina da Ana", cnpj="12.345.678/0001-90")
    db_session.add_all([purchase, payment, expense, sale, store])
    await db_session.commit()

    return {
        "supplier": supplier,
        "stock_item": stock_item,
        "employee": employee,
        "category": category,
        "purchase": purchase,
        "payment": payment,
        "expense": expense,
        "sale": sale,
        "store": store,
    }
