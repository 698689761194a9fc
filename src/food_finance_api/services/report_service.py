"""Dashboard and monthly report aggregation."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from food_finance_api.exceptions import ValidationError
from food_finance_api.models.dto.dashboard import (
    ChartDataPoint,
    DashboardMetrics,
    DashboardResponse,
    LowStockItem,
    MonthlySummary,
)
from food_finance_api.repositories.expense_repository import ExpenseRepository
from food_finance_api.repositories.purchase_repository import PurchaseRepository
from food_finance_api.repositories.sale_repository import SaleRepository
from food_finance_api.repositories.stock_item_repository import StockItemRepository
from food_finance_api.services.base import TenantService
from food_finance_api.services.cache_service import CacheConfig, get_cache_ttl
from food_finance_api.utils.money import format_money

CHART_DAYS = 7
LOW_STOCK_THRESHOLD = Decimal("1")
LOW_STOCK_LIMIT = 10


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Half-open UTC range [first day of month, first day of next month)."""
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def _utc_day(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


class ReportService(TenantService):
    """Read-only aggregates over sales, purchases, expenses and stock.

    Results are cached under the tenant's dashboard tag, which every write to
    the underlying entities invalidates.
    """

    def __init__(self, session, cache) -> None:
        super().__init__(session, cache)
        self.sale_repo = SaleRepository(session)
        self.purchase_repo = PurchaseRepository(session)
        self.expense_repo = ExpenseRepository(session)
        self.stock_repo = StockItemRepository(session)

    async def get_dashboard_metrics(
        self,
        tenant_id: str,
        now: datetime | None = None,
    ) -> DashboardMetrics:
        """Current month totals and estimated profit.

        Args:
            tenant_id: Owning tenant
            now: Reference time, defaults to the current UTC time

        Returns:
            Dashboard metrics
        """
        now = now or datetime.now(timezone.utc)
        start, end = month_bounds(now.year, now.month)

        async def load() -> DashboardMetrics:
            sales = await self.sale_repo.sum_between(tenant_id, start, end)
            purchases = await self.purchase_repo.sum_between(tenant_id, start, end)
            expenses = await self.expense_repo.sum_between(tenant_id, start, end)
            return DashboardMetrics(
                sales_month=sales,
                purchases_month=purchases,
                expenses_month=expenses,
                estimated_profit=sales - (purchases + expenses),
            )

        return await self._cached(
            CacheConfig.TAG_DASHBOARD,
            tenant_id,
            DashboardMetrics,
            load,
            "metrics",
            f"{now.year}-{now.month:02d}",
        )

    async def get_chart_data(
        self,
        tenant_id: str,
        today: date | None = None,
    ) -> list[ChartDataPoint]:
        """Daily sales and expenses for the last seven days, today included.

        Days without records are present with zero totals.
        """
        today = today or datetime.now(timezone.utc).date()
        first_day = today - timedelta(days=CHART_DAYS - 1)
        start = datetime(first_day.year, first_day.month, first_day.day, tzinfo=timezone.utc)
        end = datetime(today.year, today.month, today.day, tzinfo=timezone.utc) + timedelta(days=1)

        key = self.cache.make_key(CacheConfig.TAG_DASHBOARD, tenant_id, "chart", today.isoformat())
        cached = await self.cache.get_json(key)
        if cached is not None:
            return [ChartDataPoint.model_validate(point) for point in cached]

        days = [first_day + timedelta(days=i) for i in range(CHART_DAYS)]
        sales_by_day = {day: Decimal("0") for day in days}
        expenses_by_day = {day: Decimal("0") for day in days}

        for sale in await self.sale_repo.get_between(tenant_id, start, end):
            day = _utc_day(sale.date)
            if day in sales_by_day:
                sales_by_day[day] += sale.total_value

        for expense in await self.expense_repo.get_between(tenant_id, start, end):
            day = _utc_day(expense.date)
            if day in expenses_by_day:
                expenses_by_day[day] += expense.value

        points = [
            ChartDataPoint(
                date=day.isoformat(),
                sales=sales_by_day[day],
                expenses=expenses_by_day[day],
            )
            for day in days
        ]
        await self.cache.set_json(
            key,
            [point.model_dump(mode="json") for point in points],
            get_cache_ttl(CacheConfig.TAG_DASHBOARD),
        )
        return points

    async def get_low_stock_items(self, tenant_id: str) -> list[LowStockItem]:
        """Up to ten items with quantity at or below one, lowest first."""
        items = await self.stock_repo.get_low_stock(
            tenant_id, threshold=LOW_STOCK_THRESHOLD, limit=LOW_STOCK_LIMIT
        )
        return [
            LowStockItem(id=item.id, name=item.name, quantity=item.quantity, unit=item.unit)
            for item in items
        ]

    async def get_dashboard(self, tenant_id: str) -> DashboardResponse:
        """Metrics, chart and low stock list in one response."""
        return DashboardResponse(
            metrics=await self.get_dashboard_metrics(tenant_id),
            chart=await self.get_chart_data(tenant_id),
            low_stock=await self.get_low_stock_items(tenant_id),
        )

    async def get_monthly_summary(self, tenant_id: str, year: int, month: int) -> MonthlySummary:
        """Totals for one calendar month.

        Args:
            tenant_id: Owning tenant
            year: Calendar year
            month: Month number, 1 to 12

        Returns:
            Summary with two-decimal string values

        Raises:
            ValidationError: If the month or year is out of range
        """
        if not 1 <= month <= 12:
            raise ValidationError("Invalid month", {"month": ["Month must be between 1 and 12"]})
        if not 1900 <= year <= 9998:
            raise ValidationError("Invalid year", {"year": ["Year is out of range"]})

        start, end = month_bounds(year, month)

        async def load() -> MonthlySummary:
            sales = await self.sale_repo.sum_between(tenant_id, start, end)
            purchases = await self.purchase_repo.sum_between(tenant_id, start, end)
            expenses = await self.expense_repo.sum_between(tenant_id, start, end)
            balance = sales - purchases - expenses
            return MonthlySummary(
                year=year,
                month=month,
                sales=format_money(sales),
                purchases=format_money(purchases),
                expenses=format_money(expenses),
                balance=format_money(balance),
                profit=format_money(balance),
            )

        return await self._cached(
            CacheConfig.TAG_DASHBOARD,
            tenant_id,
            MonthlySummary,
            load,
            "monthly",
            f"{year}-{month:02d}",
        )
