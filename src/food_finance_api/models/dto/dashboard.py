"""Dashboard and report DTOs."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class DashboardMetrics(BaseModel):
    """Current month totals."""

    sales_month: Decimal
    purchases_month: Decimal
    expenses_month: Decimal
    estimated_profit: Decimal


class ChartDataPoint(BaseModel):
    """Sales and expenses for one day."""

    date: str
    sales: Decimal
    expenses: Decimal


class LowStockItem(BaseModel):
    """Stock item running out."""

    id: UUID
    name: str
    quantity: Decimal
    unit: str


class DashboardResponse(BaseModel):
    """Dashboard overview."""

    metrics: DashboardMetrics
    chart: list[ChartDataPoint]
    low_stock: list[LowStockItem]


class MonthlySummary(BaseModel):
    """Monthly totals, formatted with two decimal places."""

    year: int
    month: int
    sales: str
    purchases: str
    expenses: str
    balance: str
    profit: str
