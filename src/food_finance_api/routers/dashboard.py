"""Dashboard router."""

from typing import Annotated

from fastapi import APIRouter, Depends

from food_finance_api.dependencies import AuthenticatedUser, get_report_service
from food_finance_api.models.dto.dashboard import (
    ChartDataPoint,
    DashboardMetrics,
    DashboardResponse,
    LowStockItem,
)
from food_finance_api.services.report_service import ReportService

router = APIRouter()

Service = Annotated[ReportService, Depends(get_report_service)]


@router.get("", response_model=DashboardResponse)
async def get_dashboard(current_user: AuthenticatedUser, service: Service) -> DashboardResponse:
    """Metrics, seven-day chart and low stock list."""
    return await service.get_dashboard(current_user.tenant_id)


@router.get("/metrics", response_model=DashboardMetrics)
async def get_metrics(current_user: AuthenticatedUser, service: Service) -> DashboardMetrics:
    """Current month totals."""
    return await service.get_dashboard_metrics(current_user.tenant_id)


@router.get("/chart", response_model=list[ChartDataPoint])
async def get_chart(current_user: AuthenticatedUser, service: Service) -> list[ChartDataPoint]:
    """Daily sales and expenses for the last seven days."""
    return await service.get_chart_data(current_user.tenant_id)


@router.get("/low-stock", response_model=list[LowStockItem])
async def get_low_stock(current_user: AuthenticatedUser, service: Service) -> list[LowStockItem]:
    """Items running out."""
    return await service.get_low_stock_items(current_user.tenant_id)
