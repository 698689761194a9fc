"""Reports router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from food_finance_api.dependencies import AuthenticatedUser, get_report_service
from food_finance_api.models.dto.dashboard import MonthlySummary
from food_finance_api.services.report_service import ReportService

router = APIRouter()


@router.get("/monthly", response_model=MonthlySummary)
async def get_monthly_summary(
    current_user: AuthenticatedUser,
    service: Annotated[ReportService, Depends(get_report_service)],
    year: int = Query(..., description="Calendar year"),
    month: int = Query(..., description="Month number, 1 to 12"),
) -> MonthlySummary:
    """Sales, purchases, expenses and balance for one month."""
    return await service.get_monthly_summary(current_user.tenant_id, year, month)
