"""Services package."""

from food_finance_api.services.backup_service import BackupService
from food_finance_api.services.report_service import ReportService

__all__ = [
    "BackupService",
    "ReportService",
]
