from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from stockkeeper.core.dates import month_start
from stockkeeper.dependencies import get_report_service
from stockkeeper.schemas.report import (
    DashboardStatsRead,
    InventorySummaryRead,
    SalesSummaryRead,
)
from stockkeeper.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/sales", response_model=SalesSummaryRead)
def sales_report(
    start: Optional[date] = Query(None, description="First day, inclusive (defaults to month start)"),
    end: Optional[date] = Query(None, description="Last day, inclusive (defaults to today)"),
    reports: ReportService = Depends(get_report_service),
):
    today = reports.today()
    end = end or today
    start = start or month_start(end)
    return reports.sales_summary(start, end)


@router.get("/inventory", response_model=InventorySummaryRead)
def inventory_report(reports: ReportService = Depends(get_report_service)):
    return reports.inventory_summary()


@router.get("/dashboard", response_model=DashboardStatsRead)
def dashboard_report(reports: ReportService = Depends(get_report_service)):
    return reports.dashboard_stats()


__all__ = ["router"]
