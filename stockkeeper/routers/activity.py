from typing import Optional

from fastapi import APIRouter, Depends, Query

from stockkeeper.config import get_settings
from stockkeeper.dependencies import get_report_service
from stockkeeper.schemas.movement import ActivityPage
from stockkeeper.services.report_service import ReportService

router = APIRouter(prefix="/activity", tags=["Activity"])


@router.get("", response_model=ActivityPage)
def recent_activity(
    limit: Optional[int] = Query(None, ge=1, le=500),
    reports: ReportService = Depends(get_report_service),
):
    entries, total = reports.activity_page(limit or get_settings().ACTIVITY_PAGE_SIZE)
    return {"total": total, "results": entries}


__all__ = ["router"]
