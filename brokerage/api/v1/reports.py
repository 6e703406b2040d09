"""Commission reporting endpoints for API v1."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from brokerage.api.v1._errors import map_domain_error
from brokerage.core.dependencies import get_db_session
from brokerage.core.exceptions import BrokerageException
from brokerage.database.models import utcnow
from brokerage.schemas.settings import CommissionReportResponse
from brokerage.services.report_service import ReportService

router = APIRouter(tags=["reports"])


@router.get("/reports/commissions", response_model=CommissionReportResponse)
def commission_report(
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    db: Session = Depends(get_db_session),
) -> CommissionReportResponse:
    today = utcnow().date()
    end = end or today
    start = start or end.replace(day=1)
    try:
        summary = ReportService(db=db).commission_summary(start, end)
    except BrokerageException as exc:
        code, detail = map_domain_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc
    return CommissionReportResponse(
        start=start,
        end=end,
        deal_count=summary.deal_count,
        sales_volume=summary.sales_volume,
        broker_total=summary.broker_total,
        agent_total=summary.agent_total,
        total=summary.total,
        monthly_goal=summary.monthly_goal,
        goal_progress_percent=summary.goal_progress_percent,
    )
