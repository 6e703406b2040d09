"""Agency settings endpoints for API v1."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from brokerage.api.v1._errors import map_domain_error
from brokerage.core.dependencies import get_db_session
from brokerage.core.exceptions import BrokerageException
from brokerage.schemas.settings import (
    AgencySettingsResponse,
    CommissionRatesRequest,
    DeadlineOffsetsRequest,
    MonthlyGoalRequest,
)
from brokerage.services.settings_service import AgencyRates, AgencySettingsService

router = APIRouter(tags=["settings"])


def _response(rates: AgencyRates) -> AgencySettingsResponse:
    return AgencySettingsResponse(**asdict(rates))


@router.get("/settings", response_model=AgencySettingsResponse)
def get_settings(db: Session = Depends(get_db_session)) -> AgencySettingsResponse:
    return _response(AgencySettingsService(db=db).get_rates())


@router.put("/settings/commission", response_model=AgencySettingsResponse)
def save_commission(payload: CommissionRatesRequest, db: Session = Depends(get_db_session)) -> AgencySettingsResponse:
    try:
        rates = AgencySettingsService(db=db).save_commission_rates(payload.broker_pct, payload.agent_pct)
    except BrokerageException as exc:
        code, detail = map_domain_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc
    return _response(rates)


@router.put("/settings/deadlines", response_model=AgencySettingsResponse)
def save_deadline_offsets(
    payload: DeadlineOffsetsRequest,
    db: Session = Depends(get_db_session),
) -> AgencySettingsResponse:
    rates = AgencySettingsService(db=db).save_deadline_offsets(
        payload.inspection_days,
        payload.appraisal_days,
        payload.loan_commitment_days,
        payload.closing_days,
    )
    return _response(rates)


@router.put("/settings/goal", response_model=AgencySettingsResponse)
def save_monthly_goal(payload: MonthlyGoalRequest, db: Session = Depends(get_db_session)) -> AgencySettingsResponse:
    return _response(AgencySettingsService(db=db).save_monthly_goal(payload.monthly_goal))
