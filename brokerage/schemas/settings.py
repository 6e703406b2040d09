"""Agency settings and reporting schemas."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class AgencySettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    broker_pct: Decimal
    agent_pct: Decimal
    inspection_days: int
    appraisal_days: int
    loan_commitment_days: int
    closing_days: int
    monthly_goal: Decimal
    max_active_assignments_per_agent: int
    max_declines_per_agent_per_month: int


class CommissionRatesRequest(BaseModel):
    broker_pct: Decimal = Field(ge=0, le=100)
    agent_pct: Decimal = Field(ge=0, le=100)


class DeadlineOffsetsRequest(BaseModel):
    inspection_days: int
    appraisal_days: int
    loan_commitment_days: int
    closing_days: int


class MonthlyGoalRequest(BaseModel):
    monthly_goal: Decimal


class CommissionReportResponse(BaseModel):
    start: date
    end: date
    deal_count: int
    sales_volume: Decimal
    broker_total: Decimal
    agent_total: Decimal
    total: Decimal
    monthly_goal: Decimal
    goal_progress_percent: Decimal
