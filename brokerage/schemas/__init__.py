"""Pydantic schema package for API contracts."""

from brokerage.schemas.common import EffectResponse
from brokerage.schemas.deadlines import (
    DeadlineCompleteRequest,
    DeadlineEditItem,
    DeadlineResponse,
    DeadlineSaveRequest,
    DeadlineScheduleRequest,
)
from brokerage.schemas.deals import (
    BoardResponse,
    CommissionResponse,
    DealCreateRequest,
    DealMoveRequest,
    DealResponse,
    SetOfferRequest,
    TransitionResponse,
)
from brokerage.schemas.offers import OfferCreateRequest, OfferResponse
from brokerage.schemas.settings import (
    AgencySettingsResponse,
    CommissionRatesRequest,
    CommissionReportResponse,
    DeadlineOffsetsRequest,
    MonthlyGoalRequest,
)

__all__ = [
    "AgencySettingsResponse",
    "BoardResponse",
    "CommissionRatesRequest",
    "CommissionReportResponse",
    "CommissionResponse",
    "DeadlineCompleteRequest",
    "DeadlineEditItem",
    "DeadlineOffsetsRequest",
    "DeadlineResponse",
    "DeadlineSaveRequest",
    "DeadlineScheduleRequest",
    "DealCreateRequest",
    "DealMoveRequest",
    "DealResponse",
    "EffectResponse",
    "MonthlyGoalRequest",
    "OfferCreateRequest",
    "OfferResponse",
    "SetOfferRequest",
    "TransitionResponse",
]
