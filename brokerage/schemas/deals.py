"""Deal request/response schemas for API contracts."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from brokerage.schemas.common import EffectResponse
from brokerage.schemas.offers import OfferResponse


class DealCreateRequest(BaseModel):
    property_id: int = Field(ge=1)
    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    agent_name: str | None = Field(default=None, max_length=255)
    agent_user_id: str | None = Field(default=None, max_length=64)
    client_name: str | None = Field(default=None, max_length=255)
    offer_amount: Decimal | None = Field(default=None, gt=0)


class DealMoveRequest(BaseModel):
    status: str = Field(min_length=2, max_length=32)


class SetOfferRequest(BaseModel):
    amount: Decimal = Field(gt=0)


class DealResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    property_id: int
    status: str
    agent_name: str | None = None
    agent_user_id: str | None = None
    client_name: str | None = None
    offer_amount: Decimal | None = None
    display_order: int
    version: int
    created_at: datetime | None = None
    last_updated: datetime | None = None
    closed_at: datetime | None = None
    closed_by_user_id: str | None = None


class TransitionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    deal: DealResponse
    offer: OfferResponse | None = None
    effects: list[EffectResponse] = Field(default_factory=list)


class BoardResponse(BaseModel):
    columns: dict[str, list[DealResponse]]


class CommissionResponse(BaseModel):
    deal_id: int
    base_price: Decimal
    broker_pct: Decimal
    agent_pct: Decimal
    broker_amount: Decimal
    agent_amount: Decimal
    total: Decimal
