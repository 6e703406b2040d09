"""Offer request/response schemas for API contracts."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class OfferCreateRequest(BaseModel):
    amount: Decimal = Field(gt=0)
    financing_type: str | None = Field(default=None, max_length=64)
    earnest_money: Decimal | None = Field(default=None, ge=0)
    close_date: date | None = None
    notes: str | None = Field(default=None, max_length=512)


class OfferResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    deal_id: int
    amount: Decimal
    status: str
    financing_type: str | None = None
    earnest_money: Decimal | None = None
    close_date: date | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
