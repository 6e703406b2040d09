"""Deadline request/response schemas for API contracts."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class DeadlineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    deal_id: int
    type: str
    due_date: date
    created_at: datetime | None = None
    completed_at: datetime | None = None
    notes: str | None = None


class DeadlineEditItem(BaseModel):
    id: int | None = Field(default=None, ge=1)
    type: str = Field(min_length=1, max_length=64)
    due_date: date
    notes: str | None = Field(default=None, max_length=512)
    completed: bool | None = None


class DeadlineSaveRequest(BaseModel):
    items: list[DeadlineEditItem] = Field(min_length=1, max_length=20)


class DeadlineCompleteRequest(BaseModel):
    completed: bool = True


class DeadlineScheduleRequest(BaseModel):
    contract_entry_date: date | None = None
