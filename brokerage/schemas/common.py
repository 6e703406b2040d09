"""Common schema module."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class EffectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    ok: bool
    detail: str | None = None
