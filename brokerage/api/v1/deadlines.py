"""Deadline endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from brokerage.api.v1._errors import map_domain_error
from brokerage.core.dependencies import get_db_session
from brokerage.core.exceptions import BrokerageException
from brokerage.schemas.deadlines import (
    DeadlineCompleteRequest,
    DeadlineResponse,
    DeadlineSaveRequest,
    DeadlineScheduleRequest,
)
from brokerage.services.deadline_service import DeadlineEdit, DeadlineService

router = APIRouter(tags=["deadlines"])


def _items(rows) -> dict:
    return {"items": [DeadlineResponse.model_validate(row).model_dump(mode="json") for row in rows]}


@router.get("/deals/{deal_id}/deadlines")
def list_deadlines(deal_id: int, db: Session = Depends(get_db_session)) -> dict:
    service = DeadlineService(db=db)
    try:
        service.require_deal(deal_id)
    except BrokerageException as exc:
        code, detail = map_domain_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc
    return _items(service.list_deadlines(deal_id))


@router.post("/deals/{deal_id}/deadlines/schedule")
def schedule_deadlines(
    deal_id: int,
    payload: DeadlineScheduleRequest | None = None,
    db: Session = Depends(get_db_session),
) -> dict:
    entry = payload.contract_entry_date if payload is not None else None
    try:
        rows = DeadlineService(db=db).schedule_default_deadlines(deal_id, entry)
    except BrokerageException as exc:
        code, detail = map_domain_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc
    return _items(rows)


@router.put("/deals/{deal_id}/deadlines")
def save_deadlines(deal_id: int, payload: DeadlineSaveRequest, db: Session = Depends(get_db_session)) -> dict:
    edits = [
        DeadlineEdit(
            type=item.type,
            due_date=item.due_date,
            id=item.id,
            notes=item.notes,
            completed=item.completed,
        )
        for item in payload.items
    ]
    try:
        rows = DeadlineService(db=db).save_deadlines(deal_id, edits)
    except BrokerageException as exc:
        code, detail = map_domain_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc
    return _items(rows)


@router.post("/deadlines/{deadline_id}/complete", response_model=DeadlineResponse)
def complete_deadline(
    deadline_id: int,
    payload: DeadlineCompleteRequest,
    db: Session = Depends(get_db_session),
) -> DeadlineResponse:
    try:
        row = DeadlineService(db=db).set_deadline_completed(deadline_id, payload.completed)
    except BrokerageException as exc:
        code, detail = map_domain_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc
    return DeadlineResponse.model_validate(row)
