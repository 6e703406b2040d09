"""Deal pipeline endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from brokerage.api.v1._errors import map_domain_error
from brokerage.core.dependencies import get_actor, get_db_session
from brokerage.core.enums import DealStatus
from brokerage.core.exceptions import BrokerageException
from brokerage.schemas.deals import (
    BoardResponse,
    CommissionResponse,
    DealCreateRequest,
    DealMoveRequest,
    DealResponse,
    SetOfferRequest,
    TransitionResponse,
)
from brokerage.services.contract_packet import render_contract_html
from brokerage.services.deal_service import DealService
from brokerage.services.identity import Actor

router = APIRouter(tags=["deals"])


def _fail(exc: BrokerageException) -> HTTPException:
    code, detail = map_domain_error(exc)
    return HTTPException(status_code=code, detail=detail)


@router.get("/deals")
def list_deals(
    status_filter: str | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db_session),
) -> dict:
    service = DealService(db=db)
    if status_filter is None:
        board = service.board()
        return BoardResponse(
            columns={key: [DealResponse.model_validate(deal) for deal in deals] for key, deals in board.items()}
        ).model_dump(mode="json")
    if status_filter not in {item.value for item in DealStatus}:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"Unknown status: {status_filter}")
    items = service.list_by_status(status_filter)
    return {
        "items": [DealResponse.model_validate(deal).model_dump(mode="json") for deal in items],
        "total": len(items),
    }


@router.post("/deals", response_model=DealResponse, status_code=status.HTTP_201_CREATED)
def create_deal(
    payload: DealCreateRequest,
    db: Session = Depends(get_db_session),
    actor: Actor = Depends(get_actor),
) -> DealResponse:
    try:
        deal = DealService(db=db).create_deal(
            property_id=payload.property_id,
            title=payload.title,
            description=payload.description,
            agent_name=payload.agent_name,
            agent_user_id=payload.agent_user_id,
            client_name=payload.client_name,
            offer_amount=payload.offer_amount,
            actor=actor,
        )
    except BrokerageException as exc:
        raise _fail(exc) from exc
    return DealResponse.model_validate(deal)


@router.delete("/deals/archived")
def purge_archived(db: Session = Depends(get_db_session)) -> dict:
    removed = DealService(db=db).purge_archived()
    return {"status": "ok", "removed": removed}


@router.get("/deals/{deal_id}", response_model=DealResponse)
def get_deal(deal_id: int, db: Session = Depends(get_db_session)) -> DealResponse:
    try:
        deal = DealService(db=db).require_deal(deal_id)
    except BrokerageException as exc:
        raise _fail(exc) from exc
    return DealResponse.model_validate(deal)


@router.post("/deals/{deal_id}/move", response_model=TransitionResponse)
def move_deal(
    deal_id: int,
    payload: DealMoveRequest,
    db: Session = Depends(get_db_session),
    actor: Actor = Depends(get_actor),
) -> TransitionResponse:
    try:
        result = DealService(db=db).move_deal(deal_id, payload.status, actor=actor)
    except BrokerageException as exc:
        raise _fail(exc) from exc
    return TransitionResponse.model_validate(result)


@router.post("/deals/{deal_id}/offer", response_model=TransitionResponse)
def set_offer(
    deal_id: int,
    payload: SetOfferRequest,
    db: Session = Depends(get_db_session),
    actor: Actor = Depends(get_actor),
) -> TransitionResponse:
    try:
        result = DealService(db=db).set_offer(deal_id, payload.amount, actor=actor)
    except BrokerageException as exc:
        raise _fail(exc) from exc
    return TransitionResponse.model_validate(result)


@router.post("/deals/{deal_id}/close", response_model=TransitionResponse)
def close_deal(
    deal_id: int,
    db: Session = Depends(get_db_session),
    actor: Actor = Depends(get_actor),
) -> TransitionResponse:
    try:
        result = DealService(db=db).close_deal(deal_id, actor=actor)
    except BrokerageException as exc:
        raise _fail(exc) from exc
    return TransitionResponse.model_validate(result)


@router.post("/deals/{deal_id}/archive", response_model=TransitionResponse)
def archive_deal(
    deal_id: int,
    db: Session = Depends(get_db_session),
    actor: Actor = Depends(get_actor),
) -> TransitionResponse:
    try:
        result = DealService(db=db).archive_deal(deal_id, actor=actor)
    except BrokerageException as exc:
        raise _fail(exc) from exc
    return TransitionResponse.model_validate(result)


@router.post("/deals/{deal_id}/unarchive", response_model=TransitionResponse)
def unarchive_deal(
    deal_id: int,
    db: Session = Depends(get_db_session),
    actor: Actor = Depends(get_actor),
) -> TransitionResponse:
    try:
        result = DealService(db=db).unarchive_deal(deal_id, actor=actor)
    except BrokerageException as exc:
        raise _fail(exc) from exc
    return TransitionResponse.model_validate(result)


@router.get("/deals/{deal_id}/commission", response_model=CommissionResponse)
def deal_commission(deal_id: int, db: Session = Depends(get_db_session)) -> CommissionResponse:
    service = DealService(db=db)
    try:
        split = service.commission_for(deal_id)
    except BrokerageException as exc:
        raise _fail(exc) from exc
    return CommissionResponse(
        deal_id=deal_id,
        base_price=split.base_price,
        broker_pct=service.rates.broker_pct,
        agent_pct=service.rates.agent_pct,
        broker_amount=split.broker_amount,
        agent_amount=split.agent_amount,
        total=split.total,
    )


@router.get("/deals/{deal_id}/contract-packet")
def contract_packet_preview(deal_id: int, db: Session = Depends(get_db_session)) -> dict:
    service = DealService(db=db)
    try:
        deal = service.require_deal(deal_id)
    except BrokerageException as exc:
        raise _fail(exc) from exc
    packet, client_email = service.dispatcher.build_packet(deal, service.rates)
    return {
        "deal_id": deal.id,
        "subject": packet.subject,
        "client_email": client_email,
        "html": render_contract_html(packet),
    }
