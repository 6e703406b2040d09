"""Offer negotiation endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from brokerage.api.v1._errors import map_domain_error
from brokerage.core.dependencies import get_actor, get_db_session
from brokerage.core.exceptions import BrokerageException
from brokerage.schemas.deals import TransitionResponse
from brokerage.schemas.offers import OfferCreateRequest, OfferResponse
from brokerage.services.identity import Actor
from brokerage.services.offer_service import OfferService

router = APIRouter(tags=["offers"])


@router.get("/deals/{deal_id}/offers")
def list_offers(deal_id: int, db: Session = Depends(get_db_session)) -> dict:
    service = OfferService(db=db)
    try:
        offers = service.list_offers(deal_id)
    except BrokerageException as exc:
        code, detail = map_domain_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc

    current = service.current_offer(deal_id)
    return {
        "items": [OfferResponse.model_validate(offer).model_dump(mode="json") for offer in offers],
        "current_offer_id": current.id if current is not None else None,
        "total": len(offers),
    }


@router.post("/deals/{deal_id}/offers", response_model=TransitionResponse, status_code=status.HTTP_201_CREATED)
def create_offer(
    deal_id: int,
    payload: OfferCreateRequest,
    db: Session = Depends(get_db_session),
    actor: Actor = Depends(get_actor),
) -> TransitionResponse:
    try:
        result = OfferService(db=db).create_offer(
            deal_id,
            payload.amount,
            financing_type=payload.financing_type,
            earnest_money=payload.earnest_money,
            close_date=payload.close_date,
            notes=payload.notes,
            actor=actor,
        )
    except BrokerageException as exc:
        code, detail = map_domain_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc
    return TransitionResponse.model_validate(result)


@router.post("/offers/{offer_id}/accept", response_model=TransitionResponse)
def accept_offer(
    offer_id: int,
    db: Session = Depends(get_db_session),
    actor: Actor = Depends(get_actor),
) -> TransitionResponse:
    try:
        result = OfferService(db=db).accept_offer(offer_id, actor=actor)
    except BrokerageException as exc:
        code, detail = map_domain_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc
    return TransitionResponse.model_validate(result)


@router.post("/offers/{offer_id}/decline", response_model=OfferResponse)
def decline_offer(
    offer_id: int,
    db: Session = Depends(get_db_session),
    actor: Actor = Depends(get_actor),
) -> OfferResponse:
    try:
        offer = OfferService(db=db).decline_offer(offer_id, actor=actor)
    except BrokerageException as exc:
        code, detail = map_domain_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc
    return OfferResponse.model_validate(offer)
