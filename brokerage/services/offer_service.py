"""Offer negotiation: create, accept and decline offers on a deal."""

from __future__ import annotations

import logging
from datetime import date

from brokerage.core.enums import DealStatus, NotificationType, OfferStatus
from brokerage.core.exceptions import NotFoundError, StageViolationError, ValidationError
from brokerage.database.models import Offer, utcnow
from brokerage.services.base_service import BaseService
from brokerage.services.commission import round_money, to_decimal
from brokerage.services.deal_service import DealService
from brokerage.services.effects import EffectResult, TransitionResult
from brokerage.services.identity import SYSTEM_ACTOR, Actor
from brokerage.services.offer_rules import check_offer_range, current_offer
from brokerage.utils.validators import sanitize_text

logger = logging.getLogger(__name__)

_CLOSED_STATUSES = {DealStatus.CLOSED.value, DealStatus.ARCHIVED.value}


class OfferService(BaseService):
    def __init__(self, db=None, deals: DealService | None = None) -> None:
        if db is None and deals is not None:
            db = deals.db
        super().__init__(db)
        self.deals = deals or DealService(db=self.db)

    def get_offer(self, offer_id: int) -> Offer | None:
        return self.db.query(Offer).filter(Offer.id == offer_id).first()

    def require_offer(self, offer_id: int) -> Offer:
        offer = self.get_offer(offer_id)
        if offer is None:
            raise NotFoundError(f"Offer {offer_id} not found.")
        return offer

    def list_offers(self, deal_id: int) -> list[Offer]:
        self.deals.require_deal(deal_id)
        return (
            self.db.query(Offer)
            .filter(Offer.deal_id == deal_id)
            .order_by(Offer.created_at.desc(), Offer.id.desc())
            .all()
        )

    def current_offer(self, deal_id: int) -> Offer | None:
        return current_offer(self.list_offers(deal_id))

    def create_offer(
        self,
        deal_id: int,
        amount,
        financing_type: str | None = None,
        earnest_money=None,
        close_date: date | None = None,
        notes: str | None = None,
        actor: Actor = SYSTEM_ACTOR,
    ) -> TransitionResult:
        deal = self.deals.require_deal(deal_id)
        if deal.status != DealStatus.NEGOTIATION.value:
            raise StageViolationError(
                f"Offers can only be created while the deal is in Negotiation (currently {deal.status})."
            )
        if earnest_money is not None and to_decimal(earnest_money) < 0:
            raise ValidationError("Earnest money cannot be negative.")

        now = utcnow()
        with self.atomic():
            self.deals.apply_offer(deal, amount)
            offer = Offer(
                deal_id=deal.id,
                amount=deal.offer_amount,
                status=OfferStatus.PROPOSED.value,
                financing_type=sanitize_text(financing_type, 64) or None,
                earnest_money=round_money(to_decimal(earnest_money)) if earnest_money is not None else None,
                close_date=close_date,
                notes=sanitize_text(notes, 512) or None,
                created_at=now,
                updated_at=now,
            )
            self.db.add(offer)

        logger.info(
            "offer.created",
            extra={"event": "offer.created", "deal_id": deal.id, "offer_id": offer.id, "to_status": deal.status},
        )
        note = self.deals.announce(
            deal,
            f"Offer of {offer.amount} submitted on '{deal.title}' by {actor.label}.",
            NotificationType.OFFER_CREATED,
            actor,
        )
        return TransitionResult(deal=deal, effects=[note], offer=offer)

    def accept_offer(self, offer_id: int, actor: Actor = SYSTEM_ACTOR) -> TransitionResult:
        """Accept one offer, decline its siblings and put the deal under contract.

        Acceptance itself authorizes UnderContract, so the ContractDraft-only
        rule for manual moves does not apply here. Siblings, the offer, the
        deal and its deadlines are committed as one unit.
        """
        offer = self.require_offer(offer_id)
        deal = self.deals.require_deal(offer.deal_id)
        if deal.status in _CLOSED_STATUSES:
            raise StageViolationError(f"Cannot accept offers on a {deal.status} deal.")
        if offer.status == OfferStatus.DECLINED.value:
            raise StageViolationError("Declined offers cannot be accepted.")
        list_price = deal.property.price if deal.property is not None else None
        check_offer_range(offer.amount, list_price)

        previous = deal.status
        effects: list[EffectResult] = []
        now = utcnow()
        with self.atomic():
            siblings = (
                self.db.query(Offer)
                .filter(Offer.deal_id == deal.id)
                .filter(Offer.id != offer.id)
                .filter(Offer.status != OfferStatus.DECLINED.value)
                .all()
            )
            for sibling in siblings:
                sibling.status = OfferStatus.DECLINED.value
                sibling.updated_at = now
            offer.status = OfferStatus.ACCEPTED.value
            offer.updated_at = now
            deal.offer_amount = offer.amount
            if deal.status != DealStatus.UNDER_CONTRACT.value:
                self.deals.place(deal, DealStatus.UNDER_CONTRACT.value)
            else:
                deal.last_updated = now
            effects.append(self.deals.seed_deadlines(deal))

        logger.info(
            "offer.accepted",
            extra={
                "event": "offer.accepted",
                "deal_id": deal.id,
                "offer_id": offer.id,
                "from_status": previous,
                "to_status": deal.status,
            },
        )
        effects.extend(self.deals.after_contract_entry(deal, actor))
        effects.append(
            self.deals.announce(
                deal,
                f"Offer of {offer.amount} accepted on '{deal.title}' by {actor.label}.",
                NotificationType.OFFER_ACCEPTED,
                actor,
            )
        )
        return TransitionResult(deal=deal, effects=effects, offer=offer)

    def decline_offer(self, offer_id: int, actor: Actor = SYSTEM_ACTOR) -> Offer:
        offer = self.require_offer(offer_id)
        with self.atomic():
            offer.status = OfferStatus.DECLINED.value
            offer.updated_at = utcnow()
        logger.info(
            "offer.declined",
            extra={"event": "offer.declined", "deal_id": offer.deal_id, "offer_id": offer.id},
        )
        deal = self.deals.get_deal(offer.deal_id)
        if deal is not None:
            self.deals.announce(
                deal,
                f"Offer of {offer.amount} declined on '{deal.title}' by {actor.label}.",
                NotificationType.OFFER_DECLINED,
                actor,
            )
        return offer
