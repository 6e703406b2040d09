"""Deal pipeline: creation, board queries and status transitions.

All status changes go through this service. Each transition validates first,
then mutates inside a single ``atomic()`` unit, and only after the commit runs
the best-effort work (contract packet, notifications). Best-effort outcomes are
returned on the ``TransitionResult`` rather than raised.
"""

from __future__ import annotations

import logging

from sqlalchemy import func

from brokerage.core.config import Config, get_config
from brokerage.core.enums import DealStatus, NotificationType
from brokerage.core.exceptions import NotFoundError, StageViolationError, ValidationError
from brokerage.database.models import Deal, Property, utcnow
from brokerage.orchestration.state_machine import DEAL_MOVES
from brokerage.services.base_service import BaseService
from brokerage.services.commission import CommissionSplit, deal_commission
from brokerage.services.contract_dispatch import ContractDispatcher
from brokerage.services.deadline_service import DeadlineService
from brokerage.services.effects import EffectResult, TransitionResult
from brokerage.services.identity import SYSTEM_ACTOR, Actor, agent_matches, agent_recipient
from brokerage.services.notification_service import NotificationService
from brokerage.services.offer_rules import check_offer_range
from brokerage.services.settings_service import AgencyRates, AgencySettingsService
from brokerage.utils.validators import sanitize_text

logger = logging.getLogger(__name__)


class DealService(BaseService):
    """Service for deal CRUD and stage transitions."""

    def __init__(
        self,
        db=None,
        rates: AgencyRates | None = None,
        notifier: NotificationService | None = None,
        dispatcher: ContractDispatcher | None = None,
        config: Config | None = None,
    ) -> None:
        super().__init__(db)
        self.config = config or get_config()
        self._rates = rates
        self.notifier = notifier or NotificationService(db=self.db)
        self.dispatcher = dispatcher or ContractDispatcher(db=self.db, notifier=self.notifier, config=self.config)
        self.deadlines = DeadlineService(db=self.db, rates=rates)

    @property
    def rates(self) -> AgencyRates:
        if self._rates is None:
            self._rates = AgencySettingsService(db=self.db).get_rates()
        return self._rates

    # -- queries ---------------------------------------------------------

    def get_deal(self, deal_id: int) -> Deal | None:
        return self.db.query(Deal).filter(Deal.id == deal_id).first()

    def require_deal(self, deal_id: int) -> Deal:
        deal = self.get_deal(deal_id)
        if deal is None:
            raise NotFoundError(f"Deal {deal_id} not found.")
        return deal

    def list_by_status(self, status: str) -> list[Deal]:
        return (
            self.db.query(Deal)
            .filter(Deal.status == status)
            .order_by(Deal.display_order, Deal.created_at)
            .all()
        )

    def board(self) -> dict[str, list[Deal]]:
        columns: dict[str, list[Deal]] = {status.value: [] for status in DealStatus}
        deals = self.db.query(Deal).order_by(Deal.display_order, Deal.created_at).all()
        for deal in deals:
            columns.setdefault(deal.status, []).append(deal)
        return columns

    def commission_for(self, deal_id: int) -> CommissionSplit:
        deal = self.require_deal(deal_id)
        return deal_commission(deal, self.rates.broker_pct, self.rates.agent_pct)

    # -- creation --------------------------------------------------------

    def create_deal(
        self,
        property_id: int,
        title: str,
        description: str | None = None,
        agent_name: str | None = None,
        agent_user_id: str | None = None,
        client_name: str | None = None,
        offer_amount=None,
        actor: Actor = SYSTEM_ACTOR,
    ) -> Deal:
        clean_title = sanitize_text(title, 255)
        if not clean_title:
            raise ValidationError("Deal title is required.")
        prop = self.db.query(Property).filter(Property.id == property_id).first()
        if prop is None:
            raise NotFoundError(f"Property {property_id} not found.")
        if offer_amount is not None:
            offer_amount = check_offer_range(offer_amount, prop.price)

        now = utcnow()
        with self.atomic():
            deal = Deal(
                property_id=property_id,
                title=clean_title,
                description=sanitize_text(description) or None,
                status=DealStatus.NEW.value,
                agent_name=sanitize_text(agent_name, 255) or None,
                agent_user_id=agent_user_id,
                client_name=sanitize_text(client_name, 255) or None,
                offer_amount=offer_amount,
                display_order=self._next_display_order(DealStatus.NEW.value),
                created_at=now,
                last_updated=now,
            )
            self.db.add(deal)

        logger.info("deal.created", extra={"event": "deal.created", "deal_id": deal.id})
        self.announce(deal, f"New deal '{deal.title}' created by {actor.label}.", NotificationType.DEAL_CREATED, actor)
        return deal

    # -- transitions -----------------------------------------------------

    def _next_display_order(self, status: str) -> int:
        current = self.db.query(func.max(Deal.display_order)).filter(Deal.status == status).scalar()
        return (current or 0) + 1

    def place(self, deal: Deal, status: str) -> None:
        """Put the deal at the end of the destination column."""
        deal.display_order = self._next_display_order(status)
        deal.status = status
        deal.last_updated = utcnow()

    def _mark_closed(self, deal: Deal, actor: Actor) -> None:
        deal.closed_at = utcnow()
        deal.closed_by_user_id = actor.user_id

    def seed_deadlines(self, deal: Deal) -> EffectResult:
        """Insert default deadlines under a savepoint of the caller's unit; never raises.

        A failure rolls back only the deadline rows, so the transition still commits.
        """
        try:
            with self.db.begin_nested():
                created = self.deadlines.stage_default_deadlines(
                    deal.id, utcnow().date(), self.rates.deadline_offsets()
                )
                self.db.flush()
        except Exception as exc:
            logger.exception(
                "deadlines.schedule_failed",
                extra={"event": "deadlines.schedule_failed", "deal_id": deal.id},
            )
            return EffectResult.failure("deadlines", str(exc) or exc.__class__.__name__)
        if not created:
            return EffectResult.success("deadlines", "already scheduled")
        return EffectResult.success("deadlines", f"{len(created)} scheduled")

    def after_contract_entry(self, deal: Deal, actor: Actor) -> list[EffectResult]:
        return self.dispatcher.dispatch(deal, self.rates, actor)

    def move_deal(self, deal_id: int, new_status: str, actor: Actor = SYSTEM_ACTOR) -> TransitionResult:
        deal = self.require_deal(deal_id)
        previous = deal.status
        DEAL_MOVES.assert_transition(previous, new_status)

        effects: list[EffectResult] = []
        with self.atomic():
            self.place(deal, new_status)
            if new_status == DealStatus.CLOSED.value and deal.closed_at is None:
                self._mark_closed(deal, actor)
            if new_status == DealStatus.UNDER_CONTRACT.value:
                effects.append(self.seed_deadlines(deal))

        logger.info(
            "deal.moved",
            extra={"event": "deal.moved", "deal_id": deal.id, "from_status": previous, "to_status": new_status},
        )
        if new_status == DealStatus.UNDER_CONTRACT.value:
            effects.extend(self.after_contract_entry(deal, actor))
        effects.append(
            self.announce(
                deal,
                f"Deal '{deal.title}' moved from {previous} to {new_status} by {actor.label}.",
                NotificationType.DEAL_MOVED,
                actor,
            )
        )
        return TransitionResult(deal=deal, effects=effects)

    def apply_offer(self, deal: Deal, amount) -> None:
        """Record the offer amount and move to ContractDraft; caller commits."""
        if deal.status != DealStatus.NEGOTIATION.value:
            raise StageViolationError(
                f"Offers can only be set while the deal is in Negotiation (currently {deal.status})."
            )
        list_price = deal.property.price if deal.property is not None else None
        deal.offer_amount = check_offer_range(amount, list_price)
        self.place(deal, DealStatus.CONTRACT_DRAFT.value)

    def set_offer(self, deal_id: int, amount, actor: Actor = SYSTEM_ACTOR) -> TransitionResult:
        deal = self.require_deal(deal_id)
        with self.atomic():
            self.apply_offer(deal, amount)
        logger.info(
            "deal.offer_set",
            extra={"event": "deal.offer_set", "deal_id": deal.id, "to_status": deal.status},
        )
        note = self.announce(
            deal,
            f"Offer of {deal.offer_amount} recorded on '{deal.title}'.",
            NotificationType.OFFER_CREATED,
            actor,
        )
        return TransitionResult(deal=deal, effects=[note])

    def close_deal(self, deal_id: int, actor: Actor = SYSTEM_ACTOR) -> TransitionResult:
        deal = self.require_deal(deal_id)
        previous = deal.status
        with self.atomic():
            self.place(deal, DealStatus.CLOSED.value)
            self._mark_closed(deal, actor)
        logger.info(
            "deal.closed",
            extra={"event": "deal.closed", "deal_id": deal.id, "from_status": previous},
        )
        note = self.announce(deal, f"Deal '{deal.title}' closed by {actor.label}.", NotificationType.DEAL_CLOSED, actor)
        return TransitionResult(deal=deal, effects=[note])

    def archive_deal(self, deal_id: int, actor: Actor = SYSTEM_ACTOR) -> TransitionResult:
        deal = self.require_deal(deal_id)
        previous = deal.status
        with self.atomic():
            self.place(deal, DealStatus.ARCHIVED.value)
        logger.info(
            "deal.archived",
            extra={"event": "deal.archived", "deal_id": deal.id, "from_status": previous},
        )
        return TransitionResult(deal=deal)

    def unarchive_deal(self, deal_id: int, actor: Actor = SYSTEM_ACTOR) -> TransitionResult:
        deal = self.require_deal(deal_id)
        with self.atomic():
            self.place(deal, DealStatus.CLOSED.value)
            if deal.closed_at is None:
                self._mark_closed(deal, actor)
        logger.info("deal.unarchived", extra={"event": "deal.unarchived", "deal_id": deal.id})
        return TransitionResult(deal=deal)

    def purge_archived(self) -> int:
        """Hard-delete archived deals together with their offers and deadlines."""
        with self.atomic():
            archived = self.db.query(Deal).filter(Deal.status == DealStatus.ARCHIVED.value).all()
            for deal in archived:
                self.db.delete(deal)
        logger.info("deals.purged", extra={"event": "deals.purged", "removed": len(archived)})
        return len(archived)

    # -- notifications ---------------------------------------------------

    def announce(self, deal: Deal, message: str, event_type: NotificationType, actor: Actor) -> EffectResult:
        recipients = [self.config.BROKER_ROLE]
        agent = agent_recipient(deal)
        if agent and not agent_matches(deal, actor):
            recipients.append(agent)
        return self.notifier.notify_many(
            recipients,
            message,
            link_url=self.dispatcher.deal_link(deal),
            actor_id=actor.user_id,
            event_type=event_type.value,
        )
