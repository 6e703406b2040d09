"""Best-effort delivery of the contract packet when a deal goes under contract."""

from __future__ import annotations

import logging
from collections.abc import Callable

from brokerage.core.config import Config, get_config
from brokerage.core.enums import NotificationType
from brokerage.database.models import Deal, DealDeadline, Offer
from brokerage.services.base_service import BaseService
from brokerage.services.contact_directory import ContactDirectory
from brokerage.services.contract_packet import ContractPacket, build_contract_packet, render_contract_html
from brokerage.services.contract_pdf import render_contract_pdf
from brokerage.services.effects import EffectResult
from brokerage.services.email_sender import EmailSender
from brokerage.services.identity import SYSTEM_ACTOR, Actor, agent_recipient
from brokerage.services.notification_service import NotificationService
from brokerage.services.offer_rules import current_offer
from brokerage.services.settings_service import AgencyRates

logger = logging.getLogger(__name__)

EFFECT_NAME = "contract_packet"


class ContractDispatcher(BaseService):
    """Assembles the packet, renders the PDF and emails the client.

    Every failure is logged, reported to brokers and returned as an
    ``EffectResult``; nothing here raises into the calling transition.
    """

    def __init__(
        self,
        db=None,
        notifier: NotificationService | None = None,
        email_sender: EmailSender | None = None,
        pdf_renderer: Callable[[ContractPacket], bytes] | None = None,
        config: Config | None = None,
    ) -> None:
        super().__init__(db)
        self.config = config or get_config()
        self.notifier = notifier or NotificationService(db=self.db)
        self.email_sender = email_sender or EmailSender(self.config)
        self.pdf_renderer = pdf_renderer or render_contract_pdf
        self.contacts = ContactDirectory(db=self.db)

    def deal_link(self, deal: Deal) -> str:
        return f"{self.config.PUBLIC_BASE_URL}/deals/{deal.id}"

    def build_packet(self, deal: Deal, rates: AgencyRates) -> tuple[ContractPacket, str | None]:
        client = self.contacts.find_client(deal.client_name)
        offers = self.db.query(Offer).filter(Offer.deal_id == deal.id).all()
        deadlines = self.db.query(DealDeadline).filter(DealDeadline.deal_id == deal.id).all()
        packet = build_contract_packet(
            deal,
            client,
            current_offer(offers),
            deadlines,
            rates.broker_pct,
            rates.agent_pct,
        )
        return packet, (client.email if client is not None else None)

    def dispatch(self, deal: Deal, rates: AgencyRates, actor: Actor = SYSTEM_ACTOR) -> list[EffectResult]:
        try:
            result = self._send(deal, rates)
        except Exception as exc:
            logger.exception(
                "contract_packet.dispatch_failed",
                extra={"event": "contract_packet.dispatch_failed", "deal_id": deal.id},
            )
            result = EffectResult.failure(EFFECT_NAME, str(exc) or exc.__class__.__name__)

        if result.ok:
            note = self.notifier.notify_many(
                [self.config.BROKER_ROLE, agent_recipient(deal)],
                f"Contract packet for '{deal.title}' emailed to {deal.client_name}.",
                link_url=self.deal_link(deal),
                actor_id=actor.user_id,
                event_type=NotificationType.CONTRACT_EMAILED.value,
            )
        else:
            note = self.notifier.notify(
                self.config.BROKER_ROLE,
                f"Contract packet for '{deal.title}' was not sent: {result.detail}",
                link_url=self.deal_link(deal),
                actor_id=actor.user_id,
                event_type=NotificationType.CONTRACT_DISPATCH_FAILED.value,
            )
        return [result, note]

    def _send(self, deal: Deal, rates: AgencyRates) -> EffectResult:
        packet, to_email = self.build_packet(deal, rates)
        if not to_email:
            logger.warning(
                "contract_packet.no_client_email",
                extra={"event": "contract_packet.no_client_email", "deal_id": deal.id},
            )
            return EffectResult.failure(EFFECT_NAME, "no client email on file")

        html_body = render_contract_html(packet)
        pdf = self.pdf_renderer(packet) if self.config.CONTRACT_PDF_ENABLED else b""
        if pdf:
            sent = self.email_sender.send_email_with_attachments(
                to_email,
                packet.subject,
                html_body,
                [(f"contract-deal-{deal.id}.pdf", "application/pdf", pdf)],
            )
        else:
            sent = self.email_sender.send_email(to_email, packet.subject, html_body)

        if not sent:
            return EffectResult.failure(EFFECT_NAME, f"email to {to_email} failed")
        logger.info(
            "contract_packet.sent",
            extra={"event": "contract_packet.sent", "deal_id": deal.id, "to_email": to_email},
        )
        return EffectResult.success(EFFECT_NAME, "sent with PDF" if pdf else "sent as HTML only")
