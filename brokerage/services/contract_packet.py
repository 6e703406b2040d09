"""Contract packet assembly.

Pure transformation from deal, offer, deadline and commission data into a
document payload plus an HTML rendering used as the email body. No I/O
happens here; PDF rendering and delivery live in ``contract_pdf`` and
``contract_dispatch``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from brokerage.core.enums import CANONICAL_DEADLINE_TYPES
from brokerage.database.models import Contact, Deal, DealDeadline, Offer, utcnow
from brokerage.services.commission import CommissionSplit, deal_commission, to_decimal
from brokerage.utils.validators import escape_html

BOILERPLATE_CLAUSES = (
    "This summary is provided for information only and does not replace the executed purchase agreement.",
    "All contingency deadlines are counted in calendar days from the date the deal went under contract.",
    "Earnest money is held in escrow and applied to the purchase price at closing.",
    "Commission disclosure reflects agency rates in effect when this packet was generated.",
)


@dataclass(frozen=True)
class ContractParty:
    name: str
    email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class ContractPacket:
    deal_id: int
    deal_title: str
    generated_on: date
    buyer: ContractParty
    agent_name: str | None
    property_title: str
    property_address: str
    list_price: Decimal | None
    purchase_price: Decimal | None
    financing_type: str | None
    earnest_money: Decimal | None
    proposed_close_date: date | None
    deadlines: tuple[tuple[str, date | None], ...]
    commission: CommissionSplit
    broker_pct: Decimal
    agent_pct: Decimal
    clauses: tuple[str, ...] = BOILERPLATE_CLAUSES

    def deadline(self, deadline_type: str) -> date | None:
        for name, due in self.deadlines:
            if name == deadline_type:
                return due
        return None

    @property
    def subject(self) -> str:
        return f"Contract packet: {self.deal_title}"


def format_money(value: Decimal | None) -> str:
    if value is None:
        return "N/A"
    return f"${value:,.2f}"


def format_date(value: date | None) -> str:
    return value.isoformat() if value else "TBD"


def build_contract_packet(
    deal: Deal,
    client: Contact | None,
    offer: Offer | None,
    deadlines: Iterable[DealDeadline],
    broker_pct,
    agent_pct,
    today: date | None = None,
) -> ContractPacket:
    by_type: dict[str, date] = {}
    for item in deadlines:
        by_type.setdefault(item.type, item.due_date)

    buyer = ContractParty(
        name=(client.name if client is not None else deal.client_name) or "Client",
        email=client.email if client is not None else None,
        phone=client.phone if client is not None else None,
    )
    prop = deal.property
    purchase_price = offer.amount if offer is not None else deal.offer_amount

    return ContractPacket(
        deal_id=deal.id,
        deal_title=deal.title,
        generated_on=today or utcnow().date(),
        buyer=buyer,
        agent_name=deal.agent_name,
        property_title=prop.title if prop is not None else "",
        property_address=prop.address if prop is not None else "",
        list_price=to_decimal(prop.price) if prop is not None and prop.price is not None else None,
        purchase_price=to_decimal(purchase_price) if purchase_price is not None else None,
        financing_type=offer.financing_type if offer is not None else None,
        earnest_money=to_decimal(offer.earnest_money) if offer is not None and offer.earnest_money is not None else None,
        proposed_close_date=offer.close_date if offer is not None else None,
        deadlines=tuple((name, by_type.get(name)) for name in CANONICAL_DEADLINE_TYPES),
        commission=deal_commission(deal, broker_pct, agent_pct),
        broker_pct=to_decimal(broker_pct),
        agent_pct=to_decimal(agent_pct),
    )


def render_contract_html(packet: ContractPacket) -> str:
    deadline_rows = "".join(
        f"<tr><td>{escape_html(name)}</td><td>{format_date(due)}</td></tr>" for name, due in packet.deadlines
    )
    clauses = "".join(f"<li>{escape_html(clause)}</li>" for clause in packet.clauses)
    return (
        f"<h2>{escape_html(packet.subject)}</h2>"
        f"<p>Hi {escape_html(packet.buyer.name)},</p>"
        f"<p>Your purchase of <strong>{escape_html(packet.property_title)}</strong> "
        f"({escape_html(packet.property_address)}) is now under contract. "
        f"A summary of the agreed terms follows.</p>"
        "<h3>Parties</h3>"
        f"<p>Buyer: {escape_html(packet.buyer.name)}<br/>"
        f"Agent: {escape_html(packet.agent_name or 'Unassigned')}</p>"
        "<h3>Financial terms</h3>"
        "<table>"
        f"<tr><td>List price</td><td>{format_money(packet.list_price)}</td></tr>"
        f"<tr><td>Purchase price</td><td>{format_money(packet.purchase_price)}</td></tr>"
        f"<tr><td>Financing</td><td>{escape_html(packet.financing_type or 'N/A')}</td></tr>"
        f"<tr><td>Earnest money</td><td>{format_money(packet.earnest_money)}</td></tr>"
        f"<tr><td>Proposed close date</td><td>{format_date(packet.proposed_close_date)}</td></tr>"
        "</table>"
        "<h3>Key deadlines</h3>"
        f"<table>{deadline_rows}</table>"
        "<h3>Commission disclosure</h3>"
        f"<p>Broker ({packet.broker_pct}%): {format_money(packet.commission.broker_amount)}<br/>"
        f"Agent ({packet.agent_pct}%): {format_money(packet.commission.agent_amount)}</p>"
        f"<ul>{clauses}</ul>"
        f"<p>Generated {packet.generated_on.isoformat()}.</p>"
    )
