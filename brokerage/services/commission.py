"""Commission math for broker and agent shares of a deal's base price."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from brokerage.database.models import Deal

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class CommissionSplit:
    base_price: Decimal
    broker_amount: Decimal
    agent_amount: Decimal

    @property
    def total(self) -> Decimal:
        return self.broker_amount + self.agent_amount


@dataclass(frozen=True)
class CommissionSummary:
    deal_count: int
    sales_volume: Decimal
    broker_total: Decimal
    agent_total: Decimal
    monthly_goal: Decimal

    @property
    def total(self) -> Decimal:
        return self.broker_total + self.agent_total

    @property
    def goal_progress_percent(self) -> Decimal:
        if self.monthly_goal <= 0:
            return ZERO
        return round_money(self.total / self.monthly_goal * 100)


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    """Round to cents with ties going away from zero."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def compute_commission(
    base_price: Decimal | int | float | str | None,
    broker_pct: Decimal | int | float | str,
    agent_pct: Decimal | int | float | str,
) -> tuple[Decimal, Decimal]:
    base = to_decimal(base_price)
    broker = round_money(base * to_decimal(broker_pct) / 100)
    agent = round_money(base * to_decimal(agent_pct) / 100)
    return broker, agent


def base_price_for(deal: Deal) -> Decimal:
    """Offer amount if recorded, else the property's list price, else zero."""
    if deal.offer_amount is not None:
        return to_decimal(deal.offer_amount)
    if deal.property is not None and deal.property.price is not None:
        return to_decimal(deal.property.price)
    return ZERO


def deal_commission(deal: Deal, broker_pct, agent_pct) -> CommissionSplit:
    base = base_price_for(deal)
    if base <= 0:
        return CommissionSplit(base_price=base, broker_amount=ZERO, agent_amount=ZERO)
    broker, agent = compute_commission(base, broker_pct, agent_pct)
    return CommissionSplit(base_price=base, broker_amount=broker, agent_amount=agent)


def summarize_commissions(
    deals: Iterable[Deal],
    broker_pct,
    agent_pct,
    monthly_goal: Decimal | int | float | str | None = None,
) -> CommissionSummary:
    count = 0
    volume = ZERO
    broker_total = ZERO
    agent_total = ZERO
    for deal in deals:
        count += 1
        split = deal_commission(deal, broker_pct, agent_pct)
        if split.base_price <= 0:
            continue
        volume += split.base_price
        broker_total += split.broker_amount
        agent_total += split.agent_amount
    return CommissionSummary(
        deal_count=count,
        sales_volume=volume,
        broker_total=broker_total,
        agent_total=agent_total,
        monthly_goal=to_decimal(monthly_goal),
    )
