from __future__ import annotations

from decimal import Decimal

from brokerage.database.models import Deal, Property
from brokerage.services.commission import (
    compute_commission,
    deal_commission,
    round_money,
    summarize_commissions,
)


def test_compute_commission_on_one_million():
    assert compute_commission(1000000, 10, 5) == (Decimal("100000.00"), Decimal("50000.00"))


def test_round_money_sends_ties_away_from_zero():
    assert round_money(Decimal("50.025")) == Decimal("50.03")
    assert round_money(Decimal("-50.025")) == Decimal("-50.03")
    assert round_money(Decimal("50.024")) == Decimal("50.02")


def test_compute_commission_rounds_each_share():
    broker, agent = compute_commission(Decimal("100.05"), 50, Decimal("2.5"))
    assert broker == Decimal("50.03")
    assert agent == Decimal("2.50")


def test_deal_commission_prefers_offer_amount_over_list_price():
    deal = Deal(offer_amount=Decimal("480000"))
    deal.property = Property(title="Lot", price=Decimal("500000"))
    split = deal_commission(deal, 10, 5)
    assert split.base_price == Decimal("480000")
    assert split.broker_amount == Decimal("48000.00")
    assert split.agent_amount == Decimal("24000.00")
    assert split.total == Decimal("72000.00")


def test_deal_commission_falls_back_to_list_price():
    deal = Deal(offer_amount=None)
    deal.property = Property(title="Lot", price=Decimal("300000"))
    assert deal_commission(deal, 10, 5).broker_amount == Decimal("30000.00")


def test_deal_commission_is_zero_without_a_price():
    split = deal_commission(Deal(offer_amount=None), 10, 5)
    assert split.broker_amount == Decimal("0.00")
    assert split.agent_amount == Decimal("0.00")


def test_summarize_commissions_tracks_goal_progress():
    deals = [Deal(offer_amount=Decimal("500000")), Deal(offer_amount=Decimal("250000")), Deal(offer_amount=None)]
    summary = summarize_commissions(deals, 10, 5, monthly_goal=Decimal("225000"))
    assert summary.deal_count == 3
    assert summary.sales_volume == Decimal("750000")
    assert summary.broker_total == Decimal("75000.00")
    assert summary.agent_total == Decimal("37500.00")
    assert summary.total == Decimal("112500.00")
    assert summary.goal_progress_percent == Decimal("50.00")


def test_goal_progress_is_zero_without_goal():
    summary = summarize_commissions([Deal(offer_amount=Decimal("1000"))], 10, 5)
    assert summary.goal_progress_percent == Decimal("0.00")
