from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from brokerage.core.enums import DealStatus, OfferStatus
from brokerage.core.exceptions import (
    NotFoundError,
    OfferRangeViolationError,
    StageViolationError,
    ValidationError,
)
from brokerage.database.models import Deal, DealDeadline, Offer, utcnow
from brokerage.services.contract_dispatch import ContractDispatcher
from brokerage.services.deal_service import DealService
from brokerage.services.notification_service import NotificationService
from brokerage.services.offer_service import OfferService


def _offers(session, email_sender) -> OfferService:
    notifier = NotificationService(db=session)
    dispatcher = ContractDispatcher(
        db=session,
        notifier=notifier,
        email_sender=email_sender,
        pdf_renderer=lambda packet: b"",
    )
    return OfferService(deals=DealService(db=session, notifier=notifier, dispatcher=dispatcher))


def test_create_offer_enforces_list_price_band(session, seed, fake_email):
    prop = seed.property(price=Decimal("500000"))
    deal = seed.deal(prop, DealStatus.NEGOTIATION)
    service = _offers(session, fake_email)

    with pytest.raises(OfferRangeViolationError) as exc:
        service.create_offer(deal.id, Decimal("440000"))
    assert exc.value.minimum == Decimal("450000.00")
    assert exc.value.maximum == Decimal("500000")
    assert session.query(Offer).count() == 0

    result = service.create_offer(
        deal.id,
        Decimal("460000"),
        financing_type="Conventional",
        earnest_money=Decimal("10000"),
        close_date=date(2026, 12, 1),
    )

    assert result.offer.status == OfferStatus.PROPOSED.value
    assert result.offer.amount == Decimal("460000.00")
    assert result.offer.earnest_money == Decimal("10000.00")
    assert result.deal.status == DealStatus.CONTRACT_DRAFT.value
    assert result.deal.offer_amount == Decimal("460000.00")


def test_create_offer_accepts_both_band_edges(session, seed, fake_email):
    prop = seed.property(price=Decimal("500000"))
    low = seed.deal(prop, DealStatus.NEGOTIATION)
    high = seed.deal(prop, DealStatus.NEGOTIATION)
    service = _offers(session, fake_email)

    assert service.create_offer(low.id, Decimal("450000")).offer.amount == Decimal("450000.00")
    assert service.create_offer(high.id, Decimal("500000")).offer.amount == Decimal("500000.00")


def test_create_offer_skips_band_when_list_price_unknown(session, seed, fake_email):
    prop = seed.property(price=None)
    deal = seed.deal(prop, DealStatus.NEGOTIATION)
    result = _offers(session, fake_email).create_offer(deal.id, Decimal("12345"))
    assert result.offer.amount == Decimal("12345.00")


def test_create_offer_requires_negotiation(session, seed, fake_email):
    prop = seed.property()
    deal = seed.deal(prop, DealStatus.NEGOTIATION)
    service = _offers(session, fake_email)
    service.create_offer(deal.id, Decimal("480000"))

    with pytest.raises(StageViolationError):
        service.create_offer(deal.id, Decimal("490000"))
    assert session.query(Offer).count() == 1


def test_create_offer_rejects_negative_earnest_money(session, seed, fake_email):
    prop = seed.property()
    deal = seed.deal(prop, DealStatus.NEGOTIATION)
    with pytest.raises(ValidationError):
        _offers(session, fake_email).create_offer(deal.id, Decimal("480000"), earnest_money=Decimal("-1"))


def test_accepting_second_offer_declines_first(session, seed, fake_email):
    prop = seed.property(price=Decimal("500000"))
    seed.client()
    deal = seed.deal(prop, DealStatus.CONTRACT_DRAFT, offer_amount=Decimal("460000"))
    earlier = utcnow() - timedelta(hours=1)
    first = seed.offer(deal, 460000, created_at=earlier)
    second = seed.offer(deal, 475000)
    service = _offers(session, fake_email)

    result = service.accept_offer(second.id)

    session.expire_all()
    assert session.get(Offer, first.id).status == OfferStatus.DECLINED.value
    assert session.get(Offer, second.id).status == OfferStatus.ACCEPTED.value
    reloaded = session.get(Deal, deal.id)
    assert reloaded.status == DealStatus.UNDER_CONTRACT.value
    assert reloaded.offer_amount == Decimal("475000.00")
    assert session.query(DealDeadline).filter(DealDeadline.deal_id == deal.id).count() == 4
    assert result.effect("contract_packet").detail == "sent as HTML only"
    assert session.query(Offer).filter(Offer.status == OfferStatus.ACCEPTED.value).count() == 1


def test_accept_offer_leaves_at_most_one_accepted(session, seed, fake_email):
    prop = seed.property(price=Decimal("500000"))
    deal = seed.deal(prop, DealStatus.UNDER_CONTRACT)
    previously = seed.offer(deal, 470000, status=OfferStatus.ACCEPTED)
    challenger = seed.offer(deal, 490000)
    declined = seed.offer(deal, 455000, status=OfferStatus.DECLINED)
    service = _offers(session, fake_email)

    service.accept_offer(challenger.id)

    statuses = {o.id: o.status for o in service.list_offers(deal.id)}
    assert statuses == {
        previously.id: OfferStatus.DECLINED.value,
        challenger.id: OfferStatus.ACCEPTED.value,
        declined.id: OfferStatus.DECLINED.value,
    }
    assert service.current_offer(deal.id).id == challenger.id


def test_accept_offer_rechecks_range_and_changes_nothing(session, seed, fake_email):
    prop = seed.property(price=Decimal("500000"))
    deal = seed.deal(prop, DealStatus.CONTRACT_DRAFT)
    bad = seed.offer(deal, 300000)
    service = _offers(session, fake_email)

    with pytest.raises(OfferRangeViolationError):
        service.accept_offer(bad.id)

    session.expire_all()
    assert session.get(Offer, bad.id).status == OfferStatus.PROPOSED.value
    assert session.get(Deal, deal.id).status == DealStatus.CONTRACT_DRAFT.value
    assert session.query(DealDeadline).count() == 0


def test_accept_offer_commits_when_deadline_staging_errors(session, seed, fake_email, monkeypatch):
    prop = seed.property(price=Decimal("500000"))
    deal = seed.deal(prop, DealStatus.CONTRACT_DRAFT)
    first = seed.offer(deal, 460000)
    second = seed.offer(deal, 480000)
    service = _offers(session, fake_email)

    def _boom(*args, **kwargs):
        raise RuntimeError("offsets unavailable")

    monkeypatch.setattr(service.deals.deadlines, "stage_default_deadlines", _boom)

    result = service.accept_offer(second.id)

    assert result.effect("deadlines").ok is False
    session.expire_all()
    assert session.get(Offer, first.id).status == OfferStatus.DECLINED.value
    assert session.get(Offer, second.id).status == OfferStatus.ACCEPTED.value
    assert session.get(Deal, deal.id).status == DealStatus.UNDER_CONTRACT.value


def test_accept_offer_commits_when_deadline_inserts_fail(session, seed, fake_email, deadline_inserts_fail):
    prop = seed.property(price=Decimal("500000"))
    deal = seed.deal(prop, DealStatus.CONTRACT_DRAFT)
    first = seed.offer(deal, 460000)
    second = seed.offer(deal, 480000)
    service = _offers(session, fake_email)

    result = service.accept_offer(second.id)

    deadlines = result.effect("deadlines")
    assert deadlines.ok is False
    assert "deadline store down" in deadlines.detail
    session.expire_all()
    assert session.get(Offer, first.id).status == OfferStatus.DECLINED.value
    assert session.get(Offer, second.id).status == OfferStatus.ACCEPTED.value
    stored = session.get(Deal, deal.id)
    assert stored.status == DealStatus.UNDER_CONTRACT.value
    assert stored.offer_amount == Decimal("480000.00")
    assert session.query(DealDeadline).filter(DealDeadline.deal_id == deal.id).count() == 0


def test_accept_offer_rejects_declined_and_closed(session, seed, fake_email):
    prop = seed.property()
    open_deal = seed.deal(prop, DealStatus.CONTRACT_DRAFT)
    closed_deal = seed.deal(prop, DealStatus.CLOSED)
    declined = seed.offer(open_deal, 480000, status=OfferStatus.DECLINED)
    late = seed.offer(closed_deal, 480000)
    service = _offers(session, fake_email)

    with pytest.raises(StageViolationError):
        service.accept_offer(declined.id)
    with pytest.raises(StageViolationError):
        service.accept_offer(late.id)
    with pytest.raises(NotFoundError):
        service.accept_offer(9999)


def test_decline_offer_has_no_deal_side_effect(session, seed, fake_email):
    prop = seed.property()
    deal = seed.deal(prop, DealStatus.CONTRACT_DRAFT, offer_amount=Decimal("480000"))
    offer = seed.offer(deal, 480000)
    service = _offers(session, fake_email)

    declined = service.decline_offer(offer.id)

    assert declined.status == OfferStatus.DECLINED.value
    session.expire_all()
    reloaded = session.get(Deal, deal.id)
    assert reloaded.status == DealStatus.CONTRACT_DRAFT.value
    assert reloaded.offer_amount == Decimal("480000.00")


def test_current_offer_prefers_accepted_then_newest(session, seed, fake_email):
    prop = seed.property()
    deal = seed.deal(prop, DealStatus.CONTRACT_DRAFT)
    service = _offers(session, fake_email)
    assert service.current_offer(deal.id) is None

    older = seed.offer(deal, 470000, created_at=utcnow() - timedelta(days=1))
    newer = seed.offer(deal, 480000)
    assert service.current_offer(deal.id).id == newer.id

    older.status = OfferStatus.ACCEPTED.value
    session.commit()
    assert service.current_offer(deal.id).id == older.id
