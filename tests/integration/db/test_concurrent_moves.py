from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from brokerage.core.enums import DealStatus
from brokerage.core.exceptions import ConcurrencyConflictError
from brokerage.database.models import Base, Deal, Property, utcnow
from brokerage.services.deal_service import DealService
from brokerage.services.settings_service import AgencyRates


def _build_factory(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'concurrency.db'}")
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def test_stale_move_is_rejected_instead_of_overwriting(tmp_path):
    factory = _build_factory(tmp_path)
    setup = factory()
    prop = Property(title="Elm", address="1 Elm St")
    setup.add(prop)
    setup.flush()
    now = utcnow()
    deal = Deal(property_id=prop.id, title="Elm deal", status="New", display_order=1, created_at=now, last_updated=now)
    setup.add(deal)
    setup.commit()
    deal_id = deal.id
    setup.close()

    first, second = factory(), factory()
    try:
        slow = DealService(db=first, rates=AgencyRates())
        fast = DealService(db=second, rates=AgencyRates())
        # held so the identity map keeps the version-1 row
        stale = slow.require_deal(deal_id)

        fast.move_deal(deal_id, DealStatus.NEGOTIATION.value)
        with pytest.raises(ConcurrencyConflictError):
            slow.move_deal(deal_id, DealStatus.OFFER_MADE.value)
    finally:
        first.close()
        second.close()

    check = factory()
    try:
        stored = check.get(Deal, deal_id)
        assert stored.status == DealStatus.NEGOTIATION.value
        assert stored.version == 2
    finally:
        check.close()
