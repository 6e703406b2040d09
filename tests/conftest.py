from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from brokerage.core.enums import DealStatus, OfferStatus
from brokerage.database.models import Base, Contact, Deal, Offer, Property, utcnow


@dataclass
class FakeEmailSender:
    succeed: bool = True
    sent: list[dict] = field(default_factory=list)

    def send_email(self, to_email, subject, html_body):
        self.sent.append({"to": to_email, "subject": subject, "html": html_body, "attachments": []})
        return self.succeed

    def send_email_with_attachments(self, to_email, subject, html_body, attachments):
        self.sent.append({"to": to_email, "subject": subject, "html": html_body, "attachments": list(attachments)})
        return self.succeed


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def fake_email():
    return FakeEmailSender()

class Seeder:
    """Commits fixture rows directly, bypassing service validation."""

    def __init__(self, session) -> None:
        self.session = session

    def _save(self, row):
        self.session.add(row)
        self.session.commit()
        return row

    def property(self, price=Decimal("500000"), title="12 Oak Lane") -> Property:
        return self._save(Property(title=title, address="12 Oak Lane, Springfield", price=price))

    def client(self, name="Dana Buyer", email="dana@example.com") -> Contact:
        return self._save(Contact(name=name, email=email, phone="555-0100", type="Client"))

    def deal(
        self,
        prop: Property,
        status: DealStatus = DealStatus.NEW,
        client_name="Dana Buyer",
        agent_name="Alex Agent",
        agent_user_id=None,
        offer_amount=None,
        display_order=1,
    ) -> Deal:
        now = utcnow()
        return self._save(
            Deal(
                property_id=prop.id,
                title=f"Deal for {prop.title}",
                status=status.value,
                client_name=client_name,
                agent_name=agent_name,
                agent_user_id=agent_user_id,
                offer_amount=offer_amount,
                display_order=display_order,
                created_at=now,
                last_updated=now,
            )
        )

    def offer(self, deal: Deal, amount, status: OfferStatus = OfferStatus.PROPOSED, created_at=None) -> Offer:
        stamp = created_at or utcnow()
        return self._save(
            Offer(deal_id=deal.id, amount=Decimal(str(amount)), status=status.value, created_at=stamp, updated_at=stamp)
        )


@pytest.fixture
def seed(session):
    return Seeder(session)


@pytest.fixture
def deadline_inserts_fail(session):
    """Make every deal_deadlines INSERT fail at the store."""
    session.execute(
        text(
            "CREATE TRIGGER deadline_store_down BEFORE INSERT ON deal_deadlines "
            "BEGIN SELECT RAISE(ABORT, 'deadline store down'); END"
        )
    )
    session.commit()
