from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import brokerage.api.v1.health as health_module
from brokerage.core.dependencies import get_db_session
from brokerage.core.enums import DealStatus, OfferStatus
from brokerage.database.models import Notification
from brokerage.main import create_app

PREFIX = "/api/v1"
BROKER_HEADERS = {"X-Actor-Id": "u-broker", "X-Actor-Name": "Bea Broker"}


@pytest.fixture
def client(session_factory):
    app = create_app()

    def _override():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db_session] = _override
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client, monkeypatch):
    monkeypatch.setattr(health_module, "verify_database_connection", lambda: True)
    body = client.get(f"{PREFIX}/health").json()
    assert body["status"] == "ok"
    assert body["database"] == "ok"


def test_create_and_fetch_deal(client, seed):
    prop = seed.property()
    created = client.post(
        f"{PREFIX}/deals",
        json={"property_id": prop.id, "title": "Oak Lane", "agent_user_id": "u-alex", "client_name": "Dana Buyer"},
        headers=BROKER_HEADERS,
    )
    assert created.status_code == 201
    deal_id = created.json()["id"]

    fetched = client.get(f"{PREFIX}/deals/{deal_id}").json()
    assert fetched["status"] == DealStatus.NEW.value
    assert fetched["version"] == 1

    board = client.get(f"{PREFIX}/deals").json()["columns"]
    assert [d["id"] for d in board["New"]] == [deal_id]
    assert board["UnderContract"] == []


def test_unknown_deal_is_404(client):
    response = client.get(f"{PREFIX}/deals/999")
    assert response.status_code == 404


def test_illegal_move_is_409_and_deal_unchanged(client, seed):
    deal = seed.deal(seed.property(), DealStatus.NEW)
    response = client.post(f"{PREFIX}/deals/{deal.id}/move", json={"status": "UnderContract"})
    assert response.status_code == 409
    assert "Transition not allowed" in response.json()["detail"]
    assert client.get(f"{PREFIX}/deals/{deal.id}").json()["status"] == "New"


def test_full_offer_flow(client, seed):
    prop = seed.property(price=Decimal("500000"))
    seed.client()
    deal = seed.deal(prop, DealStatus.NEW)

    moved = client.post(f"{PREFIX}/deals/{deal.id}/move", json={"status": "Negotiation"}, headers=BROKER_HEADERS)
    assert moved.status_code == 200
    assert moved.json()["deal"]["status"] == "Negotiation"

    low = client.post(f"{PREFIX}/deals/{deal.id}/offers", json={"amount": "440000"})
    assert low.status_code == 422

    created = client.post(
        f"{PREFIX}/deals/{deal.id}/offers",
        json={"amount": "460000", "financing_type": "Conventional", "earnest_money": "10000"},
    )
    assert created.status_code == 201
    body = created.json()
    assert body["deal"]["status"] == "ContractDraft"
    offer_id = body["offer"]["id"]

    again = client.post(f"{PREFIX}/deals/{deal.id}/offers", json={"amount": "470000"})
    assert again.status_code == 409

    accepted = client.post(f"{PREFIX}/offers/{offer_id}/accept", headers=BROKER_HEADERS)
    assert accepted.status_code == 200
    result = accepted.json()
    assert result["deal"]["status"] == "UnderContract"
    assert Decimal(result["deal"]["offer_amount"]) == Decimal("460000")
    assert {effect["name"] for effect in result["effects"]} >= {"deadlines", "contract_packet", "notification"}

    deadlines = client.get(f"{PREFIX}/deals/{deal.id}/deadlines").json()["items"]
    assert [d["type"] for d in deadlines] == ["Inspection", "Appraisal", "LoanCommitment", "Closing"]

    offers = client.get(f"{PREFIX}/deals/{deal.id}/offers").json()
    assert offers["current_offer_id"] == offer_id
    assert offers["items"][0]["status"] == OfferStatus.ACCEPTED.value

    commission = client.get(f"{PREFIX}/deals/{deal.id}/commission").json()
    assert Decimal(commission["broker_amount"]) == Decimal("46000.00")
    assert Decimal(commission["agent_amount"]) == Decimal("23000.00")


def test_set_offer_on_wrong_stage_is_409(client, seed):
    deal = seed.deal(seed.property(), DealStatus.NEW)
    response = client.post(f"{PREFIX}/deals/{deal.id}/offer", json={"amount": "460000"})
    assert response.status_code == 409


def test_close_archive_unarchive_and_purge(client, seed):
    prop = seed.property()
    deal = seed.deal(prop, DealStatus.NEGOTIATION)
    doomed = seed.deal(prop, DealStatus.NEW)

    closed = client.post(f"{PREFIX}/deals/{deal.id}/close", headers=BROKER_HEADERS).json()
    assert closed["deal"]["status"] == "Closed"
    assert closed["deal"]["closed_by_user_id"] == "u-broker"

    client.post(f"{PREFIX}/deals/{doomed.id}/archive")
    assert client.post(f"{PREFIX}/deals/{deal.id}/archive").json()["deal"]["status"] == "Archived"
    assert client.post(f"{PREFIX}/deals/{deal.id}/unarchive").json()["deal"]["status"] == "Closed"

    purged = client.delete(f"{PREFIX}/deals/archived").json()
    assert purged["removed"] == 1
    assert client.get(f"{PREFIX}/deals/{doomed.id}").status_code == 404


def test_deadline_endpoints(client, seed):
    deal = seed.deal(seed.property(), DealStatus.UNDER_CONTRACT)

    scheduled = client.post(f"{PREFIX}/deals/{deal.id}/deadlines/schedule", json={"contract_entry_date": "2026-03-02"})
    items = scheduled.json()["items"]
    assert [d["due_date"] for d in items] == ["2026-03-09", "2026-03-16", "2026-03-23", "2026-04-01"]
    again = client.post(f"{PREFIX}/deals/{deal.id}/deadlines/schedule", json={"contract_entry_date": "2026-03-02"})
    assert len(again.json()["items"]) == 4

    done = client.post(f"{PREFIX}/deadlines/{items[0]['id']}/complete", json={"completed": True}).json()
    assert done["completed_at"] is not None

    saved = client.put(
        f"{PREFIX}/deals/{deal.id}/deadlines",
        json={"items": [{"type": "Closing", "due_date": "2026-04-15"}]},
    ).json()["items"]
    assert [d["due_date"] for d in saved if d["type"] == "Closing"] == ["2026-04-15"]
    assert len(saved) == 4


def test_settings_round_trip(client):
    assert client.get(f"{PREFIX}/settings").json()["inspection_days"] == 7

    rejected = client.put(f"{PREFIX}/settings/commission", json={"broker_pct": "70", "agent_pct": "40"})
    assert rejected.status_code == 422

    saved = client.put(f"{PREFIX}/settings/commission", json={"broker_pct": "6", "agent_pct": "3"}).json()
    assert Decimal(saved["broker_pct"]) == Decimal("6")

    offsets = client.put(
        f"{PREFIX}/settings/deadlines",
        json={"inspection_days": 0, "appraisal_days": 10, "loan_commitment_days": 20, "closing_days": 40},
    ).json()
    assert offsets["inspection_days"] == 1

    goal = client.put(f"{PREFIX}/settings/goal", json={"monthly_goal": "-10"}).json()
    assert Decimal(goal["monthly_goal"]) == Decimal("0")


def test_commission_report_rejects_inverted_range(client):
    response = client.get(f"{PREFIX}/reports/commissions", params={"start": "2026-05-02", "end": "2026-05-01"})
    assert response.status_code == 422


def test_commission_report_month(client, seed):
    deal = seed.deal(seed.property(price=Decimal("1000000")), DealStatus.NEGOTIATION)
    client.post(f"{PREFIX}/deals/{deal.id}/close")
    report = client.get(f"{PREFIX}/reports/commissions").json()
    assert report["deal_count"] == 1
    assert Decimal(report["broker_total"]) == Decimal("100000.00")
    assert Decimal(report["agent_total"]) == Decimal("50000.00")


def test_contract_packet_preview(client, seed):
    prop = seed.property(price=Decimal("500000"))
    seed.client()
    deal = seed.deal(prop, DealStatus.CONTRACT_DRAFT, offer_amount=Decimal("480000"))

    body = client.get(f"{PREFIX}/deals/{deal.id}/contract-packet").json()

    assert body["client_email"] == "dana@example.com"
    assert body["subject"] == f"Contract packet: {deal.title}"
    assert "$480,000.00" in body["html"]


def test_actor_headers_reach_notifications(client, seed, session):
    deal = seed.deal(seed.property(), DealStatus.NEW, agent_user_id="u-alex")
    client.post(
        f"{PREFIX}/deals/{deal.id}/move",
        json={"status": "Negotiation"},
        headers={"X-Actor-Id": "u-alex", "X-Actor-Name": "Alex Agent"},
    )

    rows = session.query(Notification).all()
    assert [(n.recipient, n.actor_user_id) for n in rows] == [("Broker", "u-alex")]
