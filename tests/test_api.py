"""
Tests for the FastAPI endpoints.

The lead store and classifier dependencies are overridden; no Supabase
connection is made.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_lead_store, get_owner_classifier
from api.main import app
from domain.lead_record import LeadRecord
from domain.owner_classifier import OwnerClassifier

DEALER_HISTORY = [
    {"date": "2024-03-01", "name": "Norrlands Bil AB", "owner_class": "company"},
    {"date": "2022-01-10", "name": "Anna Andersson", "owner_class": "person"},
]


@pytest.fixture
def store(make_store):
    return make_store(
        [
            LeadRecord(id="c1", reg_nr="AAA111"),
            LeadRecord(id="c2", reg_nr="BBB222"),
            LeadRecord(id="old", reg_nr="bbb222"),
        ]
    )


@pytest.fixture
def client(store):
    app.dependency_overrides[get_lead_store] = lambda: store
    app.dependency_overrides[get_owner_classifier] = lambda: OwnerClassifier()
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_analyze_dealer_vehicle_returns_lead(client) -> None:
    response = client.post(
        "/api/v1/ownership/analyze",
        json={"reg_nr": "ABC123", "history": DEALER_HISTORY},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["situation"] == "dealer"
    assert body["is_dealer_or_rental"] is True
    assert body["dealer_since"] == "2024-03-01"
    assert body["lead"]["name"] == "Anna Andersson"
    assert body["lead"]["purchase_date"] == "2022-01-10"
    assert body["lead"]["ownership_duration"] == "2 år, 1 mån"
    assert body["lead"]["chain_index"] == 1


def test_analyze_intermediary(client) -> None:
    response = client.post(
        "/api/v1/ownership/analyze",
        json={
            "reg_nr": "ABC123",
            "history": [{"date": "2023-05-01", "name": "Anna Andersson", "owner_class": "person"}],
            "seller_name": "Norrlands Bil AB",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["situation"] == "intermediary"
    assert body["seller_name"] == "Norrlands Bil AB"
    assert body["lead"] is None


def test_analyze_sold_vehicle(client) -> None:
    response = client.post(
        "/api/v1/ownership/analyze",
        json={"reg_nr": "ABC123", "history": DEALER_HISTORY, "bought_by": "Bo Berg"},
    )

    assert response.status_code == 200
    assert response.json()["situation"] == "sold"
    assert response.json()["bought_by"] == "Bo Berg"


def test_analyze_malformed_date_returns_422(client) -> None:
    response = client.post(
        "/api/v1/ownership/analyze",
        json={
            "reg_nr": "ABC123",
            "history": [{"date": "2024-03-01", "name": "Norrlands Bil AB"}, {"date": "not-a-date", "name": "Anna"}],
        },
    )

    assert response.status_code == 422
    assert "invalid date" in response.json()["detail"]


def test_check_duplicates_reports_without_deleting(client, store) -> None:
    response = client.post(
        "/api/v1/duplicates/check",
        json={"lead_ids": ["c1", "c2"], "criteria": {"match_reg_nr": True}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total_checked"] == 2
    assert body["unique_count"] == 1
    assert body["duplicate_count"] == 1
    assert body["duplicate_lead_ids"] == ["c2"]
    assert body["match_counts"] == {"reg_nr": 1}
    assert body["matches"] == [{"lead_id": "c2", "matched_against_id": "old", "match_type": "reg_nr"}]
    assert store.delete_calls == []


def test_check_duplicates_without_criteria_is_400(client, store) -> None:
    response = client.post(
        "/api/v1/duplicates/check",
        json={"lead_ids": ["c1"], "criteria": {}},
    )

    assert response.status_code == 400
    assert store.list_calls == 0


def test_check_duplicates_requires_lead_ids(client) -> None:
    response = client.post(
        "/api/v1/duplicates/check",
        json={"lead_ids": [], "criteria": {"match_reg_nr": True}},
    )

    assert response.status_code == 422


def test_delete_requires_confirmation(client, store) -> None:
    response = client.post(
        "/api/v1/duplicates/delete",
        json={"lead_ids": ["c1", "c2"], "criteria": {"match_reg_nr": True}},
    )

    assert response.status_code == 400
    assert store.delete_calls == []


def test_confirmed_delete_moves_duplicates_to_trash(client, store) -> None:
    response = client.post(
        "/api/v1/duplicates/delete",
        json={"lead_ids": ["c1", "c2"], "criteria": {"match_reg_nr": True}, "confirm": True},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["deleted"] == 1
    assert body["lead_ids"] == ["c2"]
    assert store.records["c2"].is_deleted
    assert not store.records["c1"].is_deleted


def test_failed_delete_returns_502(client, store) -> None:
    store.fail_deletes = True

    response = client.post(
        "/api/v1/duplicates/delete",
        json={"lead_ids": ["c1", "c2"], "criteria": {"match_reg_nr": True}, "confirm": True},
    )

    assert response.status_code == 502
    assert not store.records["c2"].is_deleted


def test_restore_takes_leads_out_of_trash(client, store) -> None:
    store.delete_leads(["c2"])

    response = client.post("/api/v1/duplicates/restore", json={"lead_ids": ["c2"]})

    assert response.status_code == 200
    assert response.json() == {"restored": 1}
    assert not store.records["c2"].is_deleted
