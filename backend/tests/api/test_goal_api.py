import pytest
from fastapi.testclient import TestClient

from goalplanner.api.deps import get_event_bus, reset_caches
from goalplanner.api.main import app

client = TestClient(app)


@pytest.fixture(autouse=True)
def fresh_state(monkeypatch):
    monkeypatch.setenv("GOALPLANNER_REFERENCE_DATE", "2024-06-01")
    monkeypatch.delenv("GOALPLANNER_DEFAULT_CURRENCY", raising=False)
    reset_caches()
    yield
    reset_caches()


def goal_payload(**overrides) -> dict:
    payload = {
        "user_id": "u1",
        "description": "Reserva para viagem",
        "type": "economia",
        "target_value": "100000",
        "start_date": "2024-01-01",
        "end_date": "2025-12-31",
        "monthly_income": "5000",
        "fixed_expenses": "3000",
        "available_per_month": "2000",
        "importance": "alta",
        "priority": 1,
        "monthly_contribution": "1500",
        "num_parcela": 24,
    }
    payload.update(overrides)
    return payload


def create_goal(**overrides) -> dict:
    r = client.post("/goals", json=goal_payload(**overrides))
    assert r.status_code == 201, r.text
    return r.json()


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_create_and_get_goal():
    created = create_goal()

    assert created["id"]
    assert created["currency"] == "BRL"
    assert created["target_value"] == "100000.00"
    assert created["monthly_contribution"] == "1500.00"
    assert created["status"] == "active"
    assert created["importance"] == "alta"

    r = client.get(f"/goals/{created['id']}")
    assert r.status_code == 200
    assert r.json() == created


def test_create_uses_explicit_currency():
    created = create_goal(currency="usd")
    assert created["currency"] == "USD"


def test_create_rejects_invalid_dates():
    r = client.post("/goals", json=goal_payload(end_date="2023-12-31"))
    assert r.status_code == 422
    assert r.json()["detail"] == "End date must be after start date"


def test_create_rejects_empty_description_and_bad_priority():
    r = client.post("/goals", json=goal_payload(description="  "))
    assert r.status_code == 422
    assert r.json()["detail"] == "Goal description cannot be empty"

    r = client.post("/goals", json=goal_payload(priority=7))
    assert r.status_code == 422
    assert r.json()["detail"] == "Priority must be between 1 and 5"


def test_create_rejects_zero_target():
    r = client.post("/goals", json=goal_payload(target_value="0"))
    assert r.status_code == 422
    assert r.json()["detail"] == "Target value must be greater than zero"


def test_create_accepts_very_large_target():
    big = "1" + "0" * 27
    created = create_goal(target_value=big)
    assert created["target_value"] == big + ".00"


def test_create_rejects_malformed_amount():
    r = client.post("/goals", json=goal_payload(target_value="-10"))
    assert r.status_code == 422


def test_list_goals_with_filters():
    a = create_goal()
    b = create_goal(type="compra", priority=2)
    create_goal(user_id="u2")

    r = client.get("/goals", params={"user_id": "u1"})
    assert r.status_code == 200
    assert [g["id"] for g in r.json()] == [a["id"], b["id"]]

    r = client.get("/goals", params={"user_id": "u1", "type": "compra"})
    assert [g["id"] for g in r.json()] == [b["id"]]

    assert len(client.get("/goals").json()) == 3


def test_get_unknown_goal_is_404():
    r = client.get("/goals/nope")
    assert r.status_code == 404


def test_patch_goal():
    created = create_goal()

    r = client.patch(f"/goals/{created['id']}", json={"priority": 2, "target_value": "90000"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["priority"] == 2
    assert body["target_value"] == "90000.00"
    assert body["created_at"] == created["created_at"]

    r = client.patch(f"/goals/{created['id']}", json={"end_date": "2023-01-01"})
    assert r.status_code == 422


def test_change_status_and_delete():
    created = create_goal()

    r = client.post(f"/goals/{created['id']}/status", json={"status": "completed"})
    assert r.status_code == 200
    assert r.json()["status"] == "completed"

    r = client.get("/goals", params={"status": "active"})
    assert r.json() == []

    assert client.delete(f"/goals/{created['id']}").status_code == 204
    assert client.delete(f"/goals/{created['id']}").status_code == 404


def test_goal_progress():
    created = create_goal()

    r = client.get(f"/goals/{created['id']}/progress", params={"current": "25000"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["progress"] == 25
    assert body["current"] == "25000.00"
    assert body["remaining"] == "75000.00"
    assert body["estimated_months"] == 50
    assert body["months_until_deadline"] == 18
    assert body["optimal_monthly_contribution"] == "4167.00"
    assert body["total_contribution_needed"] == "36000.00"


def test_goal_progress_without_contribution_has_no_eta():
    created = create_goal(monthly_contribution="0")

    body = client.get(f"/goals/{created['id']}/progress").json()
    assert body["estimated_months"] is None
    assert body["progress"] == 0


def test_goal_feasibility():
    created = create_goal()

    r = client.get(f"/goals/{created['id']}/feasibility")
    assert r.status_code == 200
    body = r.json()
    assert body["is_achievable"] is True
    assert body["is_feasible"] is False
    assert body["is_valid"] is False
    assert body["feasibility_score"] == 60
    assert body["total_deficit"] == "64000.00"
    assert body["monthly_deficit"] == "0.00"
    assert len(body["errors"]) == 2
    assert body["recommendations"]


def test_goal_conflicts():
    first = create_goal(type="compra")
    second = create_goal(monthly_contribution="1000", priority=1)

    r = client.get(f"/goals/{second['id']}/conflicts")
    assert r.status_code == 200
    body = r.json()
    assert body["has_conflicts"] is True
    assert len(body["conflicts"]) == 1
    assert "2500" in body["conflicts"][0]
    assert body["priority_errors"] == ["Prioridades duplicadas encontradas: 1"]

    assert client.get(f"/goals/{first['id']}/conflicts").json()["has_conflicts"] is True


def test_recommendations():
    payload = {
        "monthly_income": "5000",
        "fixed_expenses": "3000",
        "available_per_month": "2000",
        "current_savings": "0",
        "age": 35,
    }
    r = client.post("/recommendations", json=payload)
    assert r.status_code == 200, r.text
    recs = r.json()["recommendations"]

    assert len(recs) == 5
    assert recs[0]["type"] == "emergency_fund"
    assert recs[0]["target_value"] == "18000.00"
    assert recs[0]["currency"] == "BRL"
    assert recs[0]["months"] == 9
    assert recs[0]["feasibility"]["confidence"] == 90


def test_recommendations_skip_existing_emergency_fund():
    create_goal(description="Fundo de emergência")

    payload = {
        "monthly_income": "5000",
        "fixed_expenses": "3000",
        "available_per_month": "2000",
        "current_savings": "0",
        "age": 35,
        "user_id": "u1",
    }
    recs = client.post("/recommendations", json=payload).json()["recommendations"]
    assert [r["type"] for r in recs] == ["retirement", "house_purchase", "investment", "vacation"]


def test_goal_lifecycle_events_reach_subscribers():
    seen = []
    bus = get_event_bus()
    for name in ("GoalCreated", "GoalUpdated", "GoalCompleted", "GoalDeleted"):
        bus.subscribe(name, seen.append)

    created = create_goal()
    client.post(f"/goals/{created['id']}/status", json={"status": "completed"})
    client.delete(f"/goals/{created['id']}")

    assert [e.type.value for e in seen] == ["GoalCreated", "GoalUpdated", "GoalCompleted", "GoalDeleted"]
    assert seen[2].data.id == created["id"]
    assert seen[3].data == {"goal_id": created["id"]}
