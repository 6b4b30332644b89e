"""
Integration tests for the HTTP surface

Exercises the routers end to end through the ASGI app, with the database
dependency pointed at the per-test SQLite database.
"""

import pytest

from showdown_vote.core import errors
from showdown_vote.core.config import settings
from tests.fixtures.snapshots import (
    BLUE_COUPLE_ID,
    RED_COUPLE_ID,
    SHOWDOWN_ID,
    SHOWDOWN_ID_2,
    RelayTestHelper,
    salesforce_snapshot,
)


@pytest.fixture
def relay(test_client, relay_key):
    return RelayTestHelper(test_client, relay_key)


async def register(client, name="Fan", email="fan@example.com") -> str:
    response = await client.post("/api/register", json={"name": name, "email": email})
    assert response.status_code == 200
    return response.json()["userId"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_health(test_client):
    response = await test_client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_relay_requires_key(test_client, relay):
    """Test that a wrong or missing relay key is refused"""
    response = await relay.push(salesforce_snapshot(), relay_key="wrong-key")
    assert response.status_code == 401
    assert response.json() == {"error": errors.UNAUTHORIZED}

    response = await test_client.post("/api/relay/state", json=salesforce_snapshot())
    assert response.status_code == 401


@pytest.mark.integration
@pytest.mark.asyncio
async def test_relay_refuses_when_key_not_configured(test_client, monkeypatch):
    """Test that an unconfigured server never accepts relay pushes"""
    monkeypatch.setattr(settings, "relay_key", None)

    response = await test_client.post(
        "/api/relay/state",
        json=salesforce_snapshot(),
        headers={"X-Relay-Key": "anything"}
    )

    assert response.status_code == 500
    assert response.json() == {"error": errors.RELAY_KEY_NOT_SET}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_relay_rejects_oversized_body(relay, monkeypatch):
    monkeypatch.setattr(settings, "max_snapshot_bytes", 64)

    response = await relay.push(salesforce_snapshot())

    assert response.status_code == 413
    assert response.json() == {"error": errors.PAYLOAD_TOO_LARGE}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_relay_rejects_non_object_body(test_client, relay):
    response = await relay.push([1, 2, 3])
    assert response.status_code == 400
    assert response.json() == {"error": errors.INVALID_INPUT}

    response = await test_client.post(
        "/api/relay/state",
        content=b"{not json",
        headers={"X-Relay-Key": relay.relay_key, "Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json() == {"error": errors.INVALID_INPUT}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_relay_accepts_snapshot_with_unstorable_entry(test_client, relay):
    """Test that one malformed bracket entry neither fails the push nor drops the pairings"""
    payload = salesforce_snapshot()
    payload["bracket"][0]["Match_Number__c"] = "1e30"

    response = await relay.push(payload)
    assert response.status_code == 200
    assert response.json() == {"ok": True}

    body = (await test_client.get("/api/public/state")).json()
    assert len(body["bracket"]) == 2
    assert body["activeShowdown"]["red"]["coupleId"] == RED_COUPLE_ID


@pytest.mark.integration
@pytest.mark.asyncio
async def test_public_state_before_and_after_ingest(test_client, relay):
    """Test the public view moves from empty to populated"""
    response = await test_client.get("/api/public/state")
    assert response.status_code == 200
    assert response.json()["contest"] is None
    assert response.json()["bracket"] == []

    response = await relay.push(salesforce_snapshot())
    assert response.status_code == 200
    assert response.json() == {"ok": True}

    body = (await test_client.get("/api/public/state")).json()
    assert body["activeShowdown"]["id"] == SHOWDOWN_ID
    assert body["activeShowdown"]["red"]["coupleId"] == RED_COUPLE_ID
    assert body["activeShowdown"]["blue"]["coupleId"] == BLUE_COUPLE_ID
    assert len(body["bracket"]) == 2


@pytest.mark.integration
@pytest.mark.asyncio
async def test_current_showdown_endpoint(test_client, relay):
    response = await test_client.get("/api/current-showdown")
    assert response.json()["status"] == "CLOSED"

    await relay.push(salesforce_snapshot())

    response = await test_client.get("/api/current-showdown")
    assert response.json() == {
        "showdownId": SHOWDOWN_ID,
        "red": "Alex & Sam",
        "blue": "Lee & Joe",
        "status": "VOTING_OPEN",
    }


@pytest.mark.integration
@pytest.mark.asyncio
async def test_register_validation(test_client):
    """Test registration input checks"""
    response = await test_client.post("/api/register", json={"name": "Fan", "email": "not-an-email"})
    assert response.status_code == 400
    assert response.json() == {"error": errors.INVALID_INPUT}

    response = await test_client.post("/api/register", json={"name": "   ", "email": "fan@example.com"})
    assert response.status_code == 400

    response = await test_client.post("/api/register", json={"name": "x" * 101, "email": "fan@example.com"})
    assert response.status_code == 400


@pytest.mark.integration
@pytest.mark.asyncio
async def test_register_twice_returns_same_user(test_client):
    first = await register(test_client)
    second = await register(test_client, name="Renamed", email="FAN@example.com")
    assert first == second


@pytest.mark.integration
@pytest.mark.asyncio
async def test_vote_flow_over_http(test_client, relay):
    """Test vote, duplicate vote and results over HTTP"""
    await relay.push(salesforce_snapshot())
    user_id = await register(test_client)

    response = await test_client.post("/api/vote", json={"userId": user_id, "showdownId": SHOWDOWN_ID, "choice": "BLUE"})
    assert response.status_code == 200
    assert response.json() == {"ok": True}

    response = await test_client.post("/api/vote", json={"userId": user_id, "showdownId": SHOWDOWN_ID, "choice": "RED"})
    assert response.status_code == 200
    assert response.json() == {"ok": True, "status": "ALREADY_VOTED", "existingChoice": "BLUE"}

    response = await test_client.get(f"/api/results/{SHOWDOWN_ID}")
    assert response.status_code == 200
    assert response.json() == {"red": 0, "blue": 1}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_vote_rejections_over_http(test_client, relay):
    """Test the error shapes for rejected votes"""
    await relay.push(salesforce_snapshot())
    user_id = await register(test_client)

    response = await test_client.post("/api/vote", json={"userId": user_id, "showdownId": SHOWDOWN_ID_2, "choice": "RED"})
    assert response.status_code == 400
    assert response.json() == {"error": errors.VOTING_CLOSED, "reason": errors.STATUS_NOT_OPEN}

    response = await test_client.post("/api/vote", json={"userId": user_id, "showdownId": "a07000000000000Z00", "choice": "RED"})
    assert response.status_code == 400
    assert response.json() == {"error": errors.INVALID_SHOWDOWN}

    unknown_user = "00000000-0000-4000-8000-000000000000"
    response = await test_client.post("/api/vote", json={"userId": unknown_user, "showdownId": SHOWDOWN_ID, "choice": "RED"})
    assert response.status_code == 400
    assert response.json() == {"error": errors.INVALID_USER}


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"userId": "not-a-uuid", "showdownId": SHOWDOWN_ID, "choice": "RED"},
    {"userId": "00000000-0000-4000-8000-000000000000", "showdownId": "short", "choice": "RED"},
    {"userId": "00000000-0000-4000-8000-000000000000", "showdownId": SHOWDOWN_ID, "choice": "GREEN"},
    {"showdownId": SHOWDOWN_ID, "choice": "RED"},
])
async def test_vote_malformed_input(test_client, body):
    response = await test_client.post("/api/vote", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": errors.INVALID_INPUT}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_results_rejects_malformed_id(test_client):
    response = await test_client.get("/api/results/not-an-id")
    assert response.status_code == 400
    assert response.json() == {"error": errors.INVALID_SHOWDOWN}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_metrics_endpoint(test_client):
    await test_client.get("/api/health")

    response = await test_client.get("/metrics")
    assert response.status_code == 200
    assert "http_requests_total" in response.text
