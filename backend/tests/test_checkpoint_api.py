"""
Integration tests for the checkpoint tracking endpoints.

Tests checkpoint creation, history, unit views and error responses.
"""

import logging
import pytest
from httpx import AsyncClient, ASGITransport

from backend.app.core.config import Settings
from backend.app.main import create_app
from backend.app.stores.memory import InMemoryUnitStore

UNIT_ID = "6f1c2a9e-3b4d-4e8f-9a1b-2c3d4e5f6a7b"
OTHER_UNIT_ID = "0a1b2c3d-4e5f-4a6b-8c7d-9e0f1a2b3c4d"
TIMESTAMP = "2025-10-08T12:34:56.789Z"


async def post_checkpoint(client, status, unit_id=UNIT_ID, timestamp=TIMESTAMP):
    return await client.post("/v1/checkpoint", json={
        "unitId": unit_id,
        "status": status,
        "timestamp": timestamp
    })


# TEST 1: Create Checkpoint
@pytest.mark.asyncio
async def test_create_checkpoint_success(client):
    response = await post_checkpoint(client, "CREATED")

    assert response.status_code == 201
    data = response.json()
    assert set(data) == {"id", "unitId", "status", "timestamp", "history"}
    assert data["unitId"] == UNIT_ID
    assert data["status"] == "CREATED"
    assert data["timestamp"] == TIMESTAMP
    assert data["history"] == []


@pytest.mark.asyncio
async def test_create_checkpoint_normalizes_timestamp_to_utc(client):
    response = await post_checkpoint(client, "CREATED", timestamp="2025-10-08T14:34:56+02:00")

    assert response.status_code == 201
    assert response.json()["timestamp"] == "2025-10-08T12:34:56.000Z"


# TEST 2: Invalid Status -> 400
@pytest.mark.asyncio
async def test_invalid_status_returns_400(client):
    response = await post_checkpoint(client, "LOST")

    assert response.status_code == 400
    data = response.json()
    assert data["error_code"] == "ERR_INVALID_STATUS"
    assert "'LOST'" in data["message"]
    assert "Valid statuses are" in data["message"]
    assert data["details"]["status"] == "LOST"
    assert "DELIVERED" in data["details"]["valid_statuses"]


# TEST 3: Duplicate -> 409
@pytest.mark.asyncio
async def test_duplicate_status_returns_409(client):
    await post_checkpoint(client, "CREATED")
    response = await post_checkpoint(client, "CREATED")

    assert response.status_code == 409
    data = response.json()
    assert data["error_code"] == "ERR_DUPLICATE_REQUEST"
    assert UNIT_ID in data["message"]
    assert "already has status" in data["message"]

    history = await client.get("/v1/history", params={"unitId": UNIT_ID})
    assert len(history.json()) == 1


# TEST 4: Request Schema Validation -> 422
@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"unitId": "not-a-uuid", "status": "CREATED", "timestamp": TIMESTAMP},
    {"unitId": UNIT_ID, "status": "", "timestamp": TIMESTAMP},
    {"unitId": UNIT_ID, "status": "CREATED", "timestamp": "yesterday"},
    {"unitId": UNIT_ID, "status": "CREATED"},
])
async def test_malformed_request_returns_422(client, payload):
    response = await client.post("/v1/checkpoint", json=payload)

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


# TEST 5: History
@pytest.mark.asyncio
async def test_history_in_recorded_order(client):
    for status in ("CREATED", "PICKED_UP", "DELIVERED"):
        await post_checkpoint(client, status)
    await post_checkpoint(client, "CREATED", unit_id=OTHER_UNIT_ID)

    response = await client.get("/v1/history", params={"unitId": UNIT_ID})

    assert response.status_code == 200
    data = response.json()
    assert [c["status"] for c in data] == ["CREATED", "PICKED_UP", "DELIVERED"]
    assert all(c["unitId"] == UNIT_ID for c in data)


@pytest.mark.asyncio
async def test_history_unknown_unit_is_empty(client):
    response = await client.get("/v1/history", params={"unitId": OTHER_UNIT_ID})

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_history_requires_uuid(client):
    response = await client.get("/v1/history", params={"unitId": "abc"})
    assert response.status_code == 422

    response = await client.get("/v1/history")
    assert response.status_code == 422


# TEST 6: Checkpoint by id
@pytest.mark.asyncio
async def test_get_checkpoint_by_id(client):
    created = (await post_checkpoint(client, "CREATED")).json()

    response = await client.get(f"/v1/checkpoints/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created

    missing = await client.get("/v1/checkpoints/unknown")
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "ERR_NOT_FOUND_001"


# TEST 7: Unit projections
@pytest.mark.asyncio
async def test_unit_projection(client):
    for status in ("CREATED", "PICKED_UP", "DELIVERED"):
        await post_checkpoint(client, status)

    response = await client.get(f"/v1/units/{UNIT_ID}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == UNIT_ID
    assert data["status"] == "DELIVERED"
    assert [item["status"] for item in data["checkpoints"]] == ["PICKED_UP", "DELIVERED"]
    assert all(item["date"] for item in data["checkpoints"])


@pytest.mark.asyncio
async def test_unit_not_found(client):
    response = await client.get(f"/v1/units/{OTHER_UNIT_ID}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_units_with_status_filter(client):
    await post_checkpoint(client, "DELIVERED")
    await post_checkpoint(client, "IN_TRANSIT", unit_id=OTHER_UNIT_ID)

    all_units = (await client.get("/v1/units")).json()
    assert {u["id"] for u in all_units} == {UNIT_ID, OTHER_UNIT_ID}

    delivered = (await client.get("/v1/units", params={"status": "DELIVERED"})).json()
    assert [u["id"] for u in delivered] == [UNIT_ID]

    unknown = (await client.get("/v1/units", params={"status": "delivered"})).json()
    assert unknown == []


# TEST 8: Apps do not share stores
@pytest.mark.asyncio
async def test_each_app_has_its_own_stores(client):
    await post_checkpoint(client, "CREATED")

    other_app = create_app(Settings(storage_backend="memory"))
    async with AsyncClient(transport=ASGITransport(app=other_app), base_url="http://test") as other:
        response = await other.get("/v1/history", params={"unitId": UNIT_ID})

    assert response.json() == []


# TEST 9: SQL backend
@pytest.mark.asyncio
async def test_database_backend_flow(db_client):
    for status in ("CREATED", "PICKED_UP"):
        response = await post_checkpoint(db_client, status)
        assert response.status_code == 201

    duplicate = await post_checkpoint(db_client, "PICKED_UP")
    assert duplicate.status_code == 409

    history = (await db_client.get("/v1/history", params={"unitId": UNIT_ID})).json()
    assert [c["status"] for c in history] == ["CREATED", "PICKED_UP"]

    unit = (await db_client.get(f"/v1/units/{UNIT_ID}")).json()
    assert unit["status"] == "PICKED_UP"
    assert len(unit["checkpoints"]) == 1


# TEST 10: Service endpoints
@pytest.mark.asyncio
async def test_health_and_correlation_id(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "abc-123"})

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["storage_backend"] == "memory"
    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert "X-Process-Time" in response.headers


@pytest.mark.asyncio
async def test_request_log_carries_request_fields(client, caplog):
    caplog.set_level(logging.INFO, logger="tracking")

    await client.get("/health", headers={"X-Correlation-ID": "abc-123"})

    messages = [r.getMessage() for r in caplog.records if r.name == "tracking"]
    assert any(
        "GET /health -> 200" in m and "ms" in m and "correlation_id=abc-123" in m
        for m in messages
    )


# TEST 11: Store failures surface as a JSON 500
class FailingUnitStore(InMemoryUnitStore):
    async def find_by_id(self, unit_id):
        raise ConnectionError("storage unavailable")


@pytest.mark.asyncio
@pytest.mark.parametrize("app_settings", [
    Settings(storage_backend="memory"),
    Settings(storage_backend="memory", debug=True),
])
async def test_store_failure_returns_json_500(app_settings):
    failing_app = create_app(app_settings)
    failing_app.state.stores.units = FailingUnitStore()

    transport = ASGITransport(app=failing_app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await post_checkpoint(ac, "CREATED")

    assert response.status_code == 500
    data = response.json()
    assert data["error_code"] == "ERR_INTERNAL_SERVER"
    assert data["message"] == "An internal server error occurred"
    assert "storage unavailable" not in response.text
