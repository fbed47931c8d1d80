"""
Integration tests for the parcel HTTP API.

Covers registration, lookup, address changes, status progression, deletion
and the error payloads returned for each failure.
"""

import pytest


@pytest.fixture
async def registered_parcel(client, client_id):
    """Register a parcel through the API and return its JSON body."""
    response = await client.post("/v1/parcels", json={
        "client": client_id,
        "address": "Main St 1"
    })
    assert response.status_code == 201
    return response.json()


# TEST 1: Register Parcel
async def test_register_parcel(client, client_id):
    response = await client.post("/v1/parcels", json={
        "client": client_id,
        "address": "Main St 1"
    })

    assert response.status_code == 201
    data = response.json()
    assert data["number"] > 0
    assert data["client"] == client_id
    assert data["address"] == "Main St 1"
    assert data["status"] == "registered"
    assert data["created_at"].endswith("Z")


# TEST 2: Validation
async def test_register_parcel_requires_address(client, client_id):
    response = await client.post("/v1/parcels", json={"client": client_id, "address": ""})

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


async def test_register_parcel_rejects_oversized_client(client):
    response = await client.post("/v1/parcels", json={"client": 2**64, "address": "Main St 1"})

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


# TEST 3: Get Parcel
async def test_get_parcel(client, registered_parcel):
    response = await client.get(f"/v1/parcels/{registered_parcel['number']}")

    assert response.status_code == 200
    assert response.json() == registered_parcel


async def test_get_missing_parcel(client):
    response = await client.get("/v1/parcels/9999")

    assert response.status_code == 404
    body = response.json()
    assert body["error_code"] == "ERR_NOT_FOUND_001"
    assert body["details"]["number"] == 9999


async def test_get_parcel_with_oversized_number(client):
    response = await client.get("/v1/parcels/99999999999999999999")

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


async def test_list_parcels_of_oversized_client(client):
    response = await client.get(f"/v1/clients/{2**64}/parcels")

    assert response.status_code == 422


# TEST 4: Change Address
async def test_change_address(client, registered_parcel):
    number = registered_parcel["number"]

    response = await client.patch(f"/v1/parcels/{number}/address", json={"address": "Elm St 2"})

    assert response.status_code == 200
    assert response.json()["address"] == "Elm St 2"
    fetched = await client.get(f"/v1/parcels/{number}")
    assert fetched.json()["address"] == "Elm St 2"


async def test_change_address_after_sending(client, registered_parcel):
    number = registered_parcel["number"]
    await client.post(f"/v1/parcels/{number}/next-status")

    response = await client.patch(f"/v1/parcels/{number}/address", json={"address": "Elm St 2"})

    assert response.status_code == 409
    assert response.json()["error_code"] == "ERR_STATE_001"


# TEST 5: Status Progression
async def test_next_status(client, registered_parcel):
    number = registered_parcel["number"]

    statuses = []
    for _ in range(3):
        response = await client.post(f"/v1/parcels/{number}/next-status")
        assert response.status_code == 200
        statuses.append(response.json()["status"])

    assert statuses == ["sent", "delivered", "delivered"]


# TEST 6: Delete Parcel
async def test_delete_parcel(client, registered_parcel):
    number = registered_parcel["number"]

    response = await client.delete(f"/v1/parcels/{number}")
    assert response.status_code == 204

    response = await client.get(f"/v1/parcels/{number}")
    assert response.status_code == 404


async def test_delete_sent_parcel(client, registered_parcel):
    number = registered_parcel["number"]
    await client.post(f"/v1/parcels/{number}/next-status")

    response = await client.delete(f"/v1/parcels/{number}")

    assert response.status_code == 409


# TEST 7: Client Parcels
async def test_list_client_parcels(client, client_id):
    numbers = set()
    for i in range(3):
        response = await client.post("/v1/parcels", json={
            "client": client_id,
            "address": f"Street {i}"
        })
        numbers.add(response.json()["number"])

    response = await client.get(f"/v1/clients/{client_id}/parcels")

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 3
    assert {p["number"] for p in data} == numbers
    assert all(p["client"] == client_id for p in data)


async def test_list_client_parcels_empty(client, client_id):
    response = await client.get(f"/v1/clients/{client_id}/parcels")

    assert response.status_code == 200
    assert response.json() == []


# TEST 8: Health and Observability
async def test_health_check(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_correlation_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "abc-123"})

    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert "X-Process-Time" in response.headers
