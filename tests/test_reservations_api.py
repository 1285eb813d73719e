"""Tests for the reservation management endpoints"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_reservation(client: AsyncClient, sample_reservation_data):
    """Created record echoes the input and gets an id and equal timestamps"""
    response = await client.post("/api/reservations", json=sample_reservation_data)
    
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert "error" not in body
    
    data = body["data"]
    assert data["id"]
    assert data["createdAt"] == data["updatedAt"]
    for field, value in sample_reservation_data.items():
        assert data[field] == value


@pytest.mark.asyncio
async def test_create_reservation_ignores_client_id(client: AsyncClient, sample_reservation_data):
    response = await client.post("/api/reservations", json={**sample_reservation_data, "id": "mine"})
    
    assert response.status_code == 201
    assert response.json()["data"]["id"] != "mine"


@pytest.mark.asyncio
async def test_create_reservation_defaults(client: AsyncClient, sample_reservation_data):
    """Source, status and notes are optional"""
    body = dict(sample_reservation_data)
    for field in ("source", "status", "notes"):
        body.pop(field)
    
    response = await client.post("/api/reservations", json=body)
    
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["source"] == "Manual"
    assert data["status"] == "Pending"
    assert data["notes"] == ""


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "field,value",
    [
        ("customerName", ""),
        ("customerName", "   "),
        ("phoneNumber", ""),
        ("phoneNumber", "call me maybe"),
        ("date", "03/15/2025"),
        ("date", "2025-02-30"),
        ("date", "٢٠٢٥-٠٣-١٥"),
        ("time", "19:00"),
        ("time", "١٩:٠٠:٠٠"),
        ("time", "7:00:00"),
        ("time", "25:00:00"),
        ("partySize", 0),
        ("partySize", -3),
        ("partySize", 2.5),
        ("partySize", "4"),
        ("source", "Walk-in"),
        ("status", "Approved"),
    ],
)
async def test_create_reservation_rejects_invalid_body(
    client: AsyncClient, backend, sample_reservation_data, field, value
):
    response = await client.post("/api/reservations", json={**sample_reservation_data, field: value})
    
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("Invalid request:")
    assert field in body["error"]
    assert len(backend) == 0


@pytest.mark.asyncio
async def test_create_reservation_missing_field(client: AsyncClient, sample_reservation_data):
    body = dict(sample_reservation_data)
    body.pop("partySize")
    
    response = await client.post("/api/reservations", json=body)
    
    assert response.status_code == 400
    assert "partySize" in response.json()["error"]


@pytest.mark.asyncio
async def test_create_reservation_malformed_json(client: AsyncClient):
    response = await client.post(
        "/api/reservations",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_list_reservations_sorted_by_date_and_time(client: AsyncClient, create_sample_reservation):
    """Listing order is (date, time) regardless of insertion order"""
    later = await create_sample_reservation(date="2025-01-02", time="08:00:00")
    earlier = await create_sample_reservation(date="2025-01-01", time="20:00:00")
    same_day_first = await create_sample_reservation(date="2025-01-02", time="07:30:00")
    
    response = await client.get("/api/reservations")
    
    assert response.status_code == 200
    ids = [item["id"] for item in response.json()["data"]]
    assert ids == [earlier.id, same_day_first.id, later.id]


@pytest.mark.asyncio
async def test_list_reservations_empty(client: AsyncClient):
    response = await client.get("/api/reservations")
    
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": []}


@pytest.mark.asyncio
async def test_get_reservation(client: AsyncClient, create_sample_reservation):
    reservation = await create_sample_reservation()
    
    response = await client.get(f"/api/reservations/{reservation.id}")
    
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == reservation.id
    assert data["customerName"] == "John Doe"
    assert data["partySize"] == 4


@pytest.mark.asyncio
async def test_get_reservation_not_found(client: AsyncClient):
    response = await client.get("/api/reservations/does-not-exist")
    
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Reservation not found"}


@pytest.mark.asyncio
async def test_update_reservation(client: AsyncClient, backend, create_sample_reservation, sample_reservation_data):
    reservation = await create_sample_reservation()
    changes = {**sample_reservation_data, "partySize": 6, "time": "20:30:00", "notes": ""}
    
    response = await client.put(f"/api/reservations/{reservation.id}", json=changes)
    
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == reservation.id
    assert data["partySize"] == 6
    assert data["time"] == "20:30:00"
    assert data["notes"] == ""
    
    stored = await backend.get_reservation(reservation.id)
    assert stored.created_at == reservation.created_at
    assert stored.updated_at >= stored.created_at


@pytest.mark.asyncio
async def test_update_reservation_not_found(client: AsyncClient, backend, sample_reservation_data):
    response = await client.put("/api/reservations/missing", json=sample_reservation_data)
    
    assert response.status_code == 404
    assert len(backend) == 0


@pytest.mark.asyncio
async def test_update_reservation_invalid_body(client: AsyncClient, create_sample_reservation, sample_reservation_data):
    reservation = await create_sample_reservation()
    
    response = await client.put(
        f"/api/reservations/{reservation.id}",
        json={**sample_reservation_data, "partySize": 0},
    )
    
    assert response.status_code == 400
    stored = await client.get(f"/api/reservations/{reservation.id}")
    assert stored.json()["data"]["partySize"] == 4


@pytest.mark.asyncio
async def test_update_status(client: AsyncClient, create_sample_reservation):
    reservation = await create_sample_reservation()
    
    response = await client.patch(f"/api/reservations/{reservation.id}/status", json={"status": "Cancelled"})
    
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "Cancelled"


@pytest.mark.asyncio
async def test_update_status_is_unguarded(client: AsyncClient, create_sample_reservation):
    """Cancelled reservations can be reopened; no transition is forbidden"""
    reservation = await create_sample_reservation(status="Cancelled")
    
    response = await client.patch(f"/api/reservations/{reservation.id}/status", json={"status": "Pending"})
    
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "Pending"


@pytest.mark.asyncio
async def test_update_status_rejects_unknown_status(client: AsyncClient, create_sample_reservation):
    reservation = await create_sample_reservation()
    
    response = await client.patch(f"/api/reservations/{reservation.id}/status", json={"status": "Approved"})
    
    assert response.status_code == 400
    assert response.json()["success"] is False
    stored = await client.get(f"/api/reservations/{reservation.id}")
    assert stored.json()["data"]["status"] == "Pending"
    assert stored.json()["data"]["updatedAt"] == stored.json()["data"]["createdAt"]


@pytest.mark.asyncio
async def test_update_status_not_found(client: AsyncClient):
    response = await client.patch("/api/reservations/missing/status", json={"status": "Confirmed"})
    
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_reservation(client: AsyncClient, backend, create_sample_reservation):
    reservation = await create_sample_reservation()
    
    response = await client.delete(f"/api/reservations/{reservation.id}")
    
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert len(backend) == 0
    
    response = await client.get(f"/api/reservations/{reservation.id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_reservation_not_found(client: AsyncClient, backend, create_sample_reservation):
    await create_sample_reservation()
    
    response = await client.delete("/api/reservations/missing")
    
    assert response.status_code == 404
    assert len(backend) == 1


@pytest.mark.asyncio
async def test_backend_error_is_reported(client: AsyncClient, backend, sample_reservation_data, monkeypatch):
    """Backend failures become 500s carrying the backend's code and message"""
    from tablebook.errors import BackendOperationError
    
    async def broken_create(data):
        raise BackendOperationError("permission denied for table reservations", code="42501")
    
    monkeypatch.setattr(backend, "create_reservation", broken_create)
    
    response = await client.post("/api/reservations", json=sample_reservation_data)
    
    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Database error: permission denied for table reservations (42501)",
    }


@pytest.mark.asyncio
async def test_manual_pending_create_does_not_call(client: AsyncClient, notifier, sample_reservation_data):
    response = await client.post("/api/reservations", json=sample_reservation_data)
    
    assert response.status_code == 201
    assert notifier.confirmations == []


@pytest.mark.asyncio
async def test_confirmed_create_triggers_confirmation_call(client: AsyncClient, notifier, sample_reservation_data):
    response = await client.post("/api/reservations", json={**sample_reservation_data, "status": "Confirmed"})
    
    assert response.status_code == 201
    assert len(notifier.confirmations) == 1
    assert notifier.confirmations[0].id == response.json()["data"]["id"]


@pytest.mark.asyncio
async def test_confirming_triggers_confirmation_call(client: AsyncClient, notifier, create_sample_reservation):
    reservation = await create_sample_reservation()
    
    response = await client.patch(f"/api/reservations/{reservation.id}/status", json={"status": "Confirmed"})
    
    assert response.status_code == 200
    assert [r.id for r in notifier.confirmations] == [reservation.id]


@pytest.mark.asyncio
async def test_reconfirming_does_not_call_again(client: AsyncClient, notifier, create_sample_reservation):
    reservation = await create_sample_reservation(status="Confirmed")
    
    await client.patch(f"/api/reservations/{reservation.id}/status", json={"status": "Confirmed"})
    await client.patch(f"/api/reservations/{reservation.id}/status", json={"status": "Cancelled"})
    
    assert notifier.confirmations == []


@pytest.mark.asyncio
async def test_notification_failure_does_not_fail_request(
    client: AsyncClient, notifier, backend, sample_reservation_data
):
    notifier.fail = True
    
    response = await client.post("/api/reservations", json={**sample_reservation_data, "status": "Confirmed"})
    
    assert response.status_code == 201
    assert response.json()["success"] is True
    assert len(notifier.confirmations) == 1
    assert len(backend) == 1


@pytest.mark.asyncio
async def test_auto_call_disabled_skips_confirmation(client: AsyncClient, notifier, sample_reservation_data):
    notifier.auto_call_enabled = False
    
    response = await client.post("/api/reservations", json={**sample_reservation_data, "status": "Confirmed"})
    
    assert response.status_code == 201
    assert notifier.confirmations == []


@pytest.mark.asyncio
async def test_confirmed_create_without_callfluent(unconfigured_client: AsyncClient, sample_reservation_data):
    response = await unconfigured_client.post(
        "/api/reservations",
        json={**sample_reservation_data, "status": "Confirmed"},
    )
    
    assert response.status_code == 201
