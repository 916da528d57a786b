"""Tests for the HTTP endpoints"""

import pytest
from httpx import AsyncClient

from resto.config import settings

BOOKING = {
    "customer_name": "Ada Lovelace",
    "customer_email": "ada@example.com",
    "customer_phone": "+15551234567",
    "party_size": 2,
    "date": "2026-10-21",
    "time_slot_start": "6:00 PM",
    "special_occasion": "Birthday",
}


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_get_restaurant(client: AsyncClient, test_restaurant):
    response = await client.get("/restaurants/test-bistro")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Test Bistro"
    assert data["timezone"] == "America/New_York"
    assert data["deposit_required"] is False


@pytest.mark.asyncio
async def test_unknown_restaurant(client: AsyncClient, test_restaurant):
    response = await client.get("/restaurants/nowhere")

    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_availability(client: AsyncClient, test_restaurant):
    response = await client.get(
        "/restaurants/test-bistro/availability",
        params={"date": "2026-10-21", "party_size": 2},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["timeslot_length_minutes"] == 60
    assert len(data["slots"]) == 17
    assert data["slots"][0] == {
        "start": "06:00",
        "end": "07:00",
        "start_12h": "6:00 AM",
        "end_12h": "7:00 AM",
        "available": True,
    }
    assert data["error"] is None


@pytest.mark.asyncio
async def test_availability_party_too_large(client: AsyncClient, test_restaurant):
    response = await client.get(
        "/restaurants/test-bistro/availability",
        params={"date": "2026-10-21", "party_size": 9},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["slots"] == []
    assert data["max_capacity"] == 4
    assert "largest table seats 4" in data["error"]


@pytest.mark.asyncio
async def test_availability_rejects_bad_party_size(client: AsyncClient, test_restaurant):
    response = await client.get(
        "/restaurants/test-bistro/availability",
        params={"date": "2026-10-21", "party_size": 0},
    )

    assert response.status_code == 422
    assert "party_size" in response.json()["errors"]


@pytest.mark.asyncio
async def test_booking_flow(client: AsyncClient, test_restaurant, signer, notifier):
    """Book, view through the signed link, move and cancel"""
    response = await client.post("/restaurants/test-bistro/reservations", json=BOOKING)

    assert response.status_code == 201
    data = response.json()
    code = data["reservation"]["confirmation_code"]
    assert data["reservation"]["timeslot_start"] == "18:00"
    assert data["reservation"]["special_occasion"] == "Birthday"
    assert data["reservation_link"] == signer.url(code, "ada@example.com")
    assert data["warnings"] == []

    path = signer.path(code, "ada@example.com")
    response = await client.get(path)
    assert response.status_code == 200
    assert response.json()["confirmation_code"] == code

    response = await client.put(
        path, json={"party_size": 4, "date": "2026-10-22", "time_slot_start": "19:00"},
    )
    assert response.status_code == 200
    assert response.json()["reservation"]["party_size"] == 4
    assert response.json()["reservation"]["status"] == "new"

    response = await client.post(f"{path}/cancel")
    assert response.status_code == 200
    assert response.json()["reservation"]["status"] == "cancelled"

    response = await client.post(f"{path}/cancel")
    assert response.status_code == 409
    assert response.json()["error_code"] == "INVALID_TRANSITION"

    assert len(notifier.sent) == 3


@pytest.mark.asyncio
async def test_tampered_link_is_not_found(client: AsyncClient, test_restaurant, signer):
    response = await client.post("/restaurants/test-bistro/reservations", json=BOOKING)
    code = response.json()["reservation"]["confirmation_code"]

    forged = signer.mac(code, "mallory@example.com")
    response = await client.get(f"/reservations/{code}/{forged}")
    assert response.status_code == 404

    unknown = await client.get(f"/reservations/NOPE0000/{forged}")
    assert unknown.status_code == 404
    assert unknown.json() == response.json()


@pytest.mark.asyncio
async def test_booking_validation_errors(client: AsyncClient, test_restaurant):
    payload = dict(BOOKING, customer_email="not-an-email", customer_phone="123", customer_name="  ")

    response = await client.post("/restaurants/test-bistro/reservations", json=payload)

    assert response.status_code == 422
    errors = response.json()["errors"]
    assert {"customer_email", "customer_phone", "customer_name"} <= set(errors)


@pytest.mark.asyncio
async def test_slot_taken_is_conflict(client: AsyncClient, test_restaurant):
    await client.post("/restaurants/test-bistro/reservations", json=BOOKING)

    response = await client.post(
        "/restaurants/test-bistro/reservations",
        json=dict(BOOKING, customer_email="grace@example.com"),
    )

    assert response.status_code == 409
    assert response.json()["error_code"] == "SLOT_UNAVAILABLE"


@pytest.mark.asyncio
async def test_deposit_booking(client: AsyncClient, deposit_restaurant, gateway):
    response = await client.post(
        "/restaurants/deposit-house/deposits", json={"customer_email": "ada@example.com"},
    )

    assert response.status_code == 201
    hold = response.json()
    assert hold["amount_cents"] == 2000
    assert hold["currency"] == "USD"
    assert hold["client_secret"].startswith(hold["payment_intent_id"])

    response = await client.post(
        "/restaurants/deposit-house/reservations",
        json=dict(BOOKING, payment_intent_id=hold["payment_intent_id"]),
    )
    assert response.status_code == 201
    assert response.json()["reservation"]["deposit_payment_intent_id"] == hold["payment_intent_id"]


@pytest.mark.asyncio
async def test_deposit_missing(client: AsyncClient, deposit_restaurant):
    response = await client.post("/restaurants/deposit-house/reservations", json=BOOKING)

    assert response.status_code == 422
    assert "payment_intent_id" in response.json()["errors"]


@pytest.mark.asyncio
async def test_cron_requires_secret(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "cron-test-secret")

    response = await client.post("/cron/reminders", params={"type": "1_day"})
    assert response.status_code == 401

    response = await client.post(
        "/cron/reminders",
        params={"type": "1_day"},
        headers={"Authorization": "Bearer wrong"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_cron_runs_sweep(client: AsyncClient, test_restaurant, monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "cron-test-secret")

    response = await client.post(
        "/cron/reminders",
        params={"type": "1_week"},
        headers={"Authorization": "Bearer cron-test-secret"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "reminder_type": "1_week",
        "processed_count": 0,
        "sent_count": 0,
    }


@pytest.mark.asyncio
async def test_cron_rejects_unknown_type(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "cron-test-secret")

    response = await client.post(
        "/cron/reminders",
        params={"type": "1_month"},
        headers={"Authorization": "Bearer cron-test-secret"},
    )
    assert response.status_code == 422
