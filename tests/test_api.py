"""
End-to-end tests for the member API running on the in-memory GymMaster.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from teeclub.infrastructure.mock.mock_gymmaster import DEMO_EMAIL, DEMO_PASSWORD
from teeclub.main import app
from teeclub.wiring import dependencies

TOMORROW = (date.today() + timedelta(days=1)).isoformat()


@pytest.fixture
def client():
    for factory in (
        dependencies.get_gymmaster_client,
        dependencies.get_mock_gymmaster,
        dependencies.get_door_access,
        dependencies.get_notifier,
        dependencies.get_payments,
        dependencies.get_ledger_service,
    ):
        factory.cache_clear()
    return TestClient(app)


@pytest.fixture
def auth(client) -> dict[str, str]:
    response = client.post("/api/v1/login", json={"email": DEMO_EMAIL, "password": DEMO_PASSWORD})
    assert response.status_code == 200
    body = response.json()
    return {"Authorization": f"Bearer {body['token']}", "X-Member-Id": body["member_id"]}


def _booking_payload(*slots: tuple[int, str], guests: list[dict] | None = None) -> dict:
    return {
        "service_id": 1,
        "service_name": "Simulator Bay 1 hr",
        "company_id": 1,
        "location_name": "Barrie",
        "slots": [{"day": TOMORROW, "resource_id": rid, "start": start} for rid, start in slots],
        "guests": guests or [],
    }


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_login_with_wrong_password_is_rejected(client):
    response = client.post("/api/v1/login", json={"email": DEMO_EMAIL, "password": "nope"})

    assert response.status_code == 400


def test_requests_without_token_are_unauthorized(client):
    response = client.get("/api/v1/bookings")

    assert response.status_code == 401
    assert response.json()["detail"]


def test_availability_grid(client, auth):
    response = client.get(
        "/api/v1/availability",
        params={"service_id": 1, "day": TOMORROW, "company_id": 1, "service_name": "Simulator Bay 1 hr"},
        headers=auth,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["duration_minutes"] == 60
    assert len(body["cells"]) == 16 * 3
    assert all(c["available"] for c in body["cells"])


def test_book_with_guests_then_list_and_cancel(client, auth):
    guests = [
        {"name": "Ann", "email": "ann@example.com"},
        {"name": "Bob", "phone": "+17055550101"},
        {"name": "Cy", "email": "cy@example.com"},
    ]
    response = client.post("/api/v1/bookings", json=_booking_payload((1, "10:00:00"), guests=guests), headers=auth)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Tee time booked!"
    assert body["ledger_delta"]["free"] == 2
    assert body["ledger_delta"]["charged"] == 1
    assert body["amount_due_cents"] == 1000
    booking_id = body["booking_ids"][0]

    listed = client.get("/api/v1/bookings", headers=auth).json()
    assert [b["id"] for b in listed] == [booking_id]
    assert [g["name"] for g in listed[0]["guests"]] == ["Ann", "Bob", "Cy"]

    ledger = client.get("/api/v1/guest-ledger", headers=auth).json()
    assert ledger["guest_passes_used"] == 3
    assert ledger["free_passes_remaining"] == 0
    assert len(ledger["referral_codes"]) == 3

    assert client.delete(f"/api/v1/bookings/{booking_id}", headers=auth).status_code == 204
    ledger = client.get("/api/v1/guest-ledger", headers=auth).json()
    assert ledger["guest_passes_used"] == 0
    assert ledger["guests"] == []
    assert client.get("/api/v1/bookings", headers=auth).json() == []


def test_partial_booking_returns_207(client, auth):
    client.post("/api/v1/bookings", json=_booking_payload((2, "11:00:00")), headers=auth)

    response = client.post("/api/v1/bookings", json=_booking_payload((1, "11:00:00"), (2, "11:00:00")), headers=auth)

    assert response.status_code == 207
    body = response.json()
    assert len(body["booking_ids"]) == 1
    assert body["failed"][0]["slot"]["resource_id"] == 2


def test_nothing_booked_returns_502(client, auth):
    client.post("/api/v1/bookings", json=_booking_payload((3, "12:00:00")), headers=auth)

    response = client.post("/api/v1/bookings", json=_booking_payload((3, "12:00:00")), headers=auth)

    assert response.status_code == 502
    assert response.json()["booking_ids"] == []


def test_overlapping_slots_return_409(client, auth):
    response = client.post(
        "/api/v1/bookings",
        json=_booking_payload((1, "13:00:00"), (1, "13:30:00")),
        headers=auth,
    )

    assert response.status_code == 409


def test_referral_validation(client, auth):
    booked = client.post(
        "/api/v1/bookings",
        json=_booking_payload((1, "14:00:00"), guests=[{"name": "Ann", "email": "ann@example.com"}]),
        headers=auth,
    ).json()
    code = booked["ledger_delta"]["referral_codes"][0]

    assert client.post("/api/v1/referrals/validate", json={"referral_code": code}).json() == {"valid": True}
    assert client.post("/api/v1/referrals/validate", json={"referral_code": "REF-NOPE"}).json() == {"valid": False}
    assert client.post("/api/v1/referrals/validate", json={"referral_code": " "}).status_code == 400


def test_signup_with_unknown_referral_code_is_rejected(client):
    payload = {
        "firstname": "New",
        "surname": "Golfer",
        "dob": "1990-01-01",
        "email": "new@example.com",
        "password": "secret123",
        "phonecell": "+17055550199",
        "membershiptypeid": "10",
        "companyid": "1",
        "referral_code": "REF-NOPE",
        "waiver_signature": "data:image/png;base64,iVBORw0KGgo=",
    }

    response = client.post("/api/v1/signup", json=payload)

    assert response.status_code == 400
    payload.pop("referral_code")
    created = client.post("/api/v1/signup", json=payload)
    assert created.status_code == 201
    assert created.json()["membership_id"] == 10
    assert created.json()["waiver_saved"] is True


def test_signup_requires_a_waiver_signature(client):
    payload = {
        "firstname": "New",
        "surname": "Golfer",
        "dob": "1990-01-01",
        "email": "unsigned@example.com",
        "password": "secret123",
        "phonecell": "+17055550199",
        "membershiptypeid": "10",
        "companyid": "1",
    }

    assert client.post("/api/v1/signup", json=payload).status_code == 422


def test_waiver_text_and_signing(client, auth):
    waiver = client.get("/api/v1/membership-types/10/waiver").json()
    assert waiver["membership_type_id"] == 10
    assert "golf clubs" in waiver["body"]

    assert client.post("/api/v1/me/waiver", json={"signature": "sig"}, headers=auth).status_code == 204
    unknown = client.post("/api/v1/me/waiver", json={"signature": "sig", "membership_id": 99}, headers=auth)
    assert unknown.status_code == 400


def test_profile_update_ignores_ledger_fields(client, auth):
    response = client.patch("/api/v1/me", json={"goal": "Break 80", "customtext1": "{}"}, headers=auth)
    assert response.status_code == 204

    profile = client.get("/api/v1/me", headers=auth).json()
    assert profile["goal"] == "Break 80"
    assert "customtext1" not in profile

    assert client.patch("/api/v1/me", json={}, headers=auth).status_code == 400


def test_open_door_and_pay_for_guests(client, auth):
    doors = client.get("/api/v1/doors", headers=auth).json()
    assert doors[0]["name"] == "Front Door"

    opened = client.post(f"/api/v1/doors/{doors[0]['id']}/open", headers=auth).json()
    assert opened["access_granted"] is True

    paid = client.post("/api/v1/payments", json={"nonce": "cnon:card", "charged_passes": 2}, headers=auth).json()
    assert paid["success"] is True
    assert paid["amount_cents"] == 2000


def test_memberships_and_balance(client, auth):
    memberships = client.get("/api/v1/me/memberships", headers=auth).json()
    assert memberships[0]["active"] is True

    balance = client.get("/api/v1/me/balance", headers=auth).json()
    assert balance["owing_amount"] == "0.00"
