from datetime import timedelta
from zoneinfo import ZoneInfo

from fastapi.testclient import TestClient

from dockslot.core.timeutils import local_today
from dockslot.main import app
from dockslot.services import captains as captain_service

NY = ZoneInfo("America/New_York")


def next_week():
    return (local_today(NY) + timedelta(days=7)).isoformat()


def booking_payload(captain, trip_type, **overrides):
    payload = {
        "captain_id": str(captain.id),
        "trip_type_id": str(trip_type.id),
        "scheduled_date": next_week(),
        "scheduled_time": "08:00",
        "guest_name": "Ann Bonny",
        "guest_email": "ann@example.com",
        "party_size": 2,
    }
    payload.update(overrides)
    return payload


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_register_creates_default_week(client):
    res = client.post("/captains/register", json={"email": "New@Example.com", "full_name": "Grace O'Malley"})
    assert res.status_code == 201
    body = res.json()
    assert body["captain"]["email"] == "new@example.com"
    headers = {"Authorization": f"Bearer {body['api_token']}"}

    me = client.get("/captains/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["timezone"] == "America/New_York"

    week = client.get("/availability/weekly", headers=headers).json()
    assert len(week) == 7
    assert [w["is_active"] for w in week] == [True, False, True, True, True, True, True]


def test_duplicate_registration_uses_error_envelope(client, captain):
    res = client.post("/captains/register", json={"email": captain.email, "full_name": "Someone"})

    assert res.status_code == 409
    assert res.json() == {"success": False, "error": "Email already registered", "code": "DUPLICATE"}


def test_captain_routes_need_a_token(client, captain):
    assert client.get("/captains/me").status_code == 401
    assert client.get("/captains/me", headers={"Authorization": "Bearer wrong"}).status_code == 401


def test_public_availability(client, captain, trip_type):
    res = client.get(
        f"/public/captains/{captain.id}/trip-types/{trip_type.id}/availability",
        params={"date": next_week()},
    )

    assert res.status_code == 200
    body = res.json()
    assert body["is_blackout"] is False
    assert body["time_slots"][0] == {"start_time": "06:00", "end_time": "10:00", "available": True}
    assert len(body["time_slots"]) == 23


def test_public_availability_errors(client, captain, trip_type):
    url = f"/public/captains/{captain.id}/trip-types/{trip_type.id}/availability"

    bad_date = client.get(url, params={"date": "next tuesday"})
    assert bad_date.status_code == 400
    assert bad_date.json()["code"] == "VALIDATION"

    unknown = client.get(
        f"/public/captains/00000000-0000-0000-0000-000000000000/trip-types/{trip_type.id}/availability",
        params={"date": next_week()},
    )
    assert unknown.status_code == 404
    assert unknown.json()["code"] == "NOT_FOUND"


def test_booking_flow(client, captain, trip_type, auth_headers):
    res = client.post("/public/bookings", json=booking_payload(captain, trip_type))
    assert res.status_code == 201
    created = res.json()
    assert created["total_price_cents"] == 45000

    again = client.post("/public/bookings", json=booking_payload(captain, trip_type, guest_email="b@example.com"))
    assert again.status_code == 409
    assert again.json() == {
        "success": False,
        "error": "Selected time slot is no longer available",
        "code": "UNAVAILABLE",
    }

    guest = client.get(f"/public/bookings/{created['guest_token']}")
    assert guest.status_code == 200
    assert guest.json()["confirmation_code"] == created["confirmation_code"]

    mine = client.get("/bookings/captain/me", headers=auth_headers).json()
    assert [b["id"] for b in mine] == [created["booking_id"]]

    confirmed = client.post(
        f"/bookings/{created['booking_id']}/status",
        json={"status": "confirmed"},
        headers=auth_headers,
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "confirmed"

    back = client.post(
        f"/bookings/{created['booking_id']}/status",
        json={"status": "pending_deposit"},
        headers=auth_headers,
    )
    assert back.status_code == 400


def test_party_too_large_is_capacity_error(client, captain, trip_type):
    res = client.post("/public/bookings", json=booking_payload(captain, trip_type, party_size=7))

    assert res.status_code == 400
    assert res.json()["code"] == "CAPACITY"


def test_hibernation(client, captain, trip_type, auth_headers):
    res = client.patch(
        "/captains/me",
        json={
            "is_hibernating": True,
            "hibernation_message": "Back in the spring",
            "hibernation_show_contact_info": True,
        },
        headers=auth_headers,
    )
    assert res.status_code == 200

    profile = client.get(f"/public/captains/{captain.id}")
    assert profile.status_code == 403
    assert profile.json()["error"] == "Back in the spring"

    info = client.get(f"/public/captains/{captain.id}/hibernation").json()
    assert info["email"] == captain.email
    assert info["hibernation_end_date"] is None

    booking = client.post("/public/bookings", json=booking_payload(captain, trip_type))
    assert booking.status_code == 403
    assert booking.json()["code"] == "HIBERNATING"


def test_settings_validation(client, auth_headers):
    res = client.patch("/captains/me", json={"timezone": "Atlantis/Lost"}, headers=auth_headers)

    assert res.status_code == 400
    assert res.json()["code"] == "VALIDATION"


def test_trip_type_crud(client, captain, auth_headers):
    created = client.post(
        "/trip-types",
        json={"title": "Offshore", "duration_hours": 8, "price_total": 1200, "deposit_amount": 300},
        headers=auth_headers,
    )
    assert created.status_code == 201
    trip_id = created.json()["id"]

    public = client.get(f"/public/captains/{captain.id}/trip-types/{trip_id}")
    assert public.json()["title"] == "Offshore"

    updated = client.put(f"/trip-types/{trip_id}", json={"price_total": 1500}, headers=auth_headers)
    assert updated.json()["price_total"] == 1500

    deleted = client.delete(f"/trip-types/{trip_id}", headers=auth_headers)
    assert deleted.json() == {"deleted": True, "archived": False}
    assert client.get(f"/public/captains/{captain.id}/trip-types/{trip_id}").status_code == 404


def test_blackouts_over_http(client, captain, trip_type, auth_headers):
    day = next_week()
    res = client.post("/availability/blackouts", json={"blackout_date": day, "reason": "Haul out"}, headers=auth_headers)
    assert res.status_code == 201

    dup = client.post("/availability/blackouts", json={"blackout_date": day}, headers=auth_headers)
    assert dup.status_code == 409

    availability = client.get(
        f"/public/captains/{captain.id}/trip-types/{trip_type.id}/availability",
        params={"date": day},
    ).json()
    assert availability["is_blackout"] is True
    assert availability["blackout_reason"] == "Haul out"

    dates = client.get(f"/public/captains/{captain.id}/available-dates", params={"days": 10}).json()
    assert len(dates) == 11
    assert {d["date"]: d["has_availability"] for d in dates}[day] is False

    removed = client.delete(f"/availability/blackouts/{res.json()['id']}", headers=auth_headers)
    assert removed.json() == {"success": True}


def test_weekly_update_over_http(client, auth_headers):
    week = [{"day_of_week": d, "start_time": "07:00", "end_time": "15:00", "is_active": d != 0} for d in range(7)]

    res = client.put("/availability/weekly", json=week, headers=auth_headers)
    assert res.status_code == 200
    assert res.json()[1]["start_time"] == "07:00:00"

    short = client.put("/availability/weekly", json=week[:3], headers=auth_headers)
    assert short.status_code == 400
    assert short.json()["code"] == "VALIDATION"


def test_malformed_body_uses_error_envelope(client, captain):
    res = client.post("/public/bookings", json={"captain_id": str(captain.id)})

    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION"
    assert "trip_type_id" in body["error"]


def test_wrong_field_type_uses_error_envelope(client, captain, trip_type):
    res = client.post("/public/bookings", json=booking_payload(captain, trip_type, party_size="abc"))

    assert res.status_code == 400
    assert res.json()["code"] == "VALIDATION"
    assert res.json()["error"].startswith("party_size")


def test_bad_query_parameter_uses_error_envelope(client, captain):
    res = client.get(f"/public/captains/{captain.id}/available-dates", params={"days": -1})

    assert res.status_code == 400
    assert res.json()["code"] == "VALIDATION"


def test_unexpected_error_is_unknown(client, captain, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(captain_service, "get_public_profile", explode)
    quiet_client = TestClient(app, raise_server_exceptions=False)

    res = quiet_client.get(f"/public/captains/{captain.id}")

    assert res.status_code == 500
    assert res.json() == {"success": False, "error": "An unexpected error occurred", "code": "UNKNOWN"}


def test_null_flags_leave_settings_unchanged(client, captain, auth_headers):
    res = client.patch(
        "/captains/me",
        json={
            "is_hibernating": None,
            "hibernation_show_return_date": None,
            "hibernation_show_contact_info": None,
            "booking_buffer_minutes": None,
            "business_name": "Queen Anne's Revenge",
        },
        headers=auth_headers,
    )

    assert res.status_code == 200
    body = res.json()
    assert body["is_hibernating"] is False
    assert body["booking_buffer_minutes"] == 60
    assert body["business_name"] == "Queen Anne's Revenge"
