"""
Admin API tests: authentication, doctors, appointment lifecycle, archive, dashboard.
"""

import asyncio
from datetime import date

import pytest

from clinicbook.domain.enums.appointment import AppointmentStatus

TODAY = date(2025, 3, 10)
YESTERDAY = date(2025, 3, 9)
TOMORROW = date(2025, 3, 11)

DOCTOR_BODY = {
    "name": "Dr. Maria Santos",
    "specialty": "General Medicine",
    "shift_start": "08:00",
    "shift_end": "20:00",
}


@pytest.fixture
def seeded(doctor_repo, make_doctor):
    asyncio.run(doctor_repo.save(make_doctor()))


def book(client, **overrides):
    payload = {
        "doctor_id": "maria-santos",
        "date": "2025-03-11",
        "time": "10:00",
        "patient_name": "Juan Dela Cruz",
        "phone": "09171234567",
    }
    payload.update(overrides)
    response = client.post("/appointments", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]["appointment"]["id"]


class TestAuthentication:
    def test_missing_key_is_rejected(self, client):
        response = client.get("/admin/appointments")
        assert response.status_code == 401
        assert response.json()["error"] == "UNAUTHORIZED"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_wrong_key_is_rejected(self, client):
        response = client.get("/admin/dashboard", headers={"X-API-Key": "wrong"})
        assert response.status_code == 401

    def test_bearer_token_is_accepted(self, client):
        response = client.get("/admin/appointments", headers={"Authorization": "Bearer test-admin-key"})
        assert response.status_code == 200

    def test_public_endpoints_need_no_key(self, client):
        assert client.get("/doctors").status_code == 200
        assert client.get("/health/").status_code == 200


class TestDoctors:
    def test_create_doctor(self, client, admin_headers):
        response = client.post("/admin/doctors", json=DOCTOR_BODY, headers=admin_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["data"]["id"] == "maria-santos"
        assert body["message"] == "Doctor added successfully with ID: maria-santos"

    def test_create_duplicate_doctor(self, client, admin_headers):
        client.post("/admin/doctors", json=DOCTOR_BODY, headers=admin_headers)
        response = client.post("/admin/doctors", json=DOCTOR_BODY, headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["error"] == "DUPLICATE_DOCTOR"

    def test_shift_must_be_twelve_hours(self, client, admin_headers):
        body = dict(DOCTOR_BODY, shift_end="19:00")
        response = client.post("/admin/doctors", json=body, headers=admin_headers)
        assert response.status_code == 422
        assert response.json()["error"] == "INVALID_SHIFT"

    def test_missing_field(self, client, admin_headers):
        body = dict(DOCTOR_BODY, specialty="")
        response = client.post("/admin/doctors", json=body, headers=admin_headers)
        assert response.status_code == 422
        assert response.json()["error"] == "INVALID_DOCTOR_DATA"

    def test_update_doctor(self, client, admin_headers, seeded):
        body = dict(DOCTOR_BODY, specialty="Cardiology", shift_start="20:00", shift_end="08:00")
        response = client.put("/admin/doctors/maria-santos", json=body, headers=admin_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["specialty"] == "Cardiology"
        assert data["shift_start"] == "20:00"

    def test_update_unknown_doctor(self, client, admin_headers):
        response = client.put("/admin/doctors/nobody", json=DOCTOR_BODY, headers=admin_headers)
        assert response.status_code == 404

    def test_delete_doctor_reports_upcoming(self, client, admin_headers, seeded):
        book(client)
        response = client.delete("/admin/doctors/maria-santos", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["upcoming_appointments"] == 1
        assert client.get("/doctors").json()["data"] == []

    def test_doctor_appointments(self, client, admin_headers, seeded, appointment_repo, make_appointment):
        asyncio.run(appointment_repo.save(make_appointment(on_date=YESTERDAY, status=AppointmentStatus.CONFIRMED)))
        book(client)
        response = client.get("/admin/doctors/maria-santos/appointments", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 2
        assert data["upcoming_count"] == 1
        assert data["past_count"] == 1


class TestAppointmentStatus:
    def test_confirm_then_cancel_releases_slot(self, client, admin_headers, seeded, ledger_repo):
        appointment_id = book(client)
        assert ledger_repo.held("maria-santos", TOMORROW) == ["10:00"]

        confirmed = client.patch(
            f"/admin/appointments/{appointment_id}/status",
            json={"status": "confirmed"},
            headers=admin_headers,
        )
        assert confirmed.status_code == 200
        assert confirmed.json()["data"]["status"] == "confirmed"
        assert confirmed.json()["message"] == "Appointment confirmed successfully!"

        cancelled = client.patch(
            f"/admin/appointments/{appointment_id}/status",
            json={"status": "cancelled"},
            headers=admin_headers,
        )
        assert cancelled.status_code == 200
        assert ledger_repo.held("maria-santos", TOMORROW) == []

        slots = client.get("/doctors/maria-santos/slots", params={"date": "2025-03-11"}).json()["data"]
        assert "10:00" in [s["value"] for s in slots["slots"]]

    def test_disallowed_transition(self, client, admin_headers, seeded):
        appointment_id = book(client)
        client.patch(
            f"/admin/appointments/{appointment_id}/status",
            json={"status": "cancelled"},
            headers=admin_headers,
        )
        response = client.patch(
            f"/admin/appointments/{appointment_id}/status",
            json={"status": "confirmed"},
            headers=admin_headers,
        )
        assert response.status_code == 409
        assert response.json()["error"] == "INVALID_STATUS_TRANSITION"

    def test_unknown_status_value(self, client, admin_headers, seeded):
        appointment_id = book(client)
        response = client.patch(
            f"/admin/appointments/{appointment_id}/status",
            json={"status": "done"},
            headers=admin_headers,
        )
        assert response.status_code == 422
        assert response.json()["error"] == "INVALID_INPUT"

    def test_unknown_appointment(self, client, admin_headers):
        response = client.get("/admin/appointments/APT-missing", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "APPOINTMENT_NOT_FOUND"

    def test_list_filter_by_status(self, client, admin_headers, seeded):
        first = book(client)
        book(client, time="11:00", patient_name="Maria Clara", phone="09181234567")
        client.patch(f"/admin/appointments/{first}/status", json={"status": "confirmed"}, headers=admin_headers)

        response = client.get("/admin/appointments", params={"status": "pending"}, headers=admin_headers)
        assert [a["patient_name"] for a in response.json()["data"]] == ["Maria Clara"]


class TestArchive:
    def test_future_active_appointment_cannot_be_archived(self, client, admin_headers, seeded):
        appointment_id = book(client)
        response = client.post(f"/admin/appointments/{appointment_id}/archive", headers=admin_headers)
        assert response.status_code == 409

    def test_cancelled_appointment_is_archived(self, client, admin_headers, seeded):
        appointment_id = book(client)
        client.patch(
            f"/admin/appointments/{appointment_id}/status",
            json={"status": "cancelled"},
            headers=admin_headers,
        )
        response = client.post(f"/admin/appointments/{appointment_id}/archive", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["source"] == "archive"

        lookup = client.get(f"/admin/appointments/{appointment_id}", headers=admin_headers).json()["data"]
        assert lookup["source"] == "archive"
        assert lookup["archived_at"] is not None
        assert client.get("/admin/appointments", headers=admin_headers).json()["data"] == []

    def test_archived_appointment_status_is_frozen(self, client, admin_headers, archive_repo, make_appointment):
        archived = make_appointment(on_date=YESTERDAY, status=AppointmentStatus.CONFIRMED)
        asyncio.run(archive_repo.save(archived.archived_copy(archived.created_at)))
        response = client.patch(
            f"/admin/appointments/{archived.appointment_id}/status",
            json={"status": "cancelled"},
            headers=admin_headers,
        )
        assert response.status_code == 409

    def test_cleanup_and_archive_listing(self, client, admin_headers, appointment_repo, make_appointment):
        stale = make_appointment(on_date=YESTERDAY)
        done = make_appointment(on_date=YESTERDAY, status=AppointmentStatus.CONFIRMED)
        for a in (stale, done):
            asyncio.run(appointment_repo.save(a))

        response = client.post("/admin/appointments/cleanup", headers=admin_headers)
        assert response.status_code == 200
        result = response.json()["data"]
        assert (result["expired"], result["archived"]) == (1, 1)

        past = client.get("/admin/archive", headers=admin_headers).json()
        sources = {a["id"]: a["source"] for a in past["data"]}
        assert sources == {str(stale.appointment_id): "current", str(done.appointment_id): "archive"}
        assert past["message"] == "Found 2 past appointments"

    def test_delete_from_archive_and_current(self, client, admin_headers, appointment_repo, archive_repo, make_appointment):
        active = make_appointment(on_date=YESTERDAY, status=AppointmentStatus.EXPIRED)
        archived = make_appointment(on_date=YESTERDAY, status=AppointmentStatus.CONFIRMED)
        asyncio.run(appointment_repo.save(active))
        asyncio.run(archive_repo.save(archived.archived_copy(archived.created_at)))

        response = client.delete(f"/admin/archive/{archived.appointment_id}", headers=admin_headers)
        assert response.status_code == 200
        response = client.delete(
            f"/admin/archive/{active.appointment_id}", params={"source": "current"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert client.get("/admin/archive", headers=admin_headers).json()["data"] == []

        missing = client.delete(f"/admin/archive/{archived.appointment_id}", headers=admin_headers)
        assert missing.status_code == 404

    def test_delete_all_archived(self, client, admin_headers, archive_repo, make_appointment):
        for _ in range(3):
            a = make_appointment(on_date=YESTERDAY, status=AppointmentStatus.CANCELLED)
            asyncio.run(archive_repo.save(a.archived_copy(a.created_at)))
        response = client.delete("/admin/archive", headers=admin_headers)
        assert response.json()["data"] == {"deleted": 3}


def test_dashboard(client, admin_headers, seeded, doctor_repo, make_doctor):
    asyncio.run(doctor_repo.save(make_doctor(name="Dr. Jose Rizal", start="20:00", end="08:00")))
    for hour, name, phone in ((10, "A Patient", "09171111111"), (11, "B Patient", "09172222222"), (12, "C Patient", "09173333333")):
        book(client, date="2025-03-10", time=f"{hour}:00", patient_name=name, phone=phone)

    response = client.get("/admin/dashboard", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_appointments"] == 3
    assert data["pending_appointments"] == 3
    assert data["total_doctors"] == 2
    assert data["bookings_today"] == 3
    loads = {d["doctor_id"]: d for d in data["doctor_loads"]}
    assert loads["maria-santos"]["today_count"] == 3
    assert loads["maria-santos"]["load_level"] == "busy"
    assert loads["jose-rizal"]["load_level"] == "normal"
    # 09:30: the overnight doctor is off shift
    assert [d["doctor_id"] for d in data["off_shift_doctors"]] == ["jose-rizal"]
    assert len(data["recent_appointments"]) == 3
