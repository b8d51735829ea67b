"""
Public booking API tests.
"""

import asyncio

import pytest

from clinicbook.domain.enums.appointment import AppointmentStatus


@pytest.fixture
def seeded(doctor_repo, make_doctor):
    asyncio.run(doctor_repo.save(make_doctor()))
    asyncio.run(doctor_repo.save(make_doctor(name="Dr. Jose Rizal", specialty="Surgery", start="20:00", end="08:00")))


def booking_payload(**overrides):
    payload = {
        "doctor_id": "maria-santos",
        "date": "2025-03-11",
        "time": "10:00",
        "patient_name": "Juan Dela Cruz",
        "phone": "09171234567",
        "email": "juan@example.com",
        "reason": "Fever",
    }
    payload.update(overrides)
    return payload


def test_list_doctors_is_public(client, seeded):
    response = client.get("/doctors")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    ids = [d["id"] for d in body["data"]]
    assert ids == ["jose-rizal", "maria-santos"]


def test_list_doctors_by_specialty(client, seeded):
    response = client.get("/doctors", params={"specialty": "Surgery"})
    assert [d["id"] for d in response.json()["data"]] == ["jose-rizal"]


def test_available_slots_future_date(client, seeded):
    response = client.get("/doctors/maria-santos/slots", params={"date": "2025-03-11"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert [s["value"] for s in data["slots"]] == [f"{h:02d}:00" for h in range(8, 20)]
    assert data["slots"][0]["display"] == "8:00 AM"
    assert data["status"]["reason"] == "available"
    assert data["status"]["max_daily"] == 4


def test_available_slots_today_skips_elapsed_hours(client, seeded):
    response = client.get("/doctors/maria-santos/slots", params={"date": "2025-03-10"})
    slots = [s["value"] for s in response.json()["data"]["slots"]]
    assert slots[0] == "10:00"
    assert "09:00" not in slots


def test_available_slots_overnight_doctor(client, seeded):
    response = client.get("/doctors/jose-rizal/slots", params={"date": "2025-03-11"})
    slots = [s["value"] for s in response.json()["data"]["slots"]]
    assert "03:00" in slots
    assert "10:00" not in slots
    assert len(slots) == 12


def test_available_slots_past_date_is_empty(client, seeded):
    response = client.get("/doctors/maria-santos/slots", params={"date": "2025-03-01"})
    assert response.status_code == 200
    assert response.json()["data"]["slots"] == []


def test_available_slots_unknown_doctor(client, seeded):
    response = client.get("/doctors/nobody/slots", params={"date": "2025-03-11"})
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "DOCTOR_NOT_FOUND"


def test_available_slots_bad_date(client, seeded):
    response = client.get("/doctors/maria-santos/slots", params={"date": "11/03/2025"})
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


def test_book_appointment(client, seeded, notifier):
    response = client.post("/appointments", json=booking_payload())
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Appointment booked successfully! We will confirm shortly."
    appointment = body["data"]["appointment"]
    assert appointment["status"] == "pending"
    assert appointment["time"] == "10:00"
    assert appointment["display_date"] == "Tuesday, March 11, 2025"
    assert body["data"]["email_sent"] is True
    assert len(notifier.sent) == 1

    slots = client.get("/doctors/maria-santos/slots", params={"date": "2025-03-11"}).json()["data"]
    assert "10:00" not in [s["value"] for s in slots["slots"]]
    assert slots["status"]["booked_count"] == 1


def test_book_appointment_email_failure_is_reported(client, seeded, notifier):
    notifier.fail = True
    response = client.post("/appointments", json=booking_payload())
    assert response.status_code == 201
    body = response.json()
    assert body["data"]["email_sent"] is False
    assert body["message"].endswith("(Confirmation email could not be sent.)")


def test_book_appointment_without_email_delivery_has_plain_message(client, seeded):
    from clinicbook.adapters.external.email_service_emailjs import EmailJSNotificationService
    from clinicbook.api import deps
    from clinicbook.app import app
    from clinicbook.core.config import EmailSettings

    disabled = EmailJSNotificationService(EmailSettings(enabled=False))
    app.dependency_overrides[deps.get_notification_service] = lambda: disabled

    response = client.post("/appointments", json=booking_payload())
    assert response.status_code == 201
    body = response.json()
    assert body["data"]["email_sent"] is False
    assert body["message"] == "Appointment booked successfully! We will confirm shortly."


def test_book_appointment_validation_errors(client, seeded):
    response = client.post("/appointments", json=booking_payload(phone="", time="10:30"))
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "VALIDATION_ERROR"
    assert "phone is required" in body["details"]["errors"]
    assert "Appointments start on the hour (HH:00)" in body["details"]["errors"]


def test_book_appointment_capacity(client, seeded, appointment_repo, make_appointment):
    for t in ("09:00", "10:00", "11:00", "12:00"):
        asyncio.run(appointment_repo.save(make_appointment(time=t, status=AppointmentStatus.CONFIRMED)))

    response = client.post("/appointments", json=booking_payload(time="17:00"))
    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "CAPACITY"
    assert body["details"]["reason"] == "capacity"

    slots = client.get("/doctors/maria-santos/slots", params={"date": "2025-03-11"}).json()["data"]
    assert slots["slots"] == []
    assert slots["status"]["reason"] == "fully-booked"


def test_book_appointment_outside_shift(client, seeded):
    response = client.post("/appointments", json=booking_payload(doctor_id="jose-rizal", time="10:00"))
    assert response.status_code == 409
    assert response.json()["error"] == "OUTSIDE_SHIFT"


def test_book_appointment_past(client, seeded):
    response = client.post("/appointments", json=booking_payload(date="2025-03-10", time="09:00"))
    assert response.status_code == 409
    assert response.json()["error"] == "PAST"


def test_book_appointment_slot_taken(client, seeded):
    assert client.post("/appointments", json=booking_payload()).status_code == 201
    response = client.post(
        "/appointments",
        json=booking_payload(patient_name="Maria Clara", phone="09181234567", email=None),
    )
    assert response.status_code == 409
    assert response.json()["error"] == "SLOT_TAKEN"


def test_book_appointment_duplicate_patient(client, seeded):
    assert client.post("/appointments", json=booking_payload()).status_code == 201
    response = client.post(
        "/appointments",
        json=booking_payload(doctor_id="jose-rizal", time="21:00", patient_name="juan dela cruz ", phone="09181234567"),
    )
    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "DUPLICATE_BOOKING"
    assert "already has an appointment" in body["message"]


def test_book_appointment_rate_limited(client, seeded):
    for _ in range(3):
        client.post("/appointments", json=booking_payload(time="22:00"))
    response = client.post("/appointments", json=booking_payload())
    assert response.status_code == 429
    assert response.headers["Retry-After"] == "3600"
    assert response.json()["error"] == "RATE_LIMIT_EXCEEDED"


def test_book_appointment_malformed_body(client, seeded):
    response = client.post("/appointments", json={"doctor_id": 5, "patient_name": ["x"]})
    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_INPUT"


def test_duplicate_check(client, seeded):
    params = {"name": "Juan Dela Cruz", "date": "2025-03-11"}
    assert client.get("/appointments/duplicate-check", params=params).json()["data"]["is_duplicate"] is False

    client.post("/appointments", json=booking_payload())
    data = client.get("/appointments/duplicate-check", params=params).json()["data"]
    assert data["is_duplicate"] is True
    assert data["appointment_id"].startswith("APT-")


def test_request_id_is_echoed(client, seeded):
    response = client.get("/doctors", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.json()["request_id"] == "req-123"
    assert "X-Process-Time" in response.headers
