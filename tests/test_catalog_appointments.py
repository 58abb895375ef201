"""Service menu and appointment booking.

Invariants:
    - Services need a name, category, a duration of at least 5 minutes and a positive price
    - Booking prices the appointment from the salon's own services
    - End time defaults to start time plus the summed durations
    - Walk-in bookings reuse an existing customer with the same phone
"""

from salonx.domain.appointments.service import add_minutes
from salonx.models import Customer, Notification


def test_create_and_update_service(salon_client):
    created = salon_client.post(
        "/api/services", json={"name": "Head Massage", "category": "Spa", "durationMinutes": 20, "price": 299.999}
    )
    assert created.status_code == 201
    service = created.json()["service"]
    assert service["price"] == 300.0

    updated = salon_client.put("/api/services", json={"id": service["id"], "price": 350, "isActive": False})
    assert updated.json()["service"]["price"] == 350
    assert updated.json()["service"]["isActive"] is False


def test_service_validation(salon_client):
    assert salon_client.post("/api/services", json={"name": "X"}).json()["detail"] == "Name and category are required"
    short = salon_client.post(
        "/api/services", json={"name": "X", "category": "Hair", "durationMinutes": 2, "price": 100}
    )
    assert short.json()["detail"] == "Duration must be at least 5 minutes"
    free = salon_client.post("/api/services", json={"name": "X", "category": "Hair", "price": 0})
    assert free.json()["detail"] == "Price must be a positive number"


def test_delete_service(salon_client, haircut):
    assert salon_client.delete("/api/services", params={"id": haircut.id}).json()["deleted"] is True
    assert salon_client.get("/api/services").json()["services"] == []
    assert salon_client.delete("/api/services", params={"id": haircut.id}).status_code == 404


def test_add_minutes_caps_at_midnight():
    assert add_minutes("10:30", 45) == "11:15"
    assert add_minutes("23:30", 60) == "23:59"


def test_book_appointment_for_existing_customer(salon_client, db, staff, haircut, customer):
    response = salon_client.post(
        "/api/appointments",
        json={
            "customerId": customer.id,
            "staffId": staff.id,
            "appointmentDate": "2025-03-14",
            "startTime": "10:00",
            "serviceIds": [haircut.id],
        },
    )
    assert response.status_code == 201
    appointment = response.json()["appointment"]
    assert appointment["endTime"] == "10:45"
    assert appointment["totalAmount"] == 500
    assert appointment["status"] == "confirmed"
    assert appointment["staffName"] == "Priya"
    assert db.query(Notification).filter_by(type="appointment_created").count() == 1


def test_walk_in_reuses_customer_by_phone(salon_client, db, staff, haircut, customer):
    response = salon_client.post(
        "/api/appointments",
        json={
            "customerName": "Anita S",
            "customerPhone": customer.phone,
            "staffId": staff.id,
            "appointmentDate": "2025-03-14",
            "startTime": "12:00",
            "serviceIds": [haircut.id],
        },
    )
    assert response.json()["customerId"] == customer.id
    assert db.query(Customer).count() == 1


def test_walk_in_creates_new_customer(salon_client, db, staff, haircut):
    response = salon_client.post(
        "/api/appointments",
        json={
            "customerName": "Farah",
            "customerPhone": "9555555555",
            "staffId": staff.id,
            "appointmentDate": "2025-03-14",
            "startTime": "12:00",
            "serviceIds": [haircut.id],
        },
    )
    assert response.status_code == 201
    new_customer = db.query(Customer).one()
    assert new_customer.tags == ["New"]


def test_booking_validation(salon_client, staff, haircut, customer):
    base = {
        "customerId": customer.id,
        "staffId": staff.id,
        "appointmentDate": "2025-03-14",
        "startTime": "10:00",
        "serviceIds": [haircut.id],
    }
    missing = salon_client.post("/api/appointments", json={**base, "serviceIds": []})
    assert missing.json()["detail"] == "Missing required fields"

    bad_time = salon_client.post("/api/appointments", json={**base, "startTime": "10am"})
    assert bad_time.json()["detail"] == "Invalid time format. Use HH:MM"

    bad_service = salon_client.post("/api/appointments", json={**base, "serviceIds": ["other"]})
    assert bad_service.json()["detail"] == "One or more services are invalid"

    bad_staff = salon_client.post("/api/appointments", json={**base, "staffId": "other"})
    assert bad_staff.json()["detail"] == "Invalid staff member"


def test_update_status_and_filter(salon_client, staff, haircut, customer):
    created = salon_client.post(
        "/api/appointments",
        json={
            "customerId": customer.id,
            "staffId": staff.id,
            "appointmentDate": "2025-03-14",
            "startTime": "10:00",
            "serviceIds": [haircut.id],
        },
    ).json()["appointment"]

    updated = salon_client.put("/api/appointments", json={"id": created["id"], "status": "completed"})
    assert updated.json()["appointment"]["status"] == "completed"

    invalid = salon_client.put("/api/appointments", json={"id": created["id"], "status": "late"})
    assert invalid.status_code == 400

    on_day = salon_client.get("/api/appointments", params={"date": "2025-03-14"}).json()["appointments"]
    assert len(on_day) == 1
    other_day = salon_client.get("/api/appointments", params={"date": "2025-03-15"}).json()["appointments"]
    assert other_day == []
