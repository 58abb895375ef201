"""Staff management and performance metrics.

Invariants:
    - Deleting staff deactivates by default
    - Permanent deletion is refused once the staff member is on an invoice
    - Performance is aggregated from invoice items and sorted by revenue
"""

from salonx.models import Staff


def test_create_staff(salon_client):
    response = salon_client.post(
        "/api/staff", json={"name": "Neha", "role": "Nail Artist", "isCashier": True, "serviceIds": ["s-1"]}
    )
    assert response.status_code == 201
    staff = response.json()["staff"]
    assert staff["isActive"] is True
    assert staff["isCashier"] is True
    assert staff["serviceIds"] == ["s-1"]


def test_create_staff_requires_name_and_role(salon_client):
    assert salon_client.post("/api/staff", json={"role": "Stylist"}).json()["detail"] == "Staff name is required"
    assert salon_client.post("/api/staff", json={"name": "Neha"}).json()["detail"] == "Role is required"


def test_update_staff(salon_client, staff):
    response = salon_client.put("/api/staff", json={"id": staff.id, "role": "Senior Stylist", "isActive": False})
    body = response.json()["staff"]
    assert body["role"] == "Senior Stylist"
    assert body["isActive"] is False


def test_update_rejects_empty_name(salon_client, staff):
    response = salon_client.put("/api/staff", json={"id": staff.id, "name": " "})
    assert response.status_code == 400
    assert response.json()["detail"] == "Name cannot be empty"


def test_delete_defaults_to_deactivate(salon_client, db, staff):
    salon_client.delete("/api/staff", params={"id": staff.id})
    db.refresh(staff)
    assert staff.is_active is False


def test_permanent_delete(salon_client, db, staff):
    salon_client.delete("/api/staff", params={"id": staff.id, "permanent": "true"})
    db.expire_all()
    assert db.query(Staff).count() == 0


def test_permanent_delete_refused_after_billing(salon_client, db, staff, haircut):
    salon_client.post(
        "/api/billing/complete",
        json={
            "billed_by_staff_id": staff.id,
            "payment_method": "cash",
            "items": [{"item_type": "service", "item_id": haircut.id, "item_name": "Haircut",
                       "staff_id": staff.id, "unit_price": 500}],
        },
    )
    response = salon_client.delete("/api/staff", params={"id": staff.id, "permanent": "true"})
    assert response.status_code == 400
    assert "Deactivate instead" in response.json()["detail"]


def test_performance_and_metrics(salon_client, staff, cashier, haircut):
    salon_client.post(
        "/api/billing/complete",
        json={
            "billed_by_staff_id": cashier.id,
            "payment_method": "card",
            "items": [{"item_type": "service", "item_id": haircut.id, "item_name": "Haircut",
                       "staff_id": staff.id, "quantity": 2, "unit_price": 500}],
        },
    )

    performance = salon_client.get("/api/staff/performance").json()["performance"]
    top = performance[0]
    assert top["staff_name"] == "Priya"
    assert top["services_performed"] == 2
    assert top["revenue_generated"] == 1000
    cashier_row = next(row for row in performance if row["staff_name"] == "Ravi")
    assert cashier_row["bills_created"] == 1

    metrics = salon_client.get(f"/api/staff/{staff.id}/metrics").json()
    assert metrics["metrics"]["services_performed"] == 2
    assert metrics["period_days"] == 30
    assert len(metrics["recent_invoices"]) == 1


def test_metrics_for_unknown_staff_is_404(salon_client):
    assert salon_client.get("/api/staff/missing/metrics").status_code == 404
