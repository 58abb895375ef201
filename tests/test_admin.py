"""Platform administration: admin login, salon provisioning, key lifecycle, leads.

Invariants:
    - Admin routes require an admin session (401 anonymous, 403 salon session)
    - Creating a salon returns the plain activation key exactly once
    - Suspending a salon revokes its active keys
    - Regenerating a key invalidates the previous one
"""

import pytest

from salonx.domain.admin import service as admin_service
from salonx.models import ActivationKey, AdminAuditLog, Salon
from salonx.security_utils import hash_password_bcrypt, is_valid_key_format
from tests.conftest import ADMIN_EMAIL


@pytest.fixture
def admin_password(monkeypatch):
    monkeypatch.setattr(admin_service, "ADMIN_PASSWORD_HASH", hash_password_bcrypt("s3cret-pass"))
    return "s3cret-pass"


def test_admin_login_sets_admin_session(client, admin_password):
    response = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": admin_password})
    assert response.status_code == 200
    assert response.json()["redirect"] == "/admin"

    session = client.get("/api/auth/session").json()
    assert session["isAdmin"] is True


def test_admin_login_wrong_password(client, admin_password):
    response = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": "nope"})
    assert response.status_code == 401


def test_admin_login_rejects_non_admin_email(client, admin_password):
    response = client.post("/api/admin/login", json={"email": "owner@glamour.in", "password": admin_password})
    assert response.status_code == 403


def test_admin_login_unconfigured(client, monkeypatch):
    monkeypatch.setattr(admin_service, "ADMIN_PASSWORD_HASH", None)
    response = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": "x"})
    assert response.status_code == 503


def test_admin_login_requires_fields(client):
    response = client.post("/api/admin/login", json={"email": ADMIN_EMAIL})
    assert response.status_code == 400
    assert response.json()["detail"] == "Email and password required"


def test_admin_routes_require_session(client):
    assert client.get("/api/admin/salons").status_code == 401


def test_salon_session_cannot_use_admin_routes(salon_client):
    response = salon_client.get("/api/admin/salons")
    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"


def test_create_salon_returns_key_once(admin_client, db):
    response = admin_client.post(
        "/api/admin/salons", json={"name": "Lotus Spa", "ownerEmail": "Lotus@Spa.in", "city": "Goa"}
    )
    assert response.status_code == 201
    body = response.json()
    assert is_valid_key_format(body["activationKey"])
    assert body["salon"]["ownerEmail"] == "lotus@spa.in"
    assert body["salon"]["status"] == "active"

    key = db.query(ActivationKey).filter_by(salon_id=body["salon"]["id"]).one()
    assert key.key_hash != body["activationKey"]

    listed = admin_client.get("/api/admin/salons").json()["salons"]
    assert "activationKey" not in listed[0]


def test_created_salon_can_log_in(admin_client):
    created = admin_client.post("/api/admin/salons", json={"name": "Lotus Spa", "ownerEmail": "lotus@spa.in"}).json()
    admin_client.cookies.clear()

    response = admin_client.post(
        "/api/auth/login", json={"email": "lotus@spa.in", "activationKey": created["activationKey"]}
    )
    assert response.status_code == 200


def test_create_salon_duplicate_email_conflicts(admin_client, salon):
    response = admin_client.post("/api/admin/salons", json={"name": "Copy", "ownerEmail": salon.owner_email})
    assert response.status_code == 409


def test_create_salon_invalid_email(admin_client):
    response = admin_client.post("/api/admin/salons", json={"name": "Bad", "ownerEmail": "not-an-email"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid email format"


def test_suspend_revokes_keys(admin_client, db, salon, activation_key):
    response = admin_client.patch(f"/api/admin/salons/{salon.id}", json={"action": "suspend"})
    assert response.json() == {"success": True, "message": "Salon suspended"}

    db.refresh(salon)
    db.refresh(activation_key)
    assert salon.status == "suspended"
    assert salon.suspended_at is not None
    assert activation_key.status == "revoked"


def test_reactivate_clears_suspension(admin_client, db, salon):
    admin_client.patch(f"/api/admin/salons/{salon.id}", json={"action": "suspend"})
    admin_client.patch(f"/api/admin/salons/{salon.id}", json={"action": "reactivate"})
    db.refresh(salon)
    assert salon.status == "active"
    assert salon.suspended_at is None


def test_regenerate_key_replaces_old_key(admin_client, db, salon, activation_key):
    response = admin_client.patch(f"/api/admin/salons/{salon.id}", json={"action": "regenerate-key"})
    body = response.json()
    assert is_valid_key_format(body["activationKey"])

    keys = db.query(ActivationKey).filter_by(salon_id=salon.id).all()
    assert sorted(k.status for k in keys) == ["active", "revoked"]


def test_unknown_action_is_rejected(admin_client, salon):
    response = admin_client.patch(f"/api/admin/salons/{salon.id}", json={"action": "explode"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid action"


def test_action_on_missing_salon_is_404(admin_client):
    response = admin_client.patch("/api/admin/salons/missing", json={"action": "suspend"})
    assert response.status_code == 404


def test_delete_salon_removes_tenant_rows(admin_client, db, salon, activation_key, staff):
    response = admin_client.delete(f"/api/admin/salons/{salon.id}")
    assert response.status_code == 200
    db.expire_all()
    assert db.query(Salon).count() == 0
    assert db.query(ActivationKey).count() == 0


def test_audit_log_lists_salon_creation(admin_client, db):
    admin_client.post("/api/admin/salons", json={"name": "Lotus Spa", "ownerEmail": "lotus@spa.in"})
    actions = [log["action"] for log in admin_client.get("/api/admin/audit-logs").json()["logs"]]
    assert "SALON_CREATED" in actions
    assert db.query(AdminAuditLog).count() >= 2


def test_audit_rows_record_acting_admin(admin_client, db, salon):
    admin_client.patch(f"/api/admin/salons/{salon.id}", json={"action": "suspend"})
    entry = db.query(AdminAuditLog).filter_by(action="SALON_SUSPENDED").one()
    assert entry.details["admin_email"] == ADMIN_EMAIL


def test_public_lead_capture_and_pipeline(client, admin_client):
    lead = client.post(
        "/api/admin/leads",
        json={"salonName": "Curl Up", "ownerName": "Meera", "email": "meera@curl.in", "phone": "9000011111"},
    )
    assert lead.status_code == 201
    lead_id = lead.json()["lead"]["id"]

    updated = admin_client.patch("/api/admin/leads", json={"id": lead_id, "status": "converted"})
    assert updated.json()["lead"]["status"] == "converted"

    converted = admin_client.get("/api/admin/leads", params={"status": "converted"}).json()["leads"]
    assert [row["id"] for row in converted] == [lead_id]


def test_lead_requires_fields(client):
    response = client.post("/api/admin/leads", json={"salonName": "Curl Up"})
    assert response.status_code == 400


def test_lead_invalid_status(admin_client, client):
    lead_id = client.post(
        "/api/admin/leads",
        json={"salonName": "Curl Up", "ownerName": "Meera", "email": "meera@curl.in", "phone": "9000011111"},
    ).json()["lead"]["id"]
    response = admin_client.patch("/api/admin/leads", json={"id": lead_id, "status": "maybe"})
    assert response.status_code == 400
