"""Customer directory: import, edit, delete, tenant isolation.

Invariants:
    - Import skips rows missing name or phone and reports them as failed
    - Imported rows without tags are tagged "Imported"
    - A salon never sees or changes another salon's customers
"""

from salonx.models import Customer
from tests.conftest import session_cookie_for


def test_import_skips_incomplete_rows(salon_client):
    response = salon_client.post(
        "/api/customers",
        json={
            "customers": [
                {"name": "Kavya", "phone": "9000000010", "gender": "Female"},
                {"name": "", "phone": "9000000011"},
                {"name": "Rohit"},
            ]
        },
    )
    body = response.json()
    assert body["imported"] == 1
    assert body["failed"] == 2
    assert body["customers"][0]["tags"] == ["Imported"]
    assert body["customers"][0]["gender"] == "female"


def test_import_with_no_valid_rows_is_400(salon_client):
    response = salon_client.post("/api/customers", json={"customers": [{"name": "Nobody"}]})
    assert response.status_code == 400
    assert response.json()["detail"]["failed"] == 1


def test_list_and_get_customer(salon_client, customer):
    customers = salon_client.get("/api/customers").json()["customers"]
    assert [c["name"] for c in customers] == ["Anita"]

    detail = salon_client.get(f"/api/customers/{customer.id}").json()["customer"]
    assert detail["phone"] == "9123456780"


def test_update_customer(salon_client, customer):
    response = salon_client.patch(
        f"/api/customers/{customer.id}", json={"email": "ANITA@mail.com", "tags": ["VIP"]}
    )
    body = response.json()["customer"]
    assert body["email"] == "anita@mail.com"
    assert body["tags"] == ["VIP"]


def test_update_rejects_blank_name(salon_client, customer):
    response = salon_client.patch(f"/api/customers/{customer.id}", json={"name": "  "})
    assert response.status_code == 400
    assert response.json()["detail"] == "Name cannot be empty"


def test_update_rejects_unknown_gender(salon_client, customer):
    response = salon_client.patch(f"/api/customers/{customer.id}", json={"gender": "robot"})
    assert response.status_code == 400


def test_bulk_delete(salon_client, db, customer):
    response = salon_client.request("DELETE", "/api/customers", json={"ids": [customer.id]})
    assert response.json() == {"success": True, "deleted": 1}
    assert db.query(Customer).count() == 0


def test_bulk_delete_requires_ids(salon_client):
    response = salon_client.request("DELETE", "/api/customers", json={"ids": []})
    assert response.status_code == 400


def test_other_salon_cannot_read_customer(client, customer, other_salon):
    client.cookies.update(session_cookie_for(other_salon.id, other_salon.owner_email))
    assert client.get(f"/api/customers/{customer.id}").status_code == 404
    assert client.get("/api/customers").json()["customers"] == []


def test_other_salon_bulk_delete_is_noop(client, db, customer, other_salon):
    client.cookies.update(session_cookie_for(other_salon.id, other_salon.owner_email))
    response = client.request("DELETE", "/api/customers", json={"ids": [customer.id]})
    assert response.json()["deleted"] == 0
    assert db.query(Customer).count() == 1
