"""POS checkout, standalone stock deduction and invoice view.

Invariants:
    - A bill is all-or-nothing: stock, invoice, coupon usage and customer stats change together
    - Invoice numbers are SALX-YYYYMM-NNNN, sequential per salon
    - Replaying X-Idempotency-Key returns the original invoice
    - /deduct keeps earlier deductions when a later item fails
"""

from datetime import date, datetime

import pytest

from salonx.models import Notification
from salonx.models_billing import Coupon, Invoice
from salonx.models_inventory import Inventory, StockMovement


@pytest.fixture
def bill(staff, cashier, haircut, shampoo, customer):
    """Haircut by Priya plus two bottles of shampoo, billed by Ravi"""
    return {
        "customer_id": customer.id,
        "billed_by_staff_id": cashier.id,
        "payment_method": "upi",
        "items": [
            {"item_type": "service", "item_id": haircut.id, "item_name": "Haircut", "staff_id": staff.id,
             "quantity": 1, "unit_price": 500},
            {"item_type": "product", "item_id": shampoo.id, "item_name": "Keratin Shampoo", "quantity": 2,
             "unit_price": 350},
        ],
    }


def stock_of(db, product):
    db.expire_all()
    return db.query(Inventory).filter_by(product_id=product.id).one().quantity


def test_complete_bill_creates_invoice_and_deducts_stock(salon_client, db, bill, shampoo, customer):
    response = salon_client.post("/api/billing/complete", json=bill)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Invoice created successfully"

    invoice = body["bill"]
    assert invoice["invoice_number"] == f"SALX-{datetime.utcnow().strftime('%Y%m')}-0001"
    assert invoice["subtotal"] == 1200
    assert invoice["total_amount"] == 1200
    assert invoice["payment_status"] == "paid"
    assert invoice["billed_by_name"] == "Ravi"
    assert invoice["customer_name"] == "Anita"
    assert {item["staff_name"] for item in invoice["items"] if item["item_type"] == "service"} == {"Priya"}

    assert stock_of(db, shampoo) == 18
    movement = db.query(StockMovement).one()
    assert movement.movement_type == "billing_deduction"
    assert movement.reference_id == invoice["id"]

    db.refresh(customer)
    assert customer.total_visits == 1
    assert customer.total_spent == 1200
    assert db.query(Notification).filter_by(type="payment_received").count() == 1


def test_fractional_product_quantity_is_kept(salon_client, db, bill, staff, shampoo):
    bill["items"] = [
        {"item_type": "product", "item_id": shampoo.id, "item_name": "Keratin Shampoo", "staff_id": staff.id,
         "quantity": 0.5, "unit_price": 350},
    ]
    invoice = salon_client.post("/api/billing/complete", json=bill).json()["bill"]

    item = invoice["items"][0]
    assert item["quantity"] == 0.5
    assert item["total_price"] == 175
    assert stock_of(db, shampoo) == 19.5
    assert db.query(StockMovement).one().quantity_change == -0.5

    metrics = salon_client.get(f"/api/staff/{staff.id}/metrics").json()["metrics"]
    assert metrics["products_sold"] == 0.5
    performance = {row["staff_id"]: row for row in salon_client.get("/api/staff/performance").json()["performance"]}
    assert performance[staff.id]["products_sold"] == 0.5


def test_invoice_numbers_are_sequential(salon_client, bill):
    first = salon_client.post("/api/billing/complete", json=bill).json()["bill"]["invoice_number"]
    second = salon_client.post("/api/billing/complete", json=bill).json()["bill"]["invoice_number"]
    assert first.endswith("-0001")
    assert second.endswith("-0002")


def test_discount_and_tax_are_derived(salon_client, bill):
    bill.update({"discount_percent": 10, "tax_percent": 18})
    invoice = salon_client.post("/api/billing/complete", json=bill).json()["bill"]
    assert invoice["discount_amount"] == 120
    assert invoice["tax_amount"] == 194.4
    assert invoice["total_amount"] == 1274.4


def test_idempotency_key_replays_original(salon_client, db, bill, shampoo):
    headers = {"X-Idempotency-Key": "pos-42"}
    first = salon_client.post("/api/billing/complete", json=bill, headers=headers).json()
    second = salon_client.post("/api/billing/complete", json=bill, headers=headers).json()

    assert second["message"] == "Invoice already exists (idempotent)"
    assert second["bill"]["id"] == first["bill"]["id"]
    assert db.query(Invoice).count() == 1
    assert stock_of(db, shampoo) == 18


def test_insufficient_stock_rolls_back_everything(salon_client, db, bill, shampoo, customer):
    bill["items"][1]["quantity"] = 25
    response = salon_client.post("/api/billing/complete", json=bill)
    assert response.status_code == 400
    assert response.json()["detail"] == "Insufficient stock for product. Available: 20, Required: 25"

    assert db.query(Invoice).count() == 0
    assert stock_of(db, shampoo) == 20
    db.refresh(customer)
    assert customer.total_visits == 0


@pytest.mark.parametrize(
    "change, message",
    [
        ({"items": []}, "No items in bill"),
        ({"payment_method": None}, "Payment method is required"),
        ({"payment_method": "cheque"}, "Payment method must be cash, upi, or card"),
        ({"billed_by_staff_id": None}, "Biller (staff) is required"),
        ({"billed_by_staff_id": "ghost"}, "Invalid biller staff"),
        ({"customer_id": "ghost"}, "Customer not found"),
        ({"coupon_id": "ghost"}, "Invalid coupon"),
    ],
)
def test_bill_validation(salon_client, bill, change, message):
    bill.update(change)
    response = salon_client.post("/api/billing/complete", json=bill)
    assert response.status_code == 400
    assert response.json()["detail"] == message


def test_service_without_staff_is_rejected(salon_client, bill):
    bill["items"][0]["staff_id"] = None
    response = salon_client.post("/api/billing/complete", json=bill)
    assert response.json()["detail"] == "All services must have a staff member assigned"


def test_zero_quantity_is_rejected(salon_client, bill):
    bill["items"][1]["quantity"] = -1
    response = salon_client.post("/api/billing/complete", json=bill)
    assert response.json()["detail"] == "Item quantity must be greater than zero"


def test_coupon_usage_is_counted(salon_client, db, salon, bill):
    coupon = Coupon(salon_id=salon.id, code="WELCOME10", discount_type="percentage", discount_value=10,
                    valid_from=date.today())
    db.add(coupon)
    db.commit()

    bill.update({"coupon_id": coupon.id, "discount_amount": 120})
    invoice = salon_client.post("/api/billing/complete", json=bill).json()["bill"]
    assert invoice["coupon_code"] == "WELCOME10"

    db.refresh(coupon)
    assert coupon.used_count == 1


def test_get_invoice_with_salon_block(salon_client, bill):
    invoice_id = salon_client.post("/api/billing/complete", json=bill).json()["bill"]["id"]
    body = salon_client.get(f"/api/billing/invoice/{invoice_id}").json()
    assert body["invoice"]["id"] == invoice_id
    assert len(body["invoice"]["items"]) == 2
    assert body["salon"]["name"] == "Glamour Studio"
    assert body["salon"]["email"] == "owner@glamour.in"


def test_get_missing_invoice_is_404(salon_client):
    response = salon_client.get("/api/billing/invoice/missing")
    assert response.status_code == 404
    assert response.json()["detail"] == "Invoice not found"


def test_deduct_items(salon_client, db, shampoo):
    response = salon_client.post(
        "/api/billing/deduct", json={"items": [{"product_id": shampoo.id, "quantity": 3}], "billing_id": "b-1"}
    )
    results = response.json()["results"]
    assert results[0]["new_quantity"] == 17
    assert stock_of(db, shampoo) == 17


def test_deduct_keeps_earlier_items_on_failure(salon_client, db, shampoo):
    response = salon_client.post(
        "/api/billing/deduct",
        json={"items": [{"product_id": shampoo.id, "quantity": 5}, {"product_id": shampoo.id, "quantity": 50}]},
    )
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["failed_product_id"] == shampoo.id
    assert len(detail["results"]) == 1
    assert stock_of(db, shampoo) == 15


def test_deduct_requires_items(salon_client):
    response = salon_client.post("/api/billing/deduct", json={"items": []})
    assert response.status_code == 400
    assert response.json()["detail"] == "Items array is required"
