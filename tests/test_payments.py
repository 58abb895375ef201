"""Subscription checkout through Razorpay and webhook handling.

Invariants:
    - Orders are priced from the plan table, setup fee included by default
    - A payment is only accepted with a valid HMAC signature and a captured status
    - Verification activates a one-month subscription for the paying salon
    - Webhooks require a valid signature and are always acknowledged once verified
"""

import hashlib
import hmac
import json

import pytest

from salonx.domain.payments import router as payments_router
from salonx.domain.payments import service as payments_service
from salonx.domain.payments.razorpay_service import RazorpayError
from salonx.domain.payments.service import idempotency_key
from salonx.models_billing import Payment, Subscription

KEY_SECRET = "rzp_test_secret"
WEBHOOK_SECRET = "whsec_test"


class FakeRazorpay:
    def __init__(self, payment_status="captured", fail=False):
        self.payment_status = payment_status
        self.fail = fail
        self.orders = []

    def is_available(self):
        return True

    async def create_order(self, amount, receipt, notes=None, currency="INR"):
        if self.fail:
            raise RazorpayError("Bad request")
        self.orders.append({"amount": amount, "receipt": receipt, "notes": notes})
        return {"id": f"order_{len(self.orders)}", "amount": int(amount * 100), "currency": currency}

    async def fetch_payment(self, payment_id):
        return {"id": payment_id, "status": self.payment_status, "amount": 899800}


@pytest.fixture
def razorpay(monkeypatch):
    fake = FakeRazorpay()
    monkeypatch.setattr(payments_service, "razorpay_service", fake)
    monkeypatch.setattr(payments_service, "RAZORPAY_KEY_SECRET", KEY_SECRET)
    monkeypatch.setattr(payments_service, "RAZORPAY_KEY_ID", "rzp_test_key")
    monkeypatch.setattr(payments_router, "RAZORPAY_WEBHOOK_SECRET", WEBHOOK_SECRET)
    return fake


def sign(order_id, payment_id):
    return hmac.new(KEY_SECRET.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


def post_webhook(client, event, secret=WEBHOOK_SECRET):
    body = json.dumps(event).encode()
    signature = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return client.post(
        "/api/webhooks/razorpay",
        content=body,
        headers={"Content-Type": "application/json", "X-Razorpay-Signature": signature},
    )


def create_order(client, salon, plan_id="standard", **extra):
    return client.post(
        "/api/payments/create-order", json={"plan_id": plan_id, "salon_id": salon.id, "user_id": "u-1", **extra}
    )


def test_plans_include_setup_fees(client):
    plans = {plan["id"]: plan for plan in client.get("/api/payments/plans").json()["plans"]}
    assert plans["standard"]["price"] == 4999
    assert plans["standard"]["setup_fee"] == 4999


def test_idempotency_key_is_stable_within_a_minute():
    assert idempotency_key("u-1", "core", now=120.0) == idempotency_key("u-1", "core", now=179.0)
    assert idempotency_key("u-1", "core", now=120.0) != idempotency_key("u-1", "core", now=180.0)
    assert len(idempotency_key("u-1", "core", now=0)) == 32


def test_create_order_stores_pending_payment(client, db, salon, razorpay):
    response = create_order(client, salon)
    assert response.status_code == 200
    body = response.json()
    assert body["breakdown"] == {"plan_amount": 4999, "setup_fee": 4999, "total": 9998}
    assert body["key_id"] == "rzp_test_key"
    assert razorpay.orders[0]["notes"]["salon_id"] == salon.id

    payment = db.query(Payment).one()
    assert payment.status == "pending"
    assert payment.razorpay_order_id == body["order"]["id"]
    assert payment.notes["plan_id"] == "standard"


def test_create_order_without_setup_fee(client, salon, razorpay):
    body = create_order(client, salon, include_setup=False).json()
    assert body["breakdown"]["total"] == 4999


def test_create_order_validation(client, salon, razorpay):
    assert client.post("/api/payments/create-order", json={"plan_id": "core"}).status_code == 400
    assert create_order(client, salon, plan_id="gold").json()["detail"] == "Invalid plan_id"


def test_create_order_unknown_salon(client, razorpay):
    response = client.post(
        "/api/payments/create-order", json={"plan_id": "core", "salon_id": "missing", "user_id": "u-1"}
    )
    assert response.status_code == 404


def test_create_order_gateway_failure(client, salon, razorpay):
    razorpay.fail = True
    assert create_order(client, salon).status_code == 502


def test_create_order_rate_limited(client, salon, razorpay):
    for _ in range(5):
        create_order(client, salon)
    assert create_order(client, salon).status_code == 429


def test_verify_activates_subscription(client, db, salon, razorpay):
    order_id = create_order(client, salon).json()["order"]["id"]
    response = client.post(
        "/api/payments/verify",
        json={"razorpay_order_id": order_id, "razorpay_payment_id": "pay_1",
              "razorpay_signature": sign(order_id, "pay_1")},
    )
    assert response.status_code == 200
    subscription = response.json()["subscription"]
    assert subscription["plan"] == "standard"
    assert subscription["status"] == "active"
    assert subscription["amount_paid"] == 8998

    payment = db.query(Payment).one()
    assert payment.status == "completed"
    assert payment.razorpay_payment_id == "pay_1"


def test_verify_rejects_bad_signature(client, salon, razorpay):
    order_id = create_order(client, salon).json()["order"]["id"]
    response = client.post(
        "/api/payments/verify",
        json={"razorpay_order_id": order_id, "razorpay_payment_id": "pay_1", "razorpay_signature": "forged"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid payment signature"


def test_verify_requires_captured_payment(client, salon, razorpay):
    razorpay.payment_status = "authorized"
    order_id = create_order(client, salon).json()["order"]["id"]
    response = client.post(
        "/api/payments/verify",
        json={"razorpay_order_id": order_id, "razorpay_payment_id": "pay_1",
              "razorpay_signature": sign(order_id, "pay_1")},
    )
    assert response.json()["detail"] == "Payment not captured. Status: authorized"


def test_subscription_endpoint(salon_client, db, salon, razorpay):
    assert salon_client.get("/api/payments/subscription").json() == {"subscription": None}
    payments_service.PaymentService(db).activate_subscription(salon.id, "core", 1999)
    db.commit()
    assert salon_client.get("/api/payments/subscription").json()["subscription"]["plan_name"] == "Core"


def test_webhook_requires_signature(client, razorpay):
    response = client.post("/api/webhooks/razorpay", content=b"{}")
    assert response.status_code == 401


def test_webhook_rejects_wrong_signature(client, razorpay):
    response = post_webhook(client, {"event": "payment.captured"}, secret="other")
    assert response.status_code == 401


def test_webhook_payment_captured(client, db, salon, razorpay):
    order_id = create_order(client, salon, plan_id="premium").json()["order"]["id"]
    event = {
        "event": "payment.captured",
        "payload": {"payment": {"entity": {
            "id": "pay_9", "order_id": order_id, "amount": 699900,
            "notes": {"salon_id": salon.id, "plan_id": "premium"},
        }}},
    }
    assert post_webhook(client, event).json() == {"received": True}

    db.expire_all()
    assert db.query(Payment).one().status == "completed"
    subscription = db.query(Subscription).one()
    assert subscription.plan == "premium"
    assert subscription.amount_paid == 6999


def test_webhook_payment_failed(client, db, salon, razorpay):
    order_id = create_order(client, salon).json()["order"]["id"]
    event = {"event": "payment.failed", "payload": {"payment": {"entity": {"id": "pay_2", "order_id": order_id}}}}
    post_webhook(client, event)
    db.expire_all()
    assert db.query(Payment).one().status == "failed"


def test_webhook_refund_cancels_subscription(client, db, salon, razorpay):
    order_id = create_order(client, salon).json()["order"]["id"]
    client.post(
        "/api/payments/verify",
        json={"razorpay_order_id": order_id, "razorpay_payment_id": "pay_1",
              "razorpay_signature": sign(order_id, "pay_1")},
    )
    event = {
        "event": "refund.created",
        "payload": {"refund": {"entity": {"id": "rfnd_1", "payment_id": "pay_1", "amount": 899800}}},
    }
    assert post_webhook(client, event).json() == {"received": True}

    db.expire_all()
    refund = db.query(Payment).filter_by(status="refunded").one()
    assert refund.amount == -8998
    assert db.query(Subscription).one().status == "cancelled"


def test_webhook_with_unparseable_body_is_acknowledged(client, razorpay):
    body = b"not json"
    signature = hmac.new(WEBHOOK_SECRET.encode(), body, hashlib.sha256).hexdigest()
    response = client.post("/api/webhooks/razorpay", content=body, headers={"X-Razorpay-Signature": signature})
    assert response.json() == {"received": True, "error": "Processing failed"}


def test_webhook_get_is_not_allowed(client):
    assert client.get("/api/webhooks/razorpay").status_code == 405
