"""Coupon creation and validation.

Invariants:
    - Codes are stored upper-case and unique per salon
    - Percentage discounts are capped by max_discount and never exceed the order
    - Expired, exhausted and under-minimum coupons are reported as invalid, not as errors
"""

from datetime import date, timedelta

from salonx.domain.coupons.service import check_coupon, compute_discount
from salonx.models_billing import Coupon


def make_coupon(**overrides):
    values = {
        "id": "c-1",
        "code": "FESTIVE20",
        "discount_type": "percentage",
        "discount_value": 20,
        "min_order_value": 0,
        "max_discount": None,
        "max_uses": None,
        "used_count": 0,
        "valid_from": date(2024, 1, 1),
        "valid_until": None,
        "is_active": True,
    }
    values.update(overrides)
    return Coupon(**values)


def test_percentage_discount_respects_cap():
    assert compute_discount(make_coupon(), 1000) == 200
    assert compute_discount(make_coupon(max_discount=150), 1000) == 150


def test_fixed_discount_never_exceeds_order():
    assert compute_discount(make_coupon(discount_type="fixed", discount_value=500), 300) == 300


def test_check_coupon_rules():
    today = date(2024, 6, 1)
    assert check_coupon(None, 100, today).message == "Invalid coupon code"
    assert check_coupon(make_coupon(is_active=False), 100, today).valid is False
    assert check_coupon(make_coupon(valid_from=date(2024, 7, 1)), 100, today).message == "Coupon not yet valid"
    assert check_coupon(make_coupon(valid_until=date(2024, 5, 31)), 100, today).message == "Coupon has expired"
    assert check_coupon(make_coupon(max_uses=3, used_count=3), 100, today).message == "Coupon usage limit reached"
    assert check_coupon(make_coupon(min_order_value=999), 100, today).message == "Minimum order ₹999"

    applied = check_coupon(make_coupon(), 100, today)
    assert applied.valid is True
    assert applied.discount_amount == 20


def test_create_and_validate_coupon(salon_client):
    created = salon_client.post(
        "/api/coupons", json={"code": " welcome10 ", "discount_type": "percentage", "discount_value": 10}
    )
    assert created.status_code == 201
    assert created.json()["data"]["code"] == "WELCOME10"

    result = salon_client.post("/api/coupons/validate", json={"code": "welcome10", "order_value": 800}).json()
    assert result["valid"] is True
    assert result["discount_amount"] == 80


def test_duplicate_code_is_rejected(salon_client):
    payload = {"code": "SAVE50", "discount_type": "fixed", "discount_value": 50}
    salon_client.post("/api/coupons", json=payload)
    response = salon_client.post("/api/coupons", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "Coupon code already exists"


def test_percentage_over_100_is_rejected(salon_client):
    response = salon_client.post(
        "/api/coupons", json={"code": "HUGE", "discount_type": "percentage", "discount_value": 150}
    )
    assert response.status_code == 400


def test_expired_coupon_validates_as_invalid(salon_client):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    salon_client.post(
        "/api/coupons",
        json={"code": "OLD", "discount_type": "fixed", "discount_value": 50,
              "valid_from": "2020-01-01", "valid_until": yesterday},
    )
    result = salon_client.post("/api/coupons/validate", json={"code": "OLD", "order_value": 500}).json()
    assert result["valid"] is False
    assert result["message"] == "Coupon has expired"


def test_validate_requires_code(salon_client):
    response = salon_client.post("/api/coupons/validate", json={"order_value": 500})
    assert response.status_code == 400
