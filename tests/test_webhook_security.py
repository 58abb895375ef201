"""Checkout and webhook signature helpers.

Invariants:
    - Empty values never compare equal
    - The checkout signature covers "order_id|payment_id" with the key secret
"""

import hashlib
import hmac

import pytest

from salonx.webhook_security import (
    WebhookSignatureError,
    constant_time_compare,
    verify_razorpay_payment_signature,
    verify_signature,
)


def test_constant_time_compare():
    assert constant_time_compare("abc", "abc") is True
    assert constant_time_compare("abc", "abd") is False
    assert constant_time_compare("", "") is False


def test_payment_signature():
    signature = hmac.new(b"secret", b"order_1|pay_1", hashlib.sha256).hexdigest()
    assert verify_razorpay_payment_signature("order_1", "pay_1", signature, "secret") is True
    assert verify_razorpay_payment_signature("order_1", "pay_2", signature, "secret") is False
    assert verify_razorpay_payment_signature("order_1", "pay_1", signature, None) is False


def test_verify_signature_raises_on_mismatch():
    body = b'{"event": "payment.captured"}'
    verify_signature(body, hmac.new(b"whsec", body, hashlib.sha256).hexdigest(), "whsec")
    with pytest.raises(WebhookSignatureError):
        verify_signature(body, "0" * 64, "whsec")
