"""
Signature verification for Razorpay checkout callbacks and webhooks

- Constant-time signature comparison
- HMAC-SHA256 over the exact bytes that were signed
"""

import hashlib
import hmac
import logging
from typing import Optional

from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)


class WebhookSignatureError(Exception):
    """Raised when webhook signature verification fails"""


def constant_time_compare(a: str, b: str) -> bool:
    """Compare two strings in constant time; empty values never match"""
    if not a or not b:
        return False
    return hmac.compare_digest(a, b)


def compute_hmac_sha256(secret: str, payload: bytes) -> str:
    """Compute HMAC-SHA256 signature of payload"""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def verify_razorpay_payment_signature(
    order_id: str, payment_id: str, signature: str, secret: Optional[str]
) -> bool:
    """Checkout signature is HMAC(secret, "order_id|payment_id")"""
    if not secret:
        logger.error("❌ Razorpay key secret not configured")
        return False
    expected = compute_hmac_sha256(secret, f"{order_id}|{payment_id}".encode("utf-8"))
    return constant_time_compare(expected, signature or "")


def verify_signature(payload: bytes, signature: str, secret: str) -> None:
    """Raise WebhookSignatureError unless signature matches the payload"""
    expected = compute_hmac_sha256(secret, payload)
    if not constant_time_compare(expected, signature):
        raise WebhookSignatureError("Signature mismatch")


async def verify_razorpay_webhook(request: Request, secret: Optional[str]) -> bytes:
    """
    Verify the X-Razorpay-Signature header against the raw request body.

    Returns:
        The raw body, for parsing after verification

    Raises:
        HTTPException: 401 when the signature is missing or wrong, 500 when no secret is configured
    """
    body = await request.body()
    signature = request.headers.get("x-razorpay-signature")

    if not signature:
        logger.warning("🚫 Razorpay webhook without signature header")
        raise HTTPException(status_code=401, detail="Missing signature")

    if not secret:
        logger.error("❌ RAZORPAY_WEBHOOK_SECRET not configured")
        raise HTTPException(status_code=500, detail="Webhook secret not configured")

    try:
        verify_signature(body, signature, secret)
    except WebhookSignatureError as e:
        logger.warning("🚫 Razorpay webhook signature mismatch")
        raise HTTPException(status_code=401, detail="Invalid signature") from e

    logger.info("✅ Razorpay webhook signature verified")
    return body
