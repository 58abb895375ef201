"""Razorpay service - Orders, payments and refunds over the Razorpay REST API"""

import logging
from typing import Optional

import httpx

from ...config import RAZORPAY_API_BASE, RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET

logger = logging.getLogger(__name__)


class RazorpayError(Exception):
    """Raised when the Razorpay API rejects a request"""


class RazorpayService:
    """Service for Razorpay API operations"""

    def __init__(self, key_id: Optional[str] = RAZORPAY_KEY_ID, key_secret: Optional[str] = RAZORPAY_KEY_SECRET):
        self.key_id = key_id
        self.key_secret = key_secret

        if not self.is_available():
            logger.warning("RAZORPAY_KEY_ID/RAZORPAY_KEY_SECRET not set; payment endpoints will fail until configured")

    def is_available(self) -> bool:
        return bool(self.key_id and self.key_secret)

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> dict:
        if not self.is_available():
            raise RazorpayError("Razorpay is not configured")

        async with httpx.AsyncClient(timeout=30.0, auth=(self.key_id, self.key_secret)) as http_client:
            response = await http_client.request(method, f"{RAZORPAY_API_BASE}{path}", json=json)

        if response.status_code >= 400:
            try:
                description = response.json().get("error", {}).get("description")
            except ValueError:
                description = None
            logger.error(f"❌ Razorpay {method} {path} failed: HTTP {response.status_code} {description}")
            raise RazorpayError(description or f"Razorpay request failed ({response.status_code})")

        return response.json()

    async def create_order(
        self, amount_in_rupees: float, receipt: str, notes: Optional[dict] = None, currency: str = "INR"
    ) -> dict:
        """Create an order; Razorpay amounts are in paise"""
        order = await self._request(
            "POST",
            "/orders",
            json={
                "amount": int(round(amount_in_rupees * 100)),
                "currency": currency,
                "receipt": receipt[:40],
                "notes": notes or {},
            },
        )
        logger.info(f"✅ Razorpay order created: {order.get('id')}")
        return order

    async def fetch_payment(self, payment_id: str) -> dict:
        return await self._request("GET", f"/payments/{payment_id}")


# Global instance
razorpay_service = RazorpayService()
