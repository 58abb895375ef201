"""
Payment service - Subscription checkout through Razorpay

Flow: create-order stores a pending payment row, the browser completes
checkout, verify checks the signature and activates the subscription.
Webhooks replay the same transitions for payments the browser never reported.
"""

import hashlib
import json
import logging
import time
from datetime import datetime
from typing import Optional

from dateutil.relativedelta import relativedelta
from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET
from ...models_billing import Subscription
from ...plans import PLANS, SETUP_FEES, calculate_subscription_amount
from ...rate_limiter import check_rate_limit, get_redis_client, rate_limit_exceeded
from ...webhook_security import verify_razorpay_payment_signature
from .razorpay_service import RazorpayError, razorpay_service
from .repository import PaymentRepository
from .schemas import CreateOrderRequest, VerifyPaymentRequest

logger = logging.getLogger(__name__)

CREATE_ORDER_LIMIT = 5
CREATE_ORDER_WINDOW_SECONDS = 60
DEFAULT_PLAN = "standard"


def idempotency_key(user_id: str, plan_id: str, now: Optional[float] = None) -> str:
    """Same user and plan within the same minute map to the same key"""
    minute = int((now if now is not None else time.time()) // 60)
    return hashlib.sha256(f"{user_id}:{plan_id}:{minute}".encode("utf-8")).hexdigest()[:32]


def list_plans() -> list[dict]:
    return [{**plan, "setup_fee": SETUP_FEES.get(plan_id, 0)} for plan_id, plan in PLANS.items()]


def serialize_subscription(subscription: Subscription) -> dict:
    plan = PLANS.get(subscription.plan)
    return {
        "id": subscription.id,
        "salon_id": subscription.salon_id,
        "plan": subscription.plan,
        "plan_name": plan["name"] if plan else subscription.plan,
        "status": subscription.status,
        "start_date": subscription.start_date.isoformat() if subscription.start_date else None,
        "end_date": subscription.end_date.isoformat() if subscription.end_date else None,
        "amount_paid": subscription.amount_paid,
    }


class PaymentService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = PaymentRepository()

    # ========================================================================
    # CHECKOUT
    # ========================================================================

    async def create_order(self, data: CreateOrderRequest) -> dict:
        if not data.plan_id or not data.salon_id or not data.user_id:
            raise HTTPException(status_code=400, detail="Missing required fields: plan_id, salon_id, user_id")
        if data.plan_id not in PLANS:
            raise HTTPException(status_code=400, detail="Invalid plan_id")

        allowed, count, ttl = check_rate_limit(
            f"create_order:{data.user_id}", CREATE_ORDER_LIMIT, CREATE_ORDER_WINDOW_SECONDS, get_redis_client()
        )
        if not allowed:
            logger.warning(f"🚫 Order rate limit exceeded for user {data.user_id} ({count}/{CREATE_ORDER_LIMIT})")
            raise rate_limit_exceeded(
                CREATE_ORDER_LIMIT, CREATE_ORDER_WINDOW_SECONDS, ttl, "Too many requests. Please try again later."
            )

        if not razorpay_service.is_available():
            raise HTTPException(status_code=503, detail="Payment gateway not configured. Please contact support.")
        if not self.repo.get_salon(self.db, data.salon_id):
            raise HTTPException(status_code=404, detail="Salon not found")

        breakdown = calculate_subscription_amount(data.plan_id, data.include_setup)
        key = idempotency_key(data.user_id, data.plan_id)
        try:
            order = await razorpay_service.create_order(
                breakdown["total"],
                receipt=f"sub_{data.salon_id[:8]}_{int(time.time())}",
                notes={
                    "salon_id": data.salon_id,
                    "user_id": data.user_id,
                    "plan_id": data.plan_id,
                    "plan_amount": str(breakdown["planAmount"]),
                    "setup_fee": str(breakdown["setupFee"]),
                    "idempotency_key": key,
                },
            )
        except RazorpayError as e:
            logger.error(f"❌ Order creation failed for salon {data.salon_id}: {e}")
            raise HTTPException(status_code=502, detail="Failed to create order. Please try again.") from e

        self.repo.create_payment(
            self.db,
            salon_id=data.salon_id,
            amount=breakdown["total"],
            status="pending",
            razorpay_order_id=order["id"],
            notes={
                "plan_id": data.plan_id,
                "plan_amount": breakdown["planAmount"],
                "setup_fee": breakdown["setupFee"],
                "idempotency_key": key,
            },
        )
        self.db.commit()
        logger.info(f"💳 Pending payment stored for order {order['id']} (salon {data.salon_id}, plan {data.plan_id})")

        return {
            "success": True,
            "order": {"id": order["id"], "amount": order.get("amount"), "currency": order.get("currency", "INR")},
            "breakdown": {
                "plan_amount": breakdown["planAmount"],
                "setup_fee": breakdown["setupFee"],
                "total": breakdown["total"],
            },
            "key_id": RAZORPAY_KEY_ID,
        }

    async def verify_payment(self, data: VerifyPaymentRequest) -> dict:
        if not data.razorpay_order_id or not data.razorpay_payment_id or not data.razorpay_signature:
            raise HTTPException(status_code=400, detail="Missing payment verification fields")
        if not RAZORPAY_KEY_SECRET:
            raise HTTPException(status_code=503, detail="Payment gateway not configured")

        if not verify_razorpay_payment_signature(
            data.razorpay_order_id, data.razorpay_payment_id, data.razorpay_signature, RAZORPAY_KEY_SECRET
        ):
            logger.warning(f"🚫 Invalid payment signature for order {data.razorpay_order_id}")
            raise HTTPException(status_code=400, detail="Invalid payment signature")

        try:
            payment = await razorpay_service.fetch_payment(data.razorpay_payment_id)
        except RazorpayError as e:
            raise HTTPException(status_code=502, detail="Could not confirm payment with Razorpay") from e
        if payment.get("status") != "captured":
            raise HTTPException(status_code=400, detail=f"Payment not captured. Status: {payment.get('status')}")

        record = self.repo.get_by_order_id(self.db, data.razorpay_order_id)
        salon_id = record.salon_id if record else data.salon_id
        if not salon_id:
            raise HTTPException(status_code=404, detail="Payment order not found")

        plan_id = DEFAULT_PLAN
        if record:
            record.status = "completed"
            record.razorpay_payment_id = data.razorpay_payment_id
            record.razorpay_signature = data.razorpay_signature
            plan_id = (record.notes or {}).get("plan_id") or DEFAULT_PLAN

        subscription = self.activate_subscription(salon_id, plan_id, (payment.get("amount") or 0) / 100)
        self.db.commit()
        self.db.refresh(subscription)
        logger.info(f"✅ Payment {data.razorpay_payment_id} verified, {plan_id} plan active for salon {salon_id}")

        return {
            "success": True,
            "message": "Payment verified and subscription activated",
            "subscription": serialize_subscription(subscription),
        }

    def activate_subscription(self, salon_id: str, plan_id: str, amount_paid: float) -> Subscription:
        """Upsert the salon's subscription for one month from now"""
        now = datetime.utcnow()
        subscription = self.repo.get_subscription(self.db, salon_id)
        if subscription is None:
            subscription = Subscription(salon_id=salon_id)
            self.db.add(subscription)
        subscription.plan = plan_id
        subscription.status = "active"
        subscription.start_date = now
        subscription.end_date = now + relativedelta(months=1)
        subscription.amount_paid = amount_paid
        self.db.flush()
        return subscription

    def get_subscription(self, salon_id: str) -> Optional[dict]:
        subscription = self.repo.get_subscription(self.db, salon_id)
        return serialize_subscription(subscription) if subscription else None

    # ========================================================================
    # WEBHOOKS
    # ========================================================================

    def handle_webhook(self, body: bytes) -> dict:
        """Apply a verified Razorpay event; always acknowledges so Razorpay stops retrying"""
        try:
            event = json.loads(body)
        except ValueError:
            logger.error("❌ Razorpay webhook body is not valid JSON")
            return {"received": True, "error": "Processing failed"}

        event_type = event.get("event")
        payload = event.get("payload") or {}
        logger.info(f"📨 Razorpay webhook: {event_type}")

        try:
            if event_type == "payment.captured":
                self._on_payment_captured((payload.get("payment") or {}).get("entity"))
            elif event_type == "payment.failed":
                self._on_payment_failed((payload.get("payment") or {}).get("entity"))
            elif event_type == "refund.created":
                self._on_refund_created((payload.get("refund") or {}).get("entity"))
            else:
                logger.info(f"ℹ️ Ignoring Razorpay event {event_type}")
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Razorpay webhook {event_type} processing failed: {e}")
            logger.exception(e)
            return {"received": True, "error": "Processing failed"}

        return {"received": True}

    def _on_payment_captured(self, entity: Optional[dict]) -> None:
        if not entity:
            return
        record = self.repo.get_by_order_id(self.db, entity.get("order_id"))
        if record:
            record.status = "completed"
            record.razorpay_payment_id = record.razorpay_payment_id or entity.get("id")

        notes = entity.get("notes") or {}
        salon_id = notes.get("salon_id") or (record.salon_id if record else None)
        if salon_id:
            plan_id = notes.get("plan_id") or DEFAULT_PLAN
            self.activate_subscription(salon_id, plan_id, (entity.get("amount") or 0) / 100)

    def _on_payment_failed(self, entity: Optional[dict]) -> None:
        if not entity:
            return
        record = self.repo.get_by_order_id(self.db, entity.get("order_id"))
        if record:
            record.status = "failed"
            logger.warning(f"⚠️ Payment failed for order {entity.get('order_id')}")

    def _on_refund_created(self, entity: Optional[dict]) -> None:
        if not entity:
            return
        original = self.repo.get_by_payment_id(self.db, entity.get("payment_id"))
        if not original:
            logger.warning(f"⚠️ Refund {entity.get('id')} for unknown payment {entity.get('payment_id')}")
            return

        self.repo.create_payment(
            self.db,
            salon_id=original.salon_id,
            amount=-((entity.get("amount") or 0) / 100),
            status="refunded",
            razorpay_payment_id=entity.get("id"),
            notes={"original_payment": entity.get("payment_id")},
        )
        subscription = self.repo.get_subscription(self.db, original.salon_id)
        if subscription:
            subscription.status = "cancelled"
        logger.info(f"↩️ Refund {entity.get('id')} recorded for salon {original.salon_id}")
