"""Payment router - Subscription plans, checkout and Razorpay webhooks"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...auth import get_current_salon_id
from ...config import RAZORPAY_WEBHOOK_SECRET
from ...database import get_db
from ...webhook_security import verify_razorpay_webhook
from .schemas import CreateOrderRequest, VerifyPaymentRequest
from .service import PaymentService, list_plans

router = APIRouter(prefix="/api/payments", tags=["Payments"])
webhook_router = APIRouter(prefix="/api/webhooks", tags=["Webhooks"])


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(db)


@router.get("/plans")
async def get_plans():
    return {"plans": list_plans()}


@router.post("/create-order")
async def create_order(data: CreateOrderRequest, service: PaymentService = Depends(get_payment_service)):
    return await service.create_order(data)


@router.post("/verify")
async def verify_payment(data: VerifyPaymentRequest, service: PaymentService = Depends(get_payment_service)):
    return await service.verify_payment(data)


@router.get("/subscription")
async def get_subscription(
    salon_id: str = Depends(get_current_salon_id),
    service: PaymentService = Depends(get_payment_service),
):
    return {"subscription": service.get_subscription(salon_id)}


# ============================================================================
# WEBHOOKS
# ============================================================================


@webhook_router.post("/razorpay")
async def razorpay_webhook(request: Request, service: PaymentService = Depends(get_payment_service)):
    body = await verify_razorpay_webhook(request, RAZORPAY_WEBHOOK_SECRET)
    return service.handle_webhook(body)


@webhook_router.get("/razorpay")
async def razorpay_webhook_get():
    return JSONResponse(status_code=405, content={"detail": "Method not allowed"})


__all__ = ["router", "webhook_router"]
