"""Payment schemas"""

from typing import Optional

from pydantic import BaseModel


class CreateOrderRequest(BaseModel):
    plan_id: Optional[str] = None
    salon_id: Optional[str] = None
    user_id: Optional[str] = None
    include_setup: bool = True


class VerifyPaymentRequest(BaseModel):
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    salon_id: Optional[str] = None
