"""Coupon domain schemas"""

from typing import Optional

from pydantic import BaseModel


class CouponCreate(BaseModel):
    code: Optional[str] = None
    discount_type: Optional[str] = None
    discount_value: Optional[float] = None
    description: Optional[str] = None
    min_order_value: Optional[float] = None
    max_discount: Optional[float] = None
    max_uses: Optional[int] = None
    valid_from: Optional[str] = None
    valid_until: Optional[str] = None


class CouponValidateRequest(BaseModel):
    code: Optional[str] = None
    order_value: float = 0


class CouponValidation(BaseModel):
    valid: bool
    message: str
    coupon_id: Optional[str] = None
    discount_type: Optional[str] = None
    discount_value: Optional[float] = None
    discount_amount: float = 0
