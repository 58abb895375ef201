"""Coupon service - Discount codes and their validation"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models_billing import Coupon
from ...shared.validators import parse_optional_date
from ...utils.sanitization import sanitize_string
from .repository import CouponRepository
from .schemas import CouponCreate, CouponValidation

logger = logging.getLogger(__name__)

DISCOUNT_TYPES = ["percentage", "fixed"]


def format_amount(value: float) -> str:
    value = float(value or 0)
    return str(int(value)) if value.is_integer() else f"{value:.2f}"


def compute_discount(coupon: Coupon, order_value: float) -> float:
    """Discount for an order; percentages respect max_discount, never exceeds the order"""
    if coupon.discount_type == "percentage":
        discount = order_value * (coupon.discount_value or 0) / 100
        if coupon.max_discount is not None:
            discount = min(discount, coupon.max_discount)
    else:
        discount = coupon.discount_value or 0
    return round(min(discount, order_value), 2)


def check_coupon(coupon: Optional[Coupon], order_value: float, today: Optional[date] = None) -> CouponValidation:
    today = today or date.today()
    if coupon is None or not coupon.is_active:
        return CouponValidation(valid=False, message="Invalid coupon code")
    if coupon.valid_from and today < coupon.valid_from:
        return CouponValidation(valid=False, message="Coupon not yet valid")
    if coupon.valid_until and today > coupon.valid_until:
        return CouponValidation(valid=False, message="Coupon has expired")
    if coupon.max_uses is not None and (coupon.used_count or 0) >= coupon.max_uses:
        return CouponValidation(valid=False, message="Coupon usage limit reached")
    if order_value < (coupon.min_order_value or 0):
        return CouponValidation(valid=False, message=f"Minimum order ₹{format_amount(coupon.min_order_value)}")

    return CouponValidation(
        valid=True,
        message="Coupon applied!",
        coupon_id=coupon.id,
        discount_type=coupon.discount_type,
        discount_value=coupon.discount_value,
        discount_amount=compute_discount(coupon, order_value),
    )


class CouponService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = CouponRepository()

    def list_coupons(self, salon_id: str, active_only: bool) -> list[Coupon]:
        return self.repo.list_coupons(self.db, salon_id, active_only)

    def create_coupon(self, salon_id: str, data: CouponCreate) -> Coupon:
        if not (data.code or "").strip() or not data.discount_type or data.discount_value is None:
            raise HTTPException(status_code=400, detail="Code, discount type, and discount value are required")
        if data.discount_type not in DISCOUNT_TYPES:
            raise HTTPException(status_code=400, detail="Discount type must be percentage or fixed")
        if data.discount_value <= 0:
            raise HTTPException(status_code=400, detail="Discount value must be greater than zero")
        if data.discount_type == "percentage" and data.discount_value > 100:
            raise HTTPException(status_code=400, detail="Percentage discount cannot exceed 100")

        code = data.code.strip().upper()
        if self.repo.get_by_code(self.db, salon_id, code):
            raise HTTPException(status_code=400, detail="Coupon code already exists")

        try:
            valid_from = parse_optional_date(data.valid_from) or date.today()
            valid_until = parse_optional_date(data.valid_until)
        except ValueError as e:
            raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD") from e

        coupon = self.repo.create_coupon(
            self.db,
            salon_id,
            code=code,
            description=sanitize_string(data.description),
            discount_type=data.discount_type,
            discount_value=data.discount_value,
            min_order_value=data.min_order_value or 0,
            max_discount=data.max_discount,
            max_uses=data.max_uses,
            valid_from=valid_from,
            valid_until=valid_until,
            is_active=True,
        )
        logger.info(f"🎟️ Coupon created: {code} for salon {salon_id}")
        return coupon

    def validate_coupon(self, salon_id: str, code: Optional[str], order_value: float) -> CouponValidation:
        if not (code or "").strip():
            raise HTTPException(status_code=400, detail="Coupon code is required")
        coupon = self.repo.get_by_code(self.db, salon_id, code.strip().upper())
        return check_coupon(coupon, order_value or 0)
