"""Coupon router"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_salon_id
from ...database import get_db
from ...models_billing import Coupon
from .schemas import CouponCreate, CouponValidateRequest
from .service import CouponService

router = APIRouter(prefix="/api/coupons", tags=["Coupons"])


def get_coupon_service(db: Session = Depends(get_db)) -> CouponService:
    """Dependency injection for CouponService"""
    return CouponService(db)


def serialize_coupon(c: Coupon) -> dict:
    return {
        "id": c.id,
        "salon_id": c.salon_id,
        "code": c.code,
        "description": c.description,
        "discount_type": c.discount_type,
        "discount_value": c.discount_value,
        "min_order_value": c.min_order_value,
        "max_discount": c.max_discount,
        "max_uses": c.max_uses,
        "used_count": c.used_count,
        "valid_from": c.valid_from,
        "valid_until": c.valid_until,
        "is_active": c.is_active,
        "created_at": c.created_at,
    }


@router.get("")
async def list_coupons(
    active: bool = Query(True),
    salon_id: str = Depends(get_current_salon_id),
    service: CouponService = Depends(get_coupon_service),
):
    return {"success": True, "data": [serialize_coupon(c) for c in service.list_coupons(salon_id, active)]}


@router.post("", status_code=201)
async def create_coupon(
    data: CouponCreate,
    salon_id: str = Depends(get_current_salon_id),
    service: CouponService = Depends(get_coupon_service),
):
    coupon = service.create_coupon(salon_id, data)
    return {"success": True, "data": serialize_coupon(coupon), "message": "Coupon created successfully"}


@router.post("/validate")
async def validate_coupon(
    data: CouponValidateRequest,
    salon_id: str = Depends(get_current_salon_id),
    service: CouponService = Depends(get_coupon_service),
):
    return service.validate_coupon(salon_id, data.code, data.order_value).model_dump()


__all__ = ["router"]
