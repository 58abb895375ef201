"""Coupon repository"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models_billing import Coupon


class CouponRepository:
    """Repository for coupon database operations"""

    @staticmethod
    def list_coupons(db: Session, salon_id: str, active_only: bool = True) -> list[Coupon]:
        query = db.query(Coupon).filter(Coupon.salon_id == salon_id)
        if active_only:
            query = query.filter(Coupon.is_active.is_(True))
        return query.order_by(Coupon.created_at.desc()).all()

    @staticmethod
    def get_by_code(db: Session, salon_id: str, code: str) -> Optional[Coupon]:
        return db.query(Coupon).filter(Coupon.salon_id == salon_id, Coupon.code == code).first()

    @staticmethod
    def get_coupon(db: Session, salon_id: str, coupon_id: str, lock: bool = False) -> Optional[Coupon]:
        query = db.query(Coupon).filter(Coupon.salon_id == salon_id, Coupon.id == coupon_id)
        if lock:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def create_coupon(db: Session, salon_id: str, **coupon_data) -> Coupon:
        coupon = Coupon(salon_id=salon_id, **coupon_data)
        db.add(coupon)
        db.commit()
        db.refresh(coupon)
        return coupon
