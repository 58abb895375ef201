"""Payment repository - Razorpay payment rows and salon subscriptions"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Salon
from ...models_billing import Payment, Subscription


class PaymentRepository:
    """Repository for subscription payments"""

    @staticmethod
    def get_salon(db: Session, salon_id: str) -> Optional[Salon]:
        return db.query(Salon).filter(Salon.id == salon_id).first()

    @staticmethod
    def create_payment(db: Session, **payment_data) -> Payment:
        payment = Payment(**payment_data)
        db.add(payment)
        return payment

    @staticmethod
    def get_by_order_id(db: Session, order_id: str) -> Optional[Payment]:
        return (
            db.query(Payment)
            .filter(Payment.razorpay_order_id == order_id)
            .order_by(Payment.created_at.desc())
            .first()
        )

    @staticmethod
    def get_by_payment_id(db: Session, payment_id: str) -> Optional[Payment]:
        return db.query(Payment).filter(Payment.razorpay_payment_id == payment_id).first()

    @staticmethod
    def get_subscription(db: Session, salon_id: str) -> Optional[Subscription]:
        return db.query(Subscription).filter(Subscription.salon_id == salon_id).first()
