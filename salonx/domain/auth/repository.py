"""Auth repository - Salon and activation key lookups for login"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import ActivationKey, Salon


class AuthRepository:
    """Repository for login-related database operations"""

    @staticmethod
    def get_salon_by_email(db: Session, email: str) -> Optional[Salon]:
        return db.query(Salon).filter(Salon.owner_email == email).first()

    @staticmethod
    def get_salon(db: Session, salon_id: str) -> Optional[Salon]:
        return db.query(Salon).filter(Salon.id == salon_id).first()

    @staticmethod
    def get_active_key(db: Session, salon_id: str) -> Optional[ActivationKey]:
        """Most recent active key for the salon"""
        return (
            db.query(ActivationKey)
            .filter(ActivationKey.salon_id == salon_id, ActivationKey.status == "active")
            .order_by(ActivationKey.created_at.desc())
            .first()
        )
