"""Admin repository - Platform-level salon, key and lead operations"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ...models import (
    ActivationKey,
    AdminAuditLog,
    Appointment,
    Customer,
    Lead,
    Notification,
    Salon,
    Service,
    Staff,
)
from ...models_attendance import Attendance, AttendanceAuditLog
from ...models_billing import Coupon, Invoice, InvoiceItem, Payment, Subscription
from ...models_inventory import Inventory, Product, StockMovement, Supplier

# Child tables first so foreign keys never dangle mid-delete
TENANT_TABLES = [
    AttendanceAuditLog,
    Attendance,
    StockMovement,
    Inventory,
    Payment,
    Invoice,
    Coupon,
    Product,
    Supplier,
    Appointment,
    Customer,
    Staff,
    Service,
    Notification,
    Subscription,
    ActivationKey,
]


class AdminRepository:
    """Repository for admin database operations"""

    @staticmethod
    def list_salons(db: Session) -> list[Salon]:
        return db.query(Salon).order_by(Salon.created_at.desc()).all()

    @staticmethod
    def get_salon(db: Session, salon_id: str) -> Optional[Salon]:
        return db.query(Salon).filter(Salon.id == salon_id).first()

    @staticmethod
    def get_salon_by_email(db: Session, email: str) -> Optional[Salon]:
        return db.query(Salon).filter(Salon.owner_email == email).first()

    @staticmethod
    def active_key_expiries(db: Session) -> dict[str, datetime]:
        """salon_id -> expiry of its newest active key"""
        rows = (
            db.query(ActivationKey.salon_id, ActivationKey.expires_at)
            .filter(ActivationKey.status == "active")
            .order_by(ActivationKey.created_at.asc())
            .all()
        )
        return {salon_id: expires_at for salon_id, expires_at in rows}

    @staticmethod
    def add_key(db: Session, salon_id: str, key_hash: str, expires_at: datetime) -> ActivationKey:
        key = ActivationKey(salon_id=salon_id, key_hash=key_hash, expires_at=expires_at, status="active")
        db.add(key)
        return key

    @staticmethod
    def revoke_active_keys(db: Session, salon_id: str) -> int:
        return (
            db.query(ActivationKey)
            .filter(ActivationKey.salon_id == salon_id, ActivationKey.status == "active")
            .update({"status": "revoked", "revoked_at": datetime.utcnow()}, synchronize_session=False)
        )

    @staticmethod
    def delete_salon(db: Session, salon: Salon) -> None:
        """Remove a salon and every tenant row it owns"""
        invoice_ids = select(Invoice.id).where(Invoice.salon_id == salon.id)
        db.query(InvoiceItem).filter(InvoiceItem.invoice_id.in_(invoice_ids)).delete(
            synchronize_session=False
        )
        for model in TENANT_TABLES:
            db.query(model).filter(model.salon_id == salon.id).delete(synchronize_session=False)
        db.delete(salon)
        db.commit()

    # ------------------------------------------------------------------
    # Leads
    # ------------------------------------------------------------------

    @staticmethod
    def list_leads(db: Session, status: Optional[str] = None) -> list[Lead]:
        query = db.query(Lead)
        if status:
            query = query.filter(Lead.status == status)
        return query.order_by(Lead.created_at.desc()).all()

    @staticmethod
    def get_lead(db: Session, lead_id: str) -> Optional[Lead]:
        return db.query(Lead).filter(Lead.id == lead_id).first()

    @staticmethod
    def get_lead_by_email(db: Session, email: str) -> Optional[Lead]:
        return db.query(Lead).filter(Lead.email == email).first()

    @staticmethod
    def create_lead(db: Session, **lead_data) -> Lead:
        lead = Lead(**lead_data)
        db.add(lead)
        db.commit()
        db.refresh(lead)
        return lead

    @staticmethod
    def delete_lead(db: Session, lead: Lead) -> None:
        db.delete(lead)
        db.commit()

    @staticmethod
    def list_audit_logs(db: Session, limit: int = 100) -> list[AdminAuditLog]:
        return db.query(AdminAuditLog).order_by(AdminAuditLog.created_at.desc()).limit(limit).all()
