"""Staff repository - Database operations for staff"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Appointment, Staff
from ...models_billing import Invoice, InvoiceItem


class StaffRepository:
    """Repository for staff database operations"""

    @staticmethod
    def list_staff(db: Session, salon_id: str) -> list[Staff]:
        return db.query(Staff).filter(Staff.salon_id == salon_id).order_by(Staff.name.asc()).all()

    @staticmethod
    def get_staff(db: Session, salon_id: str, staff_id: str) -> Optional[Staff]:
        return db.query(Staff).filter(Staff.id == staff_id, Staff.salon_id == salon_id).first()

    @staticmethod
    def create_staff(db: Session, salon_id: str, **staff_data) -> Staff:
        staff = Staff(salon_id=salon_id, **staff_data)
        db.add(staff)
        db.commit()
        db.refresh(staff)
        return staff

    @staticmethod
    def update_staff(db: Session, staff: Staff, **updates) -> Staff:
        for key, value in updates.items():
            setattr(staff, key, value)
        db.commit()
        db.refresh(staff)
        return staff

    @staticmethod
    def count_billed_invoices(db: Session, staff_id: str) -> int:
        return db.query(Invoice).filter(Invoice.billed_by_staff_id == staff_id).count()

    @staticmethod
    def count_performed_items(db: Session, staff_id: str) -> int:
        return db.query(InvoiceItem).filter(InvoiceItem.staff_id == staff_id).count()

    @staticmethod
    def delete_staff(db: Session, staff: Staff) -> None:
        db.delete(staff)
        db.commit()

    @staticmethod
    def get_items_since(db: Session, salon_id: str, staff_id: str, since: datetime) -> list[InvoiceItem]:
        """Items this staff member handled on paid invoices since a date"""
        return (
            db.query(InvoiceItem)
            .join(Invoice, InvoiceItem.invoice_id == Invoice.id)
            .filter(
                Invoice.salon_id == salon_id,
                Invoice.payment_status == "paid",
                Invoice.created_at >= since,
                InvoiceItem.staff_id == staff_id,
            )
            .all()
        )

    @staticmethod
    def count_completed_appointments(db: Session, salon_id: str, staff_id: str, since: datetime) -> int:
        return (
            db.query(Appointment)
            .filter(
                Appointment.salon_id == salon_id,
                Appointment.staff_id == staff_id,
                Appointment.status == "completed",
                Appointment.appointment_date >= since.date(),
            )
            .count()
        )

    @staticmethod
    def get_invoices(db: Session, invoice_ids: list[str], limit: int = 5) -> list[Invoice]:
        if not invoice_ids:
            return []
        return (
            db.query(Invoice)
            .filter(Invoice.id.in_(invoice_ids))
            .order_by(Invoice.created_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def bills_created_by_staff(db: Session, salon_id: str) -> dict[str, int]:
        """staff_id -> paid invoices billed"""
        rows = (
            db.query(Invoice.billed_by_staff_id, func.count(Invoice.id))
            .filter(Invoice.salon_id == salon_id, Invoice.payment_status == "paid")
            .group_by(Invoice.billed_by_staff_id)
            .all()
        )
        return {staff_id: count for staff_id, count in rows if staff_id}

    @staticmethod
    def item_totals_by_staff(db: Session, salon_id: str) -> list[tuple]:
        """(staff_id, item_type, quantity, revenue, item_count) for paid invoices"""
        return (
            db.query(
                InvoiceItem.staff_id,
                InvoiceItem.item_type,
                func.coalesce(func.sum(InvoiceItem.quantity), 0),
                func.coalesce(func.sum(InvoiceItem.total_price), 0),
                func.count(InvoiceItem.id),
            )
            .join(Invoice, InvoiceItem.invoice_id == Invoice.id)
            .filter(
                Invoice.salon_id == salon_id,
                Invoice.payment_status == "paid",
                InvoiceItem.staff_id.isnot(None),
            )
            .group_by(InvoiceItem.staff_id, InvoiceItem.item_type)
            .all()
        )
