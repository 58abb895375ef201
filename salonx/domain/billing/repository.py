"""Billing repository - Invoice persistence"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Customer, Salon, Staff
from ...models_billing import Invoice


class BillingRepository:
    """Repository for invoice database operations"""

    @staticmethod
    def get_invoice(db: Session, salon_id: str, invoice_id: str) -> Optional[Invoice]:
        return (
            db.query(Invoice)
            .options(
                joinedload(Invoice.items),
                joinedload(Invoice.customer),
                joinedload(Invoice.billed_by),
            )
            .filter(Invoice.id == invoice_id, Invoice.salon_id == salon_id)
            .first()
        )

    @staticmethod
    def get_by_idempotency_key(db: Session, salon_id: str, key: str) -> Optional[Invoice]:
        return db.query(Invoice).filter(Invoice.salon_id == salon_id, Invoice.idempotency_key == key).first()

    @staticmethod
    def invoice_number_exists(db: Session, salon_id: str, invoice_number: str) -> bool:
        return (
            db.query(Invoice.id)
            .filter(Invoice.salon_id == salon_id, Invoice.invoice_number == invoice_number)
            .first()
            is not None
        )

    @staticmethod
    def count_with_prefix(db: Session, salon_id: str, prefix: str) -> int:
        return (
            db.query(Invoice)
            .filter(Invoice.salon_id == salon_id, Invoice.invoice_number.like(f"{prefix}%"))
            .count()
        )

    @staticmethod
    def get_staff(db: Session, salon_id: str, staff_id: str) -> Optional[Staff]:
        return db.query(Staff).filter(Staff.id == staff_id, Staff.salon_id == salon_id).first()

    @staticmethod
    def get_customer(db: Session, salon_id: str, customer_id: str, lock: bool = False) -> Optional[Customer]:
        query = db.query(Customer).filter(Customer.id == customer_id, Customer.salon_id == salon_id)
        if lock:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def get_salon(db: Session, salon_id: str) -> Optional[Salon]:
        return db.query(Salon).filter(Salon.id == salon_id).first()

    @staticmethod
    def record_visit(customer: Customer, amount: float, when: datetime) -> None:
        customer.total_visits = (customer.total_visits or 0) + 1
        customer.total_spent = round((customer.total_spent or 0) + amount, 2)
        customer.last_visit_date = when
