"""Customer repository - Database operations for customers"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ...models import Appointment, Customer
from ...models_billing import Invoice, InvoiceItem, Payment


class CustomerRepository:
    """Repository for customer database operations"""

    @staticmethod
    def list_customers(db: Session, salon_id: str) -> list[Customer]:
        return (
            db.query(Customer)
            .filter(Customer.salon_id == salon_id)
            .order_by(Customer.created_at.desc())
            .all()
        )

    @staticmethod
    def get_customer(db: Session, salon_id: str, customer_id: str) -> Optional[Customer]:
        return (
            db.query(Customer)
            .filter(Customer.id == customer_id, Customer.salon_id == salon_id)
            .first()
        )

    @staticmethod
    def get_by_phone(db: Session, salon_id: str, phone: str) -> Optional[Customer]:
        return (
            db.query(Customer)
            .filter(Customer.salon_id == salon_id, Customer.phone == phone)
            .first()
        )

    @staticmethod
    def bulk_create(db: Session, salon_id: str, rows: list[dict]) -> list[Customer]:
        customers = [Customer(salon_id=salon_id, **row) for row in rows]
        db.add_all(customers)
        db.commit()
        for customer in customers:
            db.refresh(customer)
        return customers

    @staticmethod
    def update_customer(db: Session, customer: Customer, **updates) -> Customer:
        for key, value in updates.items():
            setattr(customer, key, value)
        db.commit()
        db.refresh(customer)
        return customer

    @staticmethod
    def delete_customers(db: Session, salon_id: str, customer_ids: list[str]) -> int:
        """Delete customers with their payments, invoices and appointments"""
        owned_ids = select(Customer.id).where(Customer.salon_id == salon_id, Customer.id.in_(customer_ids))
        invoice_ids = select(Invoice.id).where(Invoice.salon_id == salon_id, Invoice.customer_id.in_(owned_ids))

        db.query(Payment).filter(Payment.salon_id == salon_id, Payment.customer_id.in_(owned_ids)).delete(
            synchronize_session=False
        )
        db.query(Payment).filter(Payment.salon_id == salon_id, Payment.invoice_id.in_(invoice_ids)).delete(
            synchronize_session=False
        )
        db.query(InvoiceItem).filter(InvoiceItem.invoice_id.in_(invoice_ids)).delete(synchronize_session=False)
        db.query(Invoice).filter(Invoice.salon_id == salon_id, Invoice.customer_id.in_(owned_ids)).delete(
            synchronize_session=False
        )
        db.query(Appointment).filter(
            Appointment.salon_id == salon_id, Appointment.customer_id.in_(owned_ids)
        ).delete(synchronize_session=False)
        deleted = (
            db.query(Customer)
            .filter(Customer.salon_id == salon_id, Customer.id.in_(customer_ids))
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted
