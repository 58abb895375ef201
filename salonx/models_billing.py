"""
Billing models: invoices, coupons, subscription payments
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base
from .models import generate_uuid


class Coupon(Base):
    __tablename__ = "coupons"
    __table_args__ = (UniqueConstraint("salon_id", "code", name="uq_coupons_salon_code"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    code = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    discount_type = Column(String(20), nullable=False)  # percentage, fixed
    discount_value = Column(Float, nullable=False)
    min_order_value = Column(Float, default=0, nullable=False)
    max_discount = Column(Float, nullable=True)
    max_uses = Column(Integer, nullable=True)
    used_count = Column(Integer, default=0, nullable=False)
    valid_from = Column(Date, nullable=False)
    valid_until = Column(Date, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Invoice(Base):
    """A completed POS bill"""

    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("salon_id", "invoice_number", name="uq_invoices_salon_number"),
        UniqueConstraint("salon_id", "idempotency_key", name="uq_invoices_salon_idempotency"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    invoice_number = Column(String(50), nullable=False, index=True)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=True)
    billed_by_staff_id = Column(String(36), ForeignKey("staff.id"), nullable=True)
    idempotency_key = Column(String(100), nullable=True)

    subtotal = Column(Float, default=0, nullable=False)
    discount_percent = Column(Float, default=0, nullable=False)
    discount_amount = Column(Float, default=0, nullable=False)
    coupon_id = Column(String(36), ForeignKey("coupons.id"), nullable=True)
    coupon_code = Column(String(50), nullable=True)
    tax_percent = Column(Float, default=0, nullable=False)
    tax_amount = Column(Float, default=0, nullable=False)
    total_amount = Column(Float, default=0, nullable=False)

    payment_method = Column(String(20), nullable=False)  # cash, upi, card
    payment_status = Column(String(20), default="paid", nullable=False)  # paid, pending, refunded
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), index=True)

    items = relationship(
        "InvoiceItem", back_populates="invoice", cascade="all, delete-orphan"
    )
    customer = relationship("Customer")
    billed_by = relationship("Staff")


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    invoice_id = Column(String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    item_type = Column(String(20), nullable=False)  # service, product
    item_id = Column(String(36), nullable=True)
    item_name = Column(String(255), nullable=False)
    quantity = Column(Float, default=1, nullable=False)
    unit_price = Column(Float, default=0, nullable=False)
    total_price = Column(Float, default=0, nullable=False)
    staff_id = Column(String(36), ForeignKey("staff.id"), nullable=True, index=True)
    created_at = Column(DateTime, server_default=func.now())

    invoice = relationship("Invoice", back_populates="items")
    staff = relationship("Staff")


class Payment(Base):
    """Subscription payment attempt tracked against a Razorpay order"""

    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=True)
    invoice_id = Column(String(36), ForeignKey("invoices.id"), nullable=True)
    amount = Column(Float, nullable=False)
    payment_method = Column(String(20), default="razorpay", nullable=False)
    status = Column(String(20), default="pending", nullable=False)  # pending, completed, failed, refunded
    razorpay_order_id = Column(String(100), nullable=True, index=True)
    razorpay_payment_id = Column(String(100), nullable=True, index=True)
    razorpay_signature = Column(String(255), nullable=True)
    notes = Column(JSON, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), unique=True, nullable=False)
    plan = Column(String(20), default="trial", nullable=False)  # trial, core, standard, premium
    status = Column(String(20), default="active", nullable=False)  # active, expired, cancelled, past_due
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    amount_paid = Column(Float, default=0, nullable=False)
    razorpay_subscription_id = Column(String(100), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
