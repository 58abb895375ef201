import uuid

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
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_uuid():
    """Generate a string UUID primary key"""
    return str(uuid.uuid4())


# Audit rows written for platform-level actions have no admin user record
SYSTEM_ADMIN_ID = "00000000-0000-0000-0000-000000000000"


class Salon(Base):
    """Tenant: every salon-owned row carries salon_id"""

    __tablename__ = "salons"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    owner_email = Column(String(255), unique=True, index=True, nullable=False)
    logo_url = Column(String(500), nullable=True)
    gst_number = Column(String(20), nullable=True)
    gst_percentage = Column(Float, default=0, nullable=False)

    # Settings
    opening_time = Column(String(5), default="09:00")
    closing_time = Column(String(5), default="21:00")
    working_days = Column(JSON, default=lambda: [1, 2, 3, 4, 5, 6])
    currency = Column(String(3), default="INR")
    invoice_prefix = Column(String(10), default="INV")
    whatsapp_enabled = Column(Boolean, default=False)

    status = Column(String(20), default="inactive", nullable=False)  # inactive, active, suspended
    activated_at = Column(DateTime, nullable=True)
    last_login_at = Column(DateTime, nullable=True)
    suspended_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    activation_keys = relationship("ActivationKey", back_populates="salon")


class ActivationKey(Base):
    """bcrypt-hashed login credential issued by an admin"""

    __tablename__ = "activation_keys"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    key_hash = Column(String(255), nullable=False)
    status = Column(String(20), default="active", nullable=False)  # active, revoked, expired
    expires_at = Column(DateTime, nullable=False)
    last_used_at = Column(DateTime, nullable=True)
    revoked_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    salon = relationship("Salon", back_populates="activation_keys")


class AdminAuditLog(Base):
    __tablename__ = "admin_audit_logs"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    admin_id = Column(String(36), default=SYSTEM_ADMIN_ID, nullable=False)
    action = Column(String(50), nullable=False, index=True)
    target_type = Column(String(50), nullable=True)
    target_id = Column(String(255), nullable=True)
    # "metadata" is reserved on declarative classes
    details = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Lead(Base):
    """Prospective salon captured from the marketing site"""

    __tablename__ = "leads"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_name = Column(String(255), nullable=False)
    owner_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=False)
    city = Column(String(100), nullable=True)
    message = Column(Text, nullable=True)
    status = Column(String(20), default="new", nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class DemoRequest(Base):
    __tablename__ = "demo_requests"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    email = Column(String(255), nullable=True)
    salon_name = Column(String(255), nullable=False)
    city = Column(String(100), nullable=True)
    staff_count = Column(String(20), nullable=True)
    status = Column(String(20), default="pending", nullable=False)  # pending, contacted, converted, rejected
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Staff(Base):
    __tablename__ = "staff"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    role = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    image_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_cashier = Column(Boolean, default=False, nullable=False)
    service_ids = Column(JSON, default=list)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Service(Base):
    """A salon's service menu entry"""

    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)
    duration_minutes = Column(Integer, default=30, nullable=False)
    price = Column(Float, nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False, index=True)
    email = Column(String(255), nullable=True)
    gender = Column(String(10), nullable=True)  # male, female, other
    notes = Column(Text, nullable=True)
    tags = Column(JSON, default=list)
    total_visits = Column(Integer, default=0, nullable=False)
    total_spent = Column(Float, default=0, nullable=False)
    last_visit_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=False)
    staff_id = Column(String(36), ForeignKey("staff.id"), nullable=False)
    appointment_date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=True)
    service_ids = Column(JSON, default=list)
    total_amount = Column(Float, default=0, nullable=False)
    status = Column(String(20), default="confirmed", nullable=False)  # confirmed, completed, cancelled, no_show
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer")
    staff = relationship("Staff")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
