"""
Staff attendance models
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base
from .models import generate_uuid


class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = (UniqueConstraint("staff_id", "attendance_date", name="uq_attendance_staff_date"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    staff_id = Column(String(36), ForeignKey("staff.id"), nullable=False, index=True)
    attendance_date = Column(Date, nullable=False, index=True)
    status = Column(String(20), nullable=False)  # present, absent, half_day, leave
    check_in_time = Column(String(5), nullable=True)
    check_out_time = Column(String(5), nullable=True)
    working_hours = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    is_locked = Column(Boolean, default=False, nullable=False)
    locked_at = Column(DateTime, nullable=True)
    admin_override = Column(Boolean, default=False, nullable=False)
    admin_notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    staff = relationship("Staff")


class AttendanceAuditLog(Base):
    __tablename__ = "attendance_audit_log"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    attendance_id = Column(String(36), ForeignKey("attendance.id", ondelete="SET NULL"), nullable=True)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    staff_id = Column(String(36), ForeignKey("staff.id"), nullable=True)
    action = Column(String(30), nullable=False)  # create, admin_override, lock, unlock
    old_status = Column(String(20), nullable=True)
    new_status = Column(String(20), nullable=True)
    performed_by = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
