"""Attendance repository - Data access layer for attendance"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Staff
from ...models_attendance import Attendance, AttendanceAuditLog


class AttendanceRepository:
    """Repository for attendance records and their audit trail"""

    @staticmethod
    def list_for_date(db: Session, salon_id: str, day: date) -> list[Attendance]:
        return (
            db.query(Attendance)
            .options(joinedload(Attendance.staff))
            .filter(Attendance.salon_id == salon_id, Attendance.attendance_date == day)
            .order_by(Attendance.created_at.asc())
            .all()
        )

    @staticmethod
    def list_range(
        db: Session, salon_id: str, start: date, end: date, staff_id: Optional[str] = None
    ) -> list[Attendance]:
        query = (
            db.query(Attendance)
            .options(joinedload(Attendance.staff))
            .filter(
                Attendance.salon_id == salon_id,
                Attendance.attendance_date >= start,
                Attendance.attendance_date <= end,
            )
        )
        if staff_id:
            query = query.filter(Attendance.staff_id == staff_id)
        return query.order_by(Attendance.attendance_date.asc(), Attendance.created_at.asc()).all()

    @staticmethod
    def get_record(db: Session, staff_id: str, day: date) -> Optional[Attendance]:
        return (
            db.query(Attendance)
            .filter(Attendance.staff_id == staff_id, Attendance.attendance_date == day)
            .first()
        )

    @staticmethod
    def staff_ids_in_salon(db: Session, salon_id: str, staff_ids: list[str]) -> set[str]:
        rows = db.query(Staff.id).filter(Staff.salon_id == salon_id, Staff.id.in_(staff_ids)).all()
        return {row[0] for row in rows}

    @staticmethod
    def add_audit(db: Session, **audit_data) -> AttendanceAuditLog:
        entry = AttendanceAuditLog(**audit_data)
        db.add(entry)
        return entry
