"""
Attendance service - Daily staff attendance with edit locking

Non-admin edits are limited to the last 30 days, past dates need explicit
confirmation, and rows locked for payroll can only be changed by an admin.
"""

import calendar
import logging
from datetime import date, datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models_attendance import Attendance
from ...shared.validators import parse_date, parse_month
from ...utils.sanitization import sanitize_string
from .repository import AttendanceRepository
from .schemas import AdminAttendanceOverride, AttendanceLockRequest, AttendanceRecordIn

logger = logging.getLogger(__name__)

LOCK_THRESHOLD_DAYS = 30
VALID_STATUSES = ["present", "absent", "half_day", "leave"]
STATUS_LABELS = {"present": "Present", "absent": "Absent", "half_day": "Half Day", "leave": "Leave"}


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def compute_working_hours(check_in: Optional[str], check_out: Optional[str]) -> Optional[float]:
    """Hours between HH:MM check-in and check-out, None when either is missing or out of order"""
    if not check_in or not check_out:
        return None
    try:
        start = datetime.strptime(check_in[:5], "%H:%M")
        end = datetime.strptime(check_out[:5], "%H:%M")
    except ValueError:
        return None
    minutes = (end - start).total_seconds() / 60
    if minutes <= 0:
        return None
    return round(minutes / 60, 2)


def serialize_attendance(record: Attendance, include_staff: bool = False) -> dict:
    data = {
        "id": record.id,
        "salon_id": record.salon_id,
        "staff_id": record.staff_id,
        "attendance_date": record.attendance_date.isoformat(),
        "status": record.status,
        "check_in_time": record.check_in_time,
        "check_out_time": record.check_out_time,
        "working_hours": record.working_hours,
        "notes": record.notes,
        "is_locked": record.is_locked,
        "admin_override": record.admin_override,
        "admin_notes": record.admin_notes,
        "created_at": record.created_at.isoformat() if record.created_at else None,
        "updated_at": record.updated_at.isoformat() if record.updated_at else None,
    }
    if include_staff:
        data["staff"] = (
            {"id": record.staff.id, "name": record.staff.name, "role": record.staff.role} if record.staff else None
        )
    return data


def summarize_month(records: list[Attendance]) -> dict:
    return {
        "total_present_days": sum(1 for r in records if r.status == "present"),
        "total_half_days": sum(1 for r in records if r.status == "half_day"),
        "total_absent_days": sum(1 for r in records if r.status == "absent"),
        "total_leave_days": sum(1 for r in records if r.status == "leave"),
        "total_working_hours": round(sum(r.working_hours or 0 for r in records), 2),
        "records": [serialize_attendance(r) for r in records],
    }


def resolve_export_range(
    single_date: Optional[str] = None,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    month: Optional[str] = None,
    today: Optional[date] = None,
) -> tuple[date, date]:
    """Pick the export window: one day, an explicit range, a month, or the current month"""
    try:
        if single_date:
            day = parse_date(single_date)
            return day, day
        if from_date and to_date:
            start, end = parse_date(from_date), parse_date(to_date)
            if start > end:
                raise HTTPException(status_code=400, detail="'from' must be on or before 'to'")
            return start, end
        if month:
            return month_bounds(*parse_month(month))
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")
    today = today or date.today()
    return month_bounds(today.year, today.month)


class AttendanceService:
    """Service layer for attendance"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AttendanceRepository()

    # ========================================================================
    # READ
    # ========================================================================

    def get_daily(self, salon_id: str, day_str: Optional[str], include_staff: bool = False) -> dict:
        if not day_str:
            raise HTTPException(status_code=400, detail="Date parameter is required")
        try:
            day = parse_date(day_str)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")

        records = self.repo.list_for_date(self.db, salon_id, day)
        days_old = (date.today() - day).days
        return {
            "data": [serialize_attendance(r, include_staff) for r in records],
            "isLocked": days_old > LOCK_THRESHOLD_DAYS,
            "lockThreshold": LOCK_THRESHOLD_DAYS,
        }

    def get_monthly_summary(self, salon_id: str, month: str, staff_id: str) -> dict:
        try:
            start, end = month_bounds(*parse_month(month))
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid month format. Use YYYY-MM")
        records = self.repo.list_range(self.db, salon_id, start, end, staff_id)
        return {"data": summarize_month(records)}

    def list_range(self, salon_id: str, start: date, end: date) -> list[Attendance]:
        return self.repo.list_range(self.db, salon_id, start, end)

    # ========================================================================
    # WRITE
    # ========================================================================

    def _validate_record(self, record: AttendanceRecordIn, today: date, confirm_past_edit: bool) -> date:
        if not record.staff_id or not record.attendance_date or not record.status:
            raise HTTPException(status_code=400, detail="Each record must have staff_id, attendance_date, and status")
        try:
            day = parse_date(record.attendance_date)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")
        if day > today:
            raise HTTPException(status_code=400, detail="Cannot mark attendance for future dates")

        if (today - day).days > LOCK_THRESHOLD_DAYS:
            raise HTTPException(status_code=400, detail=f"Cannot edit attendance older than {LOCK_THRESHOLD_DAYS} days")
        if day < today and not confirm_past_edit:
            raise HTTPException(
                status_code=400,
                detail={"message": "Past date edit requires confirmation", "requireConfirmation": True},
            )

        if record.status not in VALID_STATUSES:
            raise HTTPException(
                status_code=400, detail=f"Invalid status. Must be one of: {', '.join(VALID_STATUSES)}"
            )
        return day

    def save_records(
        self, salon_id: str, records: list[AttendanceRecordIn], confirm_past_edit: bool = False
    ) -> list[Attendance]:
        """Salon-side upsert keyed on (staff_id, attendance_date); admin edits go through admin_override"""
        if not records:
            raise HTTPException(status_code=400, detail="Records array is required")

        today = date.today()
        days = [self._validate_record(r, today, confirm_past_edit) for r in records]

        staff_ids = list({r.staff_id for r in records})
        if len(self.repo.staff_ids_in_salon(self.db, salon_id, staff_ids)) != len(staff_ids):
            raise HTTPException(status_code=400, detail="One or more staff members do not belong to this salon")

        existing = [self.repo.get_record(self.db, r.staff_id, day) for r, day in zip(records, days)]
        if any(row is not None and row.is_locked for row in existing):
            raise HTTPException(status_code=400, detail="Some records are locked and cannot be edited")

        saved = []
        for record, day, row in zip(records, days, existing):
            if row is None:
                row = Attendance(salon_id=salon_id, staff_id=record.staff_id, attendance_date=day)
                self.db.add(row)
            row.status = record.status
            row.check_in_time = record.check_in_time or None
            row.check_out_time = record.check_out_time or None
            row.working_hours = compute_working_hours(row.check_in_time, row.check_out_time)
            row.notes = sanitize_string(record.notes) or None
            row.admin_override = False
            self.db.flush()
            saved.append(row)

        self.db.commit()
        for row in saved:
            self.db.refresh(row)
        logger.info(f"🗓️ Saved attendance for {len(saved)} staff members in salon {salon_id}")
        return saved

    # ========================================================================
    # ADMIN
    # ========================================================================

    def admin_list(
        self, salon_id: Optional[str], day: Optional[str], month: Optional[str], staff_id: Optional[str]
    ) -> dict:
        if not salon_id:
            raise HTTPException(status_code=400, detail="salon_id is required")
        if month and staff_id:
            return self.get_monthly_summary(salon_id, month, staff_id)
        if not day:
            raise HTTPException(status_code=400, detail="date is required")
        result = self.get_daily(salon_id, day, include_staff=True)
        return {"data": result["data"]}

    def admin_override(self, data: AdminAttendanceOverride, admin_email: str) -> Attendance:
        if not data.salon_id or not data.staff_id or not data.attendance_date or not data.status:
            raise HTTPException(
                status_code=400, detail="salon_id, staff_id, attendance_date, and status are required"
            )
        if data.status not in VALID_STATUSES:
            raise HTTPException(
                status_code=400, detail=f"Invalid status. Must be one of: {', '.join(VALID_STATUSES)}"
            )
        try:
            day = parse_date(data.attendance_date)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")
        if not self.repo.staff_ids_in_salon(self.db, data.salon_id, [data.staff_id]):
            raise HTTPException(status_code=404, detail="Staff member not found")

        row = self.repo.get_record(self.db, data.staff_id, day)
        old_status = row.status if row else None
        action = "admin_override" if row else "create"
        if row is None:
            row = Attendance(salon_id=data.salon_id, staff_id=data.staff_id, attendance_date=day)
            self.db.add(row)

        row.status = data.status
        row.check_in_time = data.check_in_time or None
        row.check_out_time = data.check_out_time or None
        row.working_hours = compute_working_hours(row.check_in_time, row.check_out_time)
        row.notes = data.notes or None
        row.admin_override = True
        row.admin_notes = data.admin_notes or None
        self.db.flush()

        self.repo.add_audit(
            self.db,
            attendance_id=row.id,
            salon_id=data.salon_id,
            staff_id=data.staff_id,
            action=action,
            old_status=old_status,
            new_status=data.status,
            performed_by=admin_email,
            notes=f"Admin override by {admin_email}. {data.admin_notes or ''}".strip(),
        )
        self.db.commit()
        self.db.refresh(row)
        logger.info(f"🛡️ Attendance {action} by {admin_email}: staff {data.staff_id} on {day} -> {data.status}")
        return row

    def set_month_lock(self, data: AttendanceLockRequest, admin_email: str) -> int:
        if not data.salon_id or not data.year or not data.month or data.lock is None:
            raise HTTPException(status_code=400, detail="salon_id, year, month, and lock are required")
        try:
            start, end = month_bounds(data.year, data.month)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid year or month")

        records = self.repo.list_range(self.db, data.salon_id, start, end)
        now = datetime.utcnow()
        for record in records:
            record.is_locked = data.lock
            record.locked_at = now if data.lock else None

        verb = "locked" if data.lock else "unlocked"
        self.repo.add_audit(
            self.db,
            salon_id=data.salon_id,
            action="lock" if data.lock else "unlock",
            performed_by=admin_email,
            notes=f"Admin {verb} attendance for {data.year}-{data.month:02d} ({len(records)} records)",
        )
        self.db.commit()
        logger.info(f"🔒 Attendance {verb} for salon {data.salon_id} {data.year}-{data.month:02d}: {len(records)} records")
        return len(records)
