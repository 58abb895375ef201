"""Admin attendance router - Cross-salon view, overrides and payroll locks"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from .schemas import AdminAttendanceOverride, AttendanceLockRequest
from .service import AttendanceService, serialize_attendance

router = APIRouter(prefix="/api/admin/attendance", tags=["Admin"])


def get_attendance_service(db: Session = Depends(get_db)) -> AttendanceService:
    """Dependency injection for AttendanceService"""
    return AttendanceService(db)


@router.get("")
async def admin_get_attendance(
    salon_id: Optional[str] = Query(None),
    date: Optional[str] = Query(None),
    month: Optional[str] = Query(None),
    staff_id: Optional[str] = Query(None),
    admin: dict = Depends(require_admin),
    service: AttendanceService = Depends(get_attendance_service),
):
    return service.admin_list(salon_id, date, month, staff_id)


@router.post("")
async def admin_override_attendance(
    data: AdminAttendanceOverride,
    admin: dict = Depends(require_admin),
    service: AttendanceService = Depends(get_attendance_service),
):
    record = service.admin_override(data, admin.get("email"))
    return {"success": True, "data": serialize_attendance(record), "message": "Attendance updated by admin"}


@router.patch("")
async def admin_lock_attendance(
    data: AttendanceLockRequest,
    admin: dict = Depends(require_admin),
    service: AttendanceService = Depends(get_attendance_service),
):
    count = service.set_month_lock(data, admin.get("email"))
    verb = "Locked" if data.lock else "Unlocked"
    return {"success": True, "count": count, "message": f"{verb} {count} attendance records"}


__all__ = ["router"]
