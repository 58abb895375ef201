"""Attendance domain schemas"""

from typing import Optional

from pydantic import BaseModel


class AttendanceRecordIn(BaseModel):
    staff_id: Optional[str] = None
    attendance_date: Optional[str] = None
    status: Optional[str] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    notes: Optional[str] = None


class AttendanceSaveRequest(BaseModel):
    records: list[AttendanceRecordIn] = []
    confirmPastEdit: bool = False


class AdminAttendanceOverride(BaseModel):
    salon_id: Optional[str] = None
    staff_id: Optional[str] = None
    attendance_date: Optional[str] = None
    status: Optional[str] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    notes: Optional[str] = None
    admin_notes: Optional[str] = None


class AttendanceLockRequest(BaseModel):
    salon_id: Optional[str] = None
    year: Optional[int] = None
    month: Optional[int] = None
    lock: Optional[bool] = None
