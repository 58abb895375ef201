"""Attendance router - Daily marking, monthly summaries and exports"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ...auth import get_current_salon_id
from ...database import get_db
from ...models import Salon
from .export import build_attendance_pdf, build_attendance_workbook, export_filename
from .schemas import AttendanceSaveRequest
from .service import AttendanceService, resolve_export_range, serialize_attendance

router = APIRouter(prefix="/api/attendance", tags=["Attendance"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def get_attendance_service(db: Session = Depends(get_db)) -> AttendanceService:
    """Dependency injection for AttendanceService"""
    return AttendanceService(db)


@router.get("")
async def get_attendance(
    date: Optional[str] = Query(None),
    month: Optional[str] = Query(None),
    staff_id: Optional[str] = Query(None),
    salon_id: str = Depends(get_current_salon_id),
    service: AttendanceService = Depends(get_attendance_service),
):
    if month and staff_id:
        return service.get_monthly_summary(salon_id, month, staff_id)
    return service.get_daily(salon_id, date)


@router.post("")
async def save_attendance(
    data: AttendanceSaveRequest,
    salon_id: str = Depends(get_current_salon_id),
    service: AttendanceService = Depends(get_attendance_service),
):
    saved = service.save_records(salon_id, data.records, data.confirmPastEdit)
    return {
        "success": True,
        "data": [serialize_attendance(r) for r in saved],
        "message": f"Saved attendance for {len(saved)} staff members",
    }


# ============================================================================
# EXPORTS
# ============================================================================


@router.get("/export")
async def export_attendance_xlsx(
    date: Optional[str] = Query(None),
    from_date: Optional[str] = Query(None, alias="from"),
    to_date: Optional[str] = Query(None, alias="to"),
    month: Optional[str] = Query(None),
    salon_id: str = Depends(get_current_salon_id),
    service: AttendanceService = Depends(get_attendance_service),
):
    start, end = resolve_export_range(date, from_date, to_date, month)
    content = build_attendance_workbook(service.list_range(salon_id, start, end))
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{export_filename(start, end, "xlsx")}"'},
    )


@router.get("/export/pdf")
async def export_attendance_pdf(
    date: Optional[str] = Query(None),
    from_date: Optional[str] = Query(None, alias="from"),
    to_date: Optional[str] = Query(None, alias="to"),
    month: Optional[str] = Query(None),
    salon_id: str = Depends(get_current_salon_id),
    db: Session = Depends(get_db),
    service: AttendanceService = Depends(get_attendance_service),
):
    start, end = resolve_export_range(date, from_date, to_date, month)
    salon = db.query(Salon).filter(Salon.id == salon_id).first()
    content = build_attendance_pdf(
        service.list_range(salon_id, start, end), start, end, salon.name if salon else "SalonX"
    )
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(start, end, "pdf")}"'},
    )


__all__ = ["router"]
