"""Appointment router"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_salon_id
from ...database import get_db
from ...models import Appointment
from .schemas import AppointmentCreate, AppointmentResponse, AppointmentUpdate
from .service import AppointmentService

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


def to_response(a: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=a.id,
        salonId=a.salon_id,
        customerId=a.customer_id,
        customerName=a.customer.name if a.customer else None,
        customerPhone=a.customer.phone if a.customer else None,
        staffId=a.staff_id,
        staffName=a.staff.name if a.staff else None,
        appointmentDate=a.appointment_date,
        startTime=a.start_time,
        endTime=a.end_time,
        serviceIds=a.service_ids or [],
        totalAmount=a.total_amount or 0,
        status=a.status,
        notes=a.notes,
        createdAt=a.created_at,
    )


@router.get("")
async def list_appointments(
    date: Optional[str] = Query(None),
    staff_id: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    salon_id: str = Depends(get_current_salon_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointments = service.list_appointments(salon_id, date, staff_id, status)
    return {"success": True, "appointments": [to_response(a) for a in appointments]}


@router.post("", status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    salon_id: str = Depends(get_current_salon_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.create_appointment(salon_id, data)
    return {"success": True, "appointment": to_response(appointment), "customerId": appointment.customer_id}


@router.put("")
async def update_appointment(
    data: AppointmentUpdate,
    salon_id: str = Depends(get_current_salon_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    return {"success": True, "appointment": to_response(service.update_appointment(salon_id, data))}


__all__ = ["router"]
