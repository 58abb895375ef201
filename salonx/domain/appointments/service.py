"""Appointment service - Booking and rescheduling"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Appointment, Customer, Staff
from ...shared.validators import parse_date
from ...utils.sanitization import sanitize_string
from ..catalog.repository import CatalogRepository
from ..customers.repository import CustomerRepository
from ..notifications.service import notify
from .repository import AppointmentRepository
from .schemas import AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)

APPOINTMENT_STATUSES = ["confirmed", "completed", "cancelled", "no_show"]


def parse_time(value: str) -> str:
    """Normalise HH:MM[:SS] to HH:MM"""
    try:
        return datetime.strptime(value.strip()[:5], "%H:%M").strftime("%H:%M")
    except (ValueError, AttributeError) as e:
        raise HTTPException(status_code=400, detail="Invalid time format. Use HH:MM") from e


def add_minutes(start_time: str, minutes: int) -> str:
    """HH:MM plus minutes, capped at the end of the day"""
    start = datetime.strptime(start_time, "%H:%M")
    end = start + timedelta(minutes=minutes)
    if end.date() != start.date():
        return "23:59"
    return end.strftime("%H:%M")


class AppointmentService:
    """Service layer for appointments"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.catalog = CatalogRepository()
        self.customers = CustomerRepository()

    def list_appointments(
        self, salon_id: str, on_date: Optional[str], staff_id: Optional[str], status: Optional[str]
    ) -> list[Appointment]:
        parsed_date = None
        if on_date:
            try:
                parsed_date = parse_date(on_date)
            except ValueError as e:
                raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD") from e
        return self.repo.list_appointments(self.db, salon_id, parsed_date, staff_id, status)

    def _get_staff(self, salon_id: str, staff_id: str) -> Staff:
        staff = self.db.query(Staff).filter(Staff.id == staff_id, Staff.salon_id == salon_id).first()
        if not staff:
            raise HTTPException(status_code=400, detail="Invalid staff member")
        return staff

    def _resolve_customer(self, salon_id: str, data: AppointmentCreate) -> Customer:
        if data.customerId:
            customer = self.customers.get_customer(self.db, salon_id, data.customerId)
            if not customer:
                raise HTTPException(status_code=400, detail="Customer not found")
            return customer

        name = (data.customerName or "").strip()
        phone = (data.customerPhone or "").strip()
        if not name or not phone:
            raise HTTPException(status_code=400, detail="Customer is required")

        existing = self.customers.get_by_phone(self.db, salon_id, phone)
        if existing:
            return existing

        customer = Customer(salon_id=salon_id, name=sanitize_string(name), phone=sanitize_string(phone), tags=["New"])
        self.db.add(customer)
        self.db.flush()
        logger.info(f"👤 Walk-in customer created during booking: {customer.id}")
        return customer

    def _price_services(self, salon_id: str, service_ids: list[str]) -> tuple[float, int]:
        services = self.catalog.get_services_by_ids(self.db, salon_id, service_ids)
        if len(services) != len(set(service_ids)):
            raise HTTPException(status_code=400, detail="One or more services are invalid")
        total = round(sum(s.price or 0 for s in services), 2)
        duration = sum(s.duration_minutes or 0 for s in services)
        return total, duration

    def create_appointment(self, salon_id: str, data: AppointmentCreate) -> Appointment:
        if not data.staffId or not data.appointmentDate or not data.startTime or not data.serviceIds:
            raise HTTPException(status_code=400, detail="Missing required fields")

        try:
            appointment_date = parse_date(data.appointmentDate)
        except ValueError as e:
            raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD") from e
        start_time = parse_time(data.startTime)

        staff = self._get_staff(salon_id, data.staffId)
        customer = self._resolve_customer(salon_id, data)
        total_amount, duration = self._price_services(salon_id, data.serviceIds)
        end_time = parse_time(data.endTime) if data.endTime else add_minutes(start_time, duration)

        appointment = Appointment(
            salon_id=salon_id,
            customer_id=customer.id,
            staff_id=staff.id,
            appointment_date=appointment_date,
            start_time=start_time,
            end_time=end_time,
            service_ids=list(data.serviceIds),
            total_amount=total_amount,
            status="confirmed",
            notes=sanitize_string(data.notes),
        )
        self.db.add(appointment)
        notify(
            self.db,
            salon_id,
            "appointment_created",
            "New appointment",
            f"{customer.name} with {staff.name} on {appointment_date.isoformat()} at {start_time}",
        )
        appointment = self.repo.save(self.db, appointment)
        logger.info(f"📅 Appointment created: {appointment.id}")
        return appointment

    def update_appointment(self, salon_id: str, data: AppointmentUpdate) -> Appointment:
        if not data.id:
            raise HTTPException(status_code=400, detail="Appointment ID is required")
        appointment = self.repo.get_appointment(self.db, salon_id, data.id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")

        if data.status is not None:
            if data.status not in APPOINTMENT_STATUSES:
                raise HTTPException(
                    status_code=400,
                    detail=f"Invalid status. Must be one of: {', '.join(APPOINTMENT_STATUSES)}",
                )
            appointment.status = data.status
        if data.staffId:
            appointment.staff_id = self._get_staff(salon_id, data.staffId).id
        if data.appointmentDate:
            try:
                appointment.appointment_date = parse_date(data.appointmentDate)
            except ValueError as e:
                raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD") from e
        if data.startTime:
            appointment.start_time = parse_time(data.startTime)
        if data.serviceIds:
            total_amount, duration = self._price_services(salon_id, data.serviceIds)
            appointment.service_ids = list(data.serviceIds)
            appointment.total_amount = total_amount
            if not data.endTime:
                appointment.end_time = add_minutes(appointment.start_time, duration)
        if data.endTime:
            appointment.end_time = parse_time(data.endTime)
        if data.notes is not None:
            appointment.notes = sanitize_string(data.notes)

        return self.repo.save(self.db, appointment)
