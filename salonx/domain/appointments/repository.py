"""Appointment repository"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def list_appointments(
        db: Session,
        salon_id: str,
        on_date: Optional[date] = None,
        staff_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Appointment]:
        query = (
            db.query(Appointment)
            .options(joinedload(Appointment.customer), joinedload(Appointment.staff))
            .filter(Appointment.salon_id == salon_id)
        )
        if on_date:
            query = query.filter(Appointment.appointment_date == on_date)
        if staff_id:
            query = query.filter(Appointment.staff_id == staff_id)
        if status:
            query = query.filter(Appointment.status == status)
        return query.order_by(Appointment.appointment_date.desc(), Appointment.start_time.asc()).all()

    @staticmethod
    def get_appointment(db: Session, salon_id: str, appointment_id: str) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.id == appointment_id, Appointment.salon_id == salon_id)
            .first()
        )

    @staticmethod
    def save(db: Session, appointment: Appointment) -> Appointment:
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment
