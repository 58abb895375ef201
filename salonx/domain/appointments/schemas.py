"""Appointment domain schemas"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class AppointmentCreate(BaseModel):
    customerId: Optional[str] = None
    customerName: Optional[str] = None
    customerPhone: Optional[str] = None
    staffId: Optional[str] = None
    appointmentDate: Optional[str] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    serviceIds: Optional[list[str]] = None
    notes: Optional[str] = None


class AppointmentUpdate(BaseModel):
    id: Optional[str] = None
    staffId: Optional[str] = None
    appointmentDate: Optional[str] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    serviceIds: Optional[list[str]] = None
    notes: Optional[str] = None
    status: Optional[str] = None


class AppointmentResponse(BaseModel):
    id: str
    salonId: str
    customerId: str
    customerName: Optional[str] = None
    customerPhone: Optional[str] = None
    staffId: str
    staffName: Optional[str] = None
    appointmentDate: date
    startTime: str
    endTime: Optional[str] = None
    serviceIds: list[str] = []
    totalAmount: float = 0
    status: str
    notes: Optional[str] = None
    createdAt: Optional[datetime] = None
