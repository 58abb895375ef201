"""Salon profile schemas"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator


class SalonProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    gst_number: Optional[str] = None
    gst_percentage: Optional[Any] = None
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None
    working_days: Optional[list[int]] = None
    currency: Optional[str] = None
    invoice_prefix: Optional[str] = None
    whatsapp_enabled: Optional[bool] = None

    @field_validator("working_days")
    @classmethod
    def validate_working_days(cls, v):
        if v is not None and any(day < 0 or day > 6 for day in v):
            raise ValueError("working_days must contain weekday numbers 0-6")
        return v


class SalonProfileResponse(BaseModel):
    id: str
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    email: str
    gst_number: Optional[str] = None
    gst_percentage: float = 0
    logoUrl: Optional[str] = None
    status: str
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None
    working_days: Optional[list[int]] = None
    currency: Optional[str] = None
    invoice_prefix: Optional[str] = None
    whatsapp_enabled: Optional[bool] = None
    createdAt: Optional[datetime] = None
