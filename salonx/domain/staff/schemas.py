"""Staff domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class StaffCreate(BaseModel):
    name: Optional[str] = None
    role: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    imageUrl: Optional[str] = None
    serviceIds: Optional[list[str]] = None
    isCashier: Optional[bool] = None


class StaffUpdate(StaffCreate):
    id: Optional[str] = None
    isActive: Optional[bool] = None


class StaffResponse(BaseModel):
    id: str
    salonId: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    role: str
    imageUrl: Optional[str] = None
    isActive: bool
    isCashier: bool = False
    serviceIds: list[str] = []
    createdAt: Optional[datetime] = None


class StaffMetrics(BaseModel):
    staff_id: str
    bills_created: int = 0
    services_performed: int = 0
    products_sold: float = 0
    revenue_generated: float = 0
    total_items_handled: int = 0
    appointments_completed: int = 0
