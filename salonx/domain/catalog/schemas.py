"""Service catalog schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ServiceCreate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    durationMinutes: Optional[int] = 30
    price: Optional[float] = None
    description: Optional[str] = None
    imageUrl: Optional[str] = None


class ServiceUpdate(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    durationMinutes: Optional[int] = None
    price: Optional[float] = None
    description: Optional[str] = None
    imageUrl: Optional[str] = None
    isActive: Optional[bool] = None


class ServiceResponse(BaseModel):
    id: str
    salonId: str
    name: str
    category: str
    durationMinutes: int
    price: float
    description: Optional[str] = None
    imageUrl: Optional[str] = None
    isActive: bool
    createdAt: Optional[datetime] = None
