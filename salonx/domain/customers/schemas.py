"""Customer domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class CustomerImportRow(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    gender: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[list[str]] = None


class CustomerImportRequest(BaseModel):
    customers: list[CustomerImportRow] = []


class CustomerBulkDelete(BaseModel):
    ids: list[str] = []


class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    gender: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[list[str]] = None


class CustomerResponse(BaseModel):
    id: str
    salonId: str
    name: str
    phone: str
    email: Optional[str] = None
    gender: Optional[str] = None
    notes: Optional[str] = None
    tags: list[str] = []
    totalVisits: int = 0
    totalSpent: float = 0
    lastVisitDate: Optional[datetime] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
