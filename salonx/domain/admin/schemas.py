"""Admin domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AdminLoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SalonCreate(BaseModel):
    name: Optional[str] = None
    ownerEmail: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None


class SalonAction(BaseModel):
    action: Optional[str] = None


class AdminSalonResponse(BaseModel):
    id: str
    name: str
    ownerEmail: str
    phone: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    status: str
    activatedAt: Optional[datetime] = None
    lastLoginAt: Optional[datetime] = None
    suspendedAt: Optional[datetime] = None
    keyExpiresAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None


class LeadCreate(BaseModel):
    salonName: Optional[str] = None
    ownerName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    message: Optional[str] = None


class LeadUpdate(BaseModel):
    id: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class LeadResponse(BaseModel):
    id: str
    salonName: str
    ownerName: str
    email: str
    phone: str
    city: Optional[str] = None
    message: Optional[str] = None
    status: str
    notes: Optional[str] = None
    createdAt: Optional[datetime] = None


class AuditLogResponse(BaseModel):
    id: str
    action: str
    targetType: Optional[str] = None
    targetId: Optional[str] = None
    metadata: Optional[dict] = None
    createdAt: Optional[datetime] = None
