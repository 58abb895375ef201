"""Supplier domain schemas"""

from typing import Optional

from pydantic import BaseModel


class SupplierCreate(BaseModel):
    name: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    gst_number: Optional[str] = None
    notes: Optional[str] = None


class SupplierUpdate(SupplierCreate):
    is_active: Optional[bool] = None
