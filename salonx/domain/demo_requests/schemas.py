"""Demo request schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DemoRequestCreate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    salonName: Optional[str] = None
    email: Optional[str] = None
    city: Optional[str] = None
    staffCount: Optional[str] = None


class DemoRequestUpdate(BaseModel):
    status: Optional[str] = None
    notes: Optional[str] = None


class DemoRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    phone: str
    email: Optional[str] = None
    salon_name: str = Field(serialization_alias="salonName")
    city: Optional[str] = None
    staff_count: Optional[str] = Field(default=None, serialization_alias="staffCount")
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
