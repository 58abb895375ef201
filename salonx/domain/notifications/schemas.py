"""Notification domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class NotificationCreate(BaseModel):
    salon_id: Optional[str] = None
    type: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None


class NotificationMarkRead(BaseModel):
    id: Optional[str] = None
    markAllRead: bool = False


class NotificationResponse(BaseModel):
    id: str
    salon_id: str
    type: str
    title: str
    message: Optional[str] = None
    is_read: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
