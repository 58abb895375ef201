"""Notification service - In-app notifications for salons"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Notification, Salon
from .repository import NotificationRepository
from .schemas import NotificationCreate, NotificationMarkRead

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = [
    "appointment_created",
    "appointment_reminder",
    "payment_received",
    "low_stock",
    "staff_activity",
    "system",
]


def notify(db: Session, salon_id: str, type: str, title: str, message: Optional[str] = None) -> Notification:
    """Queue a notification in the caller's transaction (no commit)"""
    notification = Notification(salon_id=salon_id, type=type, title=title, message=message)
    db.add(notification)
    logger.debug(f"🔔 Notification queued for salon {salon_id}: {type}")
    return notification


class NotificationService:
    """Service layer for notifications"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def list_notifications(self, salon_id: str) -> tuple[list[Notification], int]:
        return self.repo.list_recent(self.db, salon_id), self.repo.count_unread(self.db, salon_id)

    def mark_read(self, salon_id: str, data: NotificationMarkRead) -> int:
        if data.markAllRead:
            return self.repo.mark_all_read(self.db, salon_id)
        if not data.id:
            raise HTTPException(status_code=400, detail="Notification ID or markAllRead is required")
        return self.repo.mark_read(self.db, salon_id, data.id)

    def create(self, data: NotificationCreate) -> Notification:
        if not data.salon_id or not data.type or not data.title:
            raise HTTPException(status_code=400, detail="Missing required fields: salon_id, type, title")
        if data.type not in NOTIFICATION_TYPES:
            raise HTTPException(
                status_code=400, detail=f"Invalid type. Must be one of: {', '.join(NOTIFICATION_TYPES)}"
            )
        if not self.db.query(Salon).filter(Salon.id == data.salon_id).first():
            raise HTTPException(status_code=404, detail="Salon not found")

        notification = notify(self.db, data.salon_id, data.type, data.title, data.message)
        self.db.commit()
        self.db.refresh(notification)
        return notification
