"""Notification router"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_salon_id, require_admin
from ...database import get_db
from .schemas import NotificationCreate, NotificationMarkRead, NotificationResponse
from .service import NotificationService

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(db)


@router.get("")
async def list_notifications(
    salon_id: str = Depends(get_current_salon_id),
    service: NotificationService = Depends(get_notification_service),
):
    notifications, unread = service.list_notifications(salon_id)
    return {
        "notifications": [NotificationResponse.model_validate(n) for n in notifications],
        "unread_count": unread,
    }


@router.patch("")
async def mark_read(
    data: NotificationMarkRead,
    salon_id: str = Depends(get_current_salon_id),
    service: NotificationService = Depends(get_notification_service),
):
    updated = service.mark_read(salon_id, data)
    return {"success": True, "updated": updated}


@router.post("", status_code=201)
async def create_notification(
    data: NotificationCreate,
    _admin: dict = Depends(require_admin),
    service: NotificationService = Depends(get_notification_service),
):
    """System notification pushed by a platform admin"""
    notification = service.create(data)
    return {"notification": NotificationResponse.model_validate(notification)}


__all__ = ["router"]
