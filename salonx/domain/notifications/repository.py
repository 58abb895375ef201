"""Notification repository - Database operations for in-app notifications"""

from sqlalchemy.orm import Session

from ...models import Notification


class NotificationRepository:
    """Repository for notification database operations"""

    @staticmethod
    def list_recent(db: Session, salon_id: str, limit: int = 50) -> list[Notification]:
        return (
            db.query(Notification)
            .filter(Notification.salon_id == salon_id)
            .order_by(Notification.created_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def count_unread(db: Session, salon_id: str) -> int:
        return (
            db.query(Notification)
            .filter(Notification.salon_id == salon_id, Notification.is_read.is_(False))
            .count()
        )

    @staticmethod
    def mark_read(db: Session, salon_id: str, notification_id: str) -> int:
        count = (
            db.query(Notification)
            .filter(Notification.salon_id == salon_id, Notification.id == notification_id)
            .update({"is_read": True}, synchronize_session=False)
        )
        db.commit()
        return count

    @staticmethod
    def mark_all_read(db: Session, salon_id: str) -> int:
        count = (
            db.query(Notification)
            .filter(Notification.salon_id == salon_id, Notification.is_read.is_(False))
            .update({"is_read": True}, synchronize_session=False)
        )
        db.commit()
        return count
