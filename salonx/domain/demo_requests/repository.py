"""Demo request repository"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import DemoRequest


class DemoRequestRepository:
    """Repository for marketing-site demo requests"""

    @staticmethod
    def create(db: Session, **data) -> DemoRequest:
        request = DemoRequest(**data)
        db.add(request)
        db.commit()
        db.refresh(request)
        return request

    @staticmethod
    def list_all(db: Session) -> list[DemoRequest]:
        return db.query(DemoRequest).order_by(DemoRequest.created_at.desc()).all()

    @staticmethod
    def get(db: Session, request_id: str) -> Optional[DemoRequest]:
        return db.query(DemoRequest).filter(DemoRequest.id == request_id).first()
