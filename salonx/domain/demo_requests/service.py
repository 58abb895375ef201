"""Demo request service - Capture leads from the marketing site and alert sales"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import DEMO_REQUEST_NOTIFY_EMAIL
from ...email_service import is_email_configured, send_demo_request_notification
from ...models import DemoRequest
from ...shared.validators import validate_email
from ...utils.sanitization import sanitize_string
from .repository import DemoRequestRepository
from .schemas import DemoRequestCreate, DemoRequestUpdate

logger = logging.getLogger(__name__)

DEMO_REQUEST_STATUSES = ["pending", "contacted", "converted", "rejected"]


class DemoRequestService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = DemoRequestRepository()

    def submit(self, data: DemoRequestCreate) -> DemoRequest:
        if not data.name or not data.phone or not data.salonName:
            raise HTTPException(status_code=400, detail="Name, phone, and salon name are required")
        try:
            email = validate_email(data.email) if data.email else None
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        request = self.repo.create(
            self.db,
            name=sanitize_string(data.name),
            phone=sanitize_string(data.phone),
            salon_name=sanitize_string(data.salonName),
            email=email,
            city=sanitize_string(data.city) or None,
            staff_count=sanitize_string(data.staffCount) or None,
            status="pending",
        )
        logger.info(f"📥 Demo request {request.id} from {request.salon_name}")
        self._notify_sales(request)
        return request

    def _notify_sales(self, request: DemoRequest) -> None:
        """Email the sales inbox; the request is already stored so failures are only logged"""
        if not is_email_configured() or not DEMO_REQUEST_NOTIFY_EMAIL:
            logger.info(
                f"📧 Email not configured, demo request from {request.name} ({request.phone}) for {request.salon_name}"
            )
            return
        try:
            send_demo_request_notification(
                DEMO_REQUEST_NOTIFY_EMAIL,
                name=request.name,
                phone=request.phone,
                salon_name=request.salon_name,
                email=request.email,
                city=request.city,
                staff_count=request.staff_count,
            )
        except Exception as e:
            logger.error(f"❌ Demo request notification failed for {request.id}: {e}")

    def list_requests(self) -> list[DemoRequest]:
        return self.repo.list_all(self.db)

    def update(self, request_id: str, data: DemoRequestUpdate) -> DemoRequest:
        request = self.repo.get(self.db, request_id)
        if not request:
            raise HTTPException(status_code=404, detail="Demo request not found")
        if data.status is None and data.notes is None:
            raise HTTPException(status_code=400, detail="No fields to update")
        if data.status is not None:
            if data.status not in DEMO_REQUEST_STATUSES:
                raise HTTPException(
                    status_code=400, detail=f"Invalid status. Must be one of: {', '.join(DEMO_REQUEST_STATUSES)}"
                )
            request.status = data.status
        if data.notes is not None:
            request.notes = sanitize_string(data.notes)
        self.db.commit()
        self.db.refresh(request)
        logger.info(f"✏️ Demo request {request_id} updated: status={request.status}")
        return request
