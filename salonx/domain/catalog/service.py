"""Catalog service - The salon's menu of services"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Service
from ...utils.sanitization import sanitize_string
from .repository import CatalogRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)

MIN_DURATION_MINUTES = 5


def _check_duration(duration: Optional[int]) -> None:
    if duration is None or duration < MIN_DURATION_MINUTES:
        raise HTTPException(status_code=400, detail="Duration must be at least 5 minutes")


def _check_price(price: Optional[float]) -> None:
    if price is None or price <= 0:
        raise HTTPException(status_code=400, detail="Price must be a positive number")


class CatalogService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepository()

    def list_services(self, salon_id: str) -> list[Service]:
        return self.repo.list_services(self.db, salon_id)

    def create_service(self, salon_id: str, data: ServiceCreate) -> Service:
        if not (data.name or "").strip() or not (data.category or "").strip():
            raise HTTPException(status_code=400, detail="Name and category are required")
        _check_duration(data.durationMinutes)
        _check_price(data.price)

        service = self.repo.create_service(
            self.db,
            salon_id,
            name=sanitize_string(data.name),
            category=sanitize_string(data.category),
            duration_minutes=data.durationMinutes,
            price=round(data.price, 2),
            description=sanitize_string(data.description),
            image_url=data.imageUrl,
            is_active=True,
        )
        logger.info(f"✅ Service created: {service.id} ({service.name})")
        return service

    def update_service(self, salon_id: str, data: ServiceUpdate) -> Service:
        if not data.id:
            raise HTTPException(status_code=400, detail="Service ID is required")
        service = self.repo.get_service(self.db, salon_id, data.id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")

        updates = {}
        fields = data.model_dump(exclude_unset=True, exclude={"id"})
        for key in ("name", "category"):
            if key in fields:
                if not (fields[key] or "").strip():
                    raise HTTPException(status_code=400, detail=f"{key.capitalize()} cannot be empty")
                updates[key] = sanitize_string(fields[key])
        if "durationMinutes" in fields:
            _check_duration(fields["durationMinutes"])
            updates["duration_minutes"] = fields["durationMinutes"]
        if "price" in fields:
            _check_price(fields["price"])
            updates["price"] = round(fields["price"], 2)
        if "description" in fields:
            updates["description"] = sanitize_string(fields["description"])
        if "imageUrl" in fields:
            updates["image_url"] = fields["imageUrl"]
        if fields.get("isActive") is not None:
            updates["is_active"] = fields["isActive"]

        return self.repo.update_service(self.db, service, **updates)

    def delete_service(self, salon_id: str, service_id: Optional[str]) -> None:
        if not service_id:
            raise HTTPException(status_code=400, detail="Service ID is required")
        service = self.repo.get_service(self.db, salon_id, service_id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")
        self.repo.delete_service(self.db, service)
        logger.info(f"🗑️ Service deleted: {service_id}")
