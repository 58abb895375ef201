"""Salon service - Profile, settings and logo management"""

import logging
import math

from fastapi import HTTPException, UploadFile
from sqlalchemy.orm import Session

from ...models import Salon
from ...utils import storage
from ...utils.sanitization import sanitize_string
from .schemas import SalonProfileUpdate

logger = logging.getLogger(__name__)

MAX_LOGO_SIZE = 5 * 1024 * 1024
TEXT_FIELDS = ["name", "phone", "city", "address", "gst_number", "invoice_prefix", "currency"]
TIME_FIELDS = ["opening_time", "closing_time"]


def coerce_percentage(value) -> float:
    """Parse a GST percentage; anything unparseable or non-finite becomes 0"""
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    return result if math.isfinite(result) else 0.0


class SalonService:
    """Service layer for the logged-in salon's profile"""

    def __init__(self, db: Session):
        self.db = db

    def get_salon(self, salon_id: str) -> Salon:
        salon = self.db.query(Salon).filter(Salon.id == salon_id).first()
        if not salon:
            raise HTTPException(status_code=404, detail="Salon not found")
        return salon

    def update_profile(self, salon_id: str, data: SalonProfileUpdate) -> Salon:
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            raise HTTPException(status_code=400, detail="No fields to update")

        salon = self.get_salon(salon_id)
        for field, value in updates.items():
            if field in TEXT_FIELDS:
                value = sanitize_string(value)
            elif field in TIME_FIELDS:
                value = value.strip()[:5]
            elif field == "gst_percentage":
                value = coerce_percentage(value)
            setattr(salon, field, value)

        self.db.commit()
        self.db.refresh(salon)
        logger.info(f"✅ Salon profile updated: {salon_id} ({', '.join(updates)})")
        return salon

    async def upload_logo(self, salon_id: str, file: UploadFile) -> str:
        if not file:
            raise HTTPException(status_code=400, detail="No file uploaded")
        if not (file.content_type or "").startswith("image/"):
            raise HTTPException(status_code=400, detail="File must be an image")

        contents = await file.read()
        if len(contents) > MAX_LOGO_SIZE:
            raise HTTPException(status_code=400, detail="File must be less than 5MB")

        if not storage.is_storage_configured():
            logger.error("❌ R2 storage not configured; cannot upload logo")
            raise HTTPException(status_code=503, detail="File storage is not configured")

        salon = self.get_salon(salon_id)
        extension = (file.filename or "logo.png").rsplit(".", 1)[-1].lower() or "png"
        try:
            logo_url = storage.upload_salon_logo(salon_id, contents, file.content_type, extension)
        except Exception as e:
            logger.error(f"❌ Logo upload failed for salon {salon_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to upload logo") from e

        salon.logo_url = logo_url
        self.db.commit()
        return logo_url

    def remove_logo(self, salon_id: str) -> None:
        salon = self.get_salon(salon_id)
        if storage.is_storage_configured():
            try:
                storage.delete_prefix(f"{salon_id}/")
            except Exception as e:
                logger.warning(f"⚠️ Could not remove stored logo for salon {salon_id}: {e}")
        salon.logo_url = None
        self.db.commit()
