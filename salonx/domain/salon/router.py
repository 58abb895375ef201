"""Salon router - Profile and logo endpoints"""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_salon_id
from ...database import get_db
from ...models import Salon
from .schemas import SalonProfileResponse, SalonProfileUpdate
from .service import SalonService

router = APIRouter(prefix="/api/salon", tags=["Salon"])


def get_salon_service(db: Session = Depends(get_db)) -> SalonService:
    """Dependency injection for SalonService"""
    return SalonService(db)


def _profile(salon: Salon) -> SalonProfileResponse:
    return SalonProfileResponse(
        id=salon.id,
        name=salon.name,
        address=salon.address,
        city=salon.city,
        phone=salon.phone,
        email=salon.owner_email,
        gst_number=salon.gst_number,
        gst_percentage=salon.gst_percentage or 0,
        logoUrl=salon.logo_url,
        status=salon.status,
        opening_time=salon.opening_time,
        closing_time=salon.closing_time,
        working_days=salon.working_days,
        currency=salon.currency,
        invoice_prefix=salon.invoice_prefix,
        whatsapp_enabled=salon.whatsapp_enabled,
        createdAt=salon.created_at,
    )


@router.get("")
async def get_profile(
    salon_id: str = Depends(get_current_salon_id),
    service: SalonService = Depends(get_salon_service),
):
    return {"salon": _profile(service.get_salon(salon_id))}


@router.patch("")
async def update_profile(
    data: SalonProfileUpdate,
    salon_id: str = Depends(get_current_salon_id),
    service: SalonService = Depends(get_salon_service),
):
    salon = service.update_profile(salon_id, data)
    return {"success": True, "salon": _profile(salon), "message": "Profile updated successfully"}


@router.post("/logo")
async def upload_logo(
    logo: UploadFile = File(...),
    salon_id: str = Depends(get_current_salon_id),
    service: SalonService = Depends(get_salon_service),
):
    logo_url = await service.upload_logo(salon_id, logo)
    return {"success": True, "logo_url": logo_url}


@router.delete("/logo")
async def delete_logo(
    salon_id: str = Depends(get_current_salon_id),
    service: SalonService = Depends(get_salon_service),
):
    service.remove_logo(salon_id)
    return {"success": True}


__all__ = ["router"]
