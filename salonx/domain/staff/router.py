"""Staff router - FastAPI endpoints for staff operations"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_salon_id
from ...database import get_db
from ...models import Staff
from .schemas import StaffCreate, StaffResponse, StaffUpdate
from .service import StaffService

router = APIRouter(prefix="/api/staff", tags=["Staff"])


def get_staff_service(db: Session = Depends(get_db)) -> StaffService:
    """Dependency injection for StaffService"""
    return StaffService(db)


def to_response(s: Staff) -> StaffResponse:
    return StaffResponse(
        id=s.id,
        salonId=s.salon_id,
        name=s.name,
        phone=s.phone,
        email=s.email,
        role=s.role,
        imageUrl=s.image_url,
        isActive=s.is_active,
        isCashier=bool(s.is_cashier),
        serviceIds=s.service_ids or [],
        createdAt=s.created_at,
    )


@router.get("")
async def list_staff(
    salon_id: str = Depends(get_current_salon_id),
    service: StaffService = Depends(get_staff_service),
):
    return {"success": True, "staff": [to_response(s) for s in service.get_staff_list(salon_id)]}


@router.post("", status_code=201)
async def create_staff(
    data: StaffCreate,
    salon_id: str = Depends(get_current_salon_id),
    service: StaffService = Depends(get_staff_service),
):
    return {"success": True, "staff": to_response(service.create_staff(salon_id, data))}


@router.put("")
async def update_staff(
    data: StaffUpdate,
    salon_id: str = Depends(get_current_salon_id),
    service: StaffService = Depends(get_staff_service),
):
    return {"success": True, "staff": to_response(service.update_staff(salon_id, data))}


@router.delete("")
async def delete_staff(
    id: Optional[str] = Query(None),
    permanent: bool = Query(False),
    salon_id: str = Depends(get_current_salon_id),
    service: StaffService = Depends(get_staff_service),
):
    service.delete_staff(salon_id, id, permanent)
    return {"success": True}


# ============================================================================
# PERFORMANCE
# ============================================================================


@router.get("/performance")
async def staff_performance(
    salon_id: str = Depends(get_current_salon_id),
    service: StaffService = Depends(get_staff_service),
):
    return {"success": True, "performance": service.get_performance(salon_id)}


@router.get("/{staff_id}/metrics")
async def staff_metrics(
    staff_id: str,
    salon_id: str = Depends(get_current_salon_id),
    service: StaffService = Depends(get_staff_service),
):
    return {"success": True, **service.get_metrics(salon_id, staff_id)}


__all__ = ["router"]
