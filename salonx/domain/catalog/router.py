"""Catalog router - Salon service menu endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_salon_id
from ...database import get_db
from ...models import Service
from .schemas import ServiceCreate, ServiceResponse, ServiceUpdate
from .service import CatalogService

router = APIRouter(prefix="/api/services", tags=["Services"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


def to_response(s: Service) -> ServiceResponse:
    return ServiceResponse(
        id=s.id,
        salonId=s.salon_id,
        name=s.name,
        category=s.category,
        durationMinutes=s.duration_minutes,
        price=s.price,
        description=s.description,
        imageUrl=s.image_url,
        isActive=s.is_active,
        createdAt=s.created_at,
    )


@router.get("")
async def list_services(
    salon_id: str = Depends(get_current_salon_id),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return {"success": True, "services": [to_response(s) for s in catalog.list_services(salon_id)]}


@router.post("", status_code=201)
async def create_service(
    data: ServiceCreate,
    salon_id: str = Depends(get_current_salon_id),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return {"success": True, "service": to_response(catalog.create_service(salon_id, data))}


@router.put("")
async def update_service(
    data: ServiceUpdate,
    salon_id: str = Depends(get_current_salon_id),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return {"success": True, "service": to_response(catalog.update_service(salon_id, data))}


@router.delete("")
async def delete_service(
    id: Optional[str] = Query(None),
    salon_id: str = Depends(get_current_salon_id),
    catalog: CatalogService = Depends(get_catalog_service),
):
    catalog.delete_service(salon_id, id)
    return {"success": True, "deleted": True}


__all__ = ["router"]
