"""Admin router - Platform administration endpoints"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import ADMIN_SALON_ID, require_admin, set_session_cookie
from ...database import get_db
from ...models import Lead, Salon
from .schemas import (
    AdminLoginRequest,
    AdminSalonResponse,
    AuditLogResponse,
    LeadCreate,
    LeadResponse,
    LeadUpdate,
    SalonAction,
    SalonCreate,
)
from .service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db)


def _salon_response(salon: Salon, key_expires_at=None) -> AdminSalonResponse:
    return AdminSalonResponse(
        id=salon.id,
        name=salon.name,
        ownerEmail=salon.owner_email,
        phone=salon.phone,
        city=salon.city,
        address=salon.address,
        status=salon.status,
        activatedAt=salon.activated_at,
        lastLoginAt=salon.last_login_at,
        suspendedAt=salon.suspended_at,
        keyExpiresAt=key_expires_at,
        createdAt=salon.created_at,
    )


def _lead_response(lead: Lead) -> LeadResponse:
    return LeadResponse(
        id=lead.id,
        salonName=lead.salon_name,
        ownerName=lead.owner_name,
        email=lead.email,
        phone=lead.phone,
        city=lead.city,
        message=lead.message,
        status=lead.status,
        notes=lead.notes,
        createdAt=lead.created_at,
    )


# ============================================================================
# ADMIN SESSION
# ============================================================================


@router.post("/login")
async def admin_login(
    data: AdminLoginRequest,
    response: Response,
    service: AdminService = Depends(get_admin_service),
):
    """Log a platform admin in"""
    email = service.authenticate(data.email, data.password)
    set_session_cookie(response, ADMIN_SALON_ID, email, is_admin=True)
    return {"success": True, "message": "Admin login successful", "redirect": "/admin"}


# ============================================================================
# SALONS
# ============================================================================


@router.get("/salons")
async def list_salons(
    _admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    salons = service.list_salons()
    return {"salons": [_salon_response(salon, expires) for salon, expires in salons]}


@router.post("/salons", status_code=201)
async def create_salon(
    data: SalonCreate,
    admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Create a salon; the activation key is only ever shown in this response"""
    salon, plain_key, expires_at = service.create_salon(data, admin.get("email"))
    return {
        "success": True,
        "salon": _salon_response(salon, expires_at),
        "activationKey": plain_key,
        "expiresAt": expires_at.isoformat(),
        "message": "Salon created. Copy the activation key now - it will not be shown again.",
    }


@router.patch("/salons/{salon_id}")
async def update_salon(
    salon_id: str,
    data: SalonAction,
    admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.apply_action(salon_id, data.action, admin.get("email"))


@router.delete("/salons/{salon_id}")
async def delete_salon(
    salon_id: str,
    _admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    service.delete_salon(salon_id)
    return {"success": True, "message": "Salon deleted"}


@router.get("/audit-logs")
async def list_audit_logs(
    limit: int = Query(100, ge=1, le=500),
    _admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    logs = service.list_audit_logs(limit)
    return {
        "logs": [
            AuditLogResponse(
                id=log.id,
                action=log.action,
                targetType=log.target_type,
                targetId=log.target_id,
                metadata=log.details,
                createdAt=log.created_at,
            )
            for log in logs
        ]
    }


# ============================================================================
# LEADS
# ============================================================================


@router.post("/leads", status_code=201)
async def create_lead(data: LeadCreate, service: AdminService = Depends(get_admin_service)):
    """Public lead capture from the marketing site"""
    lead = service.create_lead(data)
    return {"success": True, "lead": _lead_response(lead)}


@router.get("/leads")
async def list_leads(
    status: Optional[str] = Query(None),
    _admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return {"leads": [_lead_response(lead) for lead in service.list_leads(status)]}


@router.patch("/leads")
async def update_lead(
    data: LeadUpdate,
    admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    lead = service.update_lead(data, admin.get("email"))
    return {"success": True, "lead": _lead_response(lead)}


@router.delete("/leads")
async def delete_lead(
    id: Optional[str] = Query(None),
    _admin: dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    service.delete_lead(id)
    return {"success": True}


__all__ = ["router"]
