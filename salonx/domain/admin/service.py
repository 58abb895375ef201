"""Admin service - Salon provisioning, activation keys and lead pipeline"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...audit import log_admin_action
from ...config import ADMIN_EMAILS, ADMIN_PASSWORD_HASH, REGENERATED_KEY_EXPIRY_HOURS
from ...models import Lead, Salon
from ...security_utils import (
    AUTH_ACTIONS,
    generate_activation_key,
    get_key_expiry_date,
    hash_activation_key,
    verify_password_bcrypt,
)
from ...shared.validators import validate_email
from ...utils.sanitization import sanitize_string
from .repository import AdminRepository
from .schemas import LeadCreate, LeadUpdate, SalonCreate

logger = logging.getLogger(__name__)

LEAD_STATUSES = ["new", "contacted", "qualified", "converted", "rejected"]


class AdminService:
    """Service layer for platform administration"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AdminRepository()

    # ========================================================================
    # ADMIN LOGIN
    # ========================================================================

    def authenticate(self, email: Optional[str], password: Optional[str]) -> str:
        """Check admin credentials and return the normalised email"""
        if not email or not password:
            raise HTTPException(status_code=400, detail="Email and password required")

        email = email.strip().lower()
        if email not in ADMIN_EMAILS:
            logger.warning(f"🚫 Admin login attempt from non-admin email: {email}")
            raise HTTPException(status_code=403, detail="Unauthorized - email not in admin list")

        if not ADMIN_PASSWORD_HASH:
            logger.error("❌ ADMIN_PASSWORD_HASH not configured")
            raise HTTPException(status_code=503, detail="Admin login is not configured")

        if not verify_password_bcrypt(password, ADMIN_PASSWORD_HASH):
            logger.warning(f"🚫 Invalid admin password for {email}")
            raise HTTPException(status_code=401, detail="Invalid credentials")

        logger.info(f"✅ Admin login: {email}")
        return email

    # ========================================================================
    # SALONS
    # ========================================================================

    def list_salons(self) -> list[tuple[Salon, Optional[datetime]]]:
        expiries = self.repo.active_key_expiries(self.db)
        return [(salon, expiries.get(salon.id)) for salon in self.repo.list_salons(self.db)]

    def create_salon(self, data: SalonCreate, admin_email: Optional[str] = None) -> tuple[Salon, str, datetime]:
        """Create an active salon with a fresh activation key; the plain key is returned once"""
        if not data.name or not data.ownerEmail:
            raise HTTPException(status_code=400, detail="Salon name and owner email are required")

        try:
            owner_email = validate_email(data.ownerEmail)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        if self.repo.get_salon_by_email(self.db, owner_email):
            raise HTTPException(status_code=409, detail="A salon with this email already exists")

        now = datetime.utcnow()
        salon = Salon(
            name=sanitize_string(data.name),
            owner_email=owner_email,
            phone=sanitize_string(data.phone),
            city=sanitize_string(data.city),
            address=sanitize_string(data.address),
            status="active",
            activated_at=now,
        )
        self.db.add(salon)
        self.db.flush()

        plain_key = generate_activation_key()
        expires_at = get_key_expiry_date()
        self.repo.add_key(self.db, salon.id, hash_activation_key(plain_key), expires_at)

        log_admin_action(
            self.db,
            AUTH_ACTIONS["SALON_CREATED"],
            target_type="salon",
            target_id=salon.id,
            metadata={"name": salon.name, "owner_email": owner_email},
            admin_email=admin_email,
            commit=False,
        )
        log_admin_action(
            self.db,
            AUTH_ACTIONS["ACTIVATION_KEY_GENERATED"],
            target_type="salon",
            target_id=salon.id,
            metadata={"expires_at": expires_at.isoformat()},
            admin_email=admin_email,
            commit=False,
        )
        self.db.commit()
        self.db.refresh(salon)

        logger.info(f"✅ Salon created: {salon.id} ({owner_email})")
        return salon, plain_key, expires_at

    def get_salon(self, salon_id: str) -> Salon:
        salon = self.repo.get_salon(self.db, salon_id)
        if not salon:
            raise HTTPException(status_code=404, detail="Salon not found")
        return salon

    def apply_action(self, salon_id: str, action: Optional[str], admin_email: Optional[str] = None) -> dict:
        """suspend / reactivate / regenerate-key"""
        salon = self.get_salon(salon_id)
        now = datetime.utcnow()

        if action == "suspend":
            salon.status = "suspended"
            salon.suspended_at = now
            revoked = self.repo.revoke_active_keys(self.db, salon.id)
            log_admin_action(
                self.db,
                AUTH_ACTIONS["SALON_SUSPENDED"],
                target_type="salon",
                target_id=salon.id,
                metadata={"revoked_keys": revoked},
                admin_email=admin_email,
                commit=False,
            )
            self.db.commit()
            logger.info(f"⛔ Salon suspended: {salon.id}")
            return {"success": True, "message": "Salon suspended"}

        if action == "reactivate":
            salon.status = "active"
            salon.suspended_at = None
            log_admin_action(
                self.db,
                AUTH_ACTIONS["SALON_REACTIVATED"],
                target_type="salon",
                target_id=salon.id,
                admin_email=admin_email,
                commit=False,
            )
            self.db.commit()
            logger.info(f"✅ Salon reactivated: {salon.id}")
            return {"success": True, "message": "Salon reactivated"}

        if action == "regenerate-key":
            self.repo.revoke_active_keys(self.db, salon.id)
            plain_key = generate_activation_key()
            expires_at = get_key_expiry_date(hours=REGENERATED_KEY_EXPIRY_HOURS)
            self.repo.add_key(self.db, salon.id, hash_activation_key(plain_key), expires_at)
            if salon.status == "inactive":
                salon.status = "active"
                salon.activated_at = now
            log_admin_action(
                self.db,
                AUTH_ACTIONS["ACTIVATION_KEY_REGENERATED"],
                target_type="salon",
                target_id=salon.id,
                metadata={"expires_at": expires_at.isoformat()},
                admin_email=admin_email,
                commit=False,
            )
            self.db.commit()
            logger.info(f"🔑 Activation key regenerated for salon {salon.id}")
            return {
                "success": True,
                "activationKey": plain_key,
                "expiresAt": expires_at.isoformat(),
                "message": "New activation key generated. Copy it now!",
            }

        raise HTTPException(status_code=400, detail="Invalid action")

    def delete_salon(self, salon_id: str) -> None:
        salon = self.get_salon(salon_id)
        self.repo.delete_salon(self.db, salon)
        logger.info(f"🗑️ Salon deleted: {salon_id}")

    def list_audit_logs(self, limit: int):
        return self.repo.list_audit_logs(self.db, limit)

    # ========================================================================
    # LEADS
    # ========================================================================

    def create_lead(self, data: LeadCreate) -> Lead:
        if not data.salonName or not data.ownerName or not data.email or not data.phone:
            raise HTTPException(
                status_code=400, detail="Salon name, owner name, email, and phone are required"
            )
        try:
            email = validate_email(data.email)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        if self.repo.get_lead_by_email(self.db, email):
            raise HTTPException(status_code=409, detail="A lead with this email already exists")

        lead = self.repo.create_lead(
            self.db,
            salon_name=sanitize_string(data.salonName),
            owner_name=sanitize_string(data.ownerName),
            email=email,
            phone=sanitize_string(data.phone),
            city=sanitize_string(data.city),
            message=sanitize_string(data.message),
            status="new",
        )
        logger.info(f"📥 New lead: {lead.id} ({email})")
        return lead

    def list_leads(self, status: Optional[str]) -> list[Lead]:
        return self.repo.list_leads(self.db, status)

    def update_lead(self, data: LeadUpdate, admin_email: Optional[str] = None) -> Lead:
        if not data.id:
            raise HTTPException(status_code=400, detail="Lead ID is required")

        lead = self.repo.get_lead(self.db, data.id)
        if not lead:
            raise HTTPException(status_code=404, detail="Lead not found")

        if data.status is not None:
            if data.status not in LEAD_STATUSES:
                raise HTTPException(
                    status_code=400, detail=f"Invalid status. Must be one of: {', '.join(LEAD_STATUSES)}"
                )
            if data.status != lead.status:
                action = "LEAD_CONVERTED" if data.status == "converted" else "LEAD_STATUS_CHANGED"
                log_admin_action(
                    self.db,
                    AUTH_ACTIONS[action],
                    target_type="lead",
                    target_id=lead.id,
                    metadata={"old_status": lead.status, "new_status": data.status},
                    admin_email=admin_email,
                    commit=False,
                )
                lead.status = data.status

        if data.notes is not None:
            lead.notes = sanitize_string(data.notes)

        self.db.commit()
        self.db.refresh(lead)
        return lead

    def delete_lead(self, lead_id: Optional[str]) -> None:
        if not lead_id:
            raise HTTPException(status_code=400, detail="Lead ID is required")
        lead = self.repo.get_lead(self.db, lead_id)
        if not lead:
            raise HTTPException(status_code=404, detail="Lead not found")
        self.repo.delete_lead(self.db, lead)
