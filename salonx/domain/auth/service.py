"""Auth service - Activation key login and session inspection"""

import logging
import math
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...audit import log_admin_action
from ...auth import ADMIN_SALON_ID
from ...config import LOGIN_RATE_LIMIT, LOGIN_RATE_WINDOW_SECONDS
from ...models import Salon
from ...rate_limiter import check_rate_limit, get_redis_client, reset_rate_limit
from ...security_utils import AUTH_ACTIONS, is_valid_key_format, verify_activation_key
from .repository import AuthRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"

SETTINGS_DEFAULTS = {
    "gst_percentage": 0,
    "working_days": [1, 2, 3, 4, 5, 6],
    "opening_time": "09:00",
    "closing_time": "21:00",
    "currency": "INR",
    "invoice_prefix": "INV",
    "whatsapp_enabled": False,
}


def serialize_session_salon(salon: Salon) -> dict:
    """Salon block returned by the session endpoint, with settings defaults filled in"""
    data = {
        "id": salon.id,
        "name": salon.name,
        "email": salon.owner_email,
        "phone": salon.phone,
        "address": salon.address,
        "city": salon.city,
        "state": salon.state,
        "logo_url": salon.logo_url,
        "gst_number": salon.gst_number,
        "status": salon.status,
    }
    for key, default in SETTINGS_DEFAULTS.items():
        value = getattr(salon, key, None)
        data[key] = default if value is None else value
    return data


class AuthService:
    """Service layer for salon login"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AuthRepository()

    def _fail(self, email: str, reason: str, salon_id: Optional[str] = None, status_code: int = 401,
              detail: str = INVALID_CREDENTIALS):
        log_admin_action(
            self.db,
            AUTH_ACTIONS["LOGIN_FAILED"],
            target_type="salon",
            target_id=salon_id,
            metadata={"email": email, "reason": reason},
        )
        logger.warning(f"🚫 Login failed for {email}: {reason}")
        raise HTTPException(status_code=status_code, detail=detail)

    def login(self, email: Optional[str], activation_key: Optional[str]) -> Salon:
        """Validate an activation key login and return the salon"""
        if not email or not activation_key:
            raise HTTPException(status_code=400, detail="Email and activation key are required")

        email = email.strip().lower()
        activation_key = activation_key.strip().upper()

        rate_key = f"login:{email}"
        allowed, _, ttl = check_rate_limit(
            rate_key, LOGIN_RATE_LIMIT, LOGIN_RATE_WINDOW_SECONDS, get_redis_client()
        )
        if not allowed:
            minutes = max(1, math.ceil(ttl / 60))
            logger.warning(f"🚫 Login rate limit hit for {email}")
            raise HTTPException(
                status_code=429,
                detail=f"Too many login attempts. Please try again in {minutes} minutes.",
                headers={"Retry-After": str(ttl)},
            )

        log_admin_action(
            self.db, AUTH_ACTIONS["LOGIN_ATTEMPT"], target_type="salon", metadata={"email": email}
        )

        if not is_valid_key_format(activation_key):
            self._fail(email, "invalid_key_format")

        salon = self.repo.get_salon_by_email(self.db, email)
        if not salon:
            self._fail(email, "salon_not_found")

        if salon.status == "suspended":
            self._fail(
                email,
                "salon_suspended",
                salon.id,
                status_code=403,
                detail="Your salon account has been suspended. Please contact support.",
            )
        if salon.status != "active":
            self._fail(
                email,
                "salon_not_active",
                salon.id,
                status_code=403,
                detail="Your salon account is not activated yet. Please contact support.",
            )

        key = self.repo.get_active_key(self.db, salon.id)
        if not key:
            self._fail(email, "no_active_key", salon.id)

        now = datetime.utcnow()
        if key.expires_at < now:
            key.status = "expired"
            self.db.commit()
            self._fail(
                email,
                "key_expired",
                salon.id,
                detail="Your activation key has expired. Please contact support for a new key.",
            )

        if not verify_activation_key(activation_key, key.key_hash):
            self._fail(email, "invalid_key", salon.id)

        salon.last_login_at = now
        if salon.activated_at is None:
            salon.activated_at = now
        key.last_used_at = now
        log_admin_action(
            self.db,
            AUTH_ACTIONS["LOGIN_SUCCESS"],
            target_type="salon",
            target_id=salon.id,
            metadata={"email": email},
            commit=False,
        )
        self.db.commit()
        self.db.refresh(salon)

        reset_rate_limit(rate_key)
        logger.info(f"✅ Salon {salon.id} logged in")
        return salon

    def describe_session(self, session: Optional[dict]) -> dict:
        """Body for GET /api/auth/session"""
        if not session:
            return {"authenticated": False}

        if session.get("isAdmin"):
            return {
                "authenticated": True,
                "isAdmin": True,
                "salon": {
                    "id": ADMIN_SALON_ID,
                    "name": "SalonX Admin",
                    "email": session.get("email"),
                },
            }

        salon = self.repo.get_salon(self.db, session.get("salonId"))
        if not salon or salon.status != "active":
            return {"authenticated": False, "reason": "Salon not active"}

        return {"authenticated": True, "isAdmin": False, "salon": serialize_session_salon(salon)}
