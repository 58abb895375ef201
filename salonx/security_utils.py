"""
Security utilities: activation keys, bcrypt hashing and signed session tokens
"""

import logging
import re
import secrets
from datetime import datetime, timedelta
from typing import Any, Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext

from .config import ACTIVATION_KEY_EXPIRY_DAYS, SECRET_KEY, SESSION_MAX_AGE_HOURS

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)

SESSION_SALT = "salonx-session"

# Ambiguous characters (0, O, 1, I) are left out of activation keys
KEY_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
KEY_PATTERN = re.compile(r"^SALONX-[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}$")

AUTH_ACTIONS = {
    "SALON_CREATED": "SALON_CREATED",
    "ACTIVATION_KEY_GENERATED": "ACTIVATION_KEY_GENERATED",
    "ACTIVATION_KEY_REGENERATED": "ACTIVATION_KEY_REGENERATED",
    "ACTIVATION_KEY_REVOKED": "ACTIVATION_KEY_REVOKED",
    "SALON_ACTIVATED": "SALON_ACTIVATED",
    "SALON_SUSPENDED": "SALON_SUSPENDED",
    "SALON_REACTIVATED": "SALON_REACTIVATED",
    "LOGIN_ATTEMPT": "LOGIN_ATTEMPT",
    "LOGIN_SUCCESS": "LOGIN_SUCCESS",
    "LOGIN_FAILED": "LOGIN_FAILED",
    "LEAD_STATUS_CHANGED": "LEAD_STATUS_CHANGED",
    "LEAD_CONVERTED": "LEAD_CONVERTED",
}


class SessionExpired(Exception):
    """Raised when a correctly signed session is past its expiry"""


# ============================================================================
# PASSWORD / KEY HASHING
# ============================================================================


def hash_password_bcrypt(password: str) -> str:
    """Hash a secret using bcrypt"""
    return pwd_context.hash(password)


def verify_password_bcrypt(plain_password: str, hashed_password: str) -> bool:
    """Verify a secret against a bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False


def generate_activation_key() -> str:
    """Generate a key of the form SALONX-XXXX-XXXX-XXXX"""
    groups = ["".join(secrets.choice(KEY_ALPHABET) for _ in range(4)) for _ in range(3)]
    return "SALONX-" + "-".join(groups)


def is_valid_key_format(key: str) -> bool:
    return bool(key) and bool(KEY_PATTERN.match(key))


def hash_activation_key(key: str) -> str:
    return hash_password_bcrypt(key)


def verify_activation_key(key: str, key_hash: str) -> bool:
    return verify_password_bcrypt(key, key_hash)


def get_key_expiry_date(hours: Optional[int] = None) -> datetime:
    """Expiry timestamp for a new key; defaults to the configured number of days"""
    if hours is not None:
        return datetime.utcnow() + timedelta(hours=hours)
    return datetime.utcnow() + timedelta(days=ACTIVATION_KEY_EXPIRY_DAYS)


# ============================================================================
# SESSION TOKENS
# ============================================================================


def create_session_token(
    salon_id: str, email: str, is_admin: bool = False, expires_at: Optional[datetime] = None
) -> str:
    """Sign a session payload for the session cookie"""
    if expires_at is None:
        expires_at = datetime.utcnow() + timedelta(hours=SESSION_MAX_AGE_HOURS)
    payload = {
        "salonId": salon_id,
        "email": email,
        "isAdmin": is_admin,
        "expiresAt": expires_at.isoformat(),
    }
    serializer = URLSafeTimedSerializer(SECRET_KEY)
    return serializer.dumps(payload, salt=SESSION_SALT)


def verify_session_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode a session cookie value.

    Returns:
        The payload, or None when the token is missing or forged.

    Raises:
        SessionExpired: the signature is valid but the session is too old.
    """
    if not token:
        return None

    serializer = URLSafeTimedSerializer(SECRET_KEY)
    try:
        data = serializer.loads(token, salt=SESSION_SALT, max_age=SESSION_MAX_AGE_HOURS * 3600)
    except SignatureExpired as e:
        raise SessionExpired() from e
    except BadSignature:
        logger.warning("⚠️ Invalid session signature")
        return None

    if not isinstance(data, dict):
        return None

    # Older cookies used snake_case for the tenant id
    if "salonId" not in data and "salon_id" in data:
        data["salonId"] = data["salon_id"]

    expires_at = data.get("expiresAt")
    if expires_at:
        try:
            if datetime.fromisoformat(expires_at) < datetime.utcnow():
                raise SessionExpired()
        except ValueError:
            return None

    return data
