import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response

from .config import (
    ADMIN_EMAILS,
    IS_PRODUCTION,
    LEGACY_SESSION_COOKIE_NAME,
    SESSION_COOKIE_NAME,
    SESSION_MAX_AGE_HOURS,
)
from .security_utils import SessionExpired, create_session_token, verify_session_token

logger = logging.getLogger(__name__)

ADMIN_SALON_ID = "admin"


def read_session_cookie(request: Request) -> Optional[str]:
    return request.cookies.get(SESSION_COOKIE_NAME) or request.cookies.get(LEGACY_SESSION_COOKIE_NAME)


def set_session_cookie(response: Response, salon_id: str, email: str, is_admin: bool = False) -> None:
    """Issue a signed session cookie"""
    token = create_session_token(salon_id, email, is_admin=is_admin)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=IS_PRODUCTION,
        samesite="lax",
        max_age=SESSION_MAX_AGE_HOURS * 3600,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    response.delete_cookie(LEGACY_SESSION_COOKIE_NAME, path="/")


def get_session_data(request: Request) -> Optional[dict]:
    """Session payload or None; expired sessions count as absent"""
    token = read_session_cookie(request)
    if not token:
        return None
    try:
        return verify_session_token(token)
    except SessionExpired:
        logger.info("⏰ Session expired")
        return None


def get_current_salon_session(session: Optional[dict] = Depends(get_session_data)) -> dict:
    """Require a salon (tenant) session"""
    if not session or not session.get("salonId") or session.get("isAdmin"):
        raise HTTPException(status_code=401, detail="Not authenticated")
    return session


def get_current_salon_id(session: dict = Depends(get_current_salon_session)) -> str:
    return session["salonId"]


def is_admin_session(session: Optional[dict]) -> bool:
    return bool(
        session
        and session.get("isAdmin")
        and (session.get("email") or "").lower() in ADMIN_EMAILS
    )


def require_admin(session: Optional[dict] = Depends(get_session_data)) -> dict:
    """Require a platform admin session"""
    if not session:
        raise HTTPException(status_code=401, detail="Unauthorized")
    if not is_admin_session(session):
        logger.warning(f"⚠️ Non-admin session attempted admin access: {session.get('email')}")
        raise HTTPException(status_code=403, detail="Admin access required")
    return session
