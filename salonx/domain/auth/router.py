"""Auth router - Salon login, session and logout endpoints"""

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from ...auth import clear_session_cookie, read_session_cookie, set_session_cookie
from ...database import get_db
from ...security_utils import SessionExpired, verify_session_token
from .schemas import LoginRequest, LoginResponse, SalonSummary
from .service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency injection for AuthService"""
    return AuthService(db)


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    """Log a salon in with owner email + activation key"""
    salon = service.login(data.email, data.activationKey)
    set_session_cookie(response, salon.id, salon.owner_email)
    return LoginResponse(salon=SalonSummary(id=salon.id, name=salon.name, email=salon.owner_email))


@router.get("/session")
async def get_session(
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    """Describe the current session"""
    token = read_session_cookie(request)
    try:
        session = verify_session_token(token) if token else None
    except SessionExpired:
        clear_session_cookie(response)
        return {"authenticated": False, "reason": "Session expired"}

    result = service.describe_session(session)
    if session and not result["authenticated"]:
        clear_session_cookie(response)
    return result


@router.delete("/session")
async def delete_session(response: Response):
    clear_session_cookie(response)
    return {"success": True}


@router.post("/logout")
async def logout(response: Response):
    clear_session_cookie(response)
    return {"success": True}


__all__ = ["router"]
