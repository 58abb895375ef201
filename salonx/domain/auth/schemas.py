"""Auth domain schemas"""

from typing import Optional

from pydantic import BaseModel


class LoginRequest(BaseModel):
    email: Optional[str] = None
    activationKey: Optional[str] = None


class SalonSummary(BaseModel):
    id: str
    name: str
    email: str


class LoginResponse(BaseModel):
    success: bool = True
    salon: SalonSummary
