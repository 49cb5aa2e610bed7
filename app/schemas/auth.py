from pydantic import BaseModel, EmailStr
from typing import Optional

from app.schemas.user import ProfileRead


# -------------------------------------------------------------------
# LOGIN REQUEST
# -------------------------------------------------------------------
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# -------------------------------------------------------------------
# TOKEN + PROFILE (login response)
# -------------------------------------------------------------------
class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    profile: ProfileRead

    # admin / male-warden / female-warden
    dashboard: str


# -------------------------------------------------------------------
# CURRENT SESSION
# -------------------------------------------------------------------
class SessionRead(BaseModel):
    profile: ProfileRead
    role: str
    dashboard: str
