import re
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core.security import password_problem
from app.models.enums import ProfileRole, ProfileStatus

NAME_PATTERN = re.compile(r"^[a-zA-Z\s'-]+$")


def _check_full_name(value: str) -> str:
    value = value.strip()
    if len(value) < 2:
        raise ValueError("Name must be at least 2 characters")
    if len(value) > 100:
        raise ValueError("Name must be less than 100 characters")
    if not NAME_PATTERN.match(value):
        raise ValueError("Name can only contain letters, spaces, hyphens, and apostrophes")
    return value


# ---------------------------------------------------------
# READ PROFILE (response)
# ---------------------------------------------------------
class ProfileRead(BaseModel):
    id: UUID
    full_name: str
    email: EmailStr
    role: ProfileRole
    status: ProfileStatus
    assigned_hostel: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ---------------------------------------------------------
# ADD USER (Admin): profile + login in one go
# ---------------------------------------------------------
class UserCreate(BaseModel):
    full_name: str
    email: EmailStr
    password: str
    role: ProfileRole = ProfileRole.MaleWarden
    assigned_hostel: Optional[str] = Field(default=None, max_length=100)

    @field_validator("full_name")
    def valid_name(cls, v):
        return _check_full_name(v)

    @field_validator("email", mode="before")
    def strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    def email_length(cls, v):
        if len(v) > 255:
            raise ValueError("Email must be less than 255 characters")
        return v

    @field_validator("password")
    def strong_password(cls, v):
        problem = password_problem(v)
        if problem:
            raise ValueError(problem)
        return v

    @field_validator("assigned_hostel")
    def blank_hostel_is_none(cls, v):
        # the form sends "" for "no hostel"
        return v or None


# ---------------------------------------------------------
# UPDATE PROFILE (Admin edits)
# ---------------------------------------------------------
class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    role: Optional[ProfileRole] = None
    status: Optional[ProfileStatus] = None
    assigned_hostel: Optional[str] = Field(default=None, max_length=100)

    @field_validator("full_name", "role", "status")
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be empty")
        return v

    @field_validator("full_name")
    def valid_name(cls, v):
        return _check_full_name(v) if v is not None else v


# ---------------------------------------------------------
# CREATE-USER PROCEDURE (links a login to an existing profile)
# ---------------------------------------------------------
class ProvisionRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None
    role: ProfileRole
    assigned_hostel: Optional[str] = None


class ProvisionResponse(BaseModel):
    success: bool = True
    user_id: UUID
    email: EmailStr
    role: str
