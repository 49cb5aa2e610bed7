# app/models/user.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, String
from datetime import datetime, timezone
import uuid
from typing import Optional

from app.models.enums import ProfileRole, ProfileStatus, AppRole, enum_type


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthUser(SQLModel, table=True):
    """Authentication identity. Separate from the application profile."""
    __tablename__ = "auth_users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    email: str = Field(nullable=False, index=True, unique=True)
    password_hash: str = Field(nullable=False)

    # --- Change-password verification ---
    verification_code: Optional[str] = Field(
        default=None,
        sa_column=Column(String, nullable=True)
    )
    verification_expires_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class UserProfile(SQLModel, table=True):
    __tablename__ = "user_profiles"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    full_name: str = Field(nullable=False)
    email: str = Field(nullable=False, index=True, unique=True)

    role: ProfileRole = Field(
        sa_column=Column(enum_type(ProfileRole, "profile_role"), nullable=False)
    )
    status: ProfileStatus = Field(
        default=ProfileStatus.Active,
        sa_column=Column(enum_type(ProfileStatus, "profile_status"), nullable=False)
    )

    assigned_hostel: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True)
    )

    last_login: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )

    # Set once the profile is provisioned with a login
    auth_user_id: Optional[uuid.UUID] = Field(default=None, foreign_key="auth_users.id", nullable=True)

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class UserRoleRecord(SQLModel, table=True):
    __tablename__ = "user_roles"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="auth_users.id", nullable=False, index=True)

    role: AppRole = Field(
        sa_column=Column(enum_type(AppRole, "app_role"), nullable=False)
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
