# app/services/auth_service.py

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger
import uuid

from app.models.user import AuthUser, UserProfile, utcnow
from app.core.config import settings
from app.core.security import verify_password, create_access_token
from app.schemas.auth import LoginResponse
from app.schemas.user import ProfileRead
from app.services.session_service import resolve_active_profile, dashboard_for


def _as_uuid(value) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


# ============================================================================
# FETCH IDENTITY / PROFILE
# ============================================================================
async def get_auth_user_by_email(session: AsyncSession, email: str) -> AuthUser | None:
    result = await session.execute(select(AuthUser).where(AuthUser.email == email))
    return result.scalar_one_or_none()


async def get_auth_user_by_id(session: AsyncSession, user_id) -> AuthUser | None:
    user_uuid = _as_uuid(user_id)
    if user_uuid is None:
        return None
    result = await session.execute(select(AuthUser).where(AuthUser.id == user_uuid))
    return result.scalar_one_or_none()


async def get_profile_by_email(session: AsyncSession, email: str) -> UserProfile | None:
    result = await session.execute(select(UserProfile).where(UserProfile.email == email))
    return result.scalar_one_or_none()


async def get_profile_by_id(session: AsyncSession, profile_id) -> UserProfile | None:
    profile_uuid = _as_uuid(profile_id)
    if profile_uuid is None:
        return None
    result = await session.execute(select(UserProfile).where(UserProfile.id == profile_uuid))
    return result.scalar_one_or_none()


# ============================================================================
# AUTHENTICATE
# ============================================================================
async def authenticate_user(
    session: AsyncSession, email: str, password: str
) -> tuple[AuthUser, UserProfile] | None:
    """
    Checks the credentials, then requires an active profile for the email.
    Returns (identity, profile) or None.
    """
    auth_user = await get_auth_user_by_email(session, email)
    if not auth_user:
        return None

    if not verify_password(password, auth_user.password_hash):
        logger.warning(f"Failed login for {email}")
        return None

    profile = await resolve_active_profile(session, email)
    if not profile:
        logger.warning(f"Login for {email} has no active profile")
        return None

    return auth_user, profile


# ============================================================================
# CREATE LOGIN RESPONSE
# ============================================================================
async def create_login_response(
    session: AsyncSession, auth_user: AuthUser, profile: UserProfile
) -> LoginResponse:
    profile.last_login = utcnow()
    session.add(profile)
    await session.commit()
    await session.refresh(profile)

    role = profile.role.value
    token = create_access_token(
        subject=str(auth_user.id),
        data={"role": role, "profile_id": str(profile.id)},
    )

    return LoginResponse(
        access_token=token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        profile=ProfileRead.model_validate(profile),
        dashboard=dashboard_for(profile.role),
    )
