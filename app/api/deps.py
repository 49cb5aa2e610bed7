# app/api/deps.py

from typing import AsyncGenerator
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import decode_token
from app.core.database import get_session
from app.core.scoping import HostelScope
from app.services.auth_service import get_auth_user_by_id
from app.services.session_service import resolve_active_profile
from app.models.user import AuthUser, UserProfile
from app.models.enums import ProfileRole


# ------------------------------------------------------------
# HTTP Bearer Authentication
# ------------------------------------------------------------
bearer_scheme = HTTPBearer(auto_error=False)


# ------------------------------------------------------------
# DB Session
# ------------------------------------------------------------
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


# ------------------------------------------------------------
# Identity from JWT
# ------------------------------------------------------------
async def get_current_auth_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
) -> AuthUser:

    if credentials is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Not authenticated")

    try:
        payload = decode_token(credentials.credentials)
    except jwt.PyJWTError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Could not validate credentials")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token payload")

    auth_user = await get_auth_user_by_id(session, user_id)
    if not auth_user:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "User not found")

    return auth_user


# ------------------------------------------------------------
# Active profile behind the identity
# ------------------------------------------------------------
async def get_current_profile(
    auth_user: AuthUser = Depends(get_current_auth_user),
    session: AsyncSession = Depends(get_db_session),
) -> UserProfile:
    profile = await resolve_active_profile(session, auth_user.email)

    # inactive / missing profile == logged out
    if not profile:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "No active profile for this account")

    return profile


async def get_scope(profile: UserProfile = Depends(get_current_profile)) -> HostelScope:
    return HostelScope.for_profile(profile)


# ------------------------------------------------------------
# Role-based access control (strict, no admin bypass)
# ------------------------------------------------------------
def role_required(*allowed_roles: ProfileRole):
    """
    Enforces that the current profile has one of the allowed roles.
    """
    allowed = {ProfileRole(r).value for r in allowed_roles}

    async def checker(current: UserProfile = Depends(get_current_profile)):
        role = ProfileRole(current.role).value
        if role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied for role '{role}'"
            )
        return current

    return checker


# ------------------------------------------------------------
# Exposed dependencies for routers
# ------------------------------------------------------------
require_admin = role_required(ProfileRole.Admin)
require_warden = role_required(ProfileRole.MaleWarden, ProfileRole.FemaleWarden)
require_any_role = role_required(ProfileRole.Admin, ProfileRole.MaleWarden, ProfileRole.FemaleWarden)
