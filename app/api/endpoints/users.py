# app/api/endpoints/users.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from app.api.deps import get_current_auth_user, get_db_session, require_admin
from app.models.user import AuthUser, UserProfile
from app.schemas.user import (
    ProfileRead,
    ProfileUpdate,
    ProvisionRequest,
    ProvisionResponse,
    UserCreate,
)
from app.services import user_service
from app.services.user_service import app_role_for

router = APIRouter(prefix="/api/users", tags=["Users"])


# -------------------------------------------------------------------
# List all users (Admin only), newest first
# -------------------------------------------------------------------
@router.get("", response_model=List[ProfileRead])
async def list_users(
    session: AsyncSession = Depends(get_db_session),
    _: UserProfile = Depends(require_admin),
):
    return await user_service.list_profiles(session)


# -------------------------------------------------------------------
# Add a user: profile + login + role record (Admin only)
# -------------------------------------------------------------------
@router.post("", response_model=ProfileRead, status_code=status.HTTP_201_CREATED)
async def add_user(
    data: UserCreate,
    session: AsyncSession = Depends(get_db_session),
    _: UserProfile = Depends(require_admin),
):
    try:
        return await user_service.add_user(session, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# -------------------------------------------------------------------
# Create-user procedure: login for an existing profile.
# Authorised by the caller's role record, not their profile.
# -------------------------------------------------------------------
@router.post("/provision", response_model=ProvisionResponse)
async def provision_user(
    data: ProvisionRequest,
    session: AsyncSession = Depends(get_db_session),
    caller: AuthUser = Depends(get_current_auth_user),
):
    try:
        auth_user = await user_service.provision_user(session, caller, data)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ProvisionResponse(user_id=auth_user.id, email=auth_user.email, role=app_role_for(data.role).value)


# -------------------------------------------------------------------
# Update / toggle / delete (Admin only)
# -------------------------------------------------------------------
@router.patch("/{user_id}", response_model=ProfileRead)
async def update_user(
    user_id: UUID,
    data: ProfileUpdate,
    session: AsyncSession = Depends(get_db_session),
    _: UserProfile = Depends(require_admin),
):
    try:
        return await user_service.update_profile(session, user_id, data)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{user_id}/toggle-status", response_model=ProfileRead)
async def toggle_user_status(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: UserProfile = Depends(require_admin),
):
    try:
        return await user_service.toggle_status(session, user_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{user_id}")
async def delete_user(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    current: UserProfile = Depends(require_admin),
):
    try:
        await user_service.delete_profile(session, user_id, current)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"detail": "User deleted successfully"}
