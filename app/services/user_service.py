# app/services/user_service.py

from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.security import hash_password
from app.models.enums import AppRole, ProfileRole, ProfileStatus
from app.models.user import AuthUser, UserProfile, UserRoleRecord, utcnow
from app.schemas.user import ProfileUpdate, ProvisionRequest, UserCreate
from app.services.auth_service import get_auth_user_by_email, get_profile_by_email, get_profile_by_id


def app_role_for(role: ProfileRole | str) -> AppRole:
    """Profile roles are hyphenated, role records use underscores."""
    return AppRole(ProfileRole(role).value.replace("-", "_"))


async def has_role(session: AsyncSession, user_id: UUID, role: AppRole) -> bool:
    result = await session.execute(
        select(UserRoleRecord.id).where(UserRoleRecord.user_id == user_id, UserRoleRecord.role == role)
    )
    return result.first() is not None


# ---------------------------------------------------------
# LIST
# ---------------------------------------------------------
async def list_profiles(session: AsyncSession) -> list[UserProfile]:
    result = await session.execute(select(UserProfile).order_by(UserProfile.created_at.desc()))
    return result.scalars().all()


# ---------------------------------------------------------
# PROVISIONING (login identity + role record for a profile)
# ---------------------------------------------------------
async def _provision(session: AsyncSession, profile: UserProfile, password: str) -> AuthUser:
    """Adds the identity and role record to the session. The caller commits."""
    if await get_auth_user_by_email(session, profile.email):
        raise ValueError("A login already exists for this email")

    auth_user = AuthUser(email=profile.email, password_hash=hash_password(password))
    session.add(auth_user)
    await session.flush()

    profile.auth_user_id = auth_user.id
    profile.updated_at = utcnow()
    session.add(profile)
    session.add(UserRoleRecord(user_id=auth_user.id, role=app_role_for(profile.role)))
    return auth_user


async def provision_user(
    session: AsyncSession, caller: AuthUser, payload: ProvisionRequest
) -> AuthUser:
    """
    Create-user procedure: links a new login to the existing profile with
    the same email. Only callers holding an 'admin' role record may use it.
    """
    if not await has_role(session, caller.id, AppRole.Admin):
        raise PermissionError("Only admins can create users")

    profile = await get_profile_by_email(session, payload.email)
    if not profile:
        raise ValueError("No profile exists for this email")

    if profile.role != payload.role:
        profile.role = payload.role
    if payload.full_name:
        profile.full_name = payload.full_name
    if payload.assigned_hostel is not None:
        profile.assigned_hostel = payload.assigned_hostel or None

    try:
        auth_user = await _provision(session, profile, payload.password)
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValueError("A login already exists for this email")
    except ValueError:
        await session.rollback()
        raise

    await session.refresh(auth_user)
    logger.info(f"Provisioned login for {payload.email} as {app_role_for(payload.role).value}")
    return auth_user


# ---------------------------------------------------------
# ADD USER (profile + provisioning, one transaction)
# ---------------------------------------------------------
async def add_user(session: AsyncSession, payload: UserCreate) -> UserProfile:
    email = payload.email.lower()

    if await get_profile_by_email(session, email) or await get_auth_user_by_email(session, email):
        raise ValueError("A user with this email already exists")

    profile = UserProfile(
        full_name=payload.full_name,
        email=email,
        role=payload.role,
        status=ProfileStatus.Active,
        assigned_hostel=payload.assigned_hostel,
    )
    session.add(profile)

    try:
        await session.flush()
        await _provision(session, profile, payload.password)
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValueError("A user with this email already exists")
    except ValueError:
        await session.rollback()
        raise

    await session.refresh(profile)
    logger.success(f"User {email} created ({profile.role.value})")
    return profile


# ---------------------------------------------------------
# UPDATE / TOGGLE / DELETE
# ---------------------------------------------------------
async def _get_profile(session: AsyncSession, profile_id) -> UserProfile:
    profile = await get_profile_by_id(session, profile_id)
    if not profile:
        raise LookupError("User not found")
    return profile


async def update_profile(session: AsyncSession, profile_id, payload: ProfileUpdate) -> UserProfile:
    profile = await _get_profile(session, profile_id)
    changes = payload.model_dump(exclude_unset=True)

    new_role: Optional[ProfileRole] = changes.get("role")
    for key, value in changes.items():
        setattr(profile, key, value)
    profile.updated_at = utcnow()
    session.add(profile)

    # keep the role record in line with the profile
    if new_role is not None and profile.auth_user_id:
        records = await session.execute(
            select(UserRoleRecord).where(UserRoleRecord.user_id == profile.auth_user_id)
        )
        for record in records.scalars().all():
            record.role = app_role_for(new_role)
            session.add(record)

    await session.commit()
    await session.refresh(profile)
    return profile


async def toggle_status(session: AsyncSession, profile_id) -> UserProfile:
    profile = await _get_profile(session, profile_id)
    profile.status = ProfileStatus.Suspended if profile.status == ProfileStatus.Active else ProfileStatus.Active
    profile.updated_at = utcnow()

    session.add(profile)
    await session.commit()
    await session.refresh(profile)
    logger.info(f"User {profile.email} is now {profile.status.value}")
    return profile


async def delete_profile(session: AsyncSession, profile_id, acting: UserProfile) -> None:
    profile = await _get_profile(session, profile_id)
    if profile.id == acting.id:
        raise ValueError("You cannot delete your own account")

    await session.delete(profile)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValueError("User has related records; suspend the account instead")
    logger.info(f"User {profile.email} deleted")
