# app/services/session_service.py

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.enums import ProfileRole, ProfileStatus
from app.models.user import UserProfile

# which dashboard a role lands on
DASHBOARDS = {
    ProfileRole.Admin: "admin",
    ProfileRole.MaleWarden: "male-warden",
    ProfileRole.FemaleWarden: "female-warden",
}


async def resolve_active_profile(session: AsyncSession, email: str) -> UserProfile | None:
    """
    Looks up the *active* profile for a signed-in email.

    Missing, inactive and suspended profiles all resolve to None, as does a
    failed lookup (logged, not retried): the caller treats that as logged out.
    """
    try:
        result = await session.execute(
            select(UserProfile).where(
                UserProfile.email == email,
                UserProfile.status == ProfileStatus.Active,
            )
        )
        return result.scalar_one_or_none()
    except SQLAlchemyError:
        logger.exception(f"Error loading profile for {email}")
        return None


def dashboard_for(role: ProfileRole | str) -> str:
    return DASHBOARDS[ProfileRole(role)]
