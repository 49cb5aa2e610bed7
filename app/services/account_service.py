# app/services/account_service.py

from datetime import datetime, timedelta, timezone

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import FieldValidationError
from app.core.security import (
    generate_verification_code,
    hash_password,
    password_problem,
    verify_password,
)
from app.models.user import AuthUser, UserProfile, utcnow
from app.schemas.account import ChangePasswordRequest
from app.services.email_service import send_verification_code_email


def _aware(value: datetime) -> datetime:
    # SQLite hands timezone columns back naive
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


# ------------------------------------------------------------
# STEP 1: issue and e-mail a code
# ------------------------------------------------------------
async def request_verification_code(
    session: AsyncSession, auth_user: AuthUser, profile: UserProfile
) -> datetime:
    code = generate_verification_code()
    expires_at = utcnow() + timedelta(minutes=settings.VERIFICATION_CODE_TTL_MINUTES)

    auth_user.verification_code = code
    auth_user.verification_expires_at = expires_at
    session.add(auth_user)
    await session.commit()

    send_verification_code_email(auth_user.email, code, profile.full_name)
    logger.info(f"Verification code issued for {auth_user.email}")
    return expires_at


# ------------------------------------------------------------
# STEP 2: verify the code and change the password
# ------------------------------------------------------------
async def change_password(session: AsyncSession, auth_user: AuthUser, data: ChangePasswordRequest) -> None:
    """
    Checks run in a fixed order and the first failure stops the flow
    without touching the stored credentials:
    code, code expiry, new password rules, confirmation, current password.
    """
    code = (data.verification_code or "").strip()
    if not auth_user.verification_code or code != auth_user.verification_code:
        raise FieldValidationError("verification_code", "Invalid verification code")

    expires_at = auth_user.verification_expires_at
    if expires_at is None or _aware(expires_at) < utcnow():
        raise FieldValidationError("verification_code", "Verification code has expired")

    problem = password_problem(data.new_password)
    if problem:
        raise FieldValidationError("new_password", problem)

    if data.new_password != data.confirm_password:
        raise FieldValidationError("confirm_password", "Passwords don't match")

    if not verify_password(data.current_password, auth_user.password_hash):
        raise FieldValidationError("current_password", "Current password is incorrect")

    auth_user.password_hash = hash_password(data.new_password)
    auth_user.verification_code = None
    auth_user.verification_expires_at = None
    session.add(auth_user)
    await session.commit()

    logger.info(f"Password changed for {auth_user.email}")
