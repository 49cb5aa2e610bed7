# app/api/endpoints/account.py
import smtplib

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_auth_user, get_current_profile, get_db_session
from app.core.config import settings
from app.core.errors import FieldValidationError
from app.core.rate_limiter import limiter
from app.models.user import AuthUser, UserProfile
from app.schemas.account import ChangePasswordRequest, VerificationCodeSent
from app.services.account_service import change_password, request_verification_code

router = APIRouter(prefix="/api/account", tags=["Account"])


# -------------------------------------------------------------------
# STEP 1: e-mail a verification code
# -------------------------------------------------------------------
@router.post("/change-password/request", response_model=VerificationCodeSent)
@limiter.limit("5/minute")
async def request_code(
    request: Request,
    auth_user: AuthUser = Depends(get_current_auth_user),
    profile: UserProfile = Depends(get_current_profile),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        await request_verification_code(session, auth_user, profile)
    except (smtplib.SMTPException, OSError):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to send verification code",
        )

    return VerificationCodeSent(
        message="Verification code sent",
        email=auth_user.email,
        expires_in_minutes=settings.VERIFICATION_CODE_TTL_MINUTES,
    )


# -------------------------------------------------------------------
# STEP 2: verify code and change password
# -------------------------------------------------------------------
@router.post("/change-password/verify")
@limiter.limit("5/minute")
async def verify_and_change(
    request: Request,
    payload: ChangePasswordRequest,
    auth_user: AuthUser = Depends(get_current_auth_user),
    _: UserProfile = Depends(get_current_profile),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        await change_password(session, auth_user, payload)
    except FieldValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.as_detail())

    return {"detail": "Password changed successfully"}
