# app/api/endpoints/session.py

from fastapi import APIRouter, Depends

from app.api.deps import get_current_profile
from app.models.user import UserProfile
from app.schemas.auth import SessionRead
from app.schemas.user import ProfileRead
from app.services.session_service import dashboard_for

router = APIRouter(prefix="/api/session", tags=["Session"])


# -------------------------------------------------------------------
# WHO AM I (active profile + dashboard to route to)
# -------------------------------------------------------------------
@router.get("", response_model=SessionRead)
async def current_session(profile: UserProfile = Depends(get_current_profile)):
    return SessionRead(
        profile=ProfileRead.model_validate(profile),
        role=profile.role.value,
        dashboard=dashboard_for(profile.role),
    )
