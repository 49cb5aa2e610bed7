# app/api/endpoints/dashboard.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session, require_admin
from app.core.rbac import AllowRoles
from app.core.scoping import HostelScope
from app.models.enums import ProfileRole
from app.models.user import UserProfile
from app.schemas.dashboard import AdminDashboard, WardenDashboard
from app.services.dashboard_service import admin_dashboard, warden_dashboard

router = APIRouter(prefix="/api/dashboard", tags=["Dashboards"])


# Admins may open a warden view too (it covers every hostel for them)
@router.get("/warden", response_model=WardenDashboard)
async def get_warden_dashboard(
    session: AsyncSession = Depends(get_db_session),
    current: UserProfile = Depends(AllowRoles(ProfileRole.MaleWarden, ProfileRole.FemaleWarden)),
):
    return await warden_dashboard(session, HostelScope.for_profile(current))


@router.get("/admin", response_model=AdminDashboard)
async def get_admin_dashboard(
    session: AsyncSession = Depends(get_db_session),
    _: UserProfile = Depends(require_admin),
):
    return await admin_dashboard(session)
