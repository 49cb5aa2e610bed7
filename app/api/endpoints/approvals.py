from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from app.api.deps import get_db_session, require_admin, require_warden
from app.core.errors import ApprovalStateError
from app.core.rbac import AllowRoles
from app.core.scoping import HostelScope
from app.models.enums import ApprovalStatus, ProfileRole
from app.models.user import UserProfile
from app.schemas.approval import (
    ApprovalCreate,
    ApprovalDecision,
    ApprovalDecisionResponse,
    ApprovalRead,
)
from app.services.approval_service import (
    create_approval_request,
    decide_approval,
    list_approvals,
)

router = APIRouter(
    prefix="/api/approvals",
    tags=["Approvals"]
)


# ===================================================================
# LIST (admin: all requests, warden: own requests)
# ===================================================================
@router.get("", response_model=List[ApprovalRead])
async def get_approvals(
    status_filter: Optional[ApprovalStatus] = Query(default=None, alias="status"),
    current_user: UserProfile = Depends(
        AllowRoles(ProfileRole.MaleWarden, ProfileRole.FemaleWarden)
    ),
    session: AsyncSession = Depends(get_db_session),
):
    scope = HostelScope.for_profile(current_user)
    return await list_approvals(session, scope, status_filter)


# ===================================================================
# FILE A REQUEST (wardens)
# ===================================================================
@router.post("", response_model=ApprovalRead, status_code=status.HTTP_201_CREATED)
async def create_request(
    payload: ApprovalCreate,
    current_user: UserProfile = Depends(require_warden),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        approval = await create_approval_request(session, current_user, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    data = approval.model_dump()
    data["warden_name"] = current_user.full_name
    data["warden_hostel"] = current_user.assigned_hostel
    return data


# ===================================================================
# DECIDE (admin only)
# ===================================================================
@router.post("/{approval_id}/decision", response_model=ApprovalDecisionResponse)
async def decide(
    approval_id: UUID,
    payload: ApprovalDecision,
    current_user: UserProfile = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        approval, item = await decide_approval(session, approval_id, payload.status, current_user)
    except ApprovalStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        code = 404 if str(e) == "Approval not found" else 400
        raise HTTPException(status_code=code, detail=str(e))

    return ApprovalDecisionResponse(
        approval=ApprovalRead.model_validate(approval),
        inventory_item_id=item.id if item else None,
        message=f"Request {payload.status} successfully",
    )
