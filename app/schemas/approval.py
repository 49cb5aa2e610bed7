from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from typing import Optional, Dict, Any, Literal

from app.models.enums import ApprovalStatus, RequestType


class ApprovalCreate(BaseModel):
    request_type: RequestType
    description: Optional[str] = None
    item_details: Optional[Dict[str, Any]] = None


class ApprovalDecision(BaseModel):
    status: Literal["approved", "rejected"]


class ApprovalRead(BaseModel):
    id: UUID
    warden_id: Optional[UUID]
    request_type: RequestType
    item_details: Optional[Dict[str, Any]] = None
    description: Optional[str] = None
    status: ApprovalStatus
    request_date: datetime
    approval_date: Optional[datetime] = None
    approved_by: Optional[UUID] = None

    # joined from user_profiles
    warden_name: Optional[str] = None
    warden_hostel: Optional[str] = None

    class Config:
        from_attributes = True
        extra = "ignore"


class ApprovalDecisionResponse(BaseModel):
    approval: ApprovalRead
    inventory_item_id: Optional[UUID] = None
    message: str
