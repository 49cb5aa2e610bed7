# app/models/approval.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, JSON, Text
from sqlalchemy.dialects.postgresql import JSONB
from datetime import datetime
import uuid
from typing import Optional, Dict, Any

from app.models.enums import ApprovalStatus, RequestType, enum_type
from app.models.user import utcnow


class WardenApproval(SQLModel, table=True):
    __tablename__ = "warden_approvals"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    warden_id: Optional[uuid.UUID] = Field(default=None, foreign_key="user_profiles.id", nullable=True, index=True)

    request_type: RequestType = Field(
        sa_column=Column(enum_type(RequestType, "request_type"), nullable=False)
    )

    # For inventory_add: the inventory row to create on approval
    item_details: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)
    )

    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    status: ApprovalStatus = Field(
        default=ApprovalStatus.Pending,
        sa_column=Column(enum_type(ApprovalStatus, "approval_status"), nullable=False, index=True)
    )

    request_date: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    approval_date: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    approved_by: Optional[uuid.UUID] = Field(default=None, foreign_key="user_profiles.id", nullable=True)

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
