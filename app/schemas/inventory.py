from pydantic import BaseModel, Field, field_validator
from typing import Optional
from uuid import UUID
from datetime import date, datetime

from app.models.enums import ItemCondition, ItemStatus


class CategoryRead(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


# ------------------------------------------------------------
# ITEM PAYLOAD
# Used both by the "add item" form and as the item_details of an
# inventory_add approval request.
# ------------------------------------------------------------
class InventoryItemDetails(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    category_id: UUID
    hostel_id: Optional[UUID] = None
    room_id: Optional[UUID] = None
    quantity: int = Field(default=1, ge=0)
    condition: ItemCondition = ItemCondition.Good
    notes: Optional[str] = None
    purchase_date: Optional[date] = None

    class Config:
        extra = "ignore"

    @field_validator("hostel_id", "room_id", "notes", mode="before")
    def blank_is_none(cls, v):
        # empty form values mean "not set"
        return v or None


class InventoryItemUpdate(BaseModel):
    quantity: Optional[int] = Field(default=None, ge=0)
    condition: Optional[ItemCondition] = None
    status: Optional[ItemStatus] = None
    room_id: Optional[UUID] = None
    notes: Optional[str] = None
    last_maintenance: Optional[date] = None

    @field_validator("quantity", "condition", "status")
    def not_null(cls, v, info):
        # these may be left out but never cleared
        if v is None:
            raise ValueError(f"{info.field_name} cannot be empty")
        return v


class InventoryItemRead(BaseModel):
    id: UUID
    name: str
    category_id: UUID
    hostel_id: Optional[UUID] = None
    room_id: Optional[UUID] = None
    quantity: int
    condition: ItemCondition
    status: ItemStatus
    assigned_by: Optional[UUID] = None
    notes: Optional[str] = None
    purchase_date: Optional[date] = None
    last_maintenance: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
