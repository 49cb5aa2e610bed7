# app/models/inventory.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Date, DateTime, Integer, String, Text
from datetime import date, datetime
import uuid
from typing import Optional

from app.models.enums import ItemStatus, ItemCondition, enum_type
from app.models.user import utcnow


class InventoryCategory(SQLModel, table=True):
    __tablename__ = "inventory_categories"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    name: str = Field(sa_column=Column(String(64), nullable=False, unique=True))
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class InventoryItem(SQLModel, table=True):
    __tablename__ = "inventory_items"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    name: str = Field(sa_column=Column(String(128), nullable=False))
    category_id: uuid.UUID = Field(foreign_key="inventory_categories.id", nullable=False)

    hostel_id: Optional[uuid.UUID] = Field(default=None, foreign_key="hostels.id", nullable=True, index=True)
    room_id: Optional[uuid.UUID] = Field(default=None, foreign_key="rooms.id", nullable=True)

    quantity: int = Field(default=1, sa_column=Column(Integer, nullable=False, default=1))

    condition: ItemCondition = Field(
        default=ItemCondition.Good,
        sa_column=Column(enum_type(ItemCondition, "item_condition"), nullable=False)
    )
    status: ItemStatus = Field(
        default=ItemStatus.Available,
        sa_column=Column(enum_type(ItemStatus, "item_status"), nullable=False)
    )

    # profile that put the item into stock
    assigned_by: Optional[uuid.UUID] = Field(default=None, foreign_key="user_profiles.id", nullable=True)

    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    purchase_date: Optional[date] = Field(default=None, sa_column=Column(Date, nullable=True))
    last_maintenance: Optional[date] = Field(default=None, sa_column=Column(Date, nullable=True))

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
