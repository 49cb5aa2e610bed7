# app/models/hostel.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Date, DateTime, Index, Integer, String, text
from datetime import date, datetime
import uuid
from typing import Optional

from app.models.enums import HostelType, RoomStatus, enum_type
from app.models.user import utcnow


class Hostel(SQLModel, table=True):
    __tablename__ = "hostels"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    name: str = Field(sa_column=Column(String(128), nullable=False))

    # male / female / mixed; decides which warden dashboard sees it
    type: HostelType = Field(
        sa_column=Column(enum_type(HostelType, "hostel_type"), nullable=False, index=True)
    )

    total_rooms: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))

    warden_id: Optional[uuid.UUID] = Field(default=None, foreign_key="user_profiles.id", nullable=True)

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class Room(SQLModel, table=True):
    __tablename__ = "rooms"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    hostel_id: uuid.UUID = Field(foreign_key="hostels.id", nullable=False, index=True)

    room_number: str = Field(sa_column=Column(String(32), nullable=False))
    capacity: int = Field(default=1, sa_column=Column(Integer, nullable=False, default=1))

    # Not enforced against capacity
    current_occupants: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))

    status: RoomStatus = Field(
        default=RoomStatus.Available,
        sa_column=Column(enum_type(RoomStatus, "room_status"), nullable=False)
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class RoomOccupant(SQLModel, table=True):
    __tablename__ = "room_occupants"
    # A registration number may only be active (not checked out) once
    __table_args__ = (
        Index(
            "uq_room_occupants_active_registration",
            "registration_number",
            unique=True,
            postgresql_where=text("check_out_date IS NULL"),
            sqlite_where=text("check_out_date IS NULL"),
        ),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    room_id: uuid.UUID = Field(foreign_key="rooms.id", nullable=False, index=True)

    student_name: str = Field(sa_column=Column(String, nullable=False))
    registration_number: str = Field(sa_column=Column(String(64), nullable=False))
    access_number: str = Field(sa_column=Column(String(64), nullable=False))

    year_of_study: int = Field(sa_column=Column(Integer, nullable=False))
    semester: int = Field(sa_column=Column(Integer, nullable=False))

    check_in_date: Optional[date] = Field(default=None, sa_column=Column(Date, nullable=True))
    check_out_date: Optional[date] = Field(default=None, sa_column=Column(Date, nullable=True))

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
