from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import date, datetime

from app.models.enums import HostelType, RoomStatus


# ------------------------------------------------------------
# HOSTELS
# ------------------------------------------------------------
class HostelCreate(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    type: HostelType = HostelType.Male
    total_rooms: int = Field(default=0, ge=0)


class HostelRead(BaseModel):
    id: UUID
    name: str
    type: HostelType
    total_rooms: int
    warden_id: Optional[UUID] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ------------------------------------------------------------
# ROOMS
# ------------------------------------------------------------
class RoomCreate(BaseModel):
    hostel_id: UUID
    room_number: str = Field(min_length=1, max_length=32)
    capacity: int = Field(default=1, ge=1)


class RoomRead(BaseModel):
    id: UUID
    hostel_id: UUID
    room_number: str
    capacity: int
    current_occupants: int
    status: RoomStatus

    class Config:
        from_attributes = True


# ------------------------------------------------------------
# OCCUPANTS
# ------------------------------------------------------------
class OccupantCreate(BaseModel):
    room_id: UUID
    student_name: str = Field(min_length=1)
    registration_number: str = Field(min_length=1, max_length=64)
    access_number: str = Field(min_length=1, max_length=64)
    year_of_study: int = Field(default=1, ge=1)
    semester: int = Field(default=1, ge=1)
    check_in_date: Optional[date] = None


class OccupantRead(BaseModel):
    id: UUID
    room_id: UUID
    student_name: str
    registration_number: str
    access_number: str
    year_of_study: int
    semester: int
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None

    class Config:
        from_attributes = True


class CheckOutRequest(BaseModel):
    check_out_date: Optional[date] = None
