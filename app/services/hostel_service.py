# app/services/hostel_service.py

from datetime import date
from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.scoping import HostelScope
from app.models.enums import RoomStatus
from app.models.hostel import Hostel, Room, RoomOccupant
from app.models.user import utcnow
from app.schemas.hostel import HostelCreate, OccupantCreate, RoomCreate

DUPLICATE_REGISTRATION = (
    "This registration number is already registered. "
    "Each registration number can only be used once."
)
DUPLICATE_REGISTRATION_STORE = (
    "This registration number or access number is already registered in the system."
)


def _as_uuid(value, what: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise LookupError(f"{what} not found")


# ------------------------------------------------------------
# Scoped fetch helpers (LookupError -> 404 in the routers)
# ------------------------------------------------------------
async def get_visible_hostel(session: AsyncSession, scope: HostelScope, hostel_id) -> Hostel:
    hostel = await session.get(Hostel, _as_uuid(hostel_id, "Hostel"))
    if not scope.covers(hostel):
        raise LookupError("Hostel not found")
    return hostel


async def get_visible_room(session: AsyncSession, scope: HostelScope, room_id) -> Room:
    room = await session.get(Room, _as_uuid(room_id, "Room"))
    if not room:
        raise LookupError("Room not found")
    hostel = await session.get(Hostel, room.hostel_id)
    if not scope.covers(hostel):
        raise LookupError("Room not found")
    return room


# ------------------------------------------------------------
# HOSTELS
# ------------------------------------------------------------
async def list_hostels(session: AsyncSession, scope: HostelScope) -> list[Hostel]:
    result = await session.execute(scope.hostels().order_by(Hostel.name))
    return result.scalars().all()


async def create_hostel(session: AsyncSession, scope: HostelScope, payload: HostelCreate) -> Hostel:
    # wardens only manage hostels of their own type
    if scope.hostel_type is not None and payload.type != scope.hostel_type:
        raise ValueError(f"You can only manage {scope.hostel_type.value} hostels")

    hostel = Hostel(
        name=payload.name.strip(),
        type=payload.type,
        total_rooms=payload.total_rooms,
        warden_id=scope.profile_id,
    )
    session.add(hostel)
    await session.commit()
    await session.refresh(hostel)
    logger.info(f"Hostel '{hostel.name}' ({hostel.type.value}) created")
    return hostel


async def delete_hostel(session: AsyncSession, scope: HostelScope, hostel_id) -> None:
    hostel = await get_visible_hostel(session, scope, hostel_id)
    await session.delete(hostel)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValueError("Hostel still has rooms or inventory attached")


# ------------------------------------------------------------
# ROOMS
# ------------------------------------------------------------
async def list_rooms(session: AsyncSession, scope: HostelScope, hostel_id: Optional[UUID] = None) -> list[Room]:
    query = scope.rooms()
    if hostel_id is not None:
        query = query.where(Room.hostel_id == hostel_id)
    result = await session.execute(query.order_by(Room.room_number))
    return result.scalars().all()


async def create_room(session: AsyncSession, scope: HostelScope, payload: RoomCreate) -> Room:
    hostel = await get_visible_hostel(session, scope, payload.hostel_id)

    room = Room(hostel_id=hostel.id, room_number=payload.room_number.strip(), capacity=payload.capacity)
    session.add(room)
    await session.commit()
    await session.refresh(room)
    return room


# ------------------------------------------------------------
# OCCUPANTS
# ------------------------------------------------------------
async def list_occupants(
    session: AsyncSession, scope: HostelScope, room_id: Optional[UUID] = None, active_only: bool = False
) -> list[RoomOccupant]:
    query = scope.occupants()
    if room_id is not None:
        query = query.where(RoomOccupant.room_id == room_id)
    if active_only:
        query = query.where(RoomOccupant.check_out_date.is_(None))
    result = await session.execute(query.order_by(RoomOccupant.created_at.desc()))
    return result.scalars().all()


async def registration_in_use(session: AsyncSession, registration_number: str) -> bool:
    """True when an occupant with this registration number has not checked out."""
    result = await session.execute(
        select(RoomOccupant.id).where(
            RoomOccupant.registration_number == registration_number,
            RoomOccupant.check_out_date.is_(None),
        )
    )
    return result.first() is not None


async def register_occupant(session: AsyncSession, scope: HostelScope, payload: OccupantCreate) -> RoomOccupant:
    room = await get_visible_room(session, scope, payload.room_id)

    registration_number = payload.registration_number.strip()
    if await registration_in_use(session, registration_number):
        raise ValueError(DUPLICATE_REGISTRATION)

    occupant = RoomOccupant(
        room_id=room.id,
        student_name=payload.student_name.strip(),
        registration_number=registration_number,
        access_number=payload.access_number.strip(),
        year_of_study=payload.year_of_study,
        semester=payload.semester,
        check_in_date=payload.check_in_date or date.today(),
    )
    session.add(occupant)

    room.current_occupants = (room.current_occupants or 0) + 1
    if room.current_occupants >= room.capacity:
        room.status = RoomStatus.Occupied
    room.updated_at = utcnow()
    session.add(room)

    try:
        await session.commit()
    except IntegrityError:
        # the partial unique index caught a concurrent registration
        await session.rollback()
        logger.warning(f"Duplicate registration number rejected by store: {registration_number}")
        raise ValueError(DUPLICATE_REGISTRATION_STORE)

    await session.refresh(occupant)
    logger.info(f"Occupant {registration_number} checked into room {room.room_number}")
    return occupant


async def _release_place(session: AsyncSession, room_id: UUID) -> None:
    room = await session.get(Room, room_id)
    if not room:
        return
    room.current_occupants = max((room.current_occupants or 0) - 1, 0)
    if room.status == RoomStatus.Occupied and room.current_occupants < room.capacity:
        room.status = RoomStatus.Available
    room.updated_at = utcnow()
    session.add(room)


async def check_out_occupant(
    session: AsyncSession, scope: HostelScope, occupant_id, check_out_date: Optional[date] = None
) -> RoomOccupant:
    occupant = await session.get(RoomOccupant, _as_uuid(occupant_id, "Occupant"))
    if not occupant:
        raise LookupError("Occupant not found")
    await get_visible_room(session, scope, occupant.room_id)

    if occupant.check_out_date is not None:
        raise ValueError("Occupant has already checked out")

    occupant.check_out_date = check_out_date or date.today()
    occupant.updated_at = utcnow()
    session.add(occupant)
    await _release_place(session, occupant.room_id)

    await session.commit()
    await session.refresh(occupant)
    return occupant


async def delete_occupant(session: AsyncSession, scope: HostelScope, occupant_id) -> None:
    occupant = await session.get(RoomOccupant, _as_uuid(occupant_id, "Occupant"))
    if not occupant:
        raise LookupError("Occupant not found")
    await get_visible_room(session, scope, occupant.room_id)

    if occupant.check_out_date is None:
        await _release_place(session, occupant.room_id)
    await session.delete(occupant)
    await session.commit()


# ------------------------------------------------------------
# Counts used by the warden dashboard
# ------------------------------------------------------------
async def count_rooms(session: AsyncSession, scope: HostelScope) -> int:
    result = await session.execute(select(func.count()).select_from(scope.rooms().subquery()))
    return result.scalar_one()
