# app/api/endpoints/hostels.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from app.api.deps import get_db_session, get_scope, require_any_role
from app.core.scoping import HostelScope
from app.schemas.hostel import (
    CheckOutRequest,
    HostelCreate,
    HostelRead,
    OccupantCreate,
    OccupantRead,
    RoomCreate,
    RoomRead,
)
from app.services import hostel_service

router = APIRouter(
    prefix="/api/hostels",
    tags=["Hostels"],
    dependencies=[Depends(require_any_role)],
)


def _raise_http(e: Exception):
    if isinstance(e, LookupError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# -------------------------------------------------------------------
# HOSTELS
# -------------------------------------------------------------------
@router.get("", response_model=List[HostelRead])
async def list_hostels(
    session: AsyncSession = Depends(get_db_session),
    scope: HostelScope = Depends(get_scope),
):
    return await hostel_service.list_hostels(session, scope)


@router.post("", response_model=HostelRead, status_code=status.HTTP_201_CREATED)
async def create_hostel(
    payload: HostelCreate,
    session: AsyncSession = Depends(get_db_session),
    scope: HostelScope = Depends(get_scope),
):
    try:
        return await hostel_service.create_hostel(session, scope, payload)
    except (LookupError, ValueError) as e:
        _raise_http(e)


@router.delete("/{hostel_id}")
async def delete_hostel(
    hostel_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    scope: HostelScope = Depends(get_scope),
):
    try:
        await hostel_service.delete_hostel(session, scope, hostel_id)
    except (LookupError, ValueError) as e:
        _raise_http(e)
    return {"detail": "Hostel deleted successfully"}


# -------------------------------------------------------------------
# ROOMS
# -------------------------------------------------------------------
@router.get("/rooms", response_model=List[RoomRead])
async def list_rooms(
    hostel_id: Optional[UUID] = None,
    session: AsyncSession = Depends(get_db_session),
    scope: HostelScope = Depends(get_scope),
):
    return await hostel_service.list_rooms(session, scope, hostel_id)


@router.post("/rooms", response_model=RoomRead, status_code=status.HTTP_201_CREATED)
async def create_room(
    payload: RoomCreate,
    session: AsyncSession = Depends(get_db_session),
    scope: HostelScope = Depends(get_scope),
):
    try:
        return await hostel_service.create_room(session, scope, payload)
    except (LookupError, ValueError) as e:
        _raise_http(e)


# -------------------------------------------------------------------
# OCCUPANTS
# -------------------------------------------------------------------
@router.get("/occupants", response_model=List[OccupantRead])
async def list_occupants(
    room_id: Optional[UUID] = None,
    active_only: bool = False,
    session: AsyncSession = Depends(get_db_session),
    scope: HostelScope = Depends(get_scope),
):
    return await hostel_service.list_occupants(session, scope, room_id, active_only)


@router.post("/occupants", response_model=OccupantRead, status_code=status.HTTP_201_CREATED)
async def register_occupant(
    payload: OccupantCreate,
    session: AsyncSession = Depends(get_db_session),
    scope: HostelScope = Depends(get_scope),
):
    try:
        return await hostel_service.register_occupant(session, scope, payload)
    except (LookupError, ValueError) as e:
        _raise_http(e)


@router.post("/occupants/{occupant_id}/check-out", response_model=OccupantRead)
async def check_out_occupant(
    occupant_id: UUID,
    payload: Optional[CheckOutRequest] = None,
    session: AsyncSession = Depends(get_db_session),
    scope: HostelScope = Depends(get_scope),
):
    try:
        return await hostel_service.check_out_occupant(
            session, scope, occupant_id, payload.check_out_date if payload else None
        )
    except (LookupError, ValueError) as e:
        _raise_http(e)


@router.delete("/occupants/{occupant_id}")
async def delete_occupant(
    occupant_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    scope: HostelScope = Depends(get_scope),
):
    try:
        await hostel_service.delete_occupant(session, scope, occupant_id)
    except (LookupError, ValueError) as e:
        _raise_http(e)
    return {"detail": "Occupant removed successfully"}
