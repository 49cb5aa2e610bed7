# app/api/endpoints/inventory.py

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from app.api.deps import get_current_profile, get_db_session, get_scope, require_any_role
from app.core.scoping import HostelScope
from app.models.enums import ItemStatus
from app.models.user import UserProfile
from app.schemas.inventory import (
    CategoryRead,
    InventoryItemDetails,
    InventoryItemRead,
    InventoryItemUpdate,
)
from app.services import inventory_service

router = APIRouter(
    prefix="/api/inventory",
    tags=["Inventory"],
    dependencies=[Depends(require_any_role)],
)


@router.get("/categories", response_model=List[CategoryRead])
async def list_categories(session: AsyncSession = Depends(get_db_session)):
    return await inventory_service.list_categories(session)


@router.get("", response_model=List[InventoryItemRead])
async def list_items(
    status_filter: Optional[ItemStatus] = Query(default=None, alias="status"),
    category_id: Optional[UUID] = None,
    session: AsyncSession = Depends(get_db_session),
    scope: HostelScope = Depends(get_scope),
):
    return await inventory_service.list_items(session, scope, status_filter, category_id)


@router.post("", response_model=InventoryItemRead, status_code=status.HTTP_201_CREATED)
async def add_item(
    payload: InventoryItemDetails,
    session: AsyncSession = Depends(get_db_session),
    scope: HostelScope = Depends(get_scope),
    current: UserProfile = Depends(get_current_profile),
):
    try:
        return await inventory_service.add_item(session, scope, current, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/{item_id}", response_model=InventoryItemRead)
async def update_item(
    item_id: UUID,
    payload: InventoryItemUpdate,
    session: AsyncSession = Depends(get_db_session),
    scope: HostelScope = Depends(get_scope),
):
    try:
        return await inventory_service.update_item(session, scope, item_id, payload)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{item_id}")
async def delete_item(
    item_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    scope: HostelScope = Depends(get_scope),
):
    try:
        await inventory_service.delete_item(session, scope, item_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"detail": "Item deleted successfully"}
