# app/services/inventory_service.py

from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.scoping import HostelScope
from app.models.enums import ItemStatus
from app.models.hostel import Hostel, Room
from app.models.inventory import InventoryCategory, InventoryItem
from app.models.user import UserProfile, utcnow
from app.schemas.inventory import InventoryItemDetails, InventoryItemUpdate


def _as_uuid(value) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise LookupError("Item not found")


# ------------------------------------------------------------
# CATEGORIES
# ------------------------------------------------------------
async def list_categories(session: AsyncSession) -> list[InventoryCategory]:
    result = await session.execute(select(InventoryCategory).order_by(InventoryCategory.name))
    return result.scalars().all()


# ------------------------------------------------------------
# ITEMS
# ------------------------------------------------------------
async def list_items(
    session: AsyncSession,
    scope: HostelScope,
    status: Optional[ItemStatus] = None,
    category_id: Optional[UUID] = None,
) -> list[InventoryItem]:
    query = scope.inventory()
    if status is not None:
        query = query.where(InventoryItem.status == status)
    if category_id is not None:
        query = query.where(InventoryItem.category_id == category_id)
    result = await session.execute(query.order_by(InventoryItem.updated_at.desc()))
    return result.scalars().all()


async def get_visible_item(session: AsyncSession, scope: HostelScope, item_id) -> InventoryItem:
    item = await session.get(InventoryItem, _as_uuid(item_id))
    if not item:
        raise LookupError("Item not found")

    if not scope.is_admin:
        hostel = await session.get(Hostel, item.hostel_id) if item.hostel_id else None
        if not scope.covers(hostel):
            raise LookupError("Item not found")
    return item


async def add_item(
    session: AsyncSession, scope: HostelScope, actor: UserProfile, payload: InventoryItemDetails
) -> InventoryItem:
    if not await session.get(InventoryCategory, payload.category_id):
        raise ValueError("Inventory category not found")

    if payload.hostel_id is not None:
        hostel = await session.get(Hostel, payload.hostel_id)
        if not scope.covers(hostel):
            raise ValueError("Hostel not found")
    elif not scope.is_admin:
        raise ValueError("Select a hostel for this item")

    if payload.room_id is not None:
        room = await session.get(Room, payload.room_id)
        if not room or room.hostel_id != payload.hostel_id:
            raise ValueError("Room does not belong to the selected hostel")

    # new stock always starts available
    item = InventoryItem(**payload.model_dump(), status=ItemStatus.Available, assigned_by=actor.id)
    session.add(item)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        logger.error(f"Inventory insert failed: {e}")
        raise ValueError("Could not add item to inventory")

    await session.refresh(item)
    logger.info(f"Inventory item '{item.name}' x{item.quantity} added by {actor.email}")
    return item


async def update_item(
    session: AsyncSession, scope: HostelScope, item_id, payload: InventoryItemUpdate
) -> InventoryItem:
    item = await get_visible_item(session, scope, item_id)

    changes = payload.model_dump(exclude_unset=True)
    if changes.get("room_id") is not None:
        room = await session.get(Room, changes["room_id"])
        hostel = await session.get(Hostel, room.hostel_id) if room else None
        if not room or room.hostel_id != item.hostel_id or not scope.covers(hostel):
            raise ValueError("Room does not belong to the item's hostel")

    for key, value in changes.items():
        setattr(item, key, value)
    item.updated_at = utcnow()

    session.add(item)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        logger.error(f"Inventory update failed for {item_id}: {e}")
        raise ValueError("Could not update item")

    await session.refresh(item)
    return item



async def delete_item(session: AsyncSession, scope: HostelScope, item_id) -> None:
    item = await get_visible_item(session, scope, item_id)
    await session.delete(item)
    await session.commit()
    logger.info(f"Inventory item {item.id} deleted")
