# app/services/approval_service.py

from sqlmodel import select
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import ValidationError
from loguru import logger
from typing import Optional
from uuid import UUID

from app.core.errors import ApprovalStateError
from app.core.scoping import HostelScope
from app.models.approval import WardenApproval
from app.models.enums import ApprovalStatus, ItemStatus, RequestType
from app.models.hostel import Hostel, Room
from app.models.inventory import InventoryCategory, InventoryItem
from app.models.user import UserProfile, utcnow
from app.schemas.approval import ApprovalCreate
from app.schemas.inventory import InventoryItemDetails

DECISIONS = {
    "approved": ApprovalStatus.Approved,
    "rejected": ApprovalStatus.Rejected,
}


def _as_uuid(value) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise ValueError("Approval not found")


def _parse_item_details(raw: Optional[dict]) -> InventoryItemDetails:
    try:
        return InventoryItemDetails.model_validate(raw or {})
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or "item_details"
        raise ValueError(f"Invalid item details ({field}): {first.get('msg')}")


async def _check_item_targets(session: AsyncSession, details: InventoryItemDetails, scope: Optional[HostelScope] = None):
    category = await session.get(InventoryCategory, details.category_id)
    if not category:
        raise ValueError("Inventory category not found")

    if details.hostel_id is not None:
        hostel = await session.get(Hostel, details.hostel_id)
        if not hostel or (scope is not None and not scope.covers(hostel)):
            raise ValueError("Hostel not found")

    if details.room_id is not None:
        room = await session.get(Room, details.room_id)
        if not room or room.hostel_id != details.hostel_id:
            raise ValueError("Room does not belong to the selected hostel")


# ---------------------------------------------------------
# CREATE (warden files a request)
# ---------------------------------------------------------
async def create_approval_request(
    session: AsyncSession, warden: UserProfile, payload: ApprovalCreate
) -> WardenApproval:
    item_details = payload.item_details

    if payload.request_type == RequestType.InventoryAdd:
        if not item_details:
            raise ValueError("Item details are required for inventory requests")
        details = _parse_item_details(item_details)
        await _check_item_targets(session, details, HostelScope.for_profile(warden))
        item_details = details.model_dump(mode="json")

    approval = WardenApproval(
        warden_id=warden.id,
        request_type=payload.request_type,
        item_details=item_details,
        description=payload.description,
        status=ApprovalStatus.Pending,
    )
    session.add(approval)
    await session.commit()
    await session.refresh(approval)

    logger.info(f"Approval request {approval.id} ({payload.request_type.value}) filed by {warden.email}")
    return approval


# ---------------------------------------------------------
# LIST (newest first, with the requesting warden's name / hostel)
# ---------------------------------------------------------
async def list_approvals(
    session: AsyncSession, scope: HostelScope, status: Optional[ApprovalStatus] = None
) -> list[dict]:
    visible = scope.approvals().subquery()

    query = (
        select(WardenApproval, UserProfile.full_name, UserProfile.assigned_hostel)
        .join(UserProfile, UserProfile.id == WardenApproval.warden_id, isouter=True)
        .where(WardenApproval.id.in_(select(visible.c.id)))
        .order_by(WardenApproval.request_date.desc())
    )
    if status is not None:
        query = query.where(WardenApproval.status == status)

    result = await session.execute(query)

    rows = []
    for approval, warden_name, warden_hostel in result.all():
        data = approval.model_dump()
        data["warden_name"] = warden_name
        data["warden_hostel"] = warden_hostel
        rows.append(data)
    return rows


# ---------------------------------------------------------
# DECIDE (admin approves / rejects)
# ---------------------------------------------------------
async def decide_approval(
    session: AsyncSession, approval_id, decision: str, actor: UserProfile
) -> tuple[WardenApproval, Optional[InventoryItem]]:
    """
    Moves a pending request to approved / rejected.

    The status change only applies while the row is still pending, so a
    second decision on the same request fails instead of overwriting the
    first. Approving an inventory_add request inserts the requested item in
    the same transaction; if that insert fails nothing is committed and the
    request stays pending.
    """
    new_status = DECISIONS.get(str(decision).lower())
    if new_status is None:
        raise ValueError("Decision must be 'approved' or 'rejected'")

    approval_uuid = _as_uuid(approval_id)
    now = utcnow()

    values = {"status": new_status, "approval_date": now, "updated_at": now}
    if new_status == ApprovalStatus.Approved:
        values["approved_by"] = actor.id

    try:
        result = await session.execute(
            update(WardenApproval)
            .where(
                WardenApproval.id == approval_uuid,
                WardenApproval.status == ApprovalStatus.Pending,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            existing = await session.get(WardenApproval, approval_uuid)
            if not existing:
                raise ValueError("Approval not found")
            raise ApprovalStateError(f"Request has already been {existing.status.value}")

        approval = await session.get(WardenApproval, approval_uuid, populate_existing=True)

        item = None
        if new_status == ApprovalStatus.Approved and approval.request_type == RequestType.InventoryAdd and approval.item_details:
            details = _parse_item_details(approval.item_details)
            await _check_item_targets(session, details)

            item = InventoryItem(
                **details.model_dump(),
                status=ItemStatus.Available,
                assigned_by=approval.warden_id,
            )
            session.add(item)

        await session.commit()

    except IntegrityError as e:
        await session.rollback()
        logger.error(f"Approval {approval_uuid}: inventory insert failed: {e}")
        raise ValueError("Could not add the requested item to inventory")
    except ValueError:
        await session.rollback()
        raise

    await session.refresh(approval)
    if item is not None:
        await session.refresh(item)

    logger.info(
        f"Approval {approval.id} {new_status.value} by {actor.email}"
        + (f", inventory item {item.id} created" if item is not None else "")
    )
    return approval, item
