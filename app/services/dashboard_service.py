# app/services/dashboard_service.py

import math

from sqlalchemy import case, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.scoping import HostelScope
from app.models.approval import WardenApproval
from app.models.enums import (
    ApprovalStatus,
    ItemCondition,
    ItemStatus,
    ProfileRole,
    ProfileStatus,
)
from app.models.inventory import InventoryCategory, InventoryItem
from app.models.user import UserProfile
from app.schemas.dashboard import (
    Activity,
    AdminDashboard,
    CategoryStock,
    StockTransaction,
    WardenDashboard,
    WardenStat,
)
from app.services.hostel_service import count_rooms

LOW_STOCK_QUANTITY = 5
RECENT_TRANSACTIONS = 4
RECENT_ACTIVITIES = 10

WARDEN_ROLES = (ProfileRole.MaleWarden, ProfileRole.FemaleWarden)


# ============================================================================
# PURE HELPERS
# ============================================================================
def compute_efficiency(approved: int, total: int) -> int:
    """Share of approved requests as a whole percentage, rounding .5 up. 0 when there are none."""
    if not total:
        return 0
    return math.floor(approved / total * 100 + 0.5)


def efficiency_label(efficiency: int) -> str:
    if efficiency > 90:
        return "Excellent"
    if efficiency > 75:
        return "Very Good"
    if efficiency > 60:
        return "Good"
    return "Needs Improvement"


def category_stock_status(available: int, total: int) -> str:
    if total == 0:
        return "No Stock"
    if available < total * 0.3:
        return "Low Stock"
    if available < total * 0.7:
        return "Adequate"
    return "Good"


def transaction_type(item_status) -> str:
    status = ItemStatus(item_status)
    if status == ItemStatus.Assigned:
        return "Issued"
    if status == ItemStatus.Maintenance:
        return "Maintenance"
    return "Updated"


def room_label(room_id) -> str:
    return f"Room {str(room_id)[-6:]}" if room_id else "Unassigned"


def activity_action(status) -> str:
    status = ApprovalStatus(status)
    if status == ApprovalStatus.Approved:
        return "Approved Request"
    if status == ApprovalStatus.Rejected:
        return "Rejected Request"
    return "Pending Request"


def needs_maintenance(item: InventoryItem) -> bool:
    return item.status == ItemStatus.Maintenance or item.condition == ItemCondition.Damaged


# ============================================================================
# WARDEN DASHBOARD
# ============================================================================
async def warden_dashboard(session: AsyncSession, scope: HostelScope) -> WardenDashboard:
    items = (await session.execute(scope.inventory())).scalars().all()
    categories = (
        await session.execute(select(InventoryCategory).order_by(InventoryCategory.name))
    ).scalars().all()

    category_stats = []
    for category in categories:
        in_category = [i for i in items if i.category_id == category.id]
        available = sum(1 for i in in_category if i.status == ItemStatus.Available)
        category_stats.append(
            CategoryStock(
                category_id=category.id,
                name=category.name,
                count=len(in_category),
                available=available,
                status=category_stock_status(available, len(in_category)),
            )
        )

    recent = sorted(
        (i for i in items if i.updated_at),
        key=lambda i: i.updated_at,
        reverse=True,
    )[:RECENT_TRANSACTIONS]

    transactions = [
        StockTransaction(
            item_id=i.id,
            type=transaction_type(i.status),
            item=i.name,
            quantity=i.quantity,
            room=room_label(i.room_id),
            status=i.status.value,
            time=i.updated_at,
        )
        for i in recent
    ]

    return WardenDashboard(
        role=scope.role.value,
        hostel_type=scope.hostel_type.value if scope.hostel_type else None,
        assigned_rooms=await count_rooms(session, scope),
        total_items=len(items),
        maintenance_items=sum(1 for i in items if needs_maintenance(i)),
        available_items=sum(1 for i in items if i.status == ItemStatus.Available),
        categories=category_stats,
        recent_transactions=transactions,
    )


# ============================================================================
# ADMIN DASHBOARD
# ============================================================================
async def _warden_stats(session: AsyncSession) -> list[WardenStat]:
    wardens = (
        await session.execute(
            select(UserProfile)
            .where(UserProfile.role.in_(WARDEN_ROLES), UserProfile.status == ProfileStatus.Active)
            .order_by(UserProfile.full_name)
        )
    ).scalars().all()

    counts = await session.execute(
        select(
            WardenApproval.warden_id,
            func.count(WardenApproval.id),
            func.sum(case((WardenApproval.status == ApprovalStatus.Approved, 1), else_=0)),
        ).group_by(WardenApproval.warden_id)
    )
    per_warden = {warden_id: (total, approved or 0) for warden_id, total, approved in counts.all()}

    stats = []
    for warden in wardens:
        total, approved = per_warden.get(warden.id, (0, 0))
        efficiency = compute_efficiency(approved, total)
        stats.append(
            WardenStat(
                warden_id=warden.id,
                name=warden.full_name,
                role=warden.role.value,
                hostel=warden.assigned_hostel or "Unassigned",
                approved=approved,
                total=total,
                efficiency=efficiency,
                status=efficiency_label(efficiency),
            )
        )
    return stats


async def admin_dashboard(session: AsyncSession) -> AdminDashboard:
    admin_ids = select(UserProfile.id).where(UserProfile.role == ProfileRole.Admin)

    total_items = (
        await session.execute(
            select(func.count(InventoryItem.id)).where(InventoryItem.assigned_by.in_(admin_ids))
        )
    ).scalar_one()

    active_wardens = (
        await session.execute(
            select(func.count(UserProfile.id)).where(
                UserProfile.role.in_(WARDEN_ROLES), UserProfile.status == ProfileStatus.Active
            )
        )
    ).scalar_one()

    low_stock = (
        await session.execute(
            select(func.count(InventoryItem.id)).where(InventoryItem.quantity < LOW_STOCK_QUANTITY)
        )
    ).scalar_one()

    pending = (
        await session.execute(
            select(func.count(WardenApproval.id)).where(WardenApproval.status == ApprovalStatus.Pending)
        )
    ).scalar_one()

    recent = await session.execute(
        select(WardenApproval, UserProfile.full_name, UserProfile.role)
        .join(UserProfile, UserProfile.id == WardenApproval.warden_id, isouter=True)
        .order_by(WardenApproval.created_at.desc())
        .limit(RECENT_ACTIVITIES)
    )
    activities = [
        Activity(
            approval_id=approval.id,
            action=activity_action(approval.status),
            user=warden_name or "Unknown Warden",
            role=warden_role.value if warden_role else "",
            item=approval.description or "No description",
            time=approval.created_at,
            status=approval.status.value,
        )
        for approval, warden_name, warden_role in recent.all()
    ]

    return AdminDashboard(
        total_items=total_items,
        active_wardens=active_wardens,
        low_stock_items=low_stock,
        pending_approvals=pending,
        recent_activities=activities,
        warden_stats=await _warden_stats(session),
    )
