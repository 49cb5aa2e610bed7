import pytest

from app.core.database import AsyncSessionLocal
from app.models.approval import WardenApproval
from app.models.enums import ApprovalStatus, HostelType, ItemCondition, ItemStatus, ProfileRole, RequestType
from app.models.hostel import Hostel
from app.models.inventory import InventoryItem
from app.services.dashboard_service import (
    category_stock_status,
    compute_efficiency,
    efficiency_label,
    room_label,
    transaction_type,
)


# ------------------------------------------------------------------
# Pure helpers
# ------------------------------------------------------------------
def test_efficiency_without_requests_is_zero():
    assert compute_efficiency(0, 0) == 0


@pytest.mark.parametrize(
    "approved,total,expected",
    [(7, 10, 70), (3, 4, 75), (9, 10, 90), (1, 8, 13), (2, 3, 67), (10, 10, 100)],
)
def test_efficiency_rounds_half_up(approved, total, expected):
    assert compute_efficiency(approved, total) == expected


@pytest.mark.parametrize(
    "efficiency,label",
    [
        (0, "Needs Improvement"),
        (60, "Needs Improvement"),
        (61, "Good"),
        (70, "Good"),
        (75, "Good"),
        (76, "Very Good"),
        (90, "Very Good"),
        (91, "Excellent"),
        (100, "Excellent"),
    ],
)
def test_efficiency_labels(efficiency, label):
    assert efficiency_label(efficiency) == label


@pytest.mark.parametrize(
    "available,total,status",
    [(0, 0, "No Stock"), (2, 10, "Low Stock"), (3, 10, "Adequate"), (6, 10, "Adequate"), (7, 10, "Good"), (1, 1, "Good")],
)
def test_category_stock_status(available, total, status):
    assert category_stock_status(available, total) == status


def test_transaction_type_and_room_label():
    assert transaction_type("assigned") == "Issued"
    assert transaction_type(ItemStatus.Maintenance) == "Maintenance"
    assert transaction_type("available") == "Updated"
    assert transaction_type("damaged") == "Updated"

    assert room_label(None) == "Unassigned"
    assert room_label("0f8fad5b-d9cb-469f-a165-70867728950e") == "Room 28950e"


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------
async def seed_stock(categories, admin, male_warden):
    async with AsyncSessionLocal() as session:
        male = Hostel(name="Nkoyoyo Hall", type=HostelType.Male, total_rooms=4)
        female = Hostel(name="Sabiiti Hall", type=HostelType.Female, total_rooms=4)
        session.add_all([male, female])
        await session.flush()

        furniture = categories["Furniture"].id
        session.add_all([
            InventoryItem(name="Bed", category_id=furniture, hostel_id=male.id, quantity=3,
                          assigned_by=admin["profile"].id),
            InventoryItem(name="Desk", category_id=furniture, hostel_id=male.id, quantity=10,
                          status=ItemStatus.Assigned, assigned_by=admin["profile"].id),
            InventoryItem(name="Chair", category_id=furniture, hostel_id=male.id, quantity=8,
                          condition=ItemCondition.Damaged, assigned_by=male_warden["profile"].id),
            InventoryItem(name="Kettle", category_id=categories["Electronics"].id, hostel_id=female.id,
                          quantity=1, assigned_by=admin["profile"].id),
        ])

        warden_id = male_warden["profile"].id
        for status in [ApprovalStatus.Approved] * 3 + [ApprovalStatus.Rejected, ApprovalStatus.Pending]:
            session.add(WardenApproval(
                warden_id=warden_id,
                request_type=RequestType.MaintenanceRequest,
                description=f"{status.value} request",
                status=status,
            ))
        await session.commit()


@pytest.mark.asyncio
async def test_warden_dashboard_only_counts_own_hostel_type(client, categories, admin, male_warden):
    await seed_stock(categories, admin, male_warden)

    res = await client.get("/api/dashboard/warden", headers=male_warden["headers"])
    assert res.status_code == 200, res.text
    data = res.json()

    assert data["hostel_type"] == "male"
    assert data["total_items"] == 3
    assert data["available_items"] == 2
    assert data["maintenance_items"] == 1
    assert data["assigned_rooms"] == 0

    by_name = {c["name"]: c for c in data["categories"]}
    assert by_name["Furniture"]["count"] == 3
    assert by_name["Furniture"]["status"] == "Adequate"
    assert by_name["Electronics"]["status"] == "No Stock"

    assert len(data["recent_transactions"]) == 3
    assert {t["type"] for t in data["recent_transactions"]} == {"Issued", "Updated"}
    assert all(t["room"] == "Unassigned" for t in data["recent_transactions"])


@pytest.mark.asyncio
async def test_admin_dashboard(client, categories, admin, male_warden, female_warden):
    await seed_stock(categories, admin, male_warden)

    res = await client.get("/api/dashboard/admin", headers=admin["headers"])
    assert res.status_code == 200, res.text
    data = res.json()

    assert data["total_items"] == 3          # assigned by admins only
    assert data["active_wardens"] == 2
    assert data["low_stock_items"] == 2      # quantity < 5
    assert data["pending_approvals"] == 1
    assert len(data["recent_activities"]) == 5
    assert {a["action"] for a in data["recent_activities"]} == {
        "Approved Request", "Rejected Request", "Pending Request"
    }
    assert all(a["user"] == "John Okello" for a in data["recent_activities"])

    stats = {s["name"]: s for s in data["warden_stats"]}
    assert stats["John Okello"]["efficiency"] == 60
    assert stats["John Okello"]["status"] == "Needs Improvement"
    assert stats["John Okello"]["role"] == ProfileRole.MaleWarden.value
    assert stats["Grace Namuli"]["efficiency"] == 0
    assert stats["Grace Namuli"]["hostel"] == "Sabiiti Hall"


@pytest.mark.asyncio
async def test_activity_without_warden_is_unknown(client, admin):
    async with AsyncSessionLocal() as session:
        session.add(WardenApproval(request_type=RequestType.RoomAssignment, description=None))
        await session.commit()

    data = (await client.get("/api/dashboard/admin", headers=admin["headers"])).json()
    assert data["recent_activities"][0]["user"] == "Unknown Warden"
    assert data["recent_activities"][0]["item"] == "No description"


@pytest.mark.asyncio
async def test_admin_dashboard_is_admin_only(client, male_warden):
    res = await client.get("/api/dashboard/admin", headers=male_warden["headers"])
    assert res.status_code == 403
