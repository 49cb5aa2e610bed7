import pytest
from sqlmodel import select

from app.core.database import AsyncSessionLocal
from app.models.enums import AppRole, ProfileRole, ProfileStatus
from app.models.user import AuthUser, UserProfile, UserRoleRecord


def new_user(**overrides):
    data = {
        "full_name": "Sarah O'Neil-Akello",
        "email": "sarah@ucu.ac.ug",
        "password": "Warden2024",
        "role": "female-warden",
        "assigned_hostel": "Sabiiti Hall",
    }
    data.update(overrides)
    return data


async def role_records_for(email):
    async with AsyncSessionLocal() as session:
        result = await session.execute(
            select(UserRoleRecord).join(AuthUser, AuthUser.id == UserRoleRecord.user_id).where(AuthUser.email == email)
        )
        return result.scalars().all()


# ------------------------------------------------------------------
# Add user (profile + login + role record)
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_admin_adds_user_who_can_log_in(client, admin):
    res = await client.post("/api/users", json=new_user(), headers=admin["headers"])
    assert res.status_code == 201, res.text
    assert res.json()["role"] == "female-warden"
    assert res.json()["status"] == "active"

    records = await role_records_for("sarah@ucu.ac.ug")
    assert [r.role for r in records] == [AppRole.FemaleWarden]

    login = await client.post("/api/auth/login", json={"email": "sarah@ucu.ac.ug", "password": "Warden2024"})
    assert login.status_code == 200
    assert login.json()["dashboard"] == "female-warden"


@pytest.mark.parametrize(
    "overrides",
    [
        {"full_name": "A"},
        {"full_name": "R2-D2"},
        {"email": "not-an-email"},
        {"password": "weakpass"},
        {"role": "student"},
        {"assigned_hostel": "x" * 101},
    ],
)
@pytest.mark.asyncio
async def test_add_user_validation(client, admin, overrides):
    res = await client.post("/api/users", json=new_user(**overrides), headers=admin["headers"])
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_duplicate_email_rolls_back(client, admin):
    first = await client.post("/api/users", json=new_user(), headers=admin["headers"])
    assert first.status_code == 201

    second = await client.post("/api/users", json=new_user(full_name="Someone Else"), headers=admin["headers"])
    assert second.status_code == 400

    async with AsyncSessionLocal() as session:
        profiles = (await session.execute(select(UserProfile).where(UserProfile.email == "sarah@ucu.ac.ug"))).scalars().all()
    assert len(profiles) == 1
    assert profiles[0].full_name == "Sarah O'Neil-Akello"


@pytest.mark.asyncio
async def test_wardens_cannot_manage_users(client, male_warden):
    res = await client.get("/api/users", headers=male_warden["headers"])
    assert res.status_code == 403
    res = await client.post("/api/users", json=new_user(), headers=male_warden["headers"])
    assert res.status_code == 403


# ------------------------------------------------------------------
# Update / toggle / delete
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_update_role_follows_into_role_record(client, admin):
    created = (await client.post("/api/users", json=new_user(), headers=admin["headers"])).json()

    res = await client.patch(
        f"/api/users/{created['id']}",
        json={"role": "male-warden", "assigned_hostel": "Nkoyoyo Hall"},
        headers=admin["headers"],
    )
    assert res.status_code == 200
    assert res.json()["role"] == "male-warden"
    assert res.json()["assigned_hostel"] == "Nkoyoyo Hall"

    records = await role_records_for("sarah@ucu.ac.ug")
    assert [r.role for r in records] == [AppRole.MaleWarden]


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["status", "role", "full_name"])
async def test_update_refuses_clearing_required_fields(client, admin, field):
    created = (await client.post("/api/users", json=new_user(), headers=admin["headers"])).json()

    res = await client.patch(f"/api/users/{created['id']}", json={field: None}, headers=admin["headers"])
    assert res.status_code == 422

    res = await client.get("/api/users", headers=admin["headers"])
    sarah = next(u for u in res.json() if u["email"] == "sarah@ucu.ac.ug")
    assert sarah["status"] == "active"
    assert sarah["role"] == "female-warden"


@pytest.mark.asyncio
async def test_toggle_status_logs_user_out(client, admin, male_warden):
    profile_id = male_warden["profile"].id

    res = await client.post(f"/api/users/{profile_id}/toggle-status", headers=admin["headers"])
    assert res.json()["status"] == "suspended"

    # a suspended profile resolves to no session
    session_res = await client.get("/api/session", headers=male_warden["headers"])
    assert session_res.status_code == 401

    res = await client.post(f"/api/users/{profile_id}/toggle-status", headers=admin["headers"])
    assert res.json()["status"] == "active"
    assert (await client.get("/api/session", headers=male_warden["headers"])).status_code == 200


@pytest.mark.asyncio
async def test_list_newest_first_and_delete(client, admin, male_warden):
    listed = (await client.get("/api/users", headers=admin["headers"])).json()
    assert [u["email"] for u in listed] == ["male.warden@ucu.ac.ug", "admin@ucu.ac.ug"]

    res = await client.delete(f"/api/users/{male_warden['profile'].id}", headers=admin["headers"])
    assert res.status_code == 200
    assert len((await client.get("/api/users", headers=admin["headers"])).json()) == 1

    own = await client.delete(f"/api/users/{admin['profile'].id}", headers=admin["headers"])
    assert own.status_code == 400


# ------------------------------------------------------------------
# Create-user procedure
# ------------------------------------------------------------------
async def bare_profile(email, role=ProfileRole.MaleWarden):
    async with AsyncSessionLocal() as session:
        profile = UserProfile(full_name="Paul Ssali", email=email, role=role, status=ProfileStatus.Active)
        session.add(profile)
        await session.commit()
        return profile


@pytest.mark.asyncio
async def test_provision_requires_bearer(client, db):
    res = await client.post(
        "/api/users/provision",
        json={"email": "paul@ucu.ac.ug", "password": "Warden2024", "role": "male-warden"},
    )
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_provision_requires_admin_role_record(client, make_account):
    # admin profile, but no 'admin' row in user_roles
    caller = await make_account("noroles@ucu.ac.ug", ProfileRole.Admin, with_role_record=False)
    await bare_profile("paul@ucu.ac.ug")

    res = await client.post(
        "/api/users/provision",
        json={"email": "paul@ucu.ac.ug", "password": "Warden2024", "role": "male-warden"},
        headers=caller["headers"],
    )
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_provision_links_login_and_translates_role(client, admin):
    profile = await bare_profile("paul@ucu.ac.ug")

    res = await client.post(
        "/api/users/provision",
        json={"email": "paul@ucu.ac.ug", "password": "Warden2024", "role": "male-warden"},
        headers=admin["headers"],
    )
    assert res.status_code == 200, res.text
    assert res.json()["role"] == "male_warden"

    async with AsyncSessionLocal() as session:
        stored = await session.get(UserProfile, profile.id)
        assert str(stored.auth_user_id) == res.json()["user_id"]

    records = await role_records_for("paul@ucu.ac.ug")
    assert [r.role for r in records] == [AppRole.MaleWarden]

    again = await client.post(
        "/api/users/provision",
        json={"email": "paul@ucu.ac.ug", "password": "Warden2024", "role": "male-warden"},
        headers=admin["headers"],
    )
    assert again.status_code == 400


@pytest.mark.asyncio
async def test_provision_needs_existing_profile(client, admin):
    res = await client.post(
        "/api/users/provision",
        json={"email": "ghost@ucu.ac.ug", "password": "Warden2024", "role": "female-warden"},
        headers=admin["headers"],
    )
    assert res.status_code == 400
