import os
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ------------------------------------------------------------------
# FORCE TESTING MODE
# Set BEFORE importing app.main so config / database pick these up.
# ------------------------------------------------------------------
os.environ["TESTING"] = "true"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SMTP_HOST"] = ""
os.environ["REDIS_URL"] = ""
os.environ["SUPER_ADMIN_EMAIL"] = ""

from app.main import app  # noqa: E402
from app.core.database import AsyncSessionLocal, engine, init_db  # noqa: E402
from app.core.security import create_access_token, hash_password  # noqa: E402
from app.core.seeding_logic import seed_categories  # noqa: E402
from app.models.enums import ProfileRole, ProfileStatus  # noqa: E402
from app.models.user import AuthUser, UserProfile, UserRoleRecord  # noqa: E402
from app.services.inventory_service import list_categories  # noqa: E402
from app.services.user_service import app_role_for  # noqa: E402

PASSWORD = "Secret123"


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database per test."""
    await init_db()
    yield
    # drops the shared in-memory connection, and with it every table
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest_asyncio.fixture
async def categories(db):
    async with AsyncSessionLocal() as session:
        await seed_categories(session)
        await session.commit()
        return {c.name: c for c in await list_categories(session)}


async def create_account(
    email: str,
    role: ProfileRole,
    full_name: str = "Test User",
    password: str = PASSWORD,
    status: ProfileStatus = ProfileStatus.Active,
    assigned_hostel: str | None = None,
    with_role_record: bool = True,
) -> dict:
    """Profile + login (+ role record). Returns the rows and ready-made auth headers."""
    async with AsyncSessionLocal() as session:
        auth_user = AuthUser(email=email, password_hash=hash_password(password))
        session.add(auth_user)
        await session.flush()

        profile = UserProfile(
            full_name=full_name,
            email=email,
            role=role,
            status=status,
            assigned_hostel=assigned_hostel,
            auth_user_id=auth_user.id,
        )
        session.add(profile)
        if with_role_record:
            session.add(UserRoleRecord(user_id=auth_user.id, role=app_role_for(role)))
        await session.commit()

    token = create_access_token(subject=str(auth_user.id))
    return {
        "auth_user": auth_user,
        "profile": profile,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest_asyncio.fixture
async def admin(db):
    return await create_account("admin@ucu.ac.ug", ProfileRole.Admin, full_name="Hostel Admin")


@pytest_asyncio.fixture
async def male_warden(db):
    return await create_account(
        "male.warden@ucu.ac.ug", ProfileRole.MaleWarden, full_name="John Okello", assigned_hostel="Nkoyoyo Hall"
    )


@pytest_asyncio.fixture
async def female_warden(db):
    return await create_account(
        "female.warden@ucu.ac.ug", ProfileRole.FemaleWarden, full_name="Grace Namuli", assigned_hostel="Sabiiti Hall"
    )


@pytest_asyncio.fixture
async def make_account(db):
    return create_account
