from sqlmodel import select
from loguru import logger
from app.models.enums import AppRole, ProfileRole, ProfileStatus
from app.models.inventory import InventoryCategory
from app.models.user import AuthUser, UserProfile, UserRoleRecord
from app.core.database import AsyncSessionLocal
from app.core.security import hash_password
from app.core.config import settings

# ----------------------------------------------------------------
# 1. DEFINE STATIC DATA
# ----------------------------------------------------------------

CATEGORIES_DATA = [
    {"name": "Furniture", "description": "Beds, desks, chairs, wardrobes"},
    {"name": "Electronics", "description": "Bulbs, sockets, fans, kettles"},
    {"name": "Plumbing", "description": "Taps, showers, pipes, sinks"},
    {"name": "Bedding", "description": "Mattresses, sheets, pillows, blankets"},
    {"name": "Cleaning", "description": "Brooms, mops, buckets, detergents"},
]


# ----------------------------------------------------------------
# 2. SEEDING FUNCTIONS
# ----------------------------------------------------------------

async def seed_all():
    """Master function to run all seeding logic."""
    async with AsyncSessionLocal() as session:
        try:
            await seed_categories(session)
            await seed_admin_user(session)

            await session.commit()
            logger.success("Seeding complete.")
        except Exception as e:
            logger.error(f"Seeding failed: {e}")
            await session.rollback()


async def seed_categories(session):
    result = await session.execute(select(InventoryCategory.name))
    existing = set(result.scalars().all())

    for c in CATEGORIES_DATA:
        if c["name"] not in existing:
            logger.info(f"Creating inventory category: {c['name']}")
            session.add(InventoryCategory(name=c["name"], description=c["description"]))
    await session.flush()


async def seed_admin_user(session):
    """Super admin = profile + login + 'admin' role record."""
    email = settings.SUPER_ADMIN_EMAIL
    if not email or not settings.SUPER_ADMIN_PASSWORD:
        logger.warning("Missing Super Admin credentials in settings.")
        return

    profile = (await session.execute(select(UserProfile).where(UserProfile.email == email))).scalar_one_or_none()
    if profile and profile.auth_user_id:
        logger.info("Super Admin already exists. Skipping.")
        return

    logger.info(f"Seeding Super Admin: {email}")

    auth_user = (await session.execute(select(AuthUser).where(AuthUser.email == email))).scalar_one_or_none()
    if not auth_user:
        auth_user = AuthUser(email=email, password_hash=hash_password(settings.SUPER_ADMIN_PASSWORD))
        session.add(auth_user)
        await session.flush()
        session.add(UserRoleRecord(user_id=auth_user.id, role=AppRole.Admin))

    if not profile:
        profile = UserProfile(
            full_name=settings.SUPER_ADMIN_NAME or "Super Admin",
            email=email,
            role=ProfileRole.Admin,
            status=ProfileStatus.Active,
        )
    profile.auth_user_id = auth_user.id
    session.add(profile)
    await session.flush()
