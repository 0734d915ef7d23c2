# create_db.py
import asyncio
import os

from dotenv import load_dotenv
from sqlalchemy.future import select

from shared.auth import get_password_hash
from shared.db import engine, Base, AsyncSessionLocal

# Import all models here so they are registered with SQLAlchemy's metadata
import services.user_management.models
import services.faq_management.models
import services.diagnosis.models
import services.chat_logs.models
from services.user_management.models.users import SchoolUser, SchoolUserRole
from services.user_management.controllers.school_service import get_or_create_school
from services.user_management.controllers.super_admin_service import sync_super_admin

load_dotenv()

INITIAL_SUPERADMIN_EMAIL = os.getenv("INITIAL_SUPERADMIN_EMAIL")
INITIAL_SUPERADMIN_PASSWORD = os.getenv("INITIAL_SUPERADMIN_PASSWORD")
INITIAL_SUPERADMIN_SCHOOL = os.getenv("INITIAL_SUPERADMIN_SCHOOL", "admin")


async def init_models():
    async with engine.begin() as conn:
        print("🔧 Creating tables...")
        await conn.run_sync(Base.metadata.create_all)
        print("✅ Tables created.")


async def seed_super_admin(email: str, password: str, school_id: str):
    email = email.strip().lower()
    async with AsyncSessionLocal() as db:
        result = await db.execute(select(SchoolUser).where(SchoolUser.email == email))
        if result.scalars().first():
            print(f"ℹ️  {email} already exists, skipping seed.")
            return

        await get_or_create_school(db, school_id)
        db.add(SchoolUser(
            name="Super Admin",
            email=email,
            hashed_password=get_password_hash(password),
            role=SchoolUserRole.SUPERADMIN,
            school_id=school_id,
        ))
        await sync_super_admin(db, email, school_id, True)
        await db.commit()
        print(f"✅ Super admin {email} created.")


async def main():
    await init_models()
    if INITIAL_SUPERADMIN_EMAIL and INITIAL_SUPERADMIN_PASSWORD:
        await seed_super_admin(INITIAL_SUPERADMIN_EMAIL, INITIAL_SUPERADMIN_PASSWORD, INITIAL_SUPERADMIN_SCHOOL)


if __name__ == "__main__":
    asyncio.run(main())
