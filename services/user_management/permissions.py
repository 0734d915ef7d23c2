# services/user_management/permissions.py
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.user_management.models.schools import SchoolAdmin
from services.user_management.models.super_admin import SuperAdmin
from shared.auth import ROLE_SUPERADMIN


def is_super_admin(current_user: dict) -> bool:
    return current_user.get("role") == ROLE_SUPERADMIN


async def is_super_admin_email(db: AsyncSession, email: str) -> bool:
    result = await db.execute(select(SuperAdmin.id).where(SuperAdmin.email == email.lower()))
    return result.scalars().first() is not None


async def admin_school_ids(db: AsyncSession, email: str) -> list[str]:
    result = await db.execute(
        select(SchoolAdmin.school_id)
        .where(SchoolAdmin.email == email.lower())
        .order_by(SchoolAdmin.school_id)
    )
    return list(result.scalars().all())


async def allowed_school_ids(db: AsyncSession, current_user: dict) -> list[str]:
    """Schools a non super admin may manage: their own plus every membership."""
    school_ids = await admin_school_ids(db, current_user["email"])
    own = current_user.get("school_id")
    if own and own not in school_ids:
        school_ids.insert(0, own)
    return school_ids


async def ensure_school_access(db: AsyncSession, current_user: dict, school_id: str):
    if is_super_admin(current_user) and await is_super_admin_email(db, current_user["email"]):
        return
    if school_id and school_id in await allowed_school_ids(db, current_user):
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You can only access data from your own school"
    )
