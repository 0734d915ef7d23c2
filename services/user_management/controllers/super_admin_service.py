# services/user_management/controllers/super_admin_service.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.user_management.models.super_admin import SuperAdmin
from services.user_management.models.users import SchoolUser, SchoolUserRole
from services.user_management.schemas.super_admin import SuperAdminAction, SuperAdminList
from shared.auth import get_current_super_admin_user
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/superadmins", tags=["SuperAdmin"])


async def list_super_admin_emails(db: AsyncSession) -> list[str]:
    result = await db.execute(select(SuperAdmin.email).order_by(SuperAdmin.created_at, SuperAdmin.email))
    return list(result.scalars().all())


async def sync_super_admin(db: AsyncSession, email: str, school_id: Optional[str], enabled: bool):
    """Keep the registry and the user's stored role in step (flushes, does not commit)."""
    result = await db.execute(select(SuperAdmin).where(SuperAdmin.email == email))
    existing = result.scalars().first()
    if enabled:
        if existing:
            existing.school_id = school_id
        else:
            db.add(SuperAdmin(email=email, school_id=school_id))
    elif existing:
        await db.delete(existing)

    result = await db.execute(select(SchoolUser).where(SchoolUser.email == email))
    user = result.scalars().first()
    if user:
        user.role = SchoolUserRole.SUPERADMIN if enabled else SchoolUserRole.SCHOOL_ADMIN
    await db.flush()


# --- LIST SUPER ADMINS ---
@router.get("", response_model=SuperAdminList)
async def get_super_admins(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_super_admin_user)
):
    return SuperAdminList(emails=await list_super_admin_emails(db))


# --- ADD / REMOVE SUPER ADMIN ---
@router.post("", response_model=SuperAdminList)
async def update_super_admins(
    payload: SuperAdminAction,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_super_admin_user)
):
    email = payload.email.lower()

    if payload.action == "add":
        if not payload.school_id or not payload.school_id.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="school_id is required to add a super admin"
            )
        await sync_super_admin(db, email, payload.school_id.strip(), enabled=True)
    else:
        await sync_super_admin(db, email, None, enabled=False)

    await db.commit()
    logger.info("%s %s super admin %s", current_user["email"], payload.action, email)
    return SuperAdminList(emails=await list_super_admin_emails(db))
