import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError

from services.user_management.controllers.school_service import get_or_create_school
from services.user_management.controllers.super_admin_service import sync_super_admin
from services.user_management.models.users import SchoolUser, SchoolUserRole
from services.user_management.schemas.users import SchoolUserCreate, SchoolUserOut, SchoolUserUpdate
from shared.auth import get_current_super_admin_user, get_password_hash
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def default_school_id(email: str) -> str:
    return email.split("@", 1)[0]


# --- LIST USERS (SuperAdmin only) ---
@router.get("", response_model=List[SchoolUserOut])
async def list_users(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_super_admin_user)
):
    result = await db.execute(select(SchoolUser).order_by(SchoolUser.created_at, SchoolUser.email))
    return result.scalars().all()


# --- CREATE USER (SuperAdmin only) ---
@router.post("", response_model=SchoolUserOut, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: SchoolUserCreate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_super_admin_user)
):
    email = payload.email.lower()
    existing = await db.execute(select(SchoolUser).where(SchoolUser.email == email))
    if existing.scalars().first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists"
        )

    school_id = (payload.school_id or "").strip() or default_school_id(email)
    await get_or_create_school(db, school_id)

    new_user = SchoolUser(
        name=payload.name,
        email=email,
        hashed_password=get_password_hash(payload.password),
        role=SchoolUserRole(payload.role.value),
        school_id=school_id,
    )
    db.add(new_user)
    await sync_super_admin(db, email, school_id, enabled=payload.role == SchoolUserRole.SUPERADMIN)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Integrity error while creating user")

    await db.refresh(new_user)
    logger.info("%s created user %s (%s)", current_user["email"], email, payload.role.value)
    return new_user


# --- UPDATE USER (SuperAdmin only) ---
@router.put("", response_model=SchoolUserOut)
async def update_user(
    payload: SchoolUserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_super_admin_user)
):
    email = payload.email.lower()
    result = await db.execute(select(SchoolUser).where(SchoolUser.email == email))
    user = result.scalars().first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    user.name = payload.name
    user.role = SchoolUserRole(payload.role.value)
    if payload.school_id and payload.school_id.strip():
        user.school_id = payload.school_id.strip()
        await get_or_create_school(db, user.school_id)
    if payload.password:
        user.hashed_password = get_password_hash(payload.password)

    await sync_super_admin(
        db, email, user.school_id or default_school_id(email),
        enabled=payload.role == SchoolUserRole.SUPERADMIN
    )
    await db.commit()
    await db.refresh(user)

    logger.info("%s updated user %s", current_user["email"], email)
    return user


# --- DELETE USER (SuperAdmin only) ---
@router.delete("")
async def delete_user(
    email: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_super_admin_user)
):
    email = email.strip().lower()
    if email == current_user["email"].lower():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You cannot delete your own account"
        )

    result = await db.execute(select(SchoolUser).where(SchoolUser.email == email))
    user = result.scalars().first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    await db.delete(user)
    await sync_super_admin(db, email, user.school_id, enabled=False)
    await db.commit()

    logger.info("%s deleted user %s", current_user["email"], email)
    return {"ok": True, "email": email}
