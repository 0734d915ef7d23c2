import logging

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError

from services.user_management.models.schools import School, SchoolAdmin
from services.user_management.models.users import SchoolUser, SchoolUserRole
from services.user_management.permissions import admin_school_ids, ensure_school_access, is_super_admin
from services.user_management.schemas.schools import (
    AdminSchoolsResponse,
    SchoolAdminAdd,
    SchoolAdminPatch,
    SchoolDeleted,
)
from services.user_management.schemas.users import SchoolAdminCreate, SchoolUserOut
from shared.auth import get_current_super_admin_user, get_current_user, get_password_hash
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schools", tags=["Schools"])


async def load_school_admin_map(db: AsyncSession) -> dict[str, list[str]]:
    schools = await db.execute(select(School.id).order_by(School.id))
    school_map = {school_id: [] for school_id in schools.scalars().all()}

    admins = await db.execute(select(SchoolAdmin).order_by(SchoolAdmin.created_at))
    for admin in admins.scalars().all():
        school_map.setdefault(admin.school_id, []).append(admin.email)
    return school_map


async def get_or_create_school(db: AsyncSession, school_id: str, name: str = None) -> School:
    result = await db.execute(select(School).where(School.id == school_id))
    school = result.scalars().first()
    if not school:
        school = School(id=school_id, name=name or school_id)
        db.add(school)
        await db.flush()
    return school


async def add_school_admin(db: AsyncSession, school_id: str, email: str):
    result = await db.execute(
        select(SchoolAdmin).where(SchoolAdmin.school_id == school_id, SchoolAdmin.email == email)
    )
    if not result.scalars().first():
        db.add(SchoolAdmin(school_id=school_id, email=email))
        await db.flush()


# --- GET ALL SCHOOLS WITH ADMIN EMAILS (SuperAdmin only) ---
@router.get("", response_model=dict[str, list[str]])
async def list_schools(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_super_admin_user)
):
    return await load_school_admin_map(db)


# --- ADD SCHOOL / ADMIN EMAIL (SuperAdmin only) ---
@router.post("", response_model=dict[str, list[str]])
async def add_school(
    payload: SchoolAdminAdd,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_super_admin_user)
):
    school_id = payload.school_id.strip()
    if not school_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="school_id is required")

    await get_or_create_school(db, school_id, payload.name)
    await add_school_admin(db, school_id, payload.admin_email.lower())
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="School admin already exists")

    logger.info("%s added admin %s to school %s", current_user["email"], payload.admin_email, school_id)
    return await load_school_admin_map(db)


# --- ADD / REMOVE ADMIN EMAIL ON AN EXISTING SCHOOL (SuperAdmin only) ---
@router.patch("", response_model=dict[str, list[str]])
async def update_school_admins(
    payload: SchoolAdminPatch,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_super_admin_user)
):
    result = await db.execute(select(School).where(School.id == payload.school_id))
    if not result.scalars().first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="School not found")

    email = payload.email.lower()
    if payload.action == "add":
        await add_school_admin(db, payload.school_id, email)
    elif payload.action == "remove":
        await db.execute(
            delete(SchoolAdmin).where(SchoolAdmin.school_id == payload.school_id, SchoolAdmin.email == email)
        )
    else:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid action")

    await db.commit()
    logger.info("%s %s admin %s on school %s", current_user["email"], payload.action, email, payload.school_id)
    return await load_school_admin_map(db)


# --- DELETE SCHOOL (SuperAdmin only) ---
@router.delete("", response_model=SchoolDeleted)
async def delete_school(
    school_id: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_super_admin_user)
):
    result = await db.execute(select(School).where(School.id == school_id))
    school = result.scalars().first()
    if not school:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="School not found")

    await db.execute(delete(SchoolAdmin).where(SchoolAdmin.school_id == school_id))
    await db.delete(school)
    await db.commit()

    logger.info("%s deleted school %s", current_user["email"], school_id)
    return SchoolDeleted(ok=True, school_id=school_id)


# --- SCHOOLS MANAGED BY AN EMAIL ---
#  /schools/admin-schools?email=owner@links.jp
@router.get("/admin-schools", response_model=AdminSchoolsResponse)
async def get_admin_schools(
    email: str = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    if not email or not email.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="email is required")

    email = email.strip().lower()
    if not is_super_admin(current_user) and email != current_user["email"].lower():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only look up your own schools"
        )

    return AdminSchoolsResponse(email=email, schools=await admin_school_ids(db, email))


# --- CREATE A SCHOOL ADMIN ACCOUNT ---
@router.post("/{school_id}/admins", response_model=SchoolUserOut, status_code=status.HTTP_201_CREATED)
async def create_school_admin_user(
    school_id: str,
    payload: SchoolAdminCreate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    await ensure_school_access(db, current_user, school_id)

    email = payload.email.lower()
    existing = await db.execute(select(SchoolUser).where(SchoolUser.email == email))
    if existing.scalars().first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists"
        )

    await get_or_create_school(db, school_id)
    new_user = SchoolUser(
        name=payload.name,
        email=email,
        hashed_password=get_password_hash(payload.password),
        role=SchoolUserRole.SCHOOL_ADMIN,
        school_id=school_id,
    )
    db.add(new_user)
    await add_school_admin(db, school_id, email)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Integrity error while creating user")

    await db.refresh(new_user)
    logger.info("%s created school admin %s for %s", current_user["email"], email, school_id)
    return new_user
